"""Main Textual TUI application.

Feeds user input, channel events and timer ticks into the ChatSession one at
a time and performs the effects it returns. The response channel runs in an
exclusive worker that hands every event back as a Textual message, so the
session and the message log are only ever touched from the event loop.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Header, Static
from textual.worker import Worker

from ..chat.channel import (
    ChannelEvent,
    Failed,
    ResponseChannel,
    StreamingChannel,
    describe_failure,
)
from ..chat.log import Role
from ..chat.render import DEFAULT_STYLE, TranscriptRenderer, TranscriptStyle
from ..chat.session import (
    Cancel,
    CancelRequest,
    ChatSession,
    ClearDraft,
    Effect,
    Notify,
    Redraw,
    Response,
    ShowError,
    StartRequest,
    Submit,
    Tick,
)
from ..llm.models import RequestMessage
from .config import HELP_MESSAGE, TICK_INTERVAL_SECONDS, LogLevel
from .styles import APP_CSS
from .themes import DEFAULT_THEME, THEMES
from .widgets import ChatInputBar, DebugPanel, TranscriptView


class ChannelEventMessage(Message):
    """A response channel event, delivered onto the UI event loop."""

    def __init__(self, request_id: int, event: ChannelEvent) -> None:
        super().__init__()
        self.request_id = request_id
        self.event = event


class ChatApp(App):
    """Textual TUI for a single chat session."""

    CSS = APP_CSS
    TITLE = "termchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("escape", "cancel_request", "Cancel"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug", priority=True),
    ]

    def __init__(
        self,
        channel: ResponseChannel,
        session: ChatSession | None = None,
        model_name: str = "unknown",
        log_level: str | None = None,
        style: TranscriptStyle = DEFAULT_STYLE,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        super().__init__()
        self._channel = channel
        self._session = session if session is not None else ChatSession()
        self._model_name = model_name
        self._log_level = log_level
        self._renderer = TranscriptRenderer(style)
        self._tick_interval = tick_interval
        self._current_worker: Worker | None = None
        self._redraw_scheduled = False
        self._scroll_on_redraw = False

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TranscriptView(id="transcript")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Static(HELP_MESSAGE, id="help-line")

    def on_mount(self) -> None:
        for theme in THEMES:
            self.register_theme(theme)
        self.theme = DEFAULT_THEME

        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.set_debug_callback(self._debug)
        self._channel.set_debug_callback(self._debug)

        mode = "streaming" if isinstance(self._channel, StreamingChannel) else "blocking"
        self.sub_title = f"{self._model_name} | {mode}"

        self.set_interval(self._tick_interval, self._on_tick)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self._schedule_redraw(scroll_to_bottom=True)

    def _debug(self, level: str, component: str, message: str) -> None:
        """Route (level, component, message) lines to the log panel."""
        try:
            log_panel = self.query_one("#debug-panel", DebugPanel)
        except NoMatches:
            return
        log_panel.add_entry(component, message, LogLevel.from_string(level))

    # Event sources

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        event.stop()
        self._perform(self._session.dispatch(Submit(event.value)))

    def on_channel_event_message(self, message: ChannelEventMessage) -> None:
        self._perform(self._session.dispatch(Response(message.request_id, message.event)))

    def on_transcript_view_resized(self, message: TranscriptView.Resized) -> None:
        self._schedule_redraw()

    def _on_tick(self) -> None:
        self._perform(self._session.dispatch(Tick()))

    def action_cancel_request(self) -> None:
        """Abandon the reply in progress."""
        self._perform(self._session.dispatch(Cancel()))

    # Effects

    def _perform(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, StartRequest):
                self._current_worker = self._request_reply(
                    effect.request_id, effect.history, effect.prompt
                )
            elif isinstance(effect, CancelRequest):
                if self._current_worker is not None and self._current_worker.is_running:
                    self._current_worker.cancel()
            elif isinstance(effect, Redraw):
                self._schedule_redraw(effect.scroll_to_bottom)
            elif isinstance(effect, ClearDraft):
                self.query_one("#chat-input-bar", ChatInputBar).clear()
            elif isinstance(effect, ShowError):
                self.notify(f"Error: {effect.reason[:80]}", severity="error", timeout=5)
            elif isinstance(effect, Notify):
                self.notify(effect.text, severity="warning", timeout=2)

        transcript = self.query_one("#transcript", TranscriptView)
        transcript.set_class(self._session.state.is_busy, "-busy")
        transcript.border_subtitle = str(self._session.state)

    def _schedule_redraw(self, scroll_to_bottom: bool = False) -> None:
        """Redraw once after the current batch of events has been handled."""
        self._scroll_on_redraw = self._scroll_on_redraw or scroll_to_bottom
        if not self._redraw_scheduled:
            self._redraw_scheduled = True
            self.call_after_refresh(self._redraw)

    def _redraw(self) -> None:
        self._redraw_scheduled = False
        scroll, self._scroll_on_redraw = self._scroll_on_redraw, False

        transcript = self.query_one("#transcript", TranscriptView)
        width = transcript.viewport_width
        if width <= 0:
            return
        transcript.set_content(
            self._renderer.render(self._session.log, width, self._session.indicator)
        )
        if scroll:
            transcript.scroll_to_bottom()

    @work(exclusive=True, group="response", exit_on_error=False)
    async def _request_reply(
        self,
        request_id: int,
        history: list[RequestMessage],
        prompt: str,
    ) -> None:
        """Run the response channel and post each event back to the app."""
        try:
            async for event in self._channel.send(history, prompt):
                self.post_message(ChannelEventMessage(request_id, event))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.post_message(ChannelEventMessage(request_id, Failed(describe_failure(e))))

    # Actions

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy the last finished assistant reply to the clipboard."""
        response = next(
            (
                message.content
                for message in reversed(self._session.log.messages)
                if message.role == Role.ASSISTANT and message.content and not message.is_pending
            ),
            None,
        )
        if response is None:
            self.notify("No response to copy", severity="warning")
            return
        try:
            import pyperclip
            pyperclip.copy(response)
        except Exception:
            self.copy_to_clipboard(response)
        self.notify("Response copied", timeout=2)


async def run_chat_tui(
    channel: ResponseChannel,
    session: ChatSession | None = None,
    model_name: str = "unknown",
    log_level: str | None = None,
    close: Callable[[], Awaitable[None]] | None = None,
) -> None:
    """Run the chat TUI until the user quits.

    Args:
        channel: Response channel answering the user's messages
        session: Session to drive (a fresh one if None)
        model_name: Shown in the header
        log_level: Log level for the debug panel, None to hide it
        close: Optional async callable awaited on exit (e.g. provider.close)
    """
    app = ChatApp(
        channel=channel,
        session=session,
        model_name=model_name,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        if close is not None:
            with contextlib.suppress(RuntimeError):
                await close()
