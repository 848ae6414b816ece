"""Transcript rendering.

Hides how messages become terminal text:
- Markdown formatting through rich, wrapped to the viewport width
- Role labels and their colours (a TranscriptStyle record, not globals)
- Markers for pending, failed and cancelled replies
"""

import io
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from .log import ChatMessage, MessageLog, MessageStatus, Role

THINKING_FRAMES = ("Thinking", "Thinking.", "Thinking..", "Thinking...")


@dataclass(frozen=True)
class TranscriptStyle:
    """Static look of the transcript."""

    user_label: str = "You:"
    assistant_label: str = "AI:"
    system_label: str = "Sys:"
    label_width: int = 6
    user_style: str = "magenta"
    assistant_style: str = "green"
    system_style: str = "bright_black"
    indicator_style: str = "dim italic"
    failed_style: str = "bold red"
    cancelled_style: str = "dim"
    code_theme: str = "monokai"
    color_system: str = "256"

    def label_for(self, role: Role) -> tuple[str, str]:
        if role == Role.USER:
            return self.user_label, self.user_style
        if role == Role.ASSISTANT:
            return self.assistant_label, self.assistant_style
        return self.system_label, self.system_style


DEFAULT_STYLE = TranscriptStyle()


def thinking_frame(tick: int) -> str:
    """Frame of the "thinking" animation for a given tick count."""
    return THINKING_FRAMES[tick % len(THINKING_FRAMES)]


def _console(width: int, style: TranscriptStyle) -> Console:
    return Console(
        file=io.StringIO(),
        width=max(width, 1),
        force_terminal=True,
        color_system=style.color_system,
        legacy_windows=False,
        highlight=False,
    )


@lru_cache(maxsize=512)
def render_message(
    message: ChatMessage,
    width: int,
    style: TranscriptStyle = DEFAULT_STYLE,
    indicator: str | None = None,
) -> str:
    """Render one message: a role label line followed by its body.

    The body is formatted as markdown and wrapped at width - label_width.
    An empty pending reply shows the indicator instead of a blank body.
    """
    label, label_style = style.label_for(message.role)
    header = Text(label.ljust(style.label_width), style=label_style)
    if message.status == MessageStatus.FAILED:
        header.append("failed", style=style.failed_style)
    elif message.status == MessageStatus.CANCELLED:
        header.append("cancelled", style=style.cancelled_style)

    console = _console(width, style)
    console.print(header)

    body_width = max(width - style.label_width, 1)
    body = _console(body_width, style)
    if message.content:
        body.print(Markdown(message.content, code_theme=style.code_theme))
    elif message.is_pending and indicator:
        body.print(Text(indicator, style=style.indicator_style))

    return console.file.getvalue() + body.file.getvalue()


def render_transcript(
    messages: Iterable[ChatMessage],
    width: int,
    style: TranscriptStyle = DEFAULT_STYLE,
    indicator: str | None = None,
) -> str:
    """Render the whole conversation as ANSI-formatted text.

    Pure: the same messages, width, style and indicator always give the
    same output.
    """
    parts = []
    for message in messages:
        parts.append(render_message(
            message,
            width,
            style,
            indicator if message.is_pending else None,
        ))
    return "".join(parts)


class TranscriptRenderer:
    """Caches the rendered transcript for a message log.

    The cached text is reused until the log revision, the width or the
    indicator changes.
    """

    def __init__(self, style: TranscriptStyle = DEFAULT_STYLE) -> None:
        self._style = style
        self._key: tuple[int, int, int, str | None] | None = None
        self._output = ""

    @property
    def style(self) -> TranscriptStyle:
        return self._style

    def invalidate(self) -> None:
        self._key = None

    def is_stale(self, log: MessageLog, width: int, indicator: str | None = None) -> bool:
        return self._key != (id(log), log.revision, width, indicator)

    def render(self, log: MessageLog, width: int, indicator: str | None = None) -> str:
        key = (id(log), log.revision, width, indicator)
        if key != self._key:
            self._output = render_transcript(log, width, self._style, indicator)
            self._key = key
        return self._output
