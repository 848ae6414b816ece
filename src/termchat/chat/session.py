"""Chat session state machine.

Hides how one conversation moves between idle, waiting and streaming:
- Which submissions are accepted
- How channel events update the message log
- Which side effects (start a request, redraw, clear the input) follow

ChatSession.dispatch() consumes one event and returns the effects the UI
must perform. It never awaits and never touches widgets, so the whole
machine runs on the UI event loop one event at a time.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..config import DEFAULT_SYSTEM_PROMPT
from ..errors import InputRejected
from ..llm.models import RequestMessage
from .channel import ChannelEvent, Complete, Done, Failed, TextIncrement
from .log import ChatMessage, MessageLog, MessageStatus, Role
from .render import thinking_frame

DebugCallback = Callable[[str, str, str], None]


class Phase(str, Enum):
    IDLE = "Idle"
    AWAITING_FIRST_TOKEN = "AwaitingFirstToken"
    STREAMING = "Streaming"
    ERROR = "Error"


@dataclass(frozen=True)
class SessionState:
    """Current phase of the session, with the reason when in Error."""

    phase: Phase
    reason: str | None = None

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(Phase.IDLE)

    @classmethod
    def awaiting_first_token(cls) -> "SessionState":
        return cls(Phase.AWAITING_FIRST_TOKEN)

    @classmethod
    def streaming(cls) -> "SessionState":
        return cls(Phase.STREAMING)

    @classmethod
    def error(cls, reason: str) -> "SessionState":
        return cls(Phase.ERROR, reason)

    @property
    def is_busy(self) -> bool:
        """True while a request is in flight."""
        return self.phase in (Phase.AWAITING_FIRST_TOKEN, Phase.STREAMING)

    def __str__(self) -> str:
        if self.reason is not None:
            return f"{self.phase.value}({self.reason})"
        return self.phase.value


# Events


@dataclass(frozen=True)
class Submit:
    """The user committed the draft."""

    text: str


@dataclass(frozen=True)
class Response:
    """An event from the response channel of a given request."""

    request_id: int
    event: ChannelEvent


@dataclass(frozen=True)
class Tick:
    """Periodic redraw timer fired."""


@dataclass(frozen=True)
class Cancel:
    """The user asked to abandon the current request."""


SessionEvent = Submit | Response | Tick | Cancel


# Effects


@dataclass(frozen=True)
class StartRequest:
    request_id: int
    history: list[RequestMessage] = field(hash=False)
    prompt: str


@dataclass(frozen=True)
class CancelRequest:
    request_id: int


@dataclass(frozen=True)
class Redraw:
    scroll_to_bottom: bool = False


@dataclass(frozen=True)
class ClearDraft:
    pass


@dataclass(frozen=True)
class ShowError:
    reason: str


@dataclass(frozen=True)
class Notify:
    text: str


Effect = StartRequest | CancelRequest | Redraw | ClearDraft | ShowError | Notify


def _accept_input(text: str) -> str:
    """Trimmed submission text.

    Raises:
        InputRejected: If the text is empty or whitespace-only
    """
    prompt = text.strip()
    if not prompt:
        raise InputRejected("empty submission")
    return prompt


class ChatSession:
    """State machine for a single conversation.

    Example:
        session = ChatSession()
        effects = session.dispatch(Submit("hi"))
        # -> ClearDraft, StartRequest(request_id=1, ...), Redraw
        session.dispatch(Response(1, TextIncrement("Hello")))
        session.dispatch(Response(1, Done()))
    """

    def __init__(self, preamble: str = DEFAULT_SYSTEM_PROMPT, log: MessageLog | None = None) -> None:
        self._preamble = preamble
        self._log = log if log is not None else MessageLog()
        self._state = SessionState.idle()
        self._next_request_id = 1
        self._active_request: int | None = None
        self._reply = ""
        self._tick = 0
        self._last_error: str | None = None
        self._debug_callback: DebugCallback | None = None

    @property
    def log(self) -> MessageLog:
        return self._log

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def active_request(self) -> int | None:
        """Id of the request in flight, if any."""
        return self._active_request

    @property
    def last_error(self) -> str | None:
        """Reason of the most recent failed request."""
        return self._last_error

    @property
    def indicator(self) -> str | None:
        """Text shown in the placeholder while no content has arrived."""
        if self._state.phase == Phase.AWAITING_FIRST_TOKEN:
            return thinking_frame(self._tick)
        return None

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback receiving (level, component, message) log lines."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback is not None:
            self._debug_callback(level, "Session", message)

    def _transition(self, new_state: SessionState) -> None:
        self._debug("debug", f"{self._state} -> {new_state}")
        self._state = new_state

    def dispatch(self, event: SessionEvent) -> list[Effect]:
        """Apply one event and return the effects to perform, in order."""
        if isinstance(event, Submit):
            return self._on_submit(event.text)
        if isinstance(event, Response):
            return self._on_response(event.request_id, event.event)
        if isinstance(event, Tick):
            return self._on_tick()
        if isinstance(event, Cancel):
            return self._on_cancel()
        raise TypeError(f"Unknown session event: {event!r}")

    def _on_submit(self, text: str) -> list[Effect]:
        try:
            prompt = _accept_input(text)
        except InputRejected:
            return []

        if self._state.phase != Phase.IDLE:
            self._debug("warning", "Submission rejected: a reply is still in progress")
            return [Notify("Still waiting for the previous reply")]

        history = self._log.snapshot_for_request(self._preamble)
        self._log.append(ChatMessage(role=Role.USER, content=prompt))
        self._log.open_slot()

        request_id = self._next_request_id
        self._next_request_id += 1
        self._active_request = request_id
        self._reply = ""
        self._tick = 0
        self._last_error = None
        self._transition(SessionState.awaiting_first_token())
        self._debug("info", f"Request {request_id} started: '{prompt[:50]}'")

        return [
            ClearDraft(),
            StartRequest(request_id=request_id, history=history, prompt=prompt),
            Redraw(scroll_to_bottom=True),
        ]

    def _on_response(self, request_id: int, event: ChannelEvent) -> list[Effect]:
        if request_id != self._active_request:
            self._debug("debug", f"Ignoring {type(event).__name__} from stale request {request_id}")
            return []

        if isinstance(event, TextIncrement):
            if not event.text:
                return []
            if self._state.phase == Phase.AWAITING_FIRST_TOKEN:
                self._transition(SessionState.streaming())
            self._reply += event.text
            self._log.replace_last(self._reply)
            return [Redraw(scroll_to_bottom=True)]

        if isinstance(event, Complete):
            self._reply = event.text
            self._log.replace_last(self._reply)
            return self._finish()

        if isinstance(event, Done):
            return self._finish()

        if isinstance(event, Failed):
            return self._fail(event.reason)

        raise TypeError(f"Unknown channel event: {event!r}")

    def _finish(self) -> list[Effect]:
        self._log.close_slot(MessageStatus.COMPLETE)
        self._debug("info", f"Request {self._active_request} complete ({len(self._reply)} chars)")
        self._active_request = None
        self._transition(SessionState.idle())
        return [Redraw(scroll_to_bottom=True)]

    def _fail(self, reason: str) -> list[Effect]:
        self._transition(SessionState.error(reason))
        self._last_error = reason
        self._log.close_slot(MessageStatus.FAILED)
        self._debug("error", f"Request {self._active_request} failed: {reason}")
        self._active_request = None
        self._transition(SessionState.idle())
        return [ShowError(reason), Redraw(scroll_to_bottom=True)]

    def _on_tick(self) -> list[Effect]:
        if not self._state.is_busy:
            return []
        self._tick += 1
        return [Redraw(scroll_to_bottom=True)]

    def _on_cancel(self) -> list[Effect]:
        if not self._state.is_busy or self._active_request is None:
            return []

        request_id = self._active_request
        self._active_request = None
        if self._reply:
            self._log.close_slot(MessageStatus.CANCELLED)
        else:
            self._log.discard_slot()
        self._debug("info", f"Request {request_id} cancelled")
        self._transition(SessionState.idle())
        return [CancelRequest(request_id), Redraw(scroll_to_bottom=True), Notify("Cancelled")]
