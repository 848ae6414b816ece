"""Conversation core: message log, transcript rendering, response channels
and the session state machine that ties them together.

Independent of Textual so it can be driven and tested without a terminal.
"""

from .channel import (
    BlockingChannel,
    ChannelEvent,
    Complete,
    Done,
    Failed,
    ResponseChannel,
    StreamingChannel,
    TextIncrement,
    create_channel,
)
from .log import ChatMessage, MessageLog, MessageStatus, Role
from .render import DEFAULT_STYLE, TranscriptRenderer, TranscriptStyle, render_transcript
from .session import (
    Cancel,
    CancelRequest,
    ChatSession,
    ClearDraft,
    Notify,
    Phase,
    Redraw,
    Response,
    SessionState,
    ShowError,
    StartRequest,
    Submit,
    Tick,
)

__all__ = [
    "BlockingChannel",
    "Cancel",
    "CancelRequest",
    "ChannelEvent",
    "ChatMessage",
    "ChatSession",
    "ClearDraft",
    "Complete",
    "DEFAULT_STYLE",
    "Done",
    "Failed",
    "MessageLog",
    "MessageStatus",
    "Notify",
    "Phase",
    "Redraw",
    "ResponseChannel",
    "Response",
    "Role",
    "SessionState",
    "ShowError",
    "StartRequest",
    "StreamingChannel",
    "Submit",
    "TextIncrement",
    "Tick",
    "TranscriptRenderer",
    "TranscriptStyle",
    "create_channel",
    "render_transcript",
]
