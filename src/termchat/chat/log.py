"""Conversation message log.

Hides how the transcript is stored:
- Messages are kept in an append-only list, in conversation order
- The in-progress assistant reply lives in a single "open slot", an index
  into that list, and is the only entry ever rewritten
- Every mutation bumps a revision counter that render caches key on
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from ..errors import SlotClosedError
from ..llm.models import RequestMessage


class Role(str, Enum):
    """Who wrote a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageStatus(str, Enum):
    """Lifecycle of a message in the transcript."""

    COMPLETE = "complete"
    PENDING = "pending"      # Assistant reply still being received
    FAILED = "failed"        # Request failed, content may be partial
    CANCELLED = "cancelled"  # User cancelled mid-stream


@dataclass(frozen=True)
class ChatMessage:
    """A single message in the conversation."""

    role: Role
    content: str
    status: MessageStatus = MessageStatus.COMPLETE
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_pending(self) -> bool:
        return self.status == MessageStatus.PENDING


class MessageLog:
    """Ordered, append-only record of the conversation.

    Entries are never reordered. The only in-place change allowed is to the
    last entry while an assistant slot is open (see open_slot()).
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._open_slot: int | None = None
        self._revision = 0

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only view of all messages."""
        return tuple(self._messages)

    @property
    def last(self) -> ChatMessage | None:
        return self._messages[-1] if self._messages else None

    @property
    def revision(self) -> int:
        """Counter incremented on every mutation."""
        return self._revision

    @property
    def has_open_slot(self) -> bool:
        return self._open_slot is not None

    def append(self, message: ChatMessage) -> None:
        """Add a message to the end of the log.

        Raises:
            TypeError: If role or content is missing
            SlotClosedError: If an assistant slot is still open
        """
        if not isinstance(message.role, Role):
            raise TypeError(f"message role must be a Role, got {message.role!r}")
        if not isinstance(message.content, str):
            raise TypeError("message content must be a string")
        if self._open_slot is not None:
            raise SlotClosedError("cannot append while an assistant reply is in progress")
        self._messages.append(message)
        self._revision += 1

    def open_slot(self) -> int:
        """Append an empty pending assistant message and open it for writing.

        Returns:
            Index of the placeholder in the log
        """
        self.append(ChatMessage(role=Role.ASSISTANT, content="", status=MessageStatus.PENDING))
        self._open_slot = len(self._messages) - 1
        return self._open_slot

    def _slot_index(self) -> int:
        if self._open_slot is None:
            raise SlotClosedError("no assistant reply is in progress")
        # The slot is always the last entry: append() refuses while it is open
        return self._open_slot

    def replace_last(self, content: str) -> None:
        """Replace the content of the in-progress assistant message wholesale.

        Raises:
            SlotClosedError: If no assistant slot is open
        """
        index = self._slot_index()
        self._messages[index] = replace(self._messages[index], content=content)
        self._revision += 1

    def append_to_last(self, chunk: str) -> None:
        """Extend the in-progress assistant message with a chunk of text."""
        index = self._slot_index()
        current = self._messages[index]
        self._messages[index] = replace(current, content=current.content + chunk)
        self._revision += 1

    def close_slot(self, status: MessageStatus = MessageStatus.COMPLETE) -> ChatMessage:
        """Finish the in-progress assistant message with the given status."""
        index = self._slot_index()
        self._messages[index] = replace(self._messages[index], status=status)
        self._open_slot = None
        self._revision += 1
        return self._messages[index]

    def discard_slot(self) -> ChatMessage:
        """Remove the in-progress assistant message from the log."""
        index = self._slot_index()
        removed = self._messages.pop(index)
        self._open_slot = None
        self._revision += 1
        return removed

    def snapshot_for_request(self, preamble: str) -> list[RequestMessage]:
        """Build the history part of an outgoing request.

        The system preamble comes first. Every logged message follows with
        its role sent as "user": the conversation is flattened into user
        context rather than replayed turn by turn. Failed, cancelled,
        pending and empty entries are left out.
        """
        history = [RequestMessage(role=Role.SYSTEM.value, content=preamble)]
        for message in self._messages:
            if message.status != MessageStatus.COMPLETE or not message.content:
                continue
            history.append(RequestMessage(role=Role.USER.value, content=message.content))
        return history
