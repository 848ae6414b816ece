"""Error taxonomy for termchat.

Hides which failures are surfaced to the user and which are programming
errors:
- InputRejected is never shown, the submission is simply ignored
- RequestFailed / MalformedResponse become a failed transcript entry
- SlotClosedError signals a write to the message log outside a stream
"""


class TermchatError(Exception):
    """Base class for all termchat errors."""


class InputRejected(TermchatError):
    """A submission was empty or whitespace-only."""


class RequestFailed(TermchatError):
    """The completion service returned an error or could not be reached."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MalformedResponse(RequestFailed):
    """The completion service answered with an unexpected shape."""


class SlotClosedError(TermchatError):
    """The last log entry was written while no assistant slot was open."""


class ConfigError(TermchatError):
    """Missing credentials or an unknown provider name."""
