"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR; a lower value shows more messages.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Redraw timer driving the "thinking" animation while a reply is pending
TICK_INTERVAL_SECONDS = 0.2

# Input configuration
INPUT_CHAR_LIMIT = 500
INPUT_HEIGHT = 5
INPUT_PLACEHOLDER = "Type your message here..."
INPUT_HISTORY_MAX_SIZE = 100

HELP_MESSAGE = "Press Ctrl+S to send message"

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
