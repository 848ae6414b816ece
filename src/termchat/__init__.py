"""
termchat: a terminal chat client for chat-completion services.

Each module hides one design decision: the message log its storage, the
renderer its formatting, the channel the provider protocol, and the session
the conversation state machine.
"""

__version__ = "0.1.0"

from .chat import ChatMessage, ChatSession, MessageLog, Role, SessionState
from .config import ChatConfig, load_config

__all__ = [
    "ChatConfig",
    "ChatMessage",
    "ChatSession",
    "MessageLog",
    "Role",
    "SessionState",
    "load_config",
]
