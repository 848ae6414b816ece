"""Terminal UI module for termchat.

Provides a Textual-based TUI around the chat session.

Module structure (each module hides a design decision):
- config.py: UI constants and log levels
- widgets.py: Custom widgets (input bar, transcript viewport, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration (event loop, effects, worker)
"""

from .app import ChannelEventMessage, ChatApp, run_chat_tui
from .config import LogLevel
from .widgets import ChatInputBar, DebugPanel, TranscriptView

__all__ = [
    "ChannelEventMessage",
    "ChatApp",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "TranscriptView",
    "run_chat_tui",
]
