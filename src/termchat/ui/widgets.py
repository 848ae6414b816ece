"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Draft editing, submit gesture and input history
- Transcript viewport content and scrolling
- Debug log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual import events
from textual.containers import Horizontal, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from .config import (
    INPUT_CHAR_LIMIT,
    INPUT_HEIGHT,
    INPUT_HISTORY_MAX_SIZE,
    INPUT_PLACEHOLDER,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


class ChatInputBar(Horizontal):
    """Draft editor with a Send button.

    Keystrokes are always accepted. Pressing Ctrl+S (or Ctrl+J) posts a
    Submitted message but does not clear the draft: the owner calls clear()
    once the submission has been accepted.
    """

    SUBMIT_KEYS = ("ctrl+s", "ctrl+j")

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, char_limit: int = INPUT_CHAR_LIMIT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._char_limit = char_limit
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Send message (Ctrl+S)"
        )

    def on_mount(self) -> None:
        text_area = self._text_area()
        text_area.styles.height = INPUT_HEIGHT
        text_area.highlight_cursor_line = False
        # Older Textual releases have no TextArea placeholder
        if hasattr(text_area, "placeholder"):
            text_area.placeholder = INPUT_PLACEHOLDER
        text_area.focus()

    def _text_area(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    @property
    def value(self) -> str:
        """Current draft text."""
        return self._text_area().text

    @value.setter
    def value(self, text: str) -> None:
        self._text_area().text = text[:self._char_limit]

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self.submit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Enforce the character limit."""
        text_area = event.text_area
        if len(text_area.text) > self._char_limit:
            text_area.text = text_area.text[:self._char_limit]
            text_area.move_cursor(text_area.document.end)

    def on_key(self, event: events.Key) -> None:
        """Handle keyboard shortcuts.

        ctrl+enter cannot work in terminals, so ctrl+s and ctrl+j submit.
        Up/Down at the edges of the draft walk through input history.
        """
        if event.key in self.SUBMIT_KEYS:
            self.submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        return self._text_area().cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self._text_area()
        return text_area.cursor_location == text_area.document.end

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self._text_area()
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def submit(self) -> None:
        """Post the current draft as a submission."""
        self.post_message(self.Submitted(self.value))

    def clear(self) -> None:
        """Reset the draft after an accepted submission and remember it."""
        value = self.value.strip()
        if value and (not self._history or self._history[-1] != value):
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self._text_area().text = ""

    def focus_input(self) -> None:
        self._text_area().focus()


class TranscriptView(VerticalScroll):
    """Scrollable viewport showing the rendered transcript."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_SELECT = True

    class Resized(Message):
        """Posted when the viewport width changes."""

        def __init__(self, width: int) -> None:
            super().__init__()
            self.width = width

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = ""
        self._last_width = 0

    def compose(self):
        yield Static(id="transcript-body")

    @property
    def content(self) -> str:
        """Formatted text currently shown."""
        return self._content

    @property
    def viewport_width(self) -> int:
        """Columns available for transcript text."""
        return self.scrollable_content_region.width

    def set_content(self, formatted: str) -> None:
        """Show ANSI-formatted text, skipping the update if nothing changed."""
        if formatted == self._content:
            return
        self._content = formatted
        self.query_one("#transcript-body", Static).update(Text.from_ansi(formatted))

    def scroll_to_bottom(self) -> None:
        self.scroll_end(animate=False)

    def on_resize(self, event: events.Resize) -> None:
        width = self.viewport_width
        if width != self._last_width:
            self._last_width = width
            self.post_message(self.Resized(width))


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "Channel": "magenta",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level
        self.display = False

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.assemble(
            (timestamp, "dim"),
            " ",
            (f"{LogLevel.name(level):<5}", level_color),
            " ",
            (f"[{component}]", comp_color),
            " ",
            message,
        )
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Debug log is empty", timeout=2)
            return
        try:
            import pyperclip
            pyperclip.copy(text)
            self.app.notify("Debug log copied", timeout=2)
        except Exception:
            self.app.copy_to_clipboard(text)
            self.app.notify("Debug log copied (terminal)", timeout=2)
