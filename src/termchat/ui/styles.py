"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.

Layout, top to bottom:
- transcript (fills the remaining height)
- debug panel (hidden unless enabled)
- input bar (fixed height)
- help line
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* Transcript viewport */
#transcript {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &.-busy {
        border: round $accent;
        border-subtitle-color: $accent;
    }

    #transcript-body {
        width: 100%;
        height: auto;
    }
}

/* Debug log panel */
#debug-panel {
    height: 10;
    background: $surface;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

/* Input bar */
#chat-input-bar {
    height: auto;
    background: $surface;

    #chat-input {
        width: 1fr;
        border: none;
        border-left: heavy $border;

        &:focus {
            border-left: heavy $primary;
        }
    }

    #send-btn {
        width: 10;
        height: 3;
        margin-left: 1;
    }
}

/* Help line */
#help-line {
    height: 1;
    padding: 0 1;
    color: $text-muted;
}
"""
