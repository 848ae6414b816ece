"""Theme definitions for the TUI.

Hides the colour palettes. To add a theme, define a palette here and list
it in THEMES.
"""

from textual.theme import Theme

# Catppuccin flavours: https://catppuccin.com/palette
MOCHA = {
    "base": "#1e1e2e",
    "mantle": "#181825",
    "crust": "#11111b",
    "text": "#cdd6f4",
    "subtext": "#a6adc8",
    "overlay": "#6c7086",
    "surface0": "#313244",
    "surface1": "#45475a",
    "blue": "#89b4fa",
    "mauve": "#cba6f7",
    "yellow": "#f9e2af",
    "green": "#a6e3a1",
    "peach": "#fab387",
    "red": "#f38ba8",
}

LATTE = {
    "base": "#eff1f5",
    "mantle": "#e6e9ef",
    "crust": "#dce0e8",
    "text": "#4c4f69",
    "subtext": "#6c6f85",
    "overlay": "#9ca0b0",
    "surface0": "#ccd0da",
    "surface1": "#bcc0cc",
    "blue": "#1e66f5",
    "mauve": "#8839ef",
    "yellow": "#df8e1d",
    "green": "#40a02b",
    "peach": "#fe640b",
    "red": "#d20f39",
}


def _catppuccin(name: str, palette: dict[str, str], dark: bool) -> Theme:
    return Theme(
        name=name,
        primary=palette["blue"],
        secondary=palette["mauve"],
        accent=palette["yellow"],
        foreground=palette["text"],
        background=palette["crust"],
        success=palette["green"],
        warning=palette["peach"],
        error=palette["red"],
        surface=palette["base"],
        panel=palette["mantle"],
        dark=dark,
        variables={
            "border": palette["surface1"],
            "border-blurred": palette["surface0"],
            "scrollbar": palette["surface0"],
            "scrollbar-hover": palette["surface1"],
            "scrollbar-active": palette["blue"],
            "scrollbar-background": palette["mantle"],
            "text-muted": palette["overlay"],
            "footer-foreground": palette["subtext"],
            "footer-background": palette["crust"],
            "footer-key-foreground": palette["yellow"],
            "input-cursor-background": palette["text"],
            "input-cursor-foreground": palette["crust"],
            "input-selection-background": f"{palette['blue']} 30%",
        },
    )


CATPPUCCIN_MOCHA = _catppuccin("catppuccin-mocha", MOCHA, dark=True)
CATPPUCCIN_LATTE = _catppuccin("catppuccin-latte", LATTE, dark=False)

THEMES = (CATPPUCCIN_MOCHA, CATPPUCCIN_LATTE)
DEFAULT_THEME = CATPPUCCIN_MOCHA.name
