"""Provider factory functions for CLI.

Turns configuration into a ready LLM provider and response channel, and
reports configuration problems on the console.
"""

from typing import Any

import typer
from rich.console import Console

from ..chat.channel import ResponseChannel, create_channel
from ..config import ChatConfig, load_config
from ..errors import ConfigError
from ..llm import LLMProvider, create_llm_provider

# Default console for output
_console = Console()


def get_config(console: Console | None = None, **overrides: Any) -> ChatConfig:
    """Load configuration, exiting with an error message if it is invalid."""
    con = console or _console
    try:
        return load_config(**overrides)
    except (ConfigError, ValueError) as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def require_llm(config: ChatConfig, console: Console | None = None) -> LLMProvider:
    """Create the configured LLM provider.

    Raises:
        typer.Exit: If the API key is missing or the provider is unknown
    """
    con = console or _console
    try:
        return create_llm_provider(config.provider, **config.provider_kwargs())
    except ConfigError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_channel(config: ChatConfig, llm: LLMProvider) -> ResponseChannel:
    """Response channel matching the configured streaming mode."""
    return create_channel(llm, stream=config.stream, temperature=config.temperature)
