"""Main CLI application using Typer."""
import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ..chat.session import ChatSession
from ..config import API_KEY_ENV, SUPPORTED_PROVIDERS
from .providers import get_channel, get_config, require_llm

# Create Typer app
app = typer.Typer(
    name="termchat",
    help="Terminal chat client for chat-completion services",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.command()
def chat(
    provider: str | None = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider: openai, deepseek or anthropic (default: $TERMCHAT_PROVIDER or openai)"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Chat model (default depends on the provider)"
    ),
    stream: bool | None = typer.Option(
        None,
        "--stream/--no-stream",
        help="Stream tokens as they arrive (default: $TERMCHAT_STREAM or on)"
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Request timeout in seconds (default: 60)"
    ),
    system_prompt: str | None = typer.Option(
        None,
        "--system-prompt",
        help="System preamble sent with every request"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level (debug, info, warning, error)"
    ),
):
    """Start an interactive chat session."""
    from ..ui import run_chat_tui

    config = get_config(
        console,
        provider=provider,
        model=model,
        stream=stream,
        timeout=timeout,
        system_prompt=system_prompt,
    )
    llm = require_llm(config, console)
    channel = get_channel(config, llm)
    session = ChatSession(preamble=config.system_prompt)

    asyncio.run(run_chat_tui(
        channel,
        session=session,
        model_name=config.model,
        log_level=log_level,
        close=llm.close,
    ))


@app.command()
def health():
    """Show configuration and which API keys are set."""
    config = get_config(console)

    table = Table(title="termchat configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Provider", config.provider)
    table.add_row("Model", config.model)
    table.add_row("Streaming", "on" if config.stream else "off")
    table.add_row("Timeout", f"{config.timeout:g}s")
    console.print(table)

    for name in SUPPORTED_PROVIDERS:
        env_var = API_KEY_ENV[name]
        if get_config(console, provider=name).api_key:
            console.print(f"[green]+[/green] {env_var}: SET")
        else:
            console.print(f"[yellow]![/yellow] {env_var}: NOT SET")

    if not config.api_key:
        console.print(f"[red]Error: {API_KEY_ENV[config.provider]} required for {config.provider}[/red]")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
