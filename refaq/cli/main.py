"""
CLI interface for ReFAQ.

Terminal front end: renders answers from the resolution pipeline.
"""

import logging
import sys
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.table import Table

from refaq.cli.reveal import ProgressiveReveal
from refaq.config.loader import AppConfig, load_config
from refaq.core.intents import INTENT_TRIGGERS
from refaq.core.rate_limiter import RateLimiter
from refaq.core.resolver import ChatMessage, ResponseResolver
from refaq.sdk.completion_client import RemoteCompletionClient
from refaq.storage.repository import SqliteUsageStore

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

EXIT_WORDS = {"exit", "quit", "bye"}


def _load_config_or_exit(path: Optional[str]) -> AppConfig:
    try:
        return load_config(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


def _build_resolver(config: AppConfig) -> ResponseResolver:
    return ResponseResolver.from_config(config, SqliteUsageStore(config.storage.path))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML configuration file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    )
):
    """ReFAQ - answers questions about Re Protocol."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    ctx.obj = _load_config_or_exit(config_path)
    if ctx.invoked_subcommand is None:
        console.print("ReFAQ - Use --help to see available commands")


def _markdown(text: str) -> Markdown:
    # answers are line-oriented; keep single newlines as hard breaks
    return Markdown(text.replace("\n", "  \n"))


def _render(message: ChatMessage, word_delay: float, reveal: bool) -> None:
    if not reveal or word_delay == 0:
        console.print(_markdown(message.text))
        return

    animation = ProgressiveReveal(message.text, word_delay)
    with Live(console=console, refresh_per_second=20) as live:
        try:
            for frame in animation.frames():
                live.update(_markdown(frame))
        except KeyboardInterrupt:
            animation.cancel()
        if not animation.done:
            live.update(_markdown(message.text))


@app.command()
def ask(
    ctx: typer.Context,
    question: str = typer.Argument(..., help="Question about Re Protocol"),
    reveal: bool = typer.Option(
        False,
        "--reveal/--no-reveal",
        help="Reveal the answer word by word"
    )
):
    """Answer a single question."""
    config: AppConfig = ctx.obj
    if not question.strip():
        console.print("[yellow]Please type a question.[/]")
        sys.exit(EXIT_CODE_FAIL)

    resolver = _build_resolver(config)
    message = resolver.handle_turn(question)
    _render(message, config.display.word_delay, reveal)


@app.command()
def chat(ctx: typer.Context):
    """Start an interactive question session."""
    config: AppConfig = ctx.obj
    resolver = _build_resolver(config)
    if resolver.client is not None:
        resolver.client.probe()

    console.print("[bold]ReFAQ[/] - Ask anything about Re Protocol. Type 'exit' to leave.\n")
    while True:
        try:
            question = console.input("[bold blue]You:[/] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        if not question.strip():
            continue
        if question.strip().lower() in EXIT_WORDS:
            break

        with console.status("Thinking..."):
            message = resolver.handle_turn(question)
        _render(message, config.display.word_delay, reveal=True)
        console.print()


@app.command()
def quota(ctx: typer.Context):
    """Show remaining questions for the current day and hour."""
    config: AppConfig = ctx.obj
    limiter = RateLimiter(SqliteUsageStore(config.storage.path), config.rate_limit)
    decision = limiter.check_limit()

    table = Table(title="Question Quota")
    table.add_column("Window")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit", justify="right")
    table.add_row("Daily", str(decision.remaining_daily), str(limiter.daily_limit))
    table.add_row("Hourly", str(decision.remaining_hourly), str(limiter.hourly_limit))
    console.print(table)

    if not config.rate_limit.enabled:
        console.print("[dim]Rate limiting is disabled in configuration.[/]")
    elif not decision.can_ask:
        console.print(f"[yellow]{decision.message}[/]")


@app.command()
def probe(ctx: typer.Context):
    """Check connectivity to the remote completion endpoint."""
    config: AppConfig = ctx.obj
    client = RemoteCompletionClient(config.remote)
    if not client.configured:
        console.print(
            f"[yellow]No API key set[/] (export {config.remote.api_key_env}); "
            "answers will come from local rules."
        )
        sys.exit(EXIT_CODE_PASS)

    if client.probe():
        console.print(f"[green]✓[/] Connected to {config.remote.base_url}")
        sys.exit(EXIT_CODE_PASS)
    console.print(f"[red]✗[/] Could not reach {config.remote.base_url}")
    sys.exit(EXIT_CODE_FAIL)


@app.command()
def topics():
    """List the topics the local fallback understands."""
    table = Table(title="Topics")
    table.add_column("Topic")
    table.add_column("Example keywords")
    for intent, triggers in INTENT_TRIGGERS:
        table.add_row(intent.name.replace("_", " ").title(), ", ".join(triggers[:3]))
    console.print(table)


if __name__ == "__main__":
    app()
