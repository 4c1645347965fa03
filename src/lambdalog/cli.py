# src/lambdalog/cli.py: Command-Line Interface (CLI) entry point.
# Implemented using Typer, this module provides the 'lambdalog' command for
# inspecting the effective logging configuration and for emitting a single
# record through the configured pipeline, which is handy when checking what a
# log sink will receive.

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import LambdaLogConfig, load_config
from .handler import build_provider
from .levels import LogLevel
from .util.errors import LambdaLogError

app = typer.Typer(
    name="lambdalog",
    help="Structured JSON logging with ambient scopes.",
    add_completion=False,
)
console = Console(stderr=True)

def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        print(f"lambdalog version: {__version__}")
        raise typer.Exit()

def get_config(config_path: Optional[str]) -> LambdaLogConfig:
    """Loads the config and handles errors."""
    try:
        return load_config(config_path)
    except LambdaLogError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

def parse_scope(item: str) -> tuple:
    """Split a 'key=value' option into a named scope pair."""
    key, sep, value = item.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"Scope '{item}' must look like key=value.")
    return (key, value)

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """
    lambdalog CLI.
    """

@app.command("show-config")
def show_config(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a logging.yaml file."),
):
    """Show the effective options, filter rules and output settings."""
    config = get_config(config_path)

    table = Table("Setting", "Value")
    table.add_row("level", config.level)
    for name, value in config.options.model_dump().items():
        table.add_row(name, str(value).lower())
    table.add_row("filter.default", str(config.filter.default) if config.filter.default is not None else "-")
    for category, level in config.filter.categories.items():
        table.add_row(escape(f"filter.categories[{category}]"), str(level))
    table.add_row("output.stream", config.output.stream)
    table.add_row("output.indent", "-" if config.output.indent is None else str(config.output.indent))
    console.print(table)

@app.command()
def emit(
    message: str = typer.Argument(..., help="The text of the record."),
    level: str = typer.Option("Information", "--level", "-l", help="Level name, e.g. Error or INFO."),
    category: Optional[str] = typer.Option(None, "--category", help="Category of the record."),
    event_id: int = typer.Option(0, "--event-id", help="Numeric event id."),
    scopes: List[str] = typer.Option([], "--scope", "-s", help="Named scope as key=value; repeatable."),
    tags: List[str] = typer.Option([], "--tag", "-t", help="Unnamed scope value; repeatable."),
    error: Optional[str] = typer.Option(None, "--error", help="Attach an error with this message."),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a logging.yaml file."),
):
    """Emit one record through the configured pipeline."""
    config = get_config(config_path)
    try:
        log_level = LogLevel.parse(level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--level")
    pairs = [parse_scope(item) for item in scopes]
    if (pairs or tags) and not config.options.include_scopes:
        console.print("[yellow]Warning:[/yellow] --scope and --tag are ignored because include_scopes is off.")
    if error is not None and not config.options.include_exception:
        console.print("[yellow]Warning:[/yellow] --error is ignored because include_exception is off.")

    try:
        provider = build_provider(config)
        json_logger = provider.create_logger(category)
        guards = [json_logger.begin_scope(tag) for tag in tags]
        if pairs:
            guards.append(json_logger.begin_scope(pairs))
        try:
            json_logger.log_message(
                log_level,
                message,
                event_id=event_id,
                error=RuntimeError(error) if error is not None else None,
            )
        finally:
            for guard in reversed(guards):
                guard.close()
    except LambdaLogError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

if __name__ == "__main__":
    app()
