"""edge-watcher CLI — Entry point.

Usage:
    edge-watcher run [--config config.yaml] [--log-level debug] [--log-format json]
    edge-watcher check [--config config.yaml]
    edge-watcher config [--config config.yaml]
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from edge_watcher import __version__
from edge_watcher.exceptions import ConfigurationError, StoreConnectionError

app = typer.Typer(
    name="edge-watcher",
    help="edge-watcher — react once to a specific state transition of a Redis hash field.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

console = Console()

ConfigOption = Annotated[
    Optional[Path], typer.Option("--config", "-c", help="Path to config.yaml.")
]


class LogLevel(str, Enum):
    """Choices for ``--log-level``; mirrors ``LoggingConfig.level``."""

    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class LogFormat(str, Enum):
    """Choices for ``--log-format``; mirrors ``LoggingConfig.format``."""

    console = "console"
    json = "json"


def _load_settings(config: Path | None):
    from edge_watcher.config import Settings

    try:
        return Settings.load(config_file=config)
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(exc))}")
        raise typer.Exit(1)


@app.callback()
def main_callback() -> None:
    pass


@app.command("version")
def version() -> None:
    """Print the installed version."""
    console.print(f"edge-watcher {__version__}")


@app.command("run")
def run(
    config: ConfigOption = None,
    log_level: Annotated[
        Optional[LogLevel], typer.Option(case_sensitive=False, help="Override logging.level.")
    ] = None,
    log_format: Annotated[
        Optional[LogFormat], typer.Option(case_sensitive=False, help="Override logging.format.")
    ] = None,
) -> None:
    """Watch the configured field until SIGINT / SIGTERM."""
    from edge_watcher.daemon import run_daemon
    from edge_watcher.logging import configure_logging

    settings = _load_settings(config)
    configure_logging(
        level=log_level.value if log_level else settings.logging.level,
        format=log_format.value if log_format else settings.logging.format,
        log_file=str(settings.logging.file) if settings.logging.file else None,
    )

    try:
        run_daemon(settings)
    except StoreConnectionError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(1)
    except ConfigurationError as exc:
        console.print(f"[red]Invalid configuration: {exc.message}[/red]")
        raise typer.Exit(1)


@app.command("check")
def check(config: ConfigOption = None) -> None:
    """Ping the configured store once."""
    from edge_watcher.store.redis_store import RedisStoreClient

    settings = _load_settings(config)
    store = RedisStoreClient.from_config(settings.redis)

    async def _ping() -> None:
        try:
            await store.ping()
        finally:
            await store.close()

    try:
        asyncio.run(_ping())
    except StoreConnectionError as exc:
        console.print(f"[red]Store unreachable: {exc.message}[/red]")
        raise typer.Exit(1)
    console.print(f"[bold green]Store reachable at {store.address}[/bold green]")


@app.command("config")
def show_config(config: ConfigOption = None) -> None:
    """Print the effective configuration."""
    settings = _load_settings(config)
    data = settings.model_dump(mode="json")
    if data["redis"].get("password"):
        data["redis"]["password"] = "***"

    table = Table(title="edge-watcher configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for block, values in data.items():
        if values is None or not isinstance(values, dict):
            table.add_row(block, escape(str(values)))
            continue
        for key, value in values.items():
            table.add_row(f"{block}.{key}", escape(str(value)))
    console.print(table)


if __name__ == "__main__":
    app()
