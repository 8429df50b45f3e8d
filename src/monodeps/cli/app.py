"""monodeps CLI application."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from monodeps.errors import MonodepsError
from monodeps.workspace import Workspace

LOG_LEVEL_ENV = "MONODEPS_LOG_LEVEL"

app = typer.Typer(
    name="monodeps",
    help="Simple dependencies manage for packages published together.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


def configure_logging() -> None:
    """Send log records to stderr through rich.

    The level is read from MONODEPS_LOG_LEVEL and defaults to WARNING.
    """
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("monodeps")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=error_console, show_time=False, show_path=False)
        )


@app.callback()
def _app_callback() -> None:
    """Simple dependencies manage."""
    configure_logging()


def get_workspace(path: Path | None = None) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(path)
    except MonodepsError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


@app.command()
def init() -> None:
    """Mark current directory as packages root."""
    from monodeps.cli.commands.init import handle_init

    handle_init(Path.cwd(), console, error_console)


@app.command("publish")
def publish_cmd(
    packages: Annotated[
        list[str] | None,
        typer.Argument(
            help="Packages to publish, by package name or package directory name",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            "-v",
            help="New version, or increment type: major minor patch",
        ),
    ] = None,
) -> None:
    """Publish new version for specified packages."""
    from monodeps.commands import handle_publish_command

    workspace = get_workspace()

    asyncio.run(
        handle_publish_command(
            workspace,
            console=console,
            error_console=error_console,
            packages=packages,
            version=version,
        )
    )


@app.command("sync")
def sync_cmd() -> None:
    """Keep packages depending on the newest version of each other."""
    from monodeps.commands import handle_sync_command

    workspace = get_workspace()

    asyncio.run(
        handle_sync_command(
            workspace,
            console=console,
            error_console=error_console,
        )
    )


@app.command("version")
def version_cmd() -> None:
    """Show this tool's version."""
    from monodeps import __version__

    print(f"monodeps {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
