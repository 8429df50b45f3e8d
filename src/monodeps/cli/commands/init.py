"""Init command implementation."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from monodeps.config import CONFIG_FILENAME
from monodeps.errors import ConfigurationError, MonodepsError

# Template for monodeps.yaml
MONODEPS_YAML_TEMPLATE = """# monodeps workspace configuration
name: {name}

# Directories under the root that are never scanned for packages
ignore:
  - node_modules
  - ".*"

publish:
  command: npm publish
  # Install dependencies before publishing
  install: true
  # auto, npm or yarn
  client: auto
"""


def init_workspace(path: Path, name: str | None = None) -> Path:
    """Mark a directory as workspace root.

    Args:
        path: Directory to mark.
        name: Workspace name (defaults to the directory name).

    Returns:
        Path of the created configuration file.

    Raises:
        ConfigurationError: If the directory is already a workspace root.
    """
    path = path.resolve()
    config_path = path / CONFIG_FILENAME

    if config_path.exists():
        raise ConfigurationError("Workspace already initialized", path=config_path)

    config_path.write_text(
        MONODEPS_YAML_TEMPLATE.format(name=name or path.name), encoding="utf-8"
    )
    return config_path


def handle_init(cwd: Path, console: Console, error_console: Console) -> None:
    """Handle init command."""
    try:
        config_path = init_workspace(cwd)
    except MonodepsError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    console.print("[green]Marked![/green]")
    console.print(f"Created {config_path.name} in {config_path.parent}")
