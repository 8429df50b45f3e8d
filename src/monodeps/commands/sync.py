"""Sync command implementation.

Republishes every package whose requirement on another workspace package
lags behind that package's current version, along with the packages
depending on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer

from monodeps.commands.base import Command, CommandContext
from monodeps.commands.publish import PublishResult, QueueExecutor, run_publish_queue
from monodeps.errors import MonodepsError
from monodeps.planning import OutdatedDependency, PublishRecord, find_outdated, plan_sync

if TYPE_CHECKING:
    from rich.console import Console

    from monodeps.workspace import Workspace


@dataclass
class SyncResult:
    """Result of sync command."""

    outdated: list[OutdatedDependency]
    publish: PublishResult

    @property
    def success(self) -> bool:
        return self.publish.success


class SyncCommand(Command[SyncResult]):
    """Bring workspace requirements up to date and republish."""

    def plan(self) -> list[PublishRecord]:
        """Compute the publish queue without touching any file."""
        return plan_sync(self.workspace.packages, self.workspace.graph)

    async def execute(self) -> SyncResult:
        outdated = find_outdated(self.workspace.packages)
        records = self.plan()
        if self.context.dry_run or not records:
            return SyncResult(outdated, PublishResult(records=records))
        return SyncResult(outdated, await QueueExecutor(self.workspace).run(records))


async def sync(workspace: Workspace, *, dry_run: bool = False) -> SyncResult:
    """Convenience function to sync workspace requirements."""
    context = CommandContext(workspace=workspace, dry_run=dry_run)
    return await SyncCommand(context).execute()


async def handle_sync_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
) -> None:
    """Handle the sync command from the CLI: plan, preview, publish."""
    cmd = SyncCommand(CommandContext(workspace=workspace))

    try:
        records = cmd.plan()
        if not records:
            console.print("[green]All workspace dependencies are up to date[/green]")
            return

        await run_publish_queue(
            workspace,
            records,
            title="Sync",
            console=console,
            error_console=error_console,
        )
    except typer.Exit:
        raise
    except MonodepsError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e
    except Exception as e:
        error_console.print_exception()
        raise typer.Exit(1) from e
