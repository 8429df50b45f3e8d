"""Publish command implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from monodeps.commands.base import Command, CommandContext
from monodeps.errors import InvalidVersionError, MonodepsError, PublishError
from monodeps.npm import install_dependencies, publish_package
from monodeps.planning import PublishRecord, arrange_publish_queue
from monodeps.versioning import ExplicitVersion, VersionTarget, parse_target

if TYPE_CHECKING:
    from rich.console import Console

    from monodeps.workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Result of publishing a queue.

    Attributes:
        records: The planned queue.
        published: Names of packages published successfully, in order.
        success: Whether the whole queue was published.
        error: Failure message when success is False.
    """

    records: list[PublishRecord]
    published: list[str] = field(default_factory=list)
    success: bool = True
    error: str | None = None

    @property
    def failed_package(self) -> str | None:
        if self.success or len(self.published) >= len(self.records):
            return None
        return self.records[len(self.published)].name


@dataclass
class PublishOptions:
    """Options for publish command.

    Attributes:
        packages: Package names or directory names; empty means the package
            containing ``cwd``.
        version: Bump keyword or explicit version; None republishes each
            entry at its current version.
        cwd: Directory used to detect the package when none is named.
    """

    packages: list[str] = field(default_factory=list)
    version: str | None = None
    cwd: Path | None = None


class QueueExecutor:
    """Publish planned records one at a time, in queue order.

    Each record is applied to its package and written to the manifest before
    dependencies are installed and the package is published. If a package
    fails, its manifest is restored and the error propagates; earlier
    packages keep their changes and later ones are not attempted.
    """

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    async def publish_record(self, record: PublishRecord) -> None:
        """Apply a record to its package and publish it.

        Raises:
            PublishError: If installing or publishing fails.
        """
        settings = self.workspace.config.publish
        pkg = self.workspace.get_package(record.name)

        pkg.apply(record)
        pkg.write_manifest()

        try:
            if settings.install:
                await install_dependencies(pkg, client=settings.client)
            await publish_package(pkg, command=settings.command)
        except PublishError:
            logger.debug("Publishing %s failed, restoring %s", pkg.name, pkg.manifest_path)
            pkg.restore_manifest()
            raise

        logger.debug("Published %s@%s", pkg.name, pkg.version)

    async def run(self, records: list[PublishRecord]) -> PublishResult:
        """Publish every record, stopping at the first failure."""
        result = PublishResult(records=records)
        for record in records:
            try:
                await self.publish_record(record)
            except PublishError as e:
                result.success = False
                result.error = e.message
                return result
            result.published.append(record.name)
        return result


class PublishCommand(Command[PublishResult]):
    """Publish packages together with everything depending on them."""

    def __init__(self, context: CommandContext, options: PublishOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or PublishOptions()

    def parse_version(self) -> VersionTarget | None:
        """Parse the requested version.

        Raises:
            InvalidVersionError: If it is neither a bump keyword nor an
                exact version without range operator.
        """
        if not self.options.version:
            return None
        target = parse_target(self.options.version)
        if target is None:
            raise InvalidVersionError(self.options.version)
        # A package version is never a range
        if isinstance(target, ExplicitVersion) and target.version.prefix:
            raise InvalidVersionError(self.options.version)
        return target

    def resolve_entries(self) -> dict[str, VersionTarget]:
        """Map each requested package to the version it should get.

        Raises:
            InvalidVersionError: If the version is invalid.
            PackageNotFoundError: If a named package does not exist.
            MonodepsError: If no package is named and cwd is not in one.
        """
        target = self.parse_version()

        if self.options.packages:
            entry_packages = [self.workspace.resolve_package(k) for k in self.options.packages]
        else:
            detected = self.workspace.detect_package(self.options.cwd)
            if detected is None:
                raise MonodepsError("Not in package directory, need specify package name")
            entry_packages = [detected]

        return {pkg.name: target or ExplicitVersion(pkg.version) for pkg in entry_packages}

    def plan(self) -> list[PublishRecord]:
        """Compute the publish queue without touching any file."""
        entries = self.resolve_entries()
        return arrange_publish_queue(entries, self.workspace.packages, self.workspace.graph)

    async def execute(self) -> PublishResult:
        """Plan and publish the queue."""
        records = self.plan()
        if self.context.dry_run or not records:
            return PublishResult(records=records)
        return await QueueExecutor(self.workspace).run(records)


async def publish(
    workspace: Workspace,
    *,
    packages: list[str] | None = None,
    version: str | None = None,
    cwd: Path | None = None,
    dry_run: bool = False,
) -> PublishResult:
    """Convenience function to publish packages."""
    context = CommandContext(workspace=workspace, dry_run=dry_run)
    options = PublishOptions(packages=packages or [], version=version, cwd=cwd)
    cmd = PublishCommand(context, options)
    return await cmd.execute()


async def handle_publish_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    packages: list[str] | None = None,
    version: str | None = None,
) -> None:
    """Handle the publish command from the CLI: plan, preview, publish."""
    context = CommandContext(workspace=workspace)
    options = PublishOptions(packages=packages or [], version=version)
    cmd = PublishCommand(context, options)

    try:
        records = cmd.plan()
        await run_publish_queue(
            workspace,
            records,
            title="Updates",
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


async def run_publish_queue(
    workspace: Workspace,
    records: list[PublishRecord],
    *,
    title: str,
    console: Console,
    error_console: Console,
) -> PublishResult:
    """Preview a planned queue and publish it, exiting 1 on failure."""
    from monodeps.cli.output.preview import print_publish_plan

    if not records:
        console.print("[yellow]No packages to publish[/yellow]")
        return PublishResult(records=records)

    print_publish_plan(console, records, title=title)

    result = await QueueExecutor(workspace).run(records)

    if result.success:
        console.print(f"[green]Published {len(result.published)} packages[/green]")
    else:
        error_console.print(f"[red]Publish failed:[/red] {result.error}")
        if result.failed_package:
            error_console.print(f"Restored manifest of {result.failed_package}")
        raise typer.Exit(1)

    return result
