"""Shell command execution in package directories.

Install and publish commands share the terminal with monodeps, so package
managers can prompt (npm asks for a one-time password when 2FA is on) and
print progress as usual. Output is only captured for version checks such
as ``yarn --version``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from monodeps.execution.results import ExecutionResult

if TYPE_CHECKING:
    from monodeps.workspace.package import Package

logger = logging.getLogger(__name__)


async def run_command(command: str, cwd: Path) -> tuple[int, str, str, int]:
    """Run a shell command and capture its output.

    Args:
        command: Shell command to execute.
        cwd: Working directory.

    Returns:
        Tuple of (exit_code, stdout, stderr, duration_ms). A command that
        cannot be started reports exit code -1.
    """
    logger.debug("Execute: `%s` at %s", command, cwd)
    start_time = time.monotonic()

    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as e:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug("`%s` could not run: %s", command, e)
        return -1, "", str(e), duration_ms

    duration_ms = int((time.monotonic() - start_time) * 1000)
    return (
        process.returncode or 0,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
        duration_ms,
    )


async def run_attached(command: str, cwd: Path) -> tuple[int, int]:
    """Run a shell command attached to the current terminal.

    stdin, stdout and stderr are inherited, nothing is captured.

    Args:
        command: Shell command to execute.
        cwd: Working directory.

    Returns:
        Tuple of (exit_code, duration_ms). A command that cannot be started
        reports exit code -1.
    """
    logger.debug("Execute: `%s` at %s", command, cwd)
    start_time = time.monotonic()

    try:
        process = await asyncio.create_subprocess_shell(command, cwd=str(cwd))
        exit_code = await process.wait()
    except OSError as e:
        logger.error("`%s` could not run: %s", command, e)
        exit_code = -1

    return exit_code, int((time.monotonic() - start_time) * 1000)


async def run_in_package(package: Package, command: str) -> ExecutionResult:
    """Run a command in a package directory, attached to the terminal.

    Returns:
        Execution result; stdout and stderr are empty since they were not
        captured.
    """
    exit_code, duration_ms = await run_attached(command, package.path)

    if exit_code == 0:
        return ExecutionResult.success_result(
            package_name=package.name,
            duration_ms=duration_ms,
            command=command,
        )
    return ExecutionResult.failure_result(
        package_name=package.name,
        exit_code=exit_code,
        duration_ms=duration_ms,
        command=command,
    )
