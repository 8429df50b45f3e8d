"""Package manager invocation for installing and publishing packages."""

from __future__ import annotations

import logging
from pathlib import Path

from monodeps.config.schema import ClientType
from monodeps.errors import PublishError
from monodeps.execution import ExecutionResult, run_command, run_in_package
from monodeps.workspace.package import Package

INSTALL_COMMANDS: dict[ClientType, str] = {
    ClientType.NPM: "npm install",
    ClientType.YARN: "yarn",
}

logger = logging.getLogger(__name__)


async def has_yarn(cwd: Path) -> bool:
    """Check if a yarn binary is available."""
    exit_code, _, _, _ = await run_command("yarn --version", cwd)
    return exit_code == 0


async def detect_client(path: Path, preferred: ClientType = ClientType.AUTO) -> ClientType:
    """Choose the package manager for a package directory.

    yarn is used when it is installed and the package either has a
    yarn.lock or has no package-lock.json; npm otherwise.

    Args:
        path: Package directory.
        preferred: Configured client, detection only runs for ``auto``.

    Returns:
        The client to use.
    """
    if preferred != ClientType.AUTO:
        return preferred

    if await has_yarn(path) and (
        (path / "yarn.lock").is_file() or not (path / "package-lock.json").is_file()
    ):
        return ClientType.YARN
    return ClientType.NPM


def _check(result: ExecutionResult) -> ExecutionResult:
    if result.failed:
        raise PublishError(result.package_name, result.command, result.exit_code, result.stderr)
    return result


async def install_dependencies(
    package: Package,
    *,
    client: ClientType = ClientType.AUTO,
) -> ExecutionResult:
    """Install the dependencies of a package.

    Raises:
        PublishError: If the install command exits with a non-zero code.
    """
    resolved = await detect_client(package.path, client)
    command = INSTALL_COMMANDS[resolved]
    logger.debug("Installing %s with %s", package.name, resolved.value)
    result = await run_in_package(package, command)
    return _check(result)


async def publish_package(
    package: Package,
    *,
    command: str = "npm publish",
) -> ExecutionResult:
    """Run the publish command in a package directory.

    Raises:
        PublishError: If the publish command exits with a non-zero code.
    """
    result = await run_in_package(package, command)
    return _check(result)
