"""Exception hierarchy for monodeps."""

from __future__ import annotations

from pathlib import Path


class MonodepsError(Exception):
    """Base class for all monodeps errors.

    Attributes:
        message: Human readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MonodepsError):
    """Raised when the workspace configuration is invalid."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)
        self.path = path


class WorkspaceNotFoundError(MonodepsError):
    """Raised when no workspace root can be located."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No workspace found at or above {path}")
        self.path = path


class PackageNotFoundError(MonodepsError):
    """Raised when a package name or directory is not part of the workspace."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        message = f"Package {name} not exists"
        if available:
            message += f" (available: {', '.join(sorted(available))})"
        super().__init__(message)
        self.name = name


class ManifestError(MonodepsError):
    """Raised when a package manifest cannot be read, parsed or written."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidVersionError(MonodepsError):
    """Raised when a version or bump keyword cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid version description {value}")
        self.value = value


class CyclicDependencyError(MonodepsError):
    """Raised when the dependency graph contains a cycle.

    Attributes:
        cycle: Package names from the first repeated ancestor through the
            repeated package, e.g. ``["a", "b", "c", "a"]``.
    """

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")
        self.cycle = cycle


class PublishError(MonodepsError):
    """Raised when installing or publishing a package fails."""

    def __init__(
        self,
        package_name: str,
        command: str,
        exit_code: int,
        stderr: str = "",
    ) -> None:
        message = f"{package_name}: `{command}` failed with exit code {exit_code}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)
        self.package_name = package_name
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
