"""Workspace discovery and package catalog."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import cached_property
from pathlib import Path

from monodeps.config import CONFIG_FILENAME, MonodepsConfig, find_config, load_config
from monodeps.errors import ManifestError, PackageNotFoundError, WorkspaceNotFoundError
from monodeps.workspace.graph import DependencyGraph
from monodeps.workspace.ignore import should_ignore
from monodeps.workspace.package import Package

logger = logging.getLogger(__name__)


def is_package_dir(path: Path) -> bool:
    """Check if a directory holds a loadable package."""
    try:
        Package.load(path)
    except ManifestError:
        return False
    return True


def looks_like_root(path: Path) -> bool:
    """Check if any direct subdirectory of path is a package."""
    try:
        children = sorted(path.iterdir())
    except OSError:
        return False
    return any(child.is_dir() and is_package_dir(child) for child in children)


def find_root(start: Path | None = None) -> Path:
    """Locate the workspace root.

    The nearest directory containing monodeps.yaml wins. Without one, the
    nearest directory with a package in a direct subdirectory is used, and
    failing that the start directory itself.

    Args:
        start: Directory to start from (defaults to cwd).

    Returns:
        Absolute path of the workspace root.
    """
    initial = (start or Path.cwd()).resolve()

    config_path = find_config(initial)
    if config_path is not None:
        logger.debug("Using marked root %s", config_path.parent)
        return config_path.parent

    for directory in (initial, *initial.parents):
        result = looks_like_root(directory)
        logger.debug("detecting root %s: %s", directory, result)
        if result:
            return directory

    logger.debug("Use current path as root: %s", initial)
    return initial


def load_packages(root: Path, ignore: list[str] | None = None) -> dict[str, Package]:
    """Load every package in the direct subdirectories of root.

    Directories without a valid manifest are skipped silently.

    Args:
        root: Workspace root.
        ignore: Directory patterns to skip.

    Returns:
        Mapping of package name to package.
    """
    packages: dict[str, Package] = {}

    for child in sorted(root.iterdir()):
        if not child.is_dir() or should_ignore(child, ignore or []):
            continue
        try:
            pkg = Package.load(child)
        except ManifestError as e:
            logger.debug("Skipping %s: %s", child, e.message)
            continue

        if pkg.name in packages:
            logger.warning(
                "Duplicate package name %s in %s, keeping %s",
                pkg.name,
                child,
                packages[pkg.name].path,
            )
            continue
        packages[pkg.name] = pkg

    return packages


class Workspace:
    """A directory of packages versioned and published together.

    The package catalog is loaded once; the dependency graph is built on
    first access and cached for the lifetime of the workspace.

    Attributes:
        root: Workspace root directory.
        config: Workspace configuration.
    """

    def __init__(
        self,
        root: Path,
        config: MonodepsConfig,
        packages: Mapping[str, Package],
    ) -> None:
        self.root = root
        self.config = config
        self._packages = dict(packages)

    @classmethod
    def discover(cls, path: Path | None = None) -> Workspace:
        """Find and load the workspace containing path.

        Args:
            path: Directory inside the workspace (defaults to cwd).

        Returns:
            Loaded workspace.

        Raises:
            WorkspaceNotFoundError: If path does not exist.
            ConfigurationError: If monodeps.yaml is invalid.
        """
        start = (path or Path.cwd()).resolve()
        if not start.is_dir():
            raise WorkspaceNotFoundError(start)

        root = find_root(start)
        config_path = root / CONFIG_FILENAME
        config = load_config(config_path) if config_path.is_file() else MonodepsConfig()

        packages = load_packages(root, config.ignore)
        logger.debug("Loaded %d packages from %s", len(packages), root)
        return cls(root, config, packages)

    @property
    def packages(self) -> Mapping[str, Package]:
        return self._packages

    @property
    def name(self) -> str:
        return self.config.name or self.root.name

    @cached_property
    def graph(self) -> DependencyGraph:
        return DependencyGraph.build(self._packages)

    def get_package(self, name: str) -> Package:
        """Get a package by name.

        Raises:
            PackageNotFoundError: If there is no such package.
        """
        try:
            return self._packages[name]
        except KeyError:
            raise PackageNotFoundError(name, list(self._packages)) from None

    def resolve_package(self, keyword: str) -> Package:
        """Find a package by name or by its directory name under the root.

        Raises:
            PackageNotFoundError: If keyword matches no package.
        """
        if keyword in self._packages:
            return self._packages[keyword]

        package_path = (self.root / keyword).resolve()
        for pkg in self._packages.values():
            if pkg.path.resolve() == package_path:
                return pkg

        raise PackageNotFoundError(keyword)

    def detect_package(self, cwd: Path | None = None) -> Package | None:
        """Get the package whose directory contains cwd, if any."""
        current = (cwd or Path.cwd()).resolve()
        for pkg in self._packages.values():
            pkg_path = pkg.path.resolve()
            if current == pkg_path or pkg_path in current.parents:
                return pkg
        return None
