"""Shared test fixtures for monodeps tests."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from monodeps.versioning import Version
from monodeps.workspace import Package

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")

PackageFactory = Callable[..., Path]
CatalogFactory = Callable[[dict[str, Any]], dict[str, Package]]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_package(temp_dir: Path) -> PackageFactory:
    """Write a package.json into a subdirectory of temp_dir."""

    def factory(
        dirname: str,
        version: str = "1.0.0",
        *,
        name: str | None = None,
        dependencies: dict[str, str] | None = None,
        dev_dependencies: dict[str, str] | None = None,
        peer_dependencies: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
        trailer: str = "\n",
    ) -> Path:
        manifest: dict[str, Any] = {"name": dirname if name is None else name}
        manifest["version"] = version
        if extra:
            manifest.update(extra)
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        if peer_dependencies is not None:
            manifest["peerDependencies"] = peer_dependencies

        path = temp_dir / dirname
        path.mkdir(parents=True, exist_ok=True)
        (path / "package.json").write_text(json.dumps(manifest, indent=2) + trailer)
        return path

    return factory


@pytest.fixture
def make_catalog() -> CatalogFactory:
    """Build an in-memory catalog.

    Takes ``{name: (version, {dep: requirement})}``.
    """

    def factory(spec: dict[str, Any]) -> dict[str, Package]:
        catalog: dict[str, Package] = {}
        for name, (version, deps) in spec.items():
            parsed_version = Version.parse(version)
            assert parsed_version is not None
            dependencies = {}
            for dep_name, requirement in deps.items():
                parsed = Version.parse(requirement)
                assert parsed is not None
                dependencies[dep_name] = parsed
            catalog[name] = Package(
                name=name,
                version=parsed_version,
                dependencies=dependencies,
                raw={"name": name, "version": version, "dependencies": dict(deps)},
                raw_text="{}\n",
                path=Path("/workspace") / name,
            )
        return catalog

    return factory


@pytest.fixture
def sample_monodeps_yaml() -> str:
    """Sample monodeps.yaml content."""
    return """\
name: test-workspace

ignore:
  - node_modules
  - ".*"
  - "scratch*"

publish:
  command: npm publish --access public
  install: true
  client: npm
"""


@pytest.fixture
def workspace_dir(
    temp_dir: Path,
    make_package: PackageFactory,
    sample_monodeps_yaml: str,
) -> Path:
    """Create a workspace with a chain pkg-c -> pkg-b -> pkg-a."""
    (temp_dir / "monodeps.yaml").write_text(sample_monodeps_yaml)

    make_package("pkg-a", "1.0.0", dependencies={"lodash": "^4.17.21"})
    make_package("pkg-b", "1.0.0", dependencies={"pkg-a": "^1.0.0"})
    make_package(
        "pkg-c",
        "1.0.0",
        dependencies={"pkg-b": "^1.0.0"},
        dev_dependencies={"pkg-a": "~1.0.0"},
    )
    make_package("standalone", "0.3.0", dependencies={"react": "^18.2.0"})

    # Not packages
    (temp_dir / "docs").mkdir()
    make_package("scratch-pkg", "1.0.0")
    broken = temp_dir / "broken"
    broken.mkdir()
    (broken / "package.json").write_text('{"name": "broken", "version": "latest"}\n')

    return temp_dir
