"""Workspace package backed by a package.json manifest."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from monodeps.errors import ManifestError
from monodeps.versioning import Version

if TYPE_CHECKING:
    from monodeps.planning.queue import PublishRecord

MANIFEST_FILENAME = "package.json"

# Merged into Package.dependencies, in this order.
DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")

logger = logging.getLogger(__name__)


def read_manifest(path: Path) -> tuple[dict[str, Any], str]:
    """Read a package manifest.

    Args:
        path: Package directory.

    Returns:
        Tuple of (parsed data, original text).

    Raises:
        ManifestError: If the file is missing or not a JSON object.
    """
    manifest = path / MANIFEST_FILENAME
    try:
        text = manifest.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(
            f"'{path}' is not a valid package, read {MANIFEST_FILENAME} failed: {e}",
            path=manifest,
        ) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"'{path}' {MANIFEST_FILENAME} invalid: {e}", path=manifest) from e

    if not isinstance(data, dict):
        raise ManifestError(f"'{path}' {MANIFEST_FILENAME} is not an object", path=manifest)

    return data, text


def merge_dependencies(raw: dict[str, Any]) -> dict[str, Version]:
    """Merge every dependency category into one requirement map.

    Requirements that are not plain versions (tags, ranges, urls) are skipped.
    When a package appears in several categories the higher version wins.
    """
    merged: dict[str, Version] = {}
    for field in DEPENDENCY_FIELDS:
        section = raw.get(field)
        if not isinstance(section, dict):
            continue
        for dep_name, requirement in section.items():
            if not isinstance(requirement, str):
                continue
            version = Version.parse(requirement)
            if version is None:
                continue
            current = merged.get(dep_name)
            if current is None or version.compare(current).is_greater:
                merged[dep_name] = version
    return merged


@dataclass(eq=False)
class Package:
    """A package in the workspace.

    ``raw`` and ``raw_text`` hold the manifest exactly as it was read and are
    never modified, so a failed publish can restore the original file.

    Attributes:
        name: Package name.
        version: Current version.
        dependencies: Requirements from all dependency categories.
        raw: Parsed manifest data.
        raw_text: Original manifest text.
        path: Package directory.
    """

    name: str
    version: Version
    dependencies: dict[str, Version]
    raw: dict[str, Any]
    raw_text: str
    path: Path

    @classmethod
    def load(cls, path: Path) -> Package:
        """Load the package in a directory.

        Args:
            path: Package directory.

        Returns:
            Loaded package.

        Raises:
            ManifestError: If the manifest is missing, malformed or its
                version cannot be parsed.
        """
        raw, text = read_manifest(path)

        raw_version = raw.get("version")
        version = Version.parse(raw_version) if isinstance(raw_version, str) else None
        if version is None:
            raise ManifestError(
                f"package '{raw.get('name')}' parse failed: invalid version '{raw_version}'",
                path=path / MANIFEST_FILENAME,
            )

        name = raw.get("name") or path.name

        return cls(
            name=name,
            version=version,
            dependencies=merge_dependencies(raw),
            raw=raw,
            raw_text=text,
            path=path,
        )

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILENAME

    def apply(self, record: PublishRecord) -> None:
        """Take the versions decided for this package by the planner."""
        if record.name != self.name:
            raise ValueError(f"Record for {record.name} applied to {self.name}")

        self.version = record.new_version
        for update in record.dependencies:
            self.dependencies[update.name] = update.new

    def render_manifest(self) -> str:
        """Serialize the current state into manifest text.

        Unknown fields are kept, and whatever followed the closing brace of
        the original file (usually a newline) is preserved.
        """
        updated = copy.deepcopy(self.raw)
        updated["name"] = self.name
        updated["version"] = str(self.version)

        for field in DEPENDENCY_FIELDS:
            section = updated.get(field)
            if not isinstance(section, dict) or not section:
                continue
            for dep_name, requirement in section.items():
                if dep_name not in self.dependencies:
                    continue
                current = Version.parse(requirement) if isinstance(requirement, str) else None
                if current is None:
                    continue
                # Each category keeps its own range operator
                section[dep_name] = str(self.dependencies[dep_name].with_prefix(current.prefix))

        tail = self.raw_text[self.raw_text.rfind("}") + 1 :]
        return json.dumps(updated, indent=2, ensure_ascii=False) + tail

    def write_manifest(self) -> None:
        """Write the updated version and dependencies to the manifest."""
        self._write(self.render_manifest())

    def restore_manifest(self) -> None:
        """Write the originally read manifest text back.

        Only the file is restored; in-memory fields keep their values.
        """
        self._write(self.raw_text)

    def _write(self, text: str) -> None:
        try:
            self.manifest_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ManifestError(
                f'update "{self.manifest_path}" failed: {e}', path=self.manifest_path
            ) from e
        logger.debug("Wrote %s", self.manifest_path)
