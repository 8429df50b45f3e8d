"""Semantic versions with an optional range-operator prefix.

Only exact ``major.minor.patch`` versions are supported. Pre-release tags,
build metadata and wildcard ranges are rejected by :meth:`Version.parse`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import IntEnum

VERSION_PATTERN = re.compile(
    r"^(?P<prefix>>=|>|<=|<|~|\^)?"
    r"(?P<major>0|[1-9][0-9]*)\."
    r"(?P<minor>0|[1-9][0-9]*)\."
    r"(?P<patch>0|[1-9][0-9]*)$"
)

PREFIXES = ("", ">=", ">", "<=", "<", "~", "^")


class BumpType(IntEnum):
    """Version component to increment, ordered by severity."""

    PATCH = 0
    MINOR = 1
    MAJOR = 2

    @property
    def keyword(self) -> str:
        return self.name.lower()


def is_bump_keyword(text: str) -> bool:
    """Check whether text is one of ``major``, ``minor`` or ``patch``."""
    return text in ("major", "minor", "patch")


@dataclass(frozen=True, slots=True)
class VersionDiff:
    """Result of comparing two versions.

    Attributes:
        direction: 1 if the left version is higher, -1 if lower, 0 if equal.
        level: Component where the versions first differ, None when equal.
    """

    direction: int
    level: BumpType | None = None

    @property
    def is_equal(self) -> bool:
        return self.direction == 0

    @property
    def is_greater(self) -> bool:
        return self.direction > 0

    @property
    def is_less(self) -> bool:
        return self.direction < 0


@dataclass(frozen=True, slots=True)
class Version:
    """An immutable three-component semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prefix: Range operator kept verbatim from the requirement (``^``, ``~``...).
    """

    major: int
    minor: int
    patch: int
    prefix: str = ""

    def __post_init__(self) -> None:
        if self.prefix not in PREFIXES:
            raise ValueError(f"Unsupported version prefix: {self.prefix!r}")
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError("Version components must be non-negative")

    @classmethod
    def parse(cls, text: str) -> Version | None:
        """Parse a version string.

        Args:
            text: Version such as ``1.2.3`` or ``^1.2.3``.

        Returns:
            The parsed version, or None if the format is not supported.
        """
        match = VERSION_PATTERN.fullmatch(text)
        if not match:
            return None
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prefix=match.group("prefix") or "",
        )

    def compare(self, other: Version) -> VersionDiff:
        """Compare against another version, ignoring prefixes.

        Args:
            other: Version to compare against.

        Returns:
            Direction and level of the first differing component.
        """
        for level, mine, theirs in (
            (BumpType.MAJOR, self.major, other.major),
            (BumpType.MINOR, self.minor, other.minor),
            (BumpType.PATCH, self.patch, other.patch),
        ):
            if mine > theirs:
                return VersionDiff(1, level)
            if mine < theirs:
                return VersionDiff(-1, level)
        return VersionDiff(0)

    def bump(self, level: BumpType) -> Version:
        """Return a new version with the given component incremented."""
        if level == BumpType.MAJOR:
            return replace(self, major=self.major + 1, minor=0, patch=0)
        if level == BumpType.MINOR:
            return replace(self, minor=self.minor + 1, patch=0)
        return replace(self, patch=self.patch + 1)

    def update(self, target: VersionTarget) -> Version:
        """Apply a requested change.

        An explicit version replaces this one entirely; a bump level is
        applied with :meth:`bump`.
        """
        if isinstance(target, ExplicitVersion):
            return target.version
        return self.bump(target.level)

    def with_prefix(self, prefix: str) -> Version:
        """Return a copy carrying another range operator."""
        return replace(self, prefix=prefix)

    def __str__(self) -> str:
        return f"{self.prefix}{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class ExplicitVersion:
    """Publish at exactly this version."""

    version: Version

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True, slots=True)
class BumpLevel:
    """Publish at the current version bumped by ``level``."""

    level: BumpType

    def __str__(self) -> str:
        return self.level.keyword


VersionTarget = ExplicitVersion | BumpLevel


def parse_target(text: str) -> VersionTarget | None:
    """Parse a bump keyword or an explicit version.

    Args:
        text: ``major``, ``minor``, ``patch`` or a version string.

    Returns:
        The requested target, or None if text is neither.
    """
    if is_bump_keyword(text):
        return BumpLevel(BumpType[text.upper()])
    version = Version.parse(text)
    if version is None:
        return None
    return ExplicitVersion(version)
