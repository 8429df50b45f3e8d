"""Version parsing, comparison and bumping."""

from monodeps.versioning.semver import (
    BumpLevel,
    BumpType,
    ExplicitVersion,
    Version,
    VersionDiff,
    VersionTarget,
    is_bump_keyword,
    parse_target,
)

__all__ = [
    "BumpLevel",
    "BumpType",
    "ExplicitVersion",
    "Version",
    "VersionDiff",
    "VersionTarget",
    "is_bump_keyword",
    "parse_target",
]
