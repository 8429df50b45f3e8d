"""Ignore patterns for package discovery."""

from __future__ import annotations

import fnmatch
from pathlib import Path


def should_ignore(directory: Path, patterns: list[str]) -> bool:
    """Check if a candidate package directory matches any ignore pattern.

    Args:
        directory: Directory to check.
        patterns: Glob patterns matched against the directory name and path.

    Returns:
        True if the directory should be skipped.
    """
    if not patterns:
        return False

    name = directory.name
    path_str = str(directory)

    for pattern in patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
        if fnmatch.fnmatch(path_str, pattern):
            return True

    return False
