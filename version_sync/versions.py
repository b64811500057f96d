"""Version parsing and bumping utilities.

Versions are plain semver.Version objects: immutable, ordered by semantic
version precedence (build metadata ignored) and rendered back exactly as
M.m.p[-pre][+build].
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import semver

from .errors import InvalidVersionFormat


class BumpKind(str, Enum):
    """Which component of the version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def parse_version(text: str, path: Path | None = None) -> semver.Version:
    """Parse a strict semantic version string.

    Surrounding whitespace is ignored. Partial versions ("1.2"), a leading
    "v" and leading zeros are all rejected.

    Raises:
        InvalidVersionFormat: If the text is not a valid semantic version.
    """
    stripped = text.strip()
    try:
        return semver.Version.parse(stripped)
    except (ValueError, TypeError) as exc:
        raise InvalidVersionFormat(stripped, path) from exc


def bump_version(version: semver.Version, kind: BumpKind) -> semver.Version:
    """Return the next release version.

    Pre-release and build metadata of the input are dropped:
        1.2.3 → 2.0.0 (major), 1.3.0 (minor), 1.2.4 (patch)
    """
    if kind is BumpKind.MAJOR:
        return semver.Version(version.major + 1, 0, 0)
    if kind is BumpKind.MINOR:
        return semver.Version(version.major, version.minor + 1, 0)
    return semver.Version(version.major, version.minor, version.patch + 1)


def with_prerelease(version: semver.Version, prerelease: str) -> semver.Version:
    """Copy the numeric core of version with a new pre-release tag."""
    return semver.Version(version.major, version.minor, version.patch, prerelease)
