"""Data models for version-sync.

These Pydantic models describe what discovery finds and what the engine
reports back to its callers. None of them hold file content.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import semver
from pydantic import BaseModel, ConfigDict, Field


class ManifestKind(str, Enum):
    """The build-system manifests whose version field can be synchronized."""

    CARGO = "cargo"
    PYPROJECT = "pyproject"
    PACKAGE_JSON = "package-json"

    @property
    def filename(self) -> str:
        return _FILENAMES[self]

    @property
    def label(self) -> str:
        """Human-readable name used in reports."""
        return _LABELS[self]

    @classmethod
    def from_filename(cls, name: str) -> ManifestKind | None:
        """Classify a bare filename, or return None if it is not a manifest."""
        for kind, filename in _FILENAMES.items():
            if filename == name:
                return kind
        return None


_FILENAMES: dict[ManifestKind, str] = {
    ManifestKind.CARGO: "Cargo.toml",
    ManifestKind.PYPROJECT: "pyproject.toml",
    ManifestKind.PACKAGE_JSON: "package.json",
}

_LABELS: dict[ManifestKind, str] = {
    ManifestKind.CARGO: "Cargo",
    ManifestKind.PYPROJECT: "PyProject",
    ManifestKind.PACKAGE_JSON: "PackageJson",
}


class ManifestRecord(BaseModel):
    """A manifest found on disk.

    Attributes:
        path: Absolute path to the manifest file.
        kind: Which manifest format the file is.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: ManifestKind


class DryRunPlan(BaseModel):
    """What a cascade operation would do, computed without writing anything.

    Attributes:
        new_version: Version every listed file would carry afterwards.
        files_to_update: Files that would be written, in write order.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    new_version: semver.Version
    files_to_update: list[Path] = Field(default_factory=list)


class VersionReport(BaseModel):
    """Outcome of reading one root-level manifest.

    Exactly one of version and error is set.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ManifestKind
    path: Path
    version: semver.Version | None = None
    error: str | None = None
