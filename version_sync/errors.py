"""Exception types raised by the version synchronization core.

Every failure the core can report derives from VersionSyncError, so callers
(the CLI in particular) can catch one type and present the message.
"""

from __future__ import annotations

from pathlib import Path


class VersionSyncError(Exception):
    """Base class for all version-sync failures."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(VersionSyncError):
    """The [tool.version-sync] configuration table is invalid."""


class InvalidVersionFormat(VersionSyncError, ValueError):
    """Text does not parse as a semantic version."""

    def __init__(self, text: str, path: Path | None = None) -> None:
        where = f" in {path}" if path else ""
        super().__init__(f"Invalid semantic version format{where}: '{text}'", path)
        self.text = text


class ReadError(VersionSyncError):
    """A file could not be read."""


class WriteError(VersionSyncError):
    """A file could not be written."""


class ManifestParseError(VersionSyncError):
    """A TOML or JSON manifest is syntactically invalid."""


class VersionFieldMissing(VersionSyncError):
    """A manifest parsed fine but has no version at the expected location."""


class NotAnObject(VersionSyncError):
    """A JSON manifest's root is not an object."""


class VersionMismatchError(VersionSyncError):
    """One or more manifests disagree with the canonical version file."""

    def __init__(self, mismatches: list[str]) -> None:
        self.mismatches = list(mismatches)
        super().__init__(
            "Version files are not synchronized:\n"
            + "\n".join(self.mismatches)
            + "\n\nRun 'version-sync sync' to synchronize all version files."
        )


class NestedCanonicalFileError(VersionSyncError):
    """A second canonical version file exists below the tree root."""


class SymlinkNotSupportedError(VersionSyncError):
    """A symbolic link was found while walking the tree."""


class CleanVersionRequiredError(VersionSyncError):
    """The canonical version already carries a pre-release suffix."""


class VcsQueryError(VersionSyncError):
    """git is missing, the directory is not a repository, or git failed."""
