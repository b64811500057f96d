"""Recursive manifest discovery for cascade operations.

Walks the tree below a root directory depth-first in sorted order, skipping
hidden entries and anything matched by a .gitignore file, and classifies
every regular file it meets against the known manifest filenames.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pathspec

from .errors import NestedCanonicalFileError, ReadError, SymlinkNotSupportedError
from .models import ManifestKind, ManifestRecord

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".gitignore"


class IgnoreRules:
    """Stack of .gitignore files, each scoped to the directory holding it."""

    def __init__(self, specs: tuple[tuple[Path, pathspec.PathSpec], ...] = ()) -> None:
        self._specs = specs

    def extended(self, directory: Path) -> IgnoreRules:
        """Return rules that also honor directory/.gitignore, if present."""
        ignore_file = directory / IGNORE_FILENAME
        if not ignore_file.is_file():
            return self
        try:
            lines = ignore_file.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise ReadError(f"Failed to read {ignore_file}: {exc}", ignore_file) from exc
        spec = pathspec.GitIgnoreSpec.from_lines(lines)
        logger.debug("Loaded ignore rules from %s", ignore_file)
        return IgnoreRules((*self._specs, (directory, spec)))

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """Decide by the deepest .gitignore with a pattern matching path."""
        for base, spec in reversed(self._specs):
            try:
                rel = path.relative_to(base).as_posix()
            except ValueError:
                continue
            if is_dir:
                rel += "/"
            include = spec.check_file(rel).include
            if include is not None:
                return include
        return False


def find_manifests(
    root: Path,
    version_filename: str = "VERSION",
    *,
    respect_ignore_files: bool = True,
) -> list[ManifestRecord]:
    """Find every manifest below root.

    A canonical version file directly in root is expected and skipped; one
    anywhere deeper is an error. Symbolic links are never followed.

    Args:
        root: Directory to walk.
        version_filename: Name of the canonical version file.
        respect_ignore_files: Honor .gitignore files while walking.

    Returns:
        Manifest records in depth-first, name-sorted order.

    Raises:
        NestedCanonicalFileError: If a canonical file exists below root.
        SymlinkNotSupportedError: If a file or directory is a symlink.
        ReadError: If a directory cannot be listed.
    """
    root = root.resolve()
    rules = IgnoreRules()
    found: list[ManifestRecord] = []
    _walk(root, root, version_filename, rules, respect_ignore_files, found)
    return found


def _walk(
    directory: Path,
    root: Path,
    version_filename: str,
    rules: IgnoreRules,
    respect_ignore_files: bool,
    found: list[ManifestRecord],
) -> None:
    if respect_ignore_files:
        rules = rules.extended(directory)

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise ReadError(f"Failed to list directory {directory}: {exc}", directory) from exc

    for entry in entries:
        path = Path(entry.path)
        # Hidden entries (including .git) are never visited
        if entry.name.startswith("."):
            continue

        is_link = entry.is_symlink()
        # A link to a directory matches directory-only patterns like `dir/`
        is_dir = entry.is_dir()
        if respect_ignore_files and rules.is_ignored(path, is_dir):
            logger.debug("Ignoring %s", path)
            continue

        if is_link:
            raise SymlinkNotSupportedError(
                f"Symbolic links are not supported: {path}", path
            )

        if is_dir:
            _walk(path, root, version_filename, rules, respect_ignore_files, found)
            continue

        if not entry.is_file(follow_symlinks=False):
            continue

        if entry.name == version_filename:
            if directory != root:
                raise NestedCanonicalFileError(
                    f"Found nested {version_filename} file at {path}; "
                    f"only one {version_filename} file is allowed, at {root}",
                    path,
                )
            continue

        kind = ManifestKind.from_filename(entry.name)
        if kind is not None:
            logger.debug("Found %s manifest at %s", kind.label, path)
            found.append(ManifestRecord(path=path, kind=kind))
