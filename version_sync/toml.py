"""TOML reading and version rewriting utilities.

Reading goes through tomlkit. Writing never round-trips the document:
the version value is replaced in the raw text so comments, key order and
unrelated tables stay byte-for-byte identical.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import ManifestParseError, ReadError, VersionFieldMissing


def read_text(path: Path) -> str:
    """Read a UTF-8 file, wrapping filesystem failures in ReadError."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReadError(f"Failed to read {path.name} at {path}: {exc}", path) from exc


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file.

    Raises:
        ReadError: If the file cannot be read.
        ManifestParseError: If the content is not valid TOML.
    """
    content = read_text(path)
    try:
        return tomlkit.parse(content)
    except TOMLKitError as exc:
        raise ManifestParseError(f"Failed to parse {path.name}: {exc}", path) from exc


def get_table_version(doc: tomlkit.TOMLDocument, table: str, path: Path) -> str:
    """Extract the string value of [table].version.

    Raises:
        VersionFieldMissing: If the table or key is absent, or the value is
            not a plain string (e.g. Cargo's `version.workspace = true`).
    """
    section = doc.get(table)
    version = section.get("version") if isinstance(section, Mapping) else None
    if not isinstance(version, str):
        raise VersionFieldMissing(
            f"No version found in {path.name} [{table}] section", path
        )
    return str(version)


def _version_pattern(table: str) -> re.Pattern[str]:
    # Header line of the table, then any lines that do not open another
    # table, then the first `version = "..."` assignment. Triple quotes are
    # tried first; a single quote never matches the start of a triple one.
    return re.compile(
        rf"(^[ \t]*\[[ \t]*{re.escape(table)}[ \t]*\][^\n]*\n"
        r"(?:(?![ \t]*\[)[^\n]*\n)*?"
        r"[ \t]*(?:version|\"version\"|'version')[ \t]*=[ \t]*)"
        r"(\"\"\"|'''|\"(?!\"\")|'(?!''))[^\"'\n]*\2",
        re.MULTILINE,
    )


def replace_table_version(content: str, table: str, version: str) -> str:
    """Replace the quoted value of [table].version in raw TOML text.

    Only the quoted value changes; the quote style is kept.

    Raises:
        VersionFieldMissing: If no version assignment exists in the table.
    """
    match = _version_pattern(table).search(content)
    if match is None:
        raise VersionFieldMissing(f"No version field found in [{table}] section")
    quote = match.group(2)
    return (
        content[: match.start()]
        + match.group(1)
        + quote
        + version
        + quote
        + content[match.end() :]
    )
