"""Read and write the version field of build-system manifests.

Cargo.toml and pyproject.toml are edited surgically (see toml.py) so that
nothing but the version value changes. package.json is re-serialized with
2-space indentation and a trailing newline; key order survives but the
original whitespace does not.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import semver

from .errors import ManifestParseError, NotAnObject, VersionFieldMissing, WriteError
from .models import ManifestKind
from .toml import get_table_version, load_toml, read_text, replace_table_version
from .versions import parse_version

logger = logging.getLogger(__name__)

# Table that holds the version for each TOML-backed manifest.
TOML_TABLES: dict[ManifestKind, str] = {
    ManifestKind.CARGO: "package",
    ManifestKind.PYPROJECT: "project",
}


def write_text(path: Path, content: str) -> None:
    """Write a UTF-8 file, wrapping filesystem failures in WriteError."""
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write {path.name} at {path}: {exc}", path) from exc


def _load_json(path: Path) -> Any:
    try:
        return json.loads(read_text(path))
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"Failed to parse {path.name}: {exc}", path) from exc


def read_manifest_version(path: Path, kind: ManifestKind) -> semver.Version:
    """Read and parse the version declared in a manifest.

    Raises:
        ReadError: If the file cannot be read.
        ManifestParseError: If the TOML/JSON is malformed.
        VersionFieldMissing: If the version key is absent.
        InvalidVersionFormat: If the value is not a semantic version.
    """
    if kind is ManifestKind.PACKAGE_JSON:
        data = _load_json(path)
        raw = data.get("version") if isinstance(data, dict) else None
        if not isinstance(raw, str):
            raise VersionFieldMissing(f"No version found in {path.name}", path)
    else:
        raw = get_table_version(load_toml(path), TOML_TABLES[kind], path)
    return parse_version(raw, path)


def write_manifest_version(
    path: Path, kind: ManifestKind, version: semver.Version
) -> None:
    """Set the version declared in a manifest, leaving everything else intact.

    Raises:
        ReadError / WriteError: On filesystem failures.
        ManifestParseError: If package.json is not valid JSON.
        NotAnObject: If the package.json root is not an object.
        VersionFieldMissing: If a TOML manifest has no version assignment
            in its table.
    """
    if kind is ManifestKind.PACKAGE_JSON:
        data = _load_json(path)
        if not isinstance(data, dict):
            raise NotAnObject(f"{path.name} root is not a JSON object", path)
        data["version"] = str(version)
        updated = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        table = TOML_TABLES[kind]
        try:
            updated = replace_table_version(read_text(path), table, str(version))
        except VersionFieldMissing as exc:
            raise VersionFieldMissing(
                f"No version field found in {path.name} [{table}] section", path
            ) from exc

    write_text(path, updated)
    logger.debug("Wrote version %s to %s", version, path)
