"""Project configuration.

Settings live in an optional [tool.version-sync] table of the root
pyproject.toml:

    [tool.version-sync]
    version-file = "VERSION"
    tag-template = "{repository_name}-v{version}"
    tag-author-name = "Release Bot"
    tag-author-email = "release@example.com"
    respect-ignore-files = true

Every key is optional; a missing file or table means defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError
from .toml import load_toml

TOOL_TABLE = "version-sync"


class Settings(BaseModel):
    """Resolved version-sync settings.

    Attributes:
        version_file: Name of the canonical version file at the root.
        tag_template: Tag name template; None means the TagNamer default.
        tag_author_name: Identity used for annotated release tags.
        tag_author_email: Identity used for annotated release tags.
        respect_ignore_files: Honor .gitignore files during cascade discovery.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version_file: str = "VERSION"
    tag_template: str | None = None
    tag_author_name: str = "version-sync"
    tag_author_email: str = "version-sync@localhost"
    respect_ignore_files: bool = True


def load_settings(root: Path) -> Settings:
    """Load settings from root/pyproject.toml, falling back to defaults.

    Raises:
        ConfigError: If the table has unknown keys or values of the wrong type.
        ManifestParseError: If pyproject.toml exists but is not valid TOML.
    """
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return Settings()

    doc = load_toml(pyproject)
    tool = doc.get("tool", {})
    table = tool.get(TOOL_TABLE) if isinstance(tool, Mapping) else None
    if table is None:
        return Settings()
    if not isinstance(table, Mapping):
        raise ConfigError(f"[tool.{TOOL_TABLE}] must be a table", pyproject)

    raw = {key.replace("-", "_"): value for key, value in table.unwrap().items()}
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid [tool.{TOOL_TABLE}] settings: {exc}", pyproject) from exc
