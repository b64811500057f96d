"""Tests for version_sync.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from version_sync.config import Settings, load_settings
from version_sync.errors import ConfigError, ManifestParseError


class TestLoadSettings:
    def test_defaults_without_pyproject(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path) == Settings()

    def test_defaults_without_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\nversion = "1.0.0"\n')
        assert load_settings(tmp_path) == Settings()

    def test_kebab_case_keys(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            "[tool.version-sync]\n"
            'version-file = "RELEASE"\n'
            'tag-template = "v{version}"\n'
            'tag-author-name = "Release Bot"\n'
            "respect-ignore-files = false\n"
        )

        settings = load_settings(tmp_path)

        assert settings.version_file == "RELEASE"
        assert settings.tag_template == "v{version}"
        assert settings.tag_author_name == "Release Bot"
        assert settings.tag_author_email == "version-sync@localhost"
        assert settings.respect_ignore_files is False

    def test_unknown_key(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.version-sync]\nversion-fiel = "X"\n')
        with pytest.raises(ConfigError, match="Invalid \\[tool.version-sync\\] settings"):
            load_settings(tmp_path)

    def test_wrong_type(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.version-sync]\nversion-file = 3\n")
        with pytest.raises(ConfigError) as excinfo:
            load_settings(tmp_path)
        assert excinfo.value.path == tmp_path / "pyproject.toml"

    def test_table_must_be_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool]\nversion-sync = "yes"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_settings(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.version-sync\n")
        with pytest.raises(ManifestParseError):
            load_settings(tmp_path)


class TestSettings:
    def test_frozen(self) -> None:
        with pytest.raises(ValueError):
            Settings().version_file = "OTHER"  # type: ignore[misc]
