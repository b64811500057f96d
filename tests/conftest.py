"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

CARGO_TOML = """\
[package]
name = "test"
version = "{version}"
edition = "2021"

[dependencies]
serde = {{ version = "1.0", features = ["derive"] }}
"""

PYPROJECT_TOML = """\
# Project metadata
[project]
name = "test"
version = "{version}"  # keep in sync with VERSION
description = "Test project"

[build-system]
requires = ["setuptools"]
build-backend = "setuptools.build_meta"
"""

PACKAGE_JSON = """\
{{
  "name": "test-package",
  "version": "{version}",
  "description": "A test package",
  "scripts": {{
    "test": "jest",
    "build": "tsc"
  }},
  "dependencies": {{
    "express": "^4.18.0"
  }},
  "devDependencies": {{
    "typescript": "^5.0.0"
  }}
}}
"""


def write_cargo(directory: Path, version: str) -> Path:
    path = directory / "Cargo.toml"
    path.write_text(CARGO_TOML.format(version=version))
    return path


def write_pyproject(directory: Path, version: str) -> Path:
    path = directory / "pyproject.toml"
    path.write_text(PYPROJECT_TOML.format(version=version))
    return path


def write_package_json(directory: Path, version: str) -> Path:
    path = directory / "package.json"
    path.write_text(PACKAGE_JSON.format(version=version))
    return path


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Map of relative path → bytes for every file below root."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A root with VERSION and all three manifests at 1.0.0."""
    (tmp_path / "VERSION").write_text("1.0.0\n")
    write_cargo(tmp_path, "1.0.0")
    write_pyproject(tmp_path, "1.0.0")
    write_package_json(tmp_path, "1.0.0")
    return tmp_path


@pytest.fixture
def cascade_tree(tmp_path: Path) -> Path:
    """A root VERSION at 1.2.3 with three manifests in nested crates/packages."""
    root = tmp_path / "repo"
    root.mkdir()
    (root / "VERSION").write_text("1.2.3\n")
    write_cargo(root, "1.2.3")
    for sub in ("crates/core", "crates/extra"):
        (root / sub).mkdir(parents=True)
        write_cargo(root / sub, "1.0.0")
    (root / "web").mkdir()
    write_package_json(root / "web", "0.9.0")
    return root
