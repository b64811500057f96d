"""Tests for version_sync.doctor."""

from __future__ import annotations

from pathlib import Path

from version_sync.doctor import run_doctor
from version_sync.engine import SyncEngine

from .conftest import write_cargo


def _doctor(root: Path) -> tuple[int, str]:
    lines: list[str] = []
    code = run_doctor(SyncEngine(root), echo=lines.append)
    return code, "\n".join(lines)


class TestRunDoctor:
    def test_healthy(self, project: Path) -> None:
        code, output = _doctor(project)

        assert code == 0
        assert "✅ VERSION file: 1.0.0" in output
        assert "✅ Cargo: 1.0.0" in output
        assert "✅ PyProject: 1.0.0" in output
        assert "✅ PackageJson: 1.0.0" in output
        assert "✅ All versions are synchronized" in output
        assert output.endswith("✨ Everything looks healthy!")

    def test_missing_version_file(self, project: Path) -> None:
        (project / "VERSION").unlink()

        code, output = _doctor(project)

        assert code == 1
        assert "❌ VERSION file error" in output
        assert output.endswith("❌ Issues found - see above for details")

    def test_unparseable_manifest(self, project: Path) -> None:
        (project / "package.json").write_text("{ nope")

        code, output = _doctor(project)

        assert code == 1
        assert "❌ PackageJson: Failed to parse package.json" in output

    def test_no_manifests(self, tmp_path: Path) -> None:
        (tmp_path / "VERSION").write_text("1.0.0\n")

        code, output = _doctor(tmp_path)

        assert code == 1
        assert "❌ No build system files detected" in output

    def test_out_of_sync(self, project: Path) -> None:
        write_cargo(project, "1.1.0")

        code, output = _doctor(project)

        assert code == 1
        assert "✅ Cargo: 1.1.0" in output
        assert "❌ Versions are out of sync" in output
        assert "Cargo has version 1.1.0 but VERSION file has 1.0.0" in output
