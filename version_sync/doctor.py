"""Health check: canonical file, root manifests, and synchronization."""

from __future__ import annotations

from collections.abc import Callable

import click

from .engine import SyncEngine
from .errors import VersionSyncError


def run_doctor(engine: SyncEngine, echo: Callable[[str], None] = click.echo) -> int:
    """Print a health report for the tree rooted at engine.root.

    Returns:
        0 if everything is healthy, 1 if any issue was found.
    """
    version_file = engine.settings.version_file
    has_errors = False

    echo("🏥 version-sync health check")
    echo("============================")
    echo("")

    echo("Version Files:")
    try:
        version = engine.read_canonical_version()
    except VersionSyncError as exc:
        echo(f"  ❌ {version_file} file error: {exc}")
        has_errors = True
    else:
        echo(f"  ✅ {version_file} file: {version}")

    echo("")
    echo("Build Systems:")
    reports = engine.read_manifest_versions()
    if not reports:
        echo("  ❌ No build system files detected")
        echo(
            "  ℹ️  At least one build system file "
            "(Cargo.toml, pyproject.toml, package.json) is required"
        )
        has_errors = True
    for report in reports:
        if report.error is not None:
            echo(f"  ❌ {report.kind.label}: {report.error}")
            has_errors = True
        else:
            echo(f"  ✅ {report.kind.label}: {report.version}")

    echo("")
    echo("Synchronization:")
    try:
        engine.verify_in_sync()
    except VersionSyncError as exc:
        echo("  ❌ Versions are out of sync")
        echo(f"  ℹ️  {exc}")
        has_errors = True
    else:
        echo("  ✅ All versions are synchronized")

    echo("")
    if has_errors:
        echo("❌ Issues found - see above for details")
        return 1
    echo("✨ Everything looks healthy!")
    return 0
