"""CLI entry point for version-sync."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import click

from .config import load_settings
from .doctor import run_doctor
from .engine import SyncEngine
from .errors import VersionSyncError
from .models import DryRunPlan
from .versions import BumpKind


def _engine(ctx: click.Context) -> SyncEngine:
    return ctx.ensure_object(dict)["engine"]


def _run(action: Callable[[], object]):
    """Call into the core, turning its errors into CLI errors (exit 1)."""
    try:
        return action()
    except VersionSyncError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_plan(verb: str, plan: DryRunPlan) -> None:
    click.echo(f"✓ Would {verb} to version {plan.new_version}")
    click.echo()
    click.echo("Files to update:")
    for path in plan.files_to_update:
        click.echo(f"  {path}")


def _check_dry_run(cascade: bool, dry_run: bool) -> None:
    if dry_run and not cascade:
        raise click.UsageError("--dry-run requires --cascade")


def _echo_status(engine: SyncEngine) -> None:
    version = _run(engine.read_canonical_version)
    click.echo(f"Current version: {version}")

    reports = engine.read_manifest_versions()
    if not reports:
        click.echo("⚠ No build system files detected")
        return

    click.echo()
    click.echo("Build systems:")
    for report in reports:
        if report.error is not None:
            click.echo(
                f"  {report.kind.label}: Error reading version: {report.error}",
                err=True,
            )
        else:
            status = "✓ in sync" if report.version == version else "✗ out of sync"
            click.echo(f"  {report.kind.label}: {report.version} {status}")


cascade_option = click.option(
    "--cascade", is_flag=True, help="Update all manifests in subdirectories recursively."
)
dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without writing files (requires --cascade).",
)
quiet_option = click.option(
    "-q", "--quiet", is_flag=True, help="Suppress output (only show errors)."
)


@click.group(invoke_without_command=True)
@click.version_option(package_name="version-sync")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory holding the canonical version file.",
)
@click.option(
    "--version-file",
    default=None,
    help="Name of the canonical version file (default: VERSION).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, root: Path, version_file: str | None, verbose: bool) -> None:
    """Keep a VERSION file and build-system manifests in sync."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = _run(lambda: load_settings(root))
    if version_file:
        settings = settings.model_copy(update={"version_file": version_file})
    engine = SyncEngine(root, settings)
    ctx.ensure_object(dict)["engine"] = engine

    if ctx.invoked_subcommand is None:
        if not engine.detect_manifests_at_root():
            raise click.ClickException(
                "No build system files (Cargo.toml, pyproject.toml or package.json) "
                "found in the current directory."
            )
        _echo_status(engine)


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show the current version."""
    click.echo(str(_run(_engine(ctx).read_canonical_version)))


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show which build systems are detected and whether they are in sync."""
    _echo_status(_engine(ctx))


@cli.command()
@click.pass_context
def verify(ctx: click.Context) -> None:
    """Verify that all version files are synchronized."""
    _run(_engine(ctx).verify_in_sync)
    click.echo("✓ All version files are synchronized")


@cli.command()
@cascade_option
@dry_run_option
@quiet_option
@click.pass_context
def sync(ctx: click.Context, cascade: bool, dry_run: bool, quiet: bool) -> None:
    """Synchronize all version files to match the VERSION file."""
    _check_dry_run(cascade, dry_run)
    engine = _engine(ctx)
    if dry_run:
        plan = _run(engine.sync_cascade_dry_run)
        if not quiet:
            _echo_plan("sync", plan)
        return

    version = _run(engine.sync_cascade if cascade else engine.sync)
    if not quiet:
        click.echo(f"✓ Synchronized all files to version {version}")


def _bump_command(kind: BumpKind, help_text: str) -> None:
    @cli.command(name=kind.value, help=help_text)
    @cascade_option
    @dry_run_option
    @quiet_option
    @click.pass_context
    def command(ctx: click.Context, cascade: bool, dry_run: bool, quiet: bool) -> None:
        _check_dry_run(cascade, dry_run)
        engine = _engine(ctx)
        if dry_run:
            plan = _run(lambda: engine.bump_cascade_dry_run(kind))
            if not quiet:
                _echo_plan("bump", plan)
            return

        bump = engine.bump_cascade if cascade else engine.bump
        version = _run(lambda: bump(kind))
        if not quiet:
            click.echo(f"✓ Bumped to version {version}")


_bump_command(BumpKind.MAJOR, "Bump the major version (x.y.z -> (x+1).0.0).")
_bump_command(BumpKind.MINOR, "Bump the minor version (x.y.z -> x.(y+1).0).")
_bump_command(BumpKind.PATCH, "Bump the patch version (x.y.z -> x.y.(z+1)).")


@cli.command()
@click.argument("version", required=False)
@cascade_option
@dry_run_option
@quiet_option
@click.pass_context
def reset(
    ctx: click.Context, version: str | None, cascade: bool, dry_run: bool, quiet: bool
) -> None:
    """Reset the version to VERSION, or 0.0.0 if omitted."""
    _check_dry_run(cascade, dry_run)
    engine = _engine(ctx)
    if dry_run:
        plan = _run(lambda: engine.reset_cascade_dry_run(version))
        if not quiet:
            _echo_plan("reset", plan)
        return

    reset_fn = engine.reset_cascade if cascade else engine.reset
    new_version = _run(lambda: reset_fn(version))
    if not quiet:
        click.echo(f"✓ Version reset to {new_version}")


@cli.command()
@click.pass_context
def rc(ctx: click.Context) -> None:
    """Print the next release-candidate version based on existing git tags."""
    click.echo(str(_run(_engine(ctx).next_rc_version)))


@cli.command()
@click.option(
    "--template",
    default=None,
    help="Tag template; placeholders: {repository_name} {version} {major} {minor} {patch}.",
)
@click.option("-m", "--message", default=None, help="Tag annotation message.")
@click.pass_context
def tag(ctx: click.Context, template: str | None, message: str | None) -> None:
    """Create an annotated git tag for the current version."""
    engine = _engine(ctx)
    name = _run(lambda: engine.create_release_tag(template, message))
    click.echo(f"✓ Created tag {name}")


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Check health and configuration."""
    ctx.exit(run_doctor(_engine(ctx)))
