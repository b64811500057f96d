"""Version synchronization engine: read → compare → bump/reset/sync → write.

A SyncEngine is rooted at one directory holding the canonical VERSION file.
Plain operations touch the manifests sitting directly in that directory.
Cascade operations discover every manifest below it and run as a
pseudo-transaction:

1. Snapshot the bytes of every file about to be written
2. Write the canonical file, then each manifest in discovery order
3. On any failure, restore every snapshot (best effort) and re-raise

The engine keeps no state between calls; each operation reads what it
needs from disk and closes every file before returning.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import semver

from .config import Settings
from .discovery import find_manifests
from .errors import (
    CleanVersionRequiredError,
    ReadError,
    VersionMismatchError,
    VersionSyncError,
)
from .manifests import read_manifest_version, write_manifest_version, write_text
from .models import DryRunPlan, ManifestKind, ManifestRecord, VersionReport
from .shell import create_annotated_tag, list_tags
from .tags import TagNamer
from .toml import read_text
from .versions import BumpKind, bump_version, parse_version, with_prerelease

logger = logging.getLogger(__name__)

DEFAULT_RESET_VERSION = "0.0.0"

_RC_ORDINAL = re.compile(r"-rc\.(\d+)$")


class SyncEngine:
    """Keeps the canonical version file and manifest versions in step.

    Args:
        root: Directory holding the canonical version file.
        settings: Project settings; defaults apply when omitted.
    """

    def __init__(self, root: Path, settings: Settings | None = None) -> None:
        self.root = Path(root).resolve()
        self.settings = settings or Settings()

    @property
    def version_path(self) -> Path:
        return self.root / self.settings.version_file

    def for_manifest(self, record: ManifestRecord) -> SyncEngine:
        """Engine scoped to the directory that holds a discovered manifest."""
        return SyncEngine(record.path.parent, self.settings)

    # ------------------------------------------------------------------
    # Canonical version file
    # ------------------------------------------------------------------

    def read_canonical_version(self) -> semver.Version:
        """Read the canonical version, ignoring any trailing `# comment`.

        Raises:
            ReadError: If the file cannot be read.
            InvalidVersionFormat: If the content is not a semantic version.
        """
        path = self.version_path
        content = read_text(path)
        return parse_version(content.split("#", 1)[0], path)

    def write_canonical_version(self, version: semver.Version) -> None:
        """Write the canonical version, keeping an existing trailing comment.

        "1.0.0 # marker\\n" becomes "2.3.4 # marker\\n"; a file without a
        comment becomes "2.3.4\\n".
        """
        path = self.version_path
        suffix = "\n"
        if path.exists():
            current = read_text(path)
            before, sep, after = current.partition("#")
            if sep:
                spacing = before[len(before.rstrip()) :]
                suffix = spacing + sep + after
                if not suffix.endswith("\n"):
                    suffix += "\n"
        write_text(path, f"{version}{suffix}")
        logger.debug("Wrote version %s to %s", version, path)

    # ------------------------------------------------------------------
    # Root-level manifests
    # ------------------------------------------------------------------

    def detect_manifests_at_root(self) -> list[ManifestKind]:
        """Return the manifest kinds present directly in root (no recursion)."""
        return [kind for kind in ManifestKind if (self.root / kind.filename).is_file()]

    def manifest_path(self, kind: ManifestKind) -> Path:
        return self.root / kind.filename

    def read_manifest_version(self, kind: ManifestKind) -> semver.Version:
        return read_manifest_version(self.manifest_path(kind), kind)

    def write_manifest_version(self, kind: ManifestKind, version: semver.Version) -> None:
        write_manifest_version(self.manifest_path(kind), kind, version)

    def read_manifest_versions(self) -> list[VersionReport]:
        """Read every root-level manifest, collecting errors instead of raising."""
        reports: list[VersionReport] = []
        for kind in self.detect_manifests_at_root():
            path = self.manifest_path(kind)
            try:
                version = read_manifest_version(path, kind)
            except VersionSyncError as exc:
                reports.append(VersionReport(kind=kind, path=path, error=str(exc)))
            else:
                reports.append(VersionReport(kind=kind, path=path, version=version))
        return reports

    def verify_in_sync(self) -> None:
        """Check every root-level manifest against the canonical version.

        Raises:
            VersionMismatchError: Listing every manifest that differs or
                could not be read.
        """
        canonical = self.read_canonical_version()
        mismatched: list[str] = []
        for report in self.read_manifest_versions():
            if report.error is not None:
                mismatched.append(
                    f"Failed to read {report.kind.label} version: {report.error}"
                )
            elif report.version != canonical:
                mismatched.append(
                    f"{report.kind.label} has version {report.version} but "
                    f"{self.settings.version_file} file has {canonical}"
                )
        if mismatched:
            raise VersionMismatchError(mismatched)

    def sync(self) -> semver.Version:
        """Overwrite every root-level manifest with the canonical version."""
        version = self.read_canonical_version()
        self._write_root_manifests(version)
        return version

    def bump(self, kind: BumpKind) -> semver.Version:
        """Bump the version everywhere at the root.

        Refuses to bump an out-of-sync tree, since it is unclear which value
        is authoritative. Nothing is written in that case.
        """
        self.verify_in_sync()
        new_version = bump_version(self.read_canonical_version(), kind)
        self.write_canonical_version(new_version)
        self._write_root_manifests(new_version)
        return new_version

    def reset(self, version_text: str | None = None) -> semver.Version:
        """Force the canonical file and root manifests to a version (default 0.0.0).

        The target is parsed before anything is written.
        """
        new_version = parse_version(
            DEFAULT_RESET_VERSION if version_text is None else version_text
        )
        self.write_canonical_version(new_version)
        self._write_root_manifests(new_version)
        return new_version

    def _write_root_manifests(self, version: semver.Version) -> None:
        for kind in self.detect_manifests_at_root():
            self.write_manifest_version(kind, version)

    # ------------------------------------------------------------------
    # Cascade operations
    # ------------------------------------------------------------------

    def find_manifests(self) -> list[ManifestRecord]:
        """Recursively discover every manifest below root."""
        return find_manifests(
            self.root,
            self.settings.version_file,
            respect_ignore_files=self.settings.respect_ignore_files,
        )

    def bump_cascade_dry_run(self, kind: BumpKind) -> DryRunPlan:
        new_version = bump_version(self.read_canonical_version(), kind)
        return self._plan(new_version, self.find_manifests(), include_canonical=True)

    def sync_cascade_dry_run(self) -> DryRunPlan:
        version = self.read_canonical_version()
        return self._plan(version, self.find_manifests(), include_canonical=False)

    def reset_cascade_dry_run(self, version_text: str | None = None) -> DryRunPlan:
        new_version = parse_version(
            DEFAULT_RESET_VERSION if version_text is None else version_text
        )
        return self._plan(new_version, self.find_manifests(), include_canonical=True)

    def bump_cascade(self, kind: BumpKind) -> semver.Version:
        """Bump the canonical version and every manifest in the tree."""
        new_version = bump_version(self.read_canonical_version(), kind)
        self._apply_cascade(new_version, self.find_manifests(), include_canonical=True)
        return new_version

    def sync_cascade(self) -> semver.Version:
        """Write the canonical version into every manifest in the tree."""
        version = self.read_canonical_version()
        self._apply_cascade(version, self.find_manifests(), include_canonical=False)
        return version

    def reset_cascade(self, version_text: str | None = None) -> semver.Version:
        """Reset the canonical version and every manifest in the tree."""
        new_version = parse_version(
            DEFAULT_RESET_VERSION if version_text is None else version_text
        )
        self._apply_cascade(new_version, self.find_manifests(), include_canonical=True)
        return new_version

    def _plan(
        self,
        version: semver.Version,
        manifests: list[ManifestRecord],
        *,
        include_canonical: bool,
    ) -> DryRunPlan:
        files = [self.version_path] if include_canonical else []
        files.extend(record.path for record in manifests)
        return DryRunPlan(new_version=version, files_to_update=files)

    def _apply_cascade(
        self,
        version: semver.Version,
        manifests: list[ManifestRecord],
        *,
        include_canonical: bool,
    ) -> None:
        targets = [self.version_path] if include_canonical else []
        targets.extend(record.path for record in manifests)
        snapshot = _snapshot(targets)

        try:
            if include_canonical:
                self.write_canonical_version(version)
            for record in manifests:
                self.for_manifest(record).write_manifest_version(record.kind, version)
        except Exception:
            logger.debug("Cascade write failed; restoring %d files", len(snapshot))
            _restore(snapshot)
            raise

    # ------------------------------------------------------------------
    # Release candidates and tags
    # ------------------------------------------------------------------

    def next_rc_version(self) -> semver.Version:
        """Compute the next release-candidate version from existing git tags.

        With canonical version 1.2.3 and tags v1.2.3-rc.1 and v1.2.3-rc.2,
        returns 1.2.3-rc.3; with no such tags, 1.2.3-rc.1.

        Raises:
            CleanVersionRequiredError: If the canonical version already has
                a pre-release suffix.
            VcsQueryError: If git is unavailable or fails.
        """
        current = self.read_canonical_version()
        if current.prerelease:
            raise CleanVersionRequiredError(
                f"Current version {current} already has a pre-release suffix; "
                "a clean release version is required",
                self.version_path,
            )

        core = f"{current.major}.{current.minor}.{current.patch}"
        highest = 0
        for tag in list_tags(f"v{core}-rc.*", cwd=self.root):
            match = _RC_ORDINAL.search(tag)
            if match:
                highest = max(highest, int(match.group(1)))
        return with_prerelease(current, f"rc.{highest + 1}")

    def create_release_tag(
        self, template: str | None = None, message: str | None = None
    ) -> str:
        """Create an annotated tag on HEAD for the canonical version.

        Returns:
            The tag name that was created.
        """
        version = self.read_canonical_version()
        namer = TagNamer(self.root)
        template = template or self.settings.tag_template or namer.default_tag_format()
        tag = namer.format(template, version)
        create_annotated_tag(
            tag,
            message or f"Release {version}",
            author_name=self.settings.tag_author_name,
            author_email=self.settings.tag_author_email,
            cwd=self.root,
        )
        logger.debug("Created tag %s", tag)
        return tag


def _snapshot(paths: list[Path]) -> dict[Path, bytes | None]:
    """Capture the original bytes of every path; None marks a missing file."""
    snapshot: dict[Path, bytes | None] = {}
    for path in paths:
        try:
            snapshot[path] = path.read_bytes() if path.exists() else None
        except OSError as exc:
            raise ReadError(f"Failed to read {path.name} at {path}: {exc}", path) from exc
    return snapshot


def _restore(snapshot: dict[Path, bytes | None]) -> None:
    """Put every snapshotted file back. Failures are logged, never raised."""
    for path, content in snapshot.items():
        try:
            if content is None:
                path.unlink(missing_ok=True)
            else:
                path.write_bytes(content)
        except OSError as exc:
            logger.warning("Could not restore %s: %s", path, exc)
