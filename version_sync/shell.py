"""Git utilities.

Provides thin wrappers around the git executable. Every failure to run git,
whether it is missing, the directory is not a repository, or the command
exits non-zero, surfaces as VcsQueryError.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import VcsQueryError


def git(*args: str, cwd: Path | None = None) -> str:
    """Run a git command and return stripped stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "--list").
        cwd: Directory to run in; defaults to the process working directory.

    Raises:
        VcsQueryError: If git cannot be started or exits non-zero.
    """
    try:
        result = subprocess.run(
            ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
        )
    except FileNotFoundError as exc:
        raise VcsQueryError("git is not installed or not on PATH") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise VcsQueryError(f"git {' '.join(args)} failed: {detail}") from exc
    return result.stdout.strip()


def list_tags(pattern: str, cwd: Path | None = None) -> list[str]:
    """List tags matching a glob pattern."""
    output = git("tag", "--list", pattern, cwd=cwd)
    return [line.strip() for line in output.splitlines() if line.strip()]


def remote_url(remote: str = "origin", cwd: Path | None = None) -> str:
    """Return the configured URL of a remote."""
    return git("remote", "get-url", remote, cwd=cwd)


def create_annotated_tag(
    tag: str,
    message: str,
    *,
    author_name: str,
    author_email: str,
    cwd: Path | None = None,
) -> None:
    """Create an annotated tag on HEAD as the given identity."""
    git(
        "-c",
        f"user.name={author_name}",
        "-c",
        f"user.email={author_email}",
        "tag",
        "-a",
        tag,
        "-m",
        message,
        "HEAD",
        cwd=cwd,
    )
