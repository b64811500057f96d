"""Git tag naming.

Tag names come from a template with literal placeholders:
{repository_name}, {version}, {major}, {minor} and {patch}. Anything else in
braces is left alone.
"""

from __future__ import annotations

import logging
from pathlib import Path

import semver

from .errors import VcsQueryError
from .shell import remote_url

logger = logging.getLogger(__name__)

DEFAULT_TAG_TEMPLATE = "{repository_name}-v{version}"


def extract_repo_name_from_url(url: str) -> str | None:
    """Derive a repository name from a git remote URL.

    Examples:
        "https://github.com/owner/repo.git" → "repo"
        "git@github.com:owner/repo.git" → "repo"
        "git@host:repo.git" → "repo"
    """
    url = url.strip()
    if url.endswith(".git"):
        url = url[: -len(".git")]
    if "/" in url:
        name = url.rsplit("/", 1)[1]
        if name:
            return name
    if ":" in url:
        name = url.rsplit(":", 1)[1]
        if name and "/" not in name:
            return name
    return None


def format_tag(template: str, version: semver.Version, repository_name: str) -> str:
    """Substitute the known placeholders in a tag template."""
    replacements = {
        "{repository_name}": repository_name,
        "{version}": str(version),
        "{major}": str(version.major),
        "{minor}": str(version.minor),
        "{patch}": str(version.patch),
    }
    tag = template
    for placeholder, value in replacements.items():
        tag = tag.replace(placeholder, value)
    return tag


class TagNamer:
    """Builds tag names for the repository rooted at a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._repository_name: str | None = None

    @property
    def repository_name(self) -> str:
        """Name from the origin remote URL, else the root directory's name."""
        if self._repository_name is None:
            name = None
            try:
                name = extract_repo_name_from_url(remote_url(cwd=self.root))
            except VcsQueryError as exc:
                logger.debug("No remote URL for %s: %s", self.root, exc)
            self._repository_name = name or self.root.resolve().name
        return self._repository_name

    def default_tag_format(self) -> str:
        """Return the default template with the repository name filled in."""
        return DEFAULT_TAG_TEMPLATE.replace("{repository_name}", self.repository_name)

    def format(self, template: str, version: semver.Version) -> str:
        return format_tag(template, version, self.repository_name)
