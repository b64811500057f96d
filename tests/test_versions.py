"""Tests for version_sync.versions."""

from __future__ import annotations

import pytest
import semver

from version_sync.errors import InvalidVersionFormat
from version_sync.versions import BumpKind, bump_version, parse_version, with_prerelease


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease is None
        assert v.build is None

    def test_strips_whitespace(self) -> None:
        assert parse_version("  1.2.3  \n") == semver.Version(1, 2, 3)

    def test_prerelease_and_build(self) -> None:
        v = parse_version("2.0.0-alpha.1+build.123")
        assert v.prerelease == "alpha.1"
        assert v.build == "build.123"

    @pytest.mark.parametrize(
        "text", ["", "1.2", "v1.2.3", "01.2.3", "1.2.3.4", "invalid-version", "1.2.x"]
    )
    def test_rejects_malformed(self, text: str) -> None:
        with pytest.raises(InvalidVersionFormat) as excinfo:
            parse_version(text)
        assert "Invalid semantic version format" in str(excinfo.value)

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_version("nope")

    @pytest.mark.parametrize(
        "text", ["0.0.0", "1.2.3", "1.0.0-rc.1", "1.0.0+build.5", "3.1.4-beta.2+exp.sha.5114f85"]
    )
    def test_round_trip(self, text: str) -> None:
        v = parse_version(text)
        assert str(v) == text
        assert parse_version(str(v)) == v


class TestOrdering:
    def test_numeric_core_first(self) -> None:
        assert parse_version("1.10.0") > parse_version("1.9.9")

    def test_prerelease_sorts_before_release(self) -> None:
        assert parse_version("1.0.0-rc.1") < parse_version("1.0.0")

    def test_prerelease_identifiers_compared(self) -> None:
        assert parse_version("1.0.0-rc.2") < parse_version("1.0.0-rc.10")

    def test_build_metadata_ignored(self) -> None:
        assert parse_version("1.0.0+a") == parse_version("1.0.0+b")


class TestBumpVersion:
    def test_patch(self) -> None:
        assert bump_version(parse_version("1.2.3"), BumpKind.PATCH) == semver.Version(1, 2, 4)

    def test_minor(self) -> None:
        assert bump_version(parse_version("1.2.3"), BumpKind.MINOR) == semver.Version(1, 3, 0)

    def test_major(self) -> None:
        assert bump_version(parse_version("1.2.3"), BumpKind.MAJOR) == semver.Version(2, 0, 0)

    def test_drops_prerelease_and_build(self) -> None:
        bumped = bump_version(parse_version("1.2.3-rc.1+build.7"), BumpKind.PATCH)
        assert str(bumped) == "1.2.4"

    def test_high_patch(self) -> None:
        assert str(bump_version(parse_version("1.0.99"), BumpKind.PATCH)) == "1.0.100"


class TestWithPrerelease:
    def test_replaces_suffix(self) -> None:
        v = with_prerelease(parse_version("1.2.3+build.1"), "rc.4")
        assert str(v) == "1.2.3-rc.4"
