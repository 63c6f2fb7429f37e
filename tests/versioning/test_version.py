"""
Tests for the Version class and version utilities.

All tests in this file are marked as 'short' since they don't require
external dependencies, containers, or network I/O.
"""

import pytest

from scala_bootstrap.versioning.exceptions import MalformedVersionTag, VersionFormatError
from scala_bootstrap.versioning.version import (
    BinaryVersion,
    Revision,
    Version,
    binary_version,
    parse_tag,
)


@pytest.mark.short
class TestVersion:
    """Test the Version class."""

    def test_from_parts(self):
        v = Version.from_parts("2.12.1", "-RC1")
        assert v.major == 2
        assert v.minor == 12
        assert v.patch == 1
        assert v.suffix == "-RC1"
        assert v.base == "2.12.1"
        assert str(v) == "2.12.1-RC1"

    def test_from_parts_without_suffix(self):
        v = Version.from_parts("2.12.1")
        assert v.suffix == ""
        assert str(v) == "2.12.1"

    @pytest.mark.parametrize("base", ["2.12", "2.12.x", "v2.12.1", "2.12.1-RC1", ""])
    def test_from_parts_invalid_base(self, base):
        with pytest.raises(VersionFormatError):
            Version.from_parts(base)

    def test_from_tag(self):
        v = Version.from_tag("v2.12.0-M2")
        assert v.base == "2.12.0"
        assert v.suffix == "-M2"

    def test_from_tag_without_prefix(self):
        assert str(Version.from_tag("2.11.8")) == "2.11.8"

    @pytest.mark.parametrize(
        "tag", ["v2.12", "release-2.12.0", "v2.12.0+build", "latest"]
    )
    def test_from_tag_malformed(self, tag):
        with pytest.raises(MalformedVersionTag) as exc_info:
            Version.from_tag(tag)
        assert exc_info.value.tag == tag

    def test_malformed_tag_is_a_format_error(self):
        with pytest.raises(VersionFormatError):
            Version.from_tag("vnext")

    def test_immutable(self):
        v = Version.from_parts("2.12.1")
        with pytest.raises(AttributeError):
            v.suffix = "-RC1"

    def test_equality_and_hash(self):
        assert Version.from_tag("v2.12.0-RC1") == Version.from_parts("2.12.0", "-RC1")
        assert Version.from_parts("2.12.0") != Version.from_parts("2.12.0", "-RC1")
        assert Version.from_parts("2.12.0") != "2.12.0"
        assert len({Version.from_tag("v2.12.0"), Version.from_parts("2.12.0")}) == 1


@pytest.mark.short
class TestParseTag:
    def test_split(self):
        assert parse_tag("v2.12.0-RC1") == ("2.12.0", "-RC1")

    def test_no_suffix(self):
        assert parse_tag("v2.12.1") == ("2.12.1", "")

    def test_reassembles_to_tag(self):
        base, suffix = parse_tag("v2.13.0-M5")
        assert "v" + base + suffix == "v2.13.0-M5"

    def test_malformed(self):
        with pytest.raises(MalformedVersionTag):
            parse_tag("v2.13")


@pytest.mark.short
class TestBinaryVersion:
    @pytest.mark.parametrize(
        "version,expected",
        [
            ("2.12.0", "2.12"),
            ("2.12.1", "2.12"),
            ("2.12.0-bin-M1", "2.12"),
            ("2.12.1-M1", "2.12"),
            ("2.12.2-SNAPSHOT", "2.12"),
            ("2.12.0-M1", "2.12.0-M1"),
            ("2.12.0-RC2", "2.12.0-RC2"),
            ("2.12.0-abc1234-nightly", "2.12.0-abc1234-nightly"),
        ],
    )
    def test_binary_version(self, version, expected):
        v = Version.from_tag(version)
        assert binary_version(str(v), v.base, v.suffix) == expected
        assert v.binary_version == expected

    def test_is_major_minor_or_full(self):
        for version in ["2.11.8", "2.12.0-M5", "2.13.3-bin-abc"]:
            v = Version.from_tag(version)
            assert v.binary_version in (f"{v.major}.{v.minor}", str(v))

    def test_invalid_base(self):
        with pytest.raises(VersionFormatError):
            binary_version("2.12-RC1", "2.12", "-RC1")

    def test_binary_version_type(self):
        assert isinstance(BinaryVersion("2.12"), str)
        assert BinaryVersion(" 2.12 ") == "2.12"
        with pytest.raises(VersionFormatError):
            BinaryVersion("2")


@pytest.mark.short
class TestRevision:
    @pytest.mark.parametrize("ref", ["master", "v1.0.6", "2.12.x", "0123abc"])
    def test_valid(self, ref):
        assert Revision(ref) == ref

    @pytest.mark.parametrize("ref", ["", "  ", "a b", "HEAD~1", "refs:heads"])
    def test_invalid(self, ref):
        with pytest.raises(ValueError):
            Revision(ref)
