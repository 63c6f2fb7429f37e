"""
Version value types for release tags.

A Scala release version is a numeric ``major.minor.patch`` base followed by a
free-form suffix (``-RC1``, ``-M2``, ``-bin-M1``, ``-SNAPSHOT``,
``-<sha>-nightly``). The suffix decides whether artifacts built against the
version share the ``major.minor`` binary namespace or get one of their own.
"""

import re
from typing import Tuple

from .exceptions import MalformedVersionTag, VersionFormatError

# Borrowed from semver_bash; deliberately permissive about the suffix.
TAG_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)([0-9A-Za-z-]*)$")
BASE_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
BINARY_PATTERN = re.compile(r"^\d+\.\d+(\.\d+\S*)?$")
REVISION_PATTERN = re.compile(r"^[^\s~^:?*\[\\]+$")


class BinaryVersion(str):
    """Compatibility key under which artifacts are cross-published (e.g. ``2.12``)."""

    def __new__(cls, value: str):
        value = str(value).strip()
        if not BINARY_PATTERN.match(value):
            raise VersionFormatError(value, expected_format="x.y or x.y.z<suffix>")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"BinaryVersion('{self}')"


class Revision(str):
    """A git ref: tag, branch or commit hash."""

    def __new__(cls, value: str):
        value = str(value).strip()
        if not value or not REVISION_PATTERN.match(value):
            raise ValueError(f"Invalid git revision: '{value}'")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Revision('{self}')"


def _split_base(base: str) -> Tuple[int, int, int]:
    match = BASE_PATTERN.match(str(base).strip())
    if not match:
        raise VersionFormatError(str(base))
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch)


class Version:
    """
    An immutable release version: numeric base plus suffix.

    ``str(version)`` is always ``base + suffix``.
    """

    __slots__ = ("_major", "_minor", "_patch", "_suffix")

    def __init__(self, major: int, minor: int, patch: int, suffix: str = ""):
        object.__setattr__(self, "_major", int(major))
        object.__setattr__(self, "_minor", int(minor))
        object.__setattr__(self, "_patch", int(patch))
        object.__setattr__(self, "_suffix", suffix or "")

    def __setattr__(self, name, value):
        raise AttributeError("Version is immutable")

    @classmethod
    def from_parts(cls, base: str, suffix: str = "") -> "Version":
        """
        Build a version from an explicit base and suffix.

        Raises:
            VersionFormatError: If base is not ``x.y.z``
        """
        major, minor, patch = _split_base(base)
        return cls(major, minor, patch, suffix or "")

    @classmethod
    def from_tag(cls, tag: str) -> "Version":
        """
        Parse a release tag such as ``v2.12.0-M2``.

        Raises:
            MalformedVersionTag: If the tag does not match the release pattern
        """
        match = TAG_PATTERN.match(str(tag).strip())
        if not match:
            raise MalformedVersionTag(str(tag))
        major, minor, patch, suffix = match.groups()
        return cls(int(major), int(minor), int(patch), suffix)

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def patch(self) -> int:
        return self._patch

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def base(self) -> str:
        """The ``major.minor.patch`` part."""
        return f"{self._major}.{self._minor}.{self._patch}"

    @property
    def binary_version(self) -> BinaryVersion:
        return binary_version(str(self), self.base, self.suffix)

    def __str__(self) -> str:
        return f"{self.base}{self._suffix}"

    def __repr__(self) -> str:
        return f"Version('{self}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return (self._major, self._minor, self._patch, self._suffix) == (
            other._major,
            other._minor,
            other._patch,
            other._suffix,
        )

    def __hash__(self) -> int:
        return hash((self._major, self._minor, self._patch, self._suffix))


def parse_tag(tag: str) -> Tuple[str, str]:
    """
    Split a release tag into ``(base, suffix)``.

    Args:
        tag: Tag string, e.g. ``v2.12.0-RC1``

    Returns:
        Tuple of base (``2.12.0``) and suffix (``-RC1``, possibly empty)

    Raises:
        MalformedVersionTag: If the tag does not match the release pattern
    """
    version = Version.from_tag(tag)
    return version.base, version.suffix


def binary_version(full_version: str, base: str, suffix: str) -> BinaryVersion:
    """
    Compute the binary compatibility version used as artifact lookup key.

    The binary version is ``major.minor`` (e.g. ``2.12``) when
      - there is no suffix: 2.12.0, 2.12.1
      - the suffix starts with ``-bin``: 2.12.0-bin-M1
      - the patch version is not 0: 2.12.1-M1, 2.12.2-SNAPSHOT

    Otherwise it is the full version (2.12.0-M1, 2.12.0-RC2,
    2.12.0-abc1234-nightly), so pre-releases of a new minor line never
    share artifacts with each other or with the final release.

    Raises:
        VersionFormatError: If base is not ``x.y.z``
    """
    major, minor, patch = _split_base(base)
    maj_min = f"{major}.{minor}"
    if not suffix or suffix.startswith("-bin") or str(patch) != "0":
        return BinaryVersion(maj_min)
    return BinaryVersion(full_version)
