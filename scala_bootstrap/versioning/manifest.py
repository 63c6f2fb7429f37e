"""Reading of Java-style ``.properties`` files (versions.properties, buildcharacter.properties)."""

import configparser
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from .exceptions import VersioningError

logger = logging.getLogger(__name__)

_SECTION = "properties"


def read_properties(path: Path) -> Dict[str, str]:
    """
    Read a flat ``key=value`` properties file.

    Keys keep their case. Lines starting with ``#`` or ``!`` are comments.

    Raises:
        VersioningError: If the file is missing or cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise VersioningError(f"Properties file not found: {path}")

    parser = configparser.ConfigParser(
        interpolation=None, comment_prefixes=("#", "!"), strict=False
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        parser.read_string(f"[{_SECTION}]\n" + path.read_text())
    except configparser.Error as e:
        raise VersioningError(f"Failed to parse {path}: {e}") from e

    return dict(parser[_SECTION])


class VersionManifest:
    """
    Module versions pinned in the workspace's ``versions.properties``.

    The manifest is read once and never written; the next manifest is
    produced by hand from the run's output.
    """

    FILE_NAME = "versions.properties"

    def __init__(self, entries: Mapping[str, str], path: Optional[Path] = None):
        self._entries = dict(entries)
        self.path = path

    @classmethod
    def load(cls, workspace: Path) -> "VersionManifest":
        path = Path(workspace) / cls.FILE_NAME
        entries = read_properties(path)
        logger.debug(f"Read {len(entries)} entries from {path}")
        return cls(entries, path)

    def get(self, key: str) -> Optional[str]:
        value = (self._entries.get(key) or "").strip()
        return value or None

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)
