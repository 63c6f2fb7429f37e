"""
Build descriptors.

Callers describe *what* to run with these types; only the build tool adapter
knows how to spell them for sbt.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from scala_bootstrap.constants import Phase


@dataclass(frozen=True)
class SetSetting:
    """Set a string setting, e.g. ``version``, for the rest of the session."""

    key: str
    value: str
    scope: Optional[str] = None


@dataclass(frozen=True)
class RunTask:
    """Run a task or command by name (``clean``, ``test``, ``library/compile``)."""

    name: str


@dataclass(frozen=True)
class Command:
    """Run a build command that takes arguments (``setupBootstrapQuick <repo> <ver>``)."""

    name: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Publish:
    """Publish to the repository of the given phase."""

    target: Phase


BuildStep = Union[SetSetting, RunTask, Command, Publish]


@dataclass(frozen=True)
class BuildRequest:
    project_dir: Path
    steps: Tuple[BuildStep, ...]
    scala_version: Optional[str] = None
    system_properties: Mapping[str, str] = field(default_factory=dict)
    description: str = ""

    def __str__(self) -> str:
        return self.description or self.project_dir.name
