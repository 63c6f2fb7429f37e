"""
Build tool adapter.

Builds are described with the typed steps of ``tasks`` and rendered to an
sbt command line by ``SbtBuildTool``; nothing else constructs sbt syntax.
"""

from .modules import ModuleBuilder
from .sbt import BuildFailure, SbtBuildTool
from .tasks import BuildRequest, Command, Publish, RunTask, SetSetting

__all__ = [
    "BuildFailure",
    "BuildRequest",
    "Command",
    "ModuleBuilder",
    "Publish",
    "RunTask",
    "SbtBuildTool",
    "SetSetting",
]
