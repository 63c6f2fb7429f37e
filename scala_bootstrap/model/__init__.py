from .module import (
    ALL_MODULES,
    CrossVersion,
    ModuleDefinition,
    ModuleSpec,
    module_definitions,
)
from .release import ReleaseDecision, ReleaseFlow

__all__ = [
    "ALL_MODULES",
    "CrossVersion",
    "ModuleDefinition",
    "ModuleSpec",
    "ReleaseDecision",
    "ReleaseFlow",
    "module_definitions",
]
