"""
Module rebuild decisions.

Modules are built twice in a public release: first against locker,
published to the integration repository (``Phase.INTERNAL``), then against
the final compiler, published to Sonatype (``Phase.PUBLIC_STAGING``).

In the second phase the artifact query always succeeds: the first phase
just published to the integration repository, which is also a resolver
(it has to be, since modules depend on the scala-library being built, which
only exists there). The ``built`` flag carried between the phases is what
makes a module that needed building in phase one get built in phase two.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol

from scala_bootstrap.artifacts.exceptions import ArtifactQueryError
from scala_bootstrap.constants import Phase
from scala_bootstrap.model.module import CrossVersion, ModuleSpec

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolves(
        self, group_id: str, artifact_id: str, version: str, cross: CrossVersion
    ) -> bool: ...


class Builder(Protocol):
    def build(self, module: ModuleSpec, phase: Phase) -> None: ...


class Decision(str, Enum):
    BUILT_AGAIN = "built again"  # built in an earlier phase of this run
    FORCED = "forced"
    MISSING = "missing"
    SKIPPED = "skipped"


@dataclass
class PhaseState:
    """The modules handled in one phase, in build order."""

    phase: Phase
    modules: List[ModuleSpec] = field(default_factory=list)

    def advance(self) -> "PhaseState":
        """
        The public staging state: publicly released modules only, built flags kept.
        """
        if self.phase is not Phase.INTERNAL:
            raise ValueError(f"No phase follows {self.phase.value}")
        return PhaseState(
            phase=Phase.PUBLIC_STAGING,
            modules=[m.carry_over() for m in self.modules if m.definition.public],
        )


@dataclass(frozen=True)
class ModuleOutcome:
    module: str
    version: str
    decision: Decision

    @property
    def built(self) -> bool:
        return self.decision is not Decision.SKIPPED


class RebuildDecisionEngine:
    def __init__(self, resolver: Resolver, builder: Builder, force_rebuild: bool = False):
        self.resolver = resolver
        self.builder = builder
        self.force_rebuild = force_rebuild

    def _artifact_exists(self, module: ModuleSpec) -> bool:
        definition = module.definition
        try:
            return self.resolver.resolves(
                definition.group_id,
                definition.artifact_id,
                module.version,
                definition.cross,
            )
        except ArtifactQueryError as e:
            # a needless rebuild is safe, a wrongly skipped one is not
            logger.warning(f"{e}; treating {module.name} as not found")
            return False

    def decide(self, module: ModuleSpec) -> Decision:
        if module.built:
            return Decision.BUILT_AGAIN
        if self.force_rebuild:
            return Decision.FORCED
        if not self._artifact_exists(module):
            return Decision.MISSING
        return Decision.SKIPPED

    def needs_build(self, module: ModuleSpec) -> bool:
        return self.decide(module) is not Decision.SKIPPED

    def run(self, state: PhaseState) -> List[ModuleOutcome]:
        """
        Build what needs building, in order. The first failure aborts the phase.

        Raises:
            FetchError, BuildFailure: From the builder
        """
        logger.info(f"Building modules ({state.phase.value})")
        outcomes = []
        for module in state.modules:
            if state.phase is Phase.PUBLIC_STAGING and not module.definition.public:
                logger.info(f"{module.name} is not released publicly; not building.")
                continue

            decision = self.decide(module)
            if decision is Decision.SKIPPED:
                logger.info(
                    f"Found {module.definition.artifact_id} {module.version}; not building."
                )
            else:
                logger.info(f"Building {module} ({decision.value})")
                self.builder.build(module, state.phase)
                module.mark_built()
            outcomes.append(ModuleOutcome(module.name, module.version, decision))
        return outcomes
