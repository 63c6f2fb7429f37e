"""
Module version resolution.

One strategy applies to the whole run:

``versions.properties`` (pinned)
    Versions come from the manifest unless overridden per module. The
    revision is always the release tag ``v<version>``, which must exist
    upstream; this keeps releases reproducible.

``nightly``
    Revisions default to ``master`` unless overridden per module. The
    version is derived from ``git describe`` and can not be overridden.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Protocol, Sequence, cast

from scala_bootstrap.git.clone import NoTagError
from scala_bootstrap.model.module import ModuleDefinition, ModuleSpec

from .exceptions import MissingModuleTag, VersionNotFoundError
from .manifest import VersionManifest
from .version import Revision

logger = logging.getLogger(__name__)

NIGHTLY_SUFFIX = "-nightly"
MAINLINE = "master"


class ModuleVersioning(str, Enum):
    PINNED = "versions.properties"
    NIGHTLY = "nightly"


class ModuleSource(Protocol):
    def fetch(self, owner: str, repo: str, revision: str) -> Path: ...

    def describe(self, work_tree: Path, match: Optional[str] = None) -> str: ...

    def tag_exists(self, owner: str, repo: str, tag: str) -> bool: ...


def nightly_version(description: str) -> str:
    """``v1.0.6-3-gabc1234`` -> ``1.0.6-3-gabc1234-nightly``"""
    description = description.strip()
    if description.startswith("v"):
        description = description[1:]
    return f"{description}{NIGHTLY_SUFFIX}"


class ModuleVersionResolver:
    def __init__(
        self,
        strategy: ModuleVersioning,
        source: ModuleSource,
        manifest: Optional[VersionManifest] = None,
        version_overrides: Optional[Mapping[str, str]] = None,
        revision_overrides: Optional[Mapping[str, str]] = None,
    ):
        self.strategy = ModuleVersioning(strategy)
        self.source = source
        self.manifest = manifest
        self.version_overrides = dict(version_overrides or {})
        self.revision_overrides = dict(revision_overrides or {})

        if self.strategy is ModuleVersioning.PINNED and manifest is None:
            raise ValueError("The versions.properties strategy needs a manifest")

    def resolve_all(self, definitions: Sequence[ModuleDefinition]) -> List[ModuleSpec]:
        """
        Resolve every module before anything is built.

        Raises:
            MissingModuleTag: If a required tag does not exist (fatal)
            VersionNotFoundError: If a pinned module has no version
            FetchError: On git failures
        """
        specs = [self.resolve(definition) for definition in definitions]

        logger.info(f"Module versions (versioning strategy: {self.strategy.value}):")
        for spec in specs:
            logger.info(f"  {spec.name:<20} {spec.version} at {spec.revision}")
        return specs

    def resolve(self, definition: ModuleDefinition) -> ModuleSpec:
        if self.strategy is ModuleVersioning.PINNED:
            return self._pinned(definition, cast(VersionManifest, self.manifest))
        return self._nightly(definition)

    def _pinned(
        self, definition: ModuleDefinition, manifest: VersionManifest
    ) -> ModuleSpec:
        if definition.name in self.revision_overrides:
            logger.warning(
                f"Ignoring revision override for {definition.name}: "
                f"{self.strategy.value} builds use the release tag."
            )

        version = self.version_overrides.get(definition.name) or manifest.get(
            definition.manifest_key
        )
        if not version:
            raise VersionNotFoundError(definition.name)

        tag = f"v{version}"
        if not self.source.tag_exists(definition.owner, definition.repo, tag):
            raise MissingModuleTag(
                definition.name, tag, f"{definition.owner}/{definition.repo}"
            )

        return ModuleSpec(definition=definition, version=version, revision=tag)

    def _nightly(self, definition: ModuleDefinition) -> ModuleSpec:
        if definition.name in self.version_overrides:
            logger.warning(
                f"Ignoring version override for {definition.name}: "
                "nightly versions are derived from git."
            )

        revision = Revision(self.revision_overrides.get(definition.name) or MAINLINE)
        work_tree = self.source.fetch(definition.owner, definition.repo, revision)

        try:
            description = self.source.describe(work_tree, definition.describe_match)
        except NoTagError as e:
            raise MissingModuleTag(
                definition.name, definition.describe_match or "*", str(e)
            ) from e

        return ModuleSpec(
            definition=definition,
            version=nightly_version(description),
            revision=revision,
        )
