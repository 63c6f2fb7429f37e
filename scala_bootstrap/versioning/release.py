"""
Determination of the Scala version built by a bootstrap run.

Exactly one of three paths is taken:

1. explicit: a version base (and optional suffix) is given by the caller
2. tagged: the workspace HEAD carries an exact tag such as ``v2.12.0-M2``
3. nightly: neither; the build tool derives a ``-<sha>-nightly`` style version

Nightly builds are never staged for a public release.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple

from scala_bootstrap.model.release import ReleaseDecision, ReleaseFlow

from .version import Version

logger = logging.getLogger(__name__)


class WorkspaceSource(Protocol):
    def exact_tag_at(self, work_tree: Path) -> Optional[str]: ...

    def head_commit(self, work_tree: Path) -> str: ...


# Returns (maven version base, maven version suffix) from buildcharacter.properties
BuildCharacter = Callable[[], Tuple[str, str]]


class ReleaseVersionSelector:
    def __init__(
        self,
        workspace: Path,
        source: WorkspaceSource,
        build_character: BuildCharacter,
        version_base: Optional[str] = None,
        version_suffix: Optional[str] = None,
        publish_to_sonatype: Optional[bool] = None,
    ):
        """
        Args:
            workspace: The scala/scala checkout being released
            source: Reads tags and commits of the workspace
            build_character: Generates the nightly base and suffix
            version_base: Explicit ``x.y.z`` version base, if any
            version_suffix: Explicit suffix; only honoured with a base
            publish_to_sonatype: Caller override; ignored for nightlies
        """
        self.workspace = Path(workspace)
        self.source = source
        self.build_character = build_character
        self.version_base = version_base or None
        self.version_suffix = version_suffix or ""
        self.publish_override = publish_to_sonatype
        self._decision: Optional[ReleaseDecision] = None

    def select(self) -> ReleaseDecision:
        """
        Decide the release version. Later calls return the same decision.

        Raises:
            VersionFormatError: If the explicit base is not ``x.y.z``
            MalformedVersionTag: If HEAD is tagged with something unparseable
        """
        if self._decision is None:
            self._decision = self._select()
            logger.info(f"Building {self._decision.summary()}.")
        return self._decision

    def _select(self) -> ReleaseDecision:
        if self.version_base is not None:
            return self._explicit()

        logger.info("No SCALA_VER_BASE specified.")
        if self.version_suffix:
            logger.warning(
                f"Ignoring version suffix '{self.version_suffix}' without a version base."
            )

        tag = self.source.exact_tag_at(self.workspace)
        if tag:
            return self._tagged(tag)

        logger.info("No tag found, running an integration build.")
        return self._nightly()

    def _explicit(self) -> ReleaseDecision:
        version = Version.from_parts(self.version_base, self.version_suffix)
        # assumes the corresponding tag exists for scaladoc source links
        return self._decide(
            version,
            publish=self._publish_default(),
            links=f"v{version}",
            flow=ReleaseFlow.EXPLICIT,
        )

    def _tagged(self, tag: str) -> ReleaseDecision:
        logger.info(f"HEAD is tagged as {tag}.")
        version = Version.from_tag(tag)
        return self._decide(
            version,
            publish=self._publish_default(),
            links=tag,
            flow=ReleaseFlow.TAGGED,
        )

    def _nightly(self) -> ReleaseDecision:
        base, suffix = self.build_character()
        version = Version.from_parts(base, suffix)
        if self.publish_override:
            logger.warning("Nightly builds are never published to Sonatype.")
        return self._decide(
            version,
            publish=False,
            links=self.source.head_commit(self.workspace),
            flow=ReleaseFlow.NIGHTLY,
        )

    def _publish_default(self) -> bool:
        return True if self.publish_override is None else self.publish_override

    @staticmethod
    def _decide(
        version: Version, publish: bool, links: str, flow: ReleaseFlow
    ) -> ReleaseDecision:
        return ReleaseDecision(
            scala_version=str(version),
            scala_version_base=version.base,
            scala_version_suffix=version.suffix,
            binary_version=str(version.binary_version),
            publish_to_sonatype=publish,
            scaladoc_source_links_ver=links,
            flow=flow,
        )
