"""Artifact existence queries against Maven repositories."""

import logging
from typing import List, Optional, Sequence

import requests

from scala_bootstrap.model.module import CrossVersion

from .exceptions import ArtifactQueryError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def artifact_name(
    artifact_id: str, cross: CrossVersion, scala_version: str, binary_version: str
) -> str:
    """The published artifact id, e.g. ``scala-xml_2.12``."""
    if cross is CrossVersion.BINARY:
        return f"{artifact_id}_{binary_version}"
    if cross is CrossVersion.FULL:
        return f"{artifact_id}_{scala_version}"
    return artifact_id


def pom_path(group_id: str, name: str, version: str) -> str:
    return f"{group_id.replace('.', '/')}/{name}/{version}/{name}-{version}.pom"


class ArtifactResolver:
    """
    Answers "is this module already published for the Scala version being built?".

    The query is a HEAD request for the module's ``.pom`` in each repository,
    the integration repository included, in order.
    """

    def __init__(
        self,
        repositories: Sequence[str],
        scala_version: str,
        binary_version: str,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.repositories = [r if r.endswith("/") else r + "/" for r in repositories]
        self.scala_version = scala_version
        self.binary_version = binary_version
        self.session = session or requests.Session()
        self.timeout = timeout

    def resolves(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        cross: CrossVersion = CrossVersion.BINARY,
    ) -> bool:
        """
        Returns:
            True if any repository has the artifact, False if all answer 404

        Raises:
            ArtifactQueryError: If no repository has it and at least one
                could not be queried
        """
        name = artifact_name(
            artifact_id, CrossVersion(cross), self.scala_version, self.binary_version
        )
        path = pom_path(group_id, name, version)
        errors: List[str] = []

        for repository in self.repositories:
            url = repository + path
            logger.debug(f"HEAD {url}")
            try:
                res = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            except requests.RequestException as e:
                errors.append(f"{url}: {e}")
                continue

            if res.status_code == 200:
                logger.debug(f"Found {group_id}:{name}:{version} in {repository}")
                return True
            if res.status_code != 404:
                errors.append(f"{url}: HTTP {res.status_code}")

        if errors:
            raise ArtifactQueryError(f"{group_id}:{name}:{version}", errors)
        return False
