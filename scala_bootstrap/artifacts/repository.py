"""Cleanup of earlier builds of the same Scala version in the integration repository."""

import logging
from typing import List, Optional, Sequence, Tuple

import requests

from scala_bootstrap.constants import PUBLISHED_ORGANISATIONS

from .exceptions import RepositoryError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
ARTIFACTORY_MARKER = "/artifactory/"


def parse_credentials(credentials: Optional[str]) -> Optional[Tuple[str, str]]:
    """``user:password`` -> ``(user, password)``"""
    if not credentials:
        return None
    user, sep, password = credentials.partition(":")
    if not sep:
        raise ValueError("Repository credentials must have the form user:password")
    return user, password


class IntegrationRepository:
    """
    The Artifactory repository that locker, modules and quick are published to.

    A rebuilt version must not resolve stale artifacts from an earlier attempt,
    so every folder of the published organisations whose name contains the
    version is deleted before the run publishes anything.
    """

    def __init__(
        self,
        url: str,
        credentials: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.url = url if url.endswith("/") else url + "/"
        self.auth = parse_credentials(credentials)
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def storage_api_url(self) -> Optional[str]:
        """``.../artifactory/api/storage/<repo>``, or None for other hosts."""
        index = self.url.find(ARTIFACTORY_MARKER)
        if index < 0:
            return None
        prefix = self.url[: index + len(ARTIFACTORY_MARKER)]
        repo_id = self.url[len(prefix) :].strip("/")
        if not repo_id:
            return None
        return f"{prefix}api/storage/{repo_id}"

    def _folders(self, url: str) -> List[str]:
        try:
            res = self.session.get(url, auth=self.auth, timeout=self.timeout)
        except requests.RequestException as e:
            raise RepositoryError(f"GET {url} failed: {e}") from e
        if res.status_code == 404:
            return []
        if res.status_code != 200:
            raise RepositoryError(f"GET {url} returned HTTP {res.status_code}")
        children = res.json().get("children", [])
        return [c["uri"] for c in children if c.get("folder")]

    def _delete(self, url: str) -> None:
        logger.info(f"Deleting {url}")
        try:
            res = self.session.delete(url, auth=self.auth, timeout=self.timeout)
        except requests.RequestException as e:
            raise RepositoryError(f"DELETE {url} failed: {e}") from e
        if res.status_code not in (200, 202, 204, 404):
            raise RepositoryError(f"DELETE {url} returned HTTP {res.status_code}")

    def remove_existing_builds(
        self,
        scala_version: str,
        organisations: Sequence[str] = PUBLISHED_ORGANISATIONS,
    ) -> List[str]:
        """
        Delete every version folder containing ``scala_version``.

        Returns:
            Repository paths that were deleted

        Raises:
            RepositoryError: If listing or deleting fails
        """
        storage = self.storage_api_url
        if storage is None:
            logger.info(f"Unknown repo, not deleting anything: {self.url}")
            return []

        deleted = []
        for organisation in organisations:
            for artifact in self._folders(f"{storage}/{organisation}"):
                artifact_path = f"{organisation}{artifact}"
                for version in self._folders(f"{storage}/{artifact_path}"):
                    if scala_version not in version:
                        continue
                    path = f"{artifact_path}{version}"
                    self._delete(f"{self.url}{path}")
                    deleted.append(path)

        if not deleted:
            logger.info(f"No existing builds of {scala_version} in {self.url}")
        return deleted
