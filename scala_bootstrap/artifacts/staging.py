"""Sonatype (Nexus 2) staging repository API."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from scala_bootstrap.constants import SONATYPE_API, SONATYPE_PROFILE

from .exceptions import RepositoryError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60

HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json,application/vnd.siesta-error-v1+json,"
    "application/vnd.siesta-validation-errors-v1+json",
}


@dataclass(frozen=True)
class StagingRepository:
    id: str
    uri: str


class SonatypeStaging:
    """
    Lists, closes and drops staging repositories of one profile.

    Credentials are read by ``requests`` from ``~/.netrc`` unless given.
    """

    def __init__(
        self,
        api_url: str = SONATYPE_API,
        profile_name: str = SONATYPE_PROFILE,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.api_url = api_url.rstrip("/")
        self.profile_name = profile_name
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.api_url}/{path}"
        logger.debug(f"{method} {url}")
        try:
            res = self.session.request(
                method, url, headers=HEADERS, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise RepositoryError(f"{method} {url} failed: {e}") from e
        if not res.ok:
            raise RepositoryError(f"{method} {url} returned HTTP {res.status_code}")
        return res

    def list_open_repos(self) -> List[StagingRepository]:
        data = self._request("GET", "staging/profile_repositories").json().get("data", [])
        return [
            StagingRepository(id=r["repositoryId"], uri=r.get("repositoryURI", ""))
            for r in data
            if r.get("profileName") == self.profile_name and r.get("type") == "open"
        ]

    def _bulk(self, action: str, ids: Sequence[str], message: str) -> None:
        if not ids:
            return
        payload: Dict[str, Any] = {
            "data": {"description": message, "stagedRepositoryIds": list(ids)}
        }
        self._request("POST", f"staging/bulk/{action}", json=payload)

    def close_repos(self, ids: Sequence[str], message: str) -> None:
        logger.info(f"Closing staging repositories: {', '.join(ids)}")
        self._bulk("close", ids, message)

    def drop_repos(self, ids: Sequence[str], message: str) -> None:
        logger.info(f"Dropping staging repositories: {', '.join(ids)}")
        self._bulk("drop", ids, message)
