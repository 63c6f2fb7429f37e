"""Tests for the Sonatype staging API client."""

from unittest.mock import MagicMock

import pytest
import requests

from scala_bootstrap.artifacts.exceptions import RepositoryError
from scala_bootstrap.artifacts.staging import SonatypeStaging, StagingRepository

API = "https://oss.sonatype.org/service/local"

PROFILE_REPOSITORIES = {
    "data": [
        {
            "profileName": "org.scala-lang",
            "type": "open",
            "repositoryId": "orgscala-lang-1001",
            "repositoryURI": "https://oss.sonatype.org/content/repositories/orgscala-lang-1001",
        },
        {
            "profileName": "org.scala-lang",
            "type": "closed",
            "repositoryId": "orgscala-lang-1000",
            "repositoryURI": "https://oss.sonatype.org/content/repositories/orgscala-lang-1000",
        },
        {
            "profileName": "org.example",
            "type": "open",
            "repositoryId": "orgexample-7",
            "repositoryURI": "https://oss.sonatype.org/content/repositories/orgexample-7",
        },
    ]
}


@pytest.fixture
def session():
    session = MagicMock()
    res = MagicMock(ok=True, status_code=200)
    res.json.return_value = PROFILE_REPOSITORIES
    session.request.return_value = res
    return session


@pytest.mark.short
class TestSonatypeStaging:
    def test_list_open_repos(self, session):
        repos = SonatypeStaging(API, session=session).list_open_repos()

        assert repos == [
            StagingRepository(
                id="orgscala-lang-1001",
                uri="https://oss.sonatype.org/content/repositories/orgscala-lang-1001",
            )
        ]
        method, url = session.request.call_args[0]
        assert method == "GET"
        assert url == f"{API}/staging/profile_repositories"

    def test_close_repos(self, session):
        SonatypeStaging(API, session=session).close_repos(
            ["orgscala-lang-1001"], "Scala 2.12.1"
        )

        method, url = session.request.call_args[0]
        assert method == "POST"
        assert url == f"{API}/staging/bulk/close"
        assert session.request.call_args[1]["json"] == {
            "data": {
                "description": "Scala 2.12.1",
                "stagedRepositoryIds": ["orgscala-lang-1001"],
            }
        }

    def test_drop_repos(self, session):
        SonatypeStaging(API, session=session).drop_repos(["orgscala-lang-1001"], "bad")
        assert session.request.call_args[0][1] == f"{API}/staging/bulk/drop"

    def test_nothing_to_close(self, session):
        SonatypeStaging(API, session=session).close_repos([], "Scala 2.12.1")
        session.request.assert_not_called()

    def test_http_error(self, session):
        session.request.return_value = MagicMock(ok=False, status_code=401)
        with pytest.raises(RepositoryError, match="HTTP 401"):
            SonatypeStaging(API, session=session).list_open_repos()

    def test_connection_error(self, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(RepositoryError):
            SonatypeStaging(API, session=session).close_repos(["x"], "msg")
