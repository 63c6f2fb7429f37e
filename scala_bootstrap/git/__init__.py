"""
Git operations for scala-bootstrap.

Module sources are checked out into ``<workspace>/src/<repo>`` with GitPython.
Tags are the source of module versions: pinned builds require ``v<version>``
to exist upstream, nightly builds derive the version from ``git describe``.
"""

from .clone import FetchError, NoTagError, SourceFetcher, repository_url

__all__ = [
    "FetchError",
    "NoTagError",
    "SourceFetcher",
    "repository_url",
]
