"""
Exception classes for artifact repository access.
"""

from typing import Sequence


class RepositoryError(Exception):
    """Base exception for failed calls to an artifact repository or the staging API."""

    pass


class ArtifactQueryError(RepositoryError):
    """Raised when artifact existence could not be determined."""

    def __init__(self, coordinates: str, errors: Sequence[str]):
        self.coordinates = coordinates
        self.errors = list(errors)
        super().__init__(f"Could not query {coordinates}: " + "; ".join(self.errors))
