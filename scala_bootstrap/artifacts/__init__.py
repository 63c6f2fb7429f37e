from .exceptions import ArtifactQueryError, RepositoryError
from .repository import IntegrationRepository
from .resolver import ArtifactResolver
from .staging import SonatypeStaging, StagingRepository

__all__ = [
    "ArtifactQueryError",
    "ArtifactResolver",
    "IntegrationRepository",
    "RepositoryError",
    "SonatypeStaging",
    "StagingRepository",
]
