from .repository import JobRepository
from .version_repository import VersionRepository

__all__ = ["JobRepository", "VersionRepository"]
