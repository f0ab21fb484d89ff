"""Job domain models."""

from .aggregate import Job
from .value import JOB_KIND, NO_ARCHIVE, PUBLISHED_FIELD, ArchiveId, IconState, JobId
from .version import VersionSnapshot

__all__ = [
    "JOB_KIND",
    "NO_ARCHIVE",
    "PUBLISHED_FIELD",
    "ArchiveId",
    "IconState",
    "Job",
    "JobId",
    "VersionSnapshot",
]
