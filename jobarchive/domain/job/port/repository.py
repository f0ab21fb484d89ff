from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Any, Protocol

from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.value import ArchiveId, JobId
from jobarchive.domain.shared.port import Port


class JobRepository(Port, Protocol):
    """Persistent job rows and their archive linkage."""

    @abstractmethod
    async def get(self, job_id: JobId) -> Job | None: ...

    @abstractmethod
    async def get_archive_id(self, job_id: JobId) -> ArchiveId | None: ...

    @abstractmethod
    async def update_published(self, job_id: JobId, published: bool) -> Job:
        """Set ``published`` and refresh ``last_modified`` in a single update.

        Raises RecordNotFoundError if the row no longer exists.
        """
        ...

    @abstractmethod
    async def update_schedule(self, job_id: JobId, date: datetime, time: datetime) -> Job: ...

    @abstractmethod
    async def find_ids_by_archive(self, archive_id: ArchiveId) -> set[JobId]: ...

    @abstractmethod
    async def snapshot(self, record_id: int) -> dict[str, Any] | None:
        """Current field set for version snapshots, or None if the row is gone."""
        ...
