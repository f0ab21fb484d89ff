from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.value import ArchiveId, JobId
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.shared.error import RecordNotFoundError
from jobarchive.infrastructure.persistence.mappers.job import row_to_job, to_utc
from jobarchive.infrastructure.persistence.tables import jobs_table


class SqlAlchemyJobRepository(JobRepository):
    """SQLAlchemy implementation of JobRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, job_id: JobId) -> Job | None:
        stmt = select(jobs_table).where(jobs_table.c.id == job_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_job(dict(row)) if row else None

    async def get_archive_id(self, job_id: JobId) -> ArchiveId | None:
        stmt = select(jobs_table.c.pid).where(jobs_table.c.id == job_id)
        result = await self.session.execute(stmt)
        pid = result.scalar_one_or_none()
        return ArchiveId(pid) if pid is not None else None

    async def update_published(self, job_id: JobId, published: bool) -> Job:
        return await self._update(job_id, published=published)

    async def update_schedule(self, job_id: JobId, date: datetime, time: datetime) -> Job:
        return await self._update(job_id, date=to_utc(date), time=to_utc(time))

    async def find_ids_by_archive(self, archive_id: ArchiveId) -> set[JobId]:
        stmt = select(jobs_table.c.id).where(jobs_table.c.pid == archive_id)
        result = await self.session.execute(stmt)
        return {JobId(i) for i in result.scalars().all()}

    async def snapshot(self, record_id: int) -> dict[str, Any] | None:
        job = await self.get(JobId(record_id))
        return job.snapshot() if job else None

    async def _update(self, job_id: JobId, **values: Any) -> Job:
        stmt = (
            update(jobs_table)
            .where(jobs_table.c.id == job_id)
            .values(tstamp=datetime.now(UTC), **values)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise RecordNotFoundError(job_id)
        await self.session.flush()

        job = await self.get(job_id)
        if job is None:
            raise RecordNotFoundError(job_id)
        return job
