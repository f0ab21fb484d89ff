from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobarchive.domain.job.model.version import VersionSnapshot
from jobarchive.domain.job.port.version_repository import VersionRepository
from jobarchive.domain.shared.error import VersionStoreError
from jobarchive.infrastructure.persistence.mappers.job import row_to_snapshot
from jobarchive.infrastructure.persistence.tables import job_versions_table

logger = logging.getLogger(__name__)

# Another writer may take the same revision between our read and insert.
_APPEND_ATTEMPTS = 3


class SqlAlchemyVersionRepository(VersionRepository):
    """Append-only version store; revisions are guarded by a unique constraint."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def append(self, entity_kind: str, record_id: int, data: dict[str, Any]) -> VersionSnapshot:
        for attempt in range(1, _APPEND_ATTEMPTS + 1):
            snapshot = VersionSnapshot(
                entity_kind=entity_kind,
                record_id=record_id,
                revision=await self.latest_revision(entity_kind, record_id) + 1,
                data=data,
                created_at=datetime.now(UTC),
            )
            try:
                async with self.session.begin_nested():
                    await self.session.execute(
                        insert(job_versions_table).values(**snapshot.model_dump())
                    )
            except IntegrityError:
                logger.warning(
                    "Revision %d of %s %s taken (attempt %d)",
                    snapshot.revision,
                    entity_kind,
                    record_id,
                    attempt,
                )
                continue
            return snapshot

        raise VersionStoreError(
            f"Could not append version for {entity_kind} {record_id} "
            f"after {_APPEND_ATTEMPTS} attempts"
        )

    async def latest_revision(self, entity_kind: str, record_id: int) -> int:
        stmt = select(func.coalesce(func.max(job_versions_table.c.revision), 0)).where(
            job_versions_table.c.entity_kind == entity_kind,
            job_versions_table.c.record_id == record_id,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list(self, entity_kind: str, record_id: int) -> list[VersionSnapshot]:
        stmt = (
            select(job_versions_table)
            .where(
                job_versions_table.c.entity_kind == entity_kind,
                job_versions_table.c.record_id == record_id,
            )
            .order_by(job_versions_table.c.revision)
        )
        result = await self.session.execute(stmt)
        return [row_to_snapshot(dict(r)) for r in result.mappings().all()]
