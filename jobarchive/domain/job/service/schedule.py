"""ScheduleService - keeps a job's date and time fields consistent on save."""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.schedule import (
    normalize_to_day_start,
    normalize_to_time_of_day,
    reconcile,
)
from jobarchive.domain.job.model.value import JOB_KIND, JobId
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.job.service.ledger import VersionLedger
from jobarchive.domain.shared.authorization.operation import Operation
from jobarchive.domain.shared.authorization.policy import AccessPolicy
from jobarchive.domain.shared.error import RecordNotFoundError
from jobarchive.domain.shared.lock import KeyedLock
from jobarchive.domain.shared.port.uow import UnitOfWork
from jobarchive.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ScheduleService(Service):
    policy: AccessPolicy
    job_repo: JobRepository
    ledger: VersionLedger
    locks: KeyedLock
    uow: UnitOfWork
    tz: ZoneInfo
    datim_format: str

    def form_values(self, job: Job) -> tuple[datetime, datetime]:
        """Date and time as the edit form shows them: day start, and time on the epoch day."""
        return (
            normalize_to_day_start(job.date, self.tz),
            normalize_to_time_of_day(job.time, self.tz),
        )

    def label(self, job: Job) -> str:
        return job.label(self.datim_format, self.tz)

    async def reconcile(self, principal: Principal, job_id: JobId) -> Job:
        """Rewrite ``date`` with the edited time of day and re-derive ``time`` from it.

        Runs after an editor saved either field; one version snapshot is
        written for the change.
        """
        async with self.locks.hold((JOB_KIND, job_id)):
            try:
                await self.policy.guard(principal, Operation.EDIT, job_id)
                job = await self.job_repo.get(job_id)
                if job is None:
                    raise RecordNotFoundError(job_id)

                new_date, new_time = reconcile(job.date, job.time, self.tz)
                async with self.ledger.track(JOB_KIND, job_id) as bracket:
                    updated = await self.job_repo.update_schedule(job_id, new_date, new_time)
                    bracket.mark_mutated()
            except Exception:
                await self.uow.rollback()
                raise
            await self.uow.commit()

        logger.info("Schedule of job %s reconciled to %s", job_id, new_date.isoformat())
        return updated
