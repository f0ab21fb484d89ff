"""ToggleWorkflow - publishes or hides a single job as one unit of work.

Stages, in order:

1. Authorizing: archive-scoped ``toggle`` check (AccessPolicy.guard)
2. Loading: the current row; a vanished row ends in RecordNotFoundError
3. Version tracking opens for the record
4. LOAD hooks
5. Field-level check on ``job.published``
6. FIELD_SAVE hooks may transform the value, then the single write
7. SUBMIT hooks with the written record
8. Version snapshot committed, then the unit of work

Calls for the same job are serialized from authorization through commit,
and a call that writes nothing rolls back before releasing the job. Every
successful toggle leaves exactly one snapshot and the stored flag matches
the last write.
"""

import logging
from typing import Any

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.toggle import ToggleIntent
from jobarchive.domain.job.model.value import JOB_KIND, PUBLISHED_FIELD, JobId
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.job.service.ledger import VersionBracket, VersionLedger
from jobarchive.domain.shared.authorization.operation import Operation
from jobarchive.domain.shared.authorization.policy import AccessPolicy
from jobarchive.domain.shared.error import RecordNotFoundError
from jobarchive.domain.shared.lock import KeyedLock
from jobarchive.domain.shared.model.hook import HookContext, HookPhase, HookRegistry
from jobarchive.domain.shared.port.uow import UnitOfWork
from jobarchive.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ToggleWorkflow(Service):
    policy: AccessPolicy
    job_repo: JobRepository
    ledger: VersionLedger
    hooks: HookRegistry
    locks: KeyedLock
    uow: UnitOfWork

    async def toggle(
        self,
        principal: Principal,
        job_id: JobId,
        published: bool,
        hint: Any = None,
    ) -> Job:
        """Set the published flag of ``job_id`` to ``published``.

        Raises:
            AuthorizationDeniedError: archive scope denies the toggle.
            RecordNotFoundError: the job does not exist (or vanished after authorization).
            FieldPermissionError: the principal may not change ``job.published``.
        Hook errors propagate unchanged. A SUBMIT hook failure happens after
        the write, which stays committed.
        """
        async with self.locks.hold((JOB_KIND, job_id)):
            bracket: VersionBracket | None = None
            try:
                await self.policy.guard(principal, Operation.TOGGLE, job_id)
                job = await self.job_repo.get(job_id)
                if job is None:
                    raise RecordNotFoundError(job_id)

                context = HookContext(
                    entity_kind=JOB_KIND,
                    record_id=job_id,
                    principal=principal,
                    record=job,
                    hint=hint,
                )
                async with self.ledger.track(JOB_KIND, job_id) as bracket:
                    context = await self.hooks.run(HookPhase.LOAD, context)

                    self.policy.guard_field(principal, JOB_KIND, PUBLISHED_FIELD, job_id)

                    value = await self.hooks.run_field(PUBLISHED_FIELD, published, context)
                    updated = await self.job_repo.update_published(job_id, bool(value))
                    bracket.mark_mutated()
                    logger.info(
                        "Job %s %s by %s",
                        job_id,
                        "published" if updated.published else "unpublished",
                        principal.user_id,
                    )

                    context.record = updated
                    await self.hooks.run(HookPhase.SUBMIT, context)
            finally:
                if bracket is not None and bracket.mutated:
                    await self.uow.commit()
                else:
                    await self.uow.rollback()

        return updated

    def intent(self, principal: Principal, job: Job) -> ToggleIntent | None:
        """Toggle affordance for a listing row; None if the principal may not change the flag."""
        if not self.policy.may_edit_field(principal, JOB_KIND, PUBLISHED_FIELD):
            return None
        return ToggleIntent(job_id=job.id, target=not job.published, icon=job.icon_state)
