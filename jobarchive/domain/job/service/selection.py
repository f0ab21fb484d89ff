"""BulkSelectionFilter - narrows a multi-record selection to one archive."""

import logging
from collections.abc import Iterable

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.value import ArchiveId, JobId
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.shared.authorization.operation import Operation, TargetScope
from jobarchive.domain.shared.authorization.policy import AccessPolicy
from jobarchive.domain.shared.error import ValidationError
from jobarchive.domain.shared.service import Service

logger = logging.getLogger(__name__)


class BulkSelectionFilter(Service):
    policy: AccessPolicy
    job_repo: JobRepository

    async def filter(
        self,
        principal: Principal,
        archive_id: ArchiveId,
        candidate_ids: Iterable[int],
        operation: Operation = Operation.SELECT,
    ) -> set[JobId]:
        """Keep only the candidates that live in ``archive_id``.

        A denied archive yields an empty set instead of an error; the bulk
        command itself is gated separately.
        """
        if self.policy.rules.get(operation) is not TargetScope.CONTAINER:
            raise ValidationError(f"{operation} is not a bulk operation", field="act")

        if not await self.policy.decide(principal, operation, archive_id):
            return set()

        in_archive = await self.job_repo.find_ids_by_archive(archive_id)
        kept = {JobId(i) for i in candidate_ids} & in_archive
        logger.debug(
            "Selection for archive %s narrowed to %d of %d", archive_id, len(kept), len(in_archive)
        )
        return kept
