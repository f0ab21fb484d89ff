"""Global test fixtures and in-memory adapters."""

import asyncio
import os
from datetime import UTC, datetime
from typing import Any

import pytest

# Set JWT secret before any test modules import Config
# This must happen at module load time, not in a fixture
os.environ.setdefault("JOBARCHIVE_AUTH__JWT__SECRET", "test-secret-for-unit-tests-min-32")

from jobarchive.domain.job.model.aggregate import Job  # noqa: E402
from jobarchive.domain.job.model.value import JOB_KIND, ArchiveId, JobId  # noqa: E402
from jobarchive.domain.job.model.version import VersionSnapshot  # noqa: E402
from jobarchive.domain.job.service import (  # noqa: E402
    BulkSelectionFilter,
    ToggleWorkflow,
    VersionLedger,
)
from jobarchive.domain.shared.authorization.policy import AccessPolicy  # noqa: E402
from jobarchive.domain.shared.error import RecordNotFoundError  # noqa: E402
from jobarchive.domain.shared.lock import KeyedLock  # noqa: E402
from jobarchive.domain.shared.model.hook import HookRegistry  # noqa: E402


def _make_job(
    job_id: int = 1,
    pid: int = 10,
    *,
    title: str = "Backend Developer",
    published: bool = False,
) -> Job:
    return Job(
        id=JobId(job_id),
        pid=ArchiveId(pid),
        title=title,
        date=datetime(2024, 3, 15, 0, 0, tzinfo=UTC),
        time=datetime(1970, 1, 1, 9, 0, tzinfo=UTC),
        published=published,
        last_modified=datetime(2024, 1, 1, tzinfo=UTC),
    )


class InMemoryJobRepository:
    """Dict-backed JobRepository. Counts writes and yields once per call."""

    def __init__(self, *jobs: Job) -> None:
        self.jobs: dict[int, Job] = {job.id: job for job in jobs}
        self.writes = 0

    async def get(self, job_id: JobId) -> Job | None:
        await asyncio.sleep(0)
        return self.jobs.get(job_id)

    async def get_archive_id(self, job_id: JobId) -> ArchiveId | None:
        job = self.jobs.get(job_id)
        return job.pid if job else None

    async def update_published(self, job_id: JobId, published: bool) -> Job:
        return await self._update(job_id, published=published)

    async def update_schedule(self, job_id: JobId, date: datetime, time: datetime) -> Job:
        return await self._update(job_id, date=date, time=time)

    async def find_ids_by_archive(self, archive_id: ArchiveId) -> set[JobId]:
        return {job.id for job in self.jobs.values() if job.pid == archive_id}

    async def snapshot(self, record_id: int) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        job = self.jobs.get(JobId(record_id))
        return job.snapshot() if job else None

    async def _update(self, job_id: JobId, **values: Any) -> Job:
        await asyncio.sleep(0)
        job = self.jobs.get(job_id)
        if job is None:
            raise RecordNotFoundError(job_id)
        updated = job.model_copy(update={**values, "last_modified": datetime.now(UTC)})
        self.jobs[job_id] = updated
        self.writes += 1
        return updated


class InMemoryVersionRepository:
    def __init__(self) -> None:
        self.rows: list[VersionSnapshot] = []

    async def append(self, entity_kind: str, record_id: int, data: dict[str, Any]) -> VersionSnapshot:
        revision = await self.latest_revision(entity_kind, record_id) + 1
        await asyncio.sleep(0)
        if any(
            (r.entity_kind, r.record_id, r.revision) == (entity_kind, record_id, revision)
            for r in self.rows
        ):
            raise AssertionError(f"duplicate revision {revision}")
        snapshot = VersionSnapshot(
            entity_kind=entity_kind,
            record_id=record_id,
            revision=revision,
            data=data,
            created_at=datetime.now(UTC),
        )
        self.rows.append(snapshot)
        return snapshot

    async def latest_revision(self, entity_kind: str, record_id: int) -> int:
        return max(
            (r.revision for r in self.rows if (r.entity_kind, r.record_id) == (entity_kind, record_id)),
            default=0,
        )

    async def list(self, entity_kind: str, record_id: int) -> list[VersionSnapshot]:
        return sorted(
            (r for r in self.rows if (r.entity_kind, r.record_id) == (entity_kind, record_id)),
            key=lambda r: r.revision,
        )


class FakeUnitOfWork:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def job_repo() -> InMemoryJobRepository:
    return InMemoryJobRepository(
        _make_job(1, 10),
        _make_job(2, 10, published=True),
        _make_job(10, 10),
        _make_job(11, 10),
        _make_job(12, 10),
        _make_job(20, 20),
        _make_job(21, 20),
    )


@pytest.fixture
def version_repo() -> InMemoryVersionRepository:
    return InMemoryVersionRepository()


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def locks() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def policy(job_repo: InMemoryJobRepository) -> AccessPolicy:
    return AccessPolicy(resolver=job_repo)


@pytest.fixture
def ledger(version_repo: InMemoryVersionRepository, job_repo: InMemoryJobRepository) -> VersionLedger:
    return VersionLedger(versions=version_repo, sources={JOB_KIND: job_repo})


@pytest.fixture
def workflow(
    policy: AccessPolicy,
    job_repo: InMemoryJobRepository,
    ledger: VersionLedger,
    hooks: HookRegistry,
    locks: KeyedLock,
    uow: FakeUnitOfWork,
) -> ToggleWorkflow:
    return ToggleWorkflow(
        policy=policy,
        job_repo=job_repo,
        ledger=ledger,
        hooks=hooks,
        locks=locks,
        uow=uow,
    )


@pytest.fixture
def selection(policy: AccessPolicy, job_repo: InMemoryJobRepository) -> BulkSelectionFilter:
    return BulkSelectionFilter(policy=policy, job_repo=job_repo)
