from dishka import Provider, provide

from jobarchive.config import Config
from jobarchive.domain.job.model.value import JOB_KIND
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.job.port.version_repository import VersionRepository
from jobarchive.domain.job.service import (
    BulkSelectionFilter,
    ScheduleService,
    ToggleWorkflow,
    VersionLedger,
)
from jobarchive.domain.shared.authorization.policy import AccessPolicy
from jobarchive.domain.shared.lock import KeyedLock
from jobarchive.domain.shared.model.hook import HookRegistry
from jobarchive.domain.shared.port.uow import UnitOfWork
from jobarchive.util.di.scope import Scope


class JobProvider(Provider):
    # APP-scoped: shared across requests
    @provide(scope=Scope.APP)
    def get_locks(self) -> KeyedLock:
        return KeyedLock()

    @provide(scope=Scope.APP)
    def get_hook_registry(self) -> HookRegistry:
        return HookRegistry()

    @provide(scope=Scope.UOW)
    def get_access_policy(self, job_repo: JobRepository) -> AccessPolicy:
        return AccessPolicy(resolver=job_repo)

    @provide(scope=Scope.UOW)
    def get_version_ledger(
        self, versions: VersionRepository, job_repo: JobRepository
    ) -> VersionLedger:
        return VersionLedger(versions=versions, sources={JOB_KIND: job_repo})

    @provide(scope=Scope.UOW)
    def get_toggle_workflow(
        self,
        policy: AccessPolicy,
        job_repo: JobRepository,
        ledger: VersionLedger,
        hooks: HookRegistry,
        locks: KeyedLock,
        uow: UnitOfWork,
    ) -> ToggleWorkflow:
        return ToggleWorkflow(
            policy=policy,
            job_repo=job_repo,
            ledger=ledger,
            hooks=hooks,
            locks=locks,
            uow=uow,
        )

    @provide(scope=Scope.UOW)
    def get_selection_filter(
        self, policy: AccessPolicy, job_repo: JobRepository
    ) -> BulkSelectionFilter:
        return BulkSelectionFilter(policy=policy, job_repo=job_repo)

    @provide(scope=Scope.UOW)
    def get_schedule_service(
        self,
        policy: AccessPolicy,
        job_repo: JobRepository,
        ledger: VersionLedger,
        locks: KeyedLock,
        uow: UnitOfWork,
        config: Config,
    ) -> ScheduleService:
        return ScheduleService(
            policy=policy,
            job_repo=job_repo,
            ledger=ledger,
            locks=locks,
            uow=uow,
            tz=config.schedule.tz,
            datim_format=config.schedule.datim_format,
        )
