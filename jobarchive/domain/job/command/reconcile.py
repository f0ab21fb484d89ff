import logfire

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.value import JobId
from jobarchive.domain.job.service.schedule import ScheduleService
from jobarchive.domain.shared.authorization.gate import authenticated
from jobarchive.domain.shared.command import Command, CommandHandler, Result


class ReconcileSchedule(Command):
    job_id: JobId


class ReconcileScheduleResult(Result):
    job: Job


class ReconcileScheduleHandler(CommandHandler[ReconcileSchedule, ReconcileScheduleResult]):
    __auth__ = authenticated()
    schedule: ScheduleService
    principal: Principal | None = None

    async def run(self, cmd: ReconcileSchedule) -> ReconcileScheduleResult:
        with logfire.span("ReconcileSchedule", job_id=cmd.job_id):
            assert self.principal is not None
            job = await self.schedule.reconcile(self.principal, cmd.job_id)
            logfire.info("Job schedule reconciled", job_id=cmd.job_id)
            return ReconcileScheduleResult(job=job)
