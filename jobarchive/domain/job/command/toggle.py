import logfire

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.value import JobId
from jobarchive.domain.job.service.toggle import ToggleWorkflow
from jobarchive.domain.shared.authorization.gate import authenticated
from jobarchive.domain.shared.command import Command, CommandHandler, Result


class ToggleVisibility(Command):
    job_id: JobId
    published: bool
    hint: str | None = None


class ToggleVisibilityResult(Result):
    job: Job


class ToggleVisibilityHandler(CommandHandler[ToggleVisibility, ToggleVisibilityResult]):
    __auth__ = authenticated()
    workflow: ToggleWorkflow
    principal: Principal | None = None

    async def run(self, cmd: ToggleVisibility) -> ToggleVisibilityResult:
        with logfire.span("ToggleVisibility", job_id=cmd.job_id, published=cmd.published):
            assert self.principal is not None  # guaranteed by the __auth__ gate
            job = await self.workflow.toggle(
                self.principal, cmd.job_id, cmd.published, hint=cmd.hint
            )
            return ToggleVisibilityResult(job=job)
