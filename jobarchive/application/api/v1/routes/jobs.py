"""Job administration routes: detail, visibility toggle, permission checks, bulk selection, versions."""

from datetime import datetime
from urllib.parse import urlsplit

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from jobarchive.application.api.v1.deps import CurrentPrincipal
from jobarchive.domain.job.command.reconcile import ReconcileSchedule, ReconcileScheduleHandler
from jobarchive.domain.job.command.toggle import ToggleVisibility, ToggleVisibilityHandler
from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.toggle import ToggleIntent, ToggleRequest
from jobarchive.domain.job.model.value import JOB_KIND, ArchiveId, JobId
from jobarchive.domain.job.model.version import VersionSnapshot
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.job.service import (
    BulkSelectionFilter,
    ScheduleService,
    ToggleWorkflow,
    VersionLedger,
)
from jobarchive.domain.shared.authorization.operation import Operation
from jobarchive.domain.shared.authorization.policy import AccessPolicy
from jobarchive.domain.shared.error import RecordNotFoundError

router = APIRouter(
    tags=["jobs"],
    route_class=DishkaRoute,
)


class ToggleBody(BaseModel):
    published: bool
    hint: str | None = None


class JobResponse(BaseModel):
    job: Job


class JobDetailResponse(BaseModel):
    job: Job
    label: str
    form_date: datetime
    form_time: datetime


class AuthorizeBody(BaseModel):
    act: str | None = None
    id: int | None = None


class AuthorizeResponse(BaseModel):
    allowed: bool
    reason: str | None = None


class SelectionBody(BaseModel):
    ids: list[int]
    act: str = Operation.SELECT.value


class SelectionResponse(BaseModel):
    ids: list[int]


class VersionsResponse(BaseModel):
    versions: list[VersionSnapshot]


def _back_to(request: Request) -> str:
    """Local path of the Referer, or the root."""
    referer = urlsplit(request.headers.get("referer", ""))
    if referer.netloc and referer.netloc != request.url.netloc:
        return "/"
    return (referer.path or "/") + (f"?{referer.query}" if referer.query else "")


@router.get("/jobs/toggle")
async def toggle_from_link(
    request: Request,
    principal: CurrentPrincipal,
    workflow: FromDishka[ToggleWorkflow],
) -> Response:
    """Run a toggle carried as ``tid``/``state`` query parameters and redirect back."""
    toggle = ToggleRequest.from_params(request.query_params)
    if toggle is not None:
        handler = ToggleVisibilityHandler(workflow=workflow, principal=principal)
        await handler.run(ToggleVisibility(job_id=toggle.job_id, published=toggle.published))
    return RedirectResponse(_back_to(request), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/jobs/{job_id}/toggle")
async def toggle_job(
    job_id: int,
    body: ToggleBody,
    principal: CurrentPrincipal,
    workflow: FromDishka[ToggleWorkflow],
) -> JobResponse:
    handler = ToggleVisibilityHandler(workflow=workflow, principal=principal)
    result = await handler.run(
        ToggleVisibility(job_id=JobId(job_id), published=body.published, hint=body.hint)
    )
    return JobResponse(job=result.job)


@router.get("/jobs/{job_id}/toggle-intent", response_model=None)
async def get_toggle_intent(
    job_id: int,
    principal: CurrentPrincipal,
    policy: FromDishka[AccessPolicy],
    job_repo: FromDishka[JobRepository],
    workflow: FromDishka[ToggleWorkflow],
) -> ToggleIntent | Response:
    await policy.guard(principal, Operation.SHOW, job_id)
    job = await job_repo.get(JobId(job_id))
    if job is None:
        raise RecordNotFoundError(job_id)

    intent = workflow.intent(principal, job)
    if intent is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return intent


@router.post("/jobs/authorize")
async def authorize(
    body: AuthorizeBody,
    principal: CurrentPrincipal,
    policy: FromDishka[AccessPolicy],
) -> AuthorizeResponse:
    decision = await policy.decide_command(principal, body.act, body.id)
    return AuthorizeResponse(
        allowed=decision.allowed,
        reason=str(decision.reason) if decision.reason else None,
    )


@router.post("/archives/{archive_id}/selection")
async def narrow_selection(
    archive_id: int,
    body: SelectionBody,
    principal: CurrentPrincipal,
    selection: FromDishka[BulkSelectionFilter],
) -> SelectionResponse:
    kept = await selection.filter(
        principal, ArchiveId(archive_id), body.ids, Operation.parse(body.act)
    )
    return SelectionResponse(ids=sorted(kept))


@router.get("/jobs/{job_id}/versions")
async def list_versions(
    job_id: int,
    principal: CurrentPrincipal,
    policy: FromDishka[AccessPolicy],
    ledger: FromDishka[VersionLedger],
) -> VersionsResponse:
    await policy.guard(principal, Operation.SHOW, job_id)
    return VersionsResponse(versions=await ledger.history(JOB_KIND, job_id))


@router.post("/jobs/{job_id}/reconcile-schedule")
async def reconcile_schedule(
    job_id: int,
    principal: CurrentPrincipal,
    schedule: FromDishka[ScheduleService],
) -> JobResponse:
    handler = ReconcileScheduleHandler(schedule=schedule, principal=principal)
    result = await handler.run(ReconcileSchedule(job_id=JobId(job_id)))
    return JobResponse(job=result.job)


@router.get("/jobs/{job_id}")
async def get_job(
    job_id: int,
    principal: CurrentPrincipal,
    policy: FromDishka[AccessPolicy],
    job_repo: FromDishka[JobRepository],
    schedule: FromDishka[ScheduleService],
) -> JobDetailResponse:
    """The job with its listing label and the date/time values an edit form starts from."""
    await policy.guard(principal, Operation.SHOW, job_id)
    job = await job_repo.get(JobId(job_id))
    if job is None:
        raise RecordNotFoundError(job_id)

    form_date, form_time = schedule.form_values(job)
    return JobDetailResponse(
        job=job,
        label=schedule.label(job),
        form_date=form_date,
        form_time=form_time,
    )
