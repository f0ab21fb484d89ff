"""ASGI application factory.

    uvicorn --factory jobarchive.application.api.rest.app:create_app
"""

import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from jobarchive.application.api.v1.errors import map_error
from jobarchive.application.api.v1.routes import health, jobs
from jobarchive.application.di import create_container
from jobarchive.config import Config, configure_logging
from jobarchive.domain.shared.authorization.policy import DEFAULT_RULES, AccessPolicy
from jobarchive.domain.shared.error import JobArchiveError
from jobarchive.infrastructure.persistence.database import create_tables
from jobarchive.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    try:
        if app.state.config.database.auto_migrate:
            await create_tables(await container.get(AsyncEngine))
            logger.info("Schema is up to date")
        yield
    finally:
        await container.close()


def validate_access_rules() -> None:
    """Refuse to start when some operation has no access rule."""
    AccessPolicy(resolver=None, rules=DEFAULT_RULES).validate_coverage()  # type: ignore[arg-type]


async def _jobarchive_error(request: Request, exc: JobArchiveError) -> JSONResponse:
    http_exc = map_error(exc)
    if http_exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(http_exc.detail, status_code=http_exc.status_code, headers=http_exc.headers)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


def create_app(config: Config | None = None) -> FastAPI:
    config = config or Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    validate_access_rules()
    logger.info("Starting %s %s", config.server.name, config.server.version)

    app = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )
    app.state.config = config

    if config.telemetry.logfire:
        logfire.configure(service_name="jobarchive", send_to_logfire="if-token-present")
        logfire.instrument_fastapi(app)

    setup_dishka(create_container(config), app)

    for module in (health, jobs):
        app.include_router(module.router, prefix=API_PREFIX)

    app.add_exception_handler(JobArchiveError, _jobarchive_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unexpected_error)
    return app
