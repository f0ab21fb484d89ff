"""Per-request dishka containers opened at the UOW scope."""

from dishka import AsyncContainer
from fastapi import FastAPI
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from jobarchive.util.di.scope import Scope as DiScope


class ContainerMiddleware:
    """Opens a UOW child container around every HTTP request.

    dishka's stock starlette middleware enters ``dishka.Scope.REQUEST``; the
    providers here are registered under ``DiScope.UOW`` instead.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive, send=send)
        root: AsyncContainer = request.app.state.dishka_container
        async with root({Request: request}, scope=DiScope.UOW) as uow_container:
            request.state.dishka_container = uow_container
            await self.app(scope, receive, send)


def setup_dishka(container: AsyncContainer, app: FastAPI) -> None:
    app.state.dishka_container = container
    app.add_middleware(ContainerMiddleware)
