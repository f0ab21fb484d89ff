from dishka import AsyncContainer, make_async_container

from jobarchive.config import Config
from jobarchive.domain.job.util.di import JobProvider
from jobarchive.infrastructure.persistence import PersistenceProvider
from jobarchive.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        JobProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
