from typing import AsyncIterable

from dishka import Provider, from_context, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.requests import Request

from jobarchive.config import Config
from jobarchive.domain.job.port.repository import JobRepository
from jobarchive.domain.job.port.version_repository import VersionRepository
from jobarchive.domain.shared.port.uow import UnitOfWork
from jobarchive.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from jobarchive.infrastructure.persistence.repository.job import SqlAlchemyJobRepository
from jobarchive.infrastructure.persistence.repository.version import (
    SqlAlchemyVersionRepository,
)
from jobarchive.infrastructure.persistence.uow import SqlAlchemyUnitOfWork
from jobarchive.util.di.scope import Scope


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)
    request = from_context(provides=Request, scope=Scope.UOW)

    # process-wide
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # one session per request, committed on clean exit
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    uow = provide(SqlAlchemyUnitOfWork, scope=Scope.UOW, provides=UnitOfWork)
    job_repo = provide(SqlAlchemyJobRepository, scope=Scope.UOW, provides=JobRepository)
    version_repo = provide(
        SqlAlchemyVersionRepository, scope=Scope.UOW, provides=VersionRepository
    )
