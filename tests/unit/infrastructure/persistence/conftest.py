"""Fixtures for SQLite-backed repository tests."""

from datetime import UTC, datetime

import pytest_asyncio
from sqlalchemy import insert

from jobarchive.config import Config, DatabaseConfig
from jobarchive.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)
from jobarchive.infrastructure.persistence.tables import job_archives_table, jobs_table


@pytest_asyncio.fixture
async def engine():
    """Per-test in-memory database with the schema created."""
    config = Config(database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    engine = create_db_engine(config)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    """Session over two archives: jobs 1 and 2 in archive 10, job 3 in archive 20."""
    async with engine.begin() as conn:
        await conn.execute(
            insert(job_archives_table),
            [{"id": 10, "title": "Careers"}, {"id": 20, "title": "Internships"}],
        )
        await conn.execute(
            insert(jobs_table),
            [
                {
                    "id": job_id,
                    "pid": pid,
                    "title": f"Job {job_id}",
                    "date": datetime(2024, 3, 15, 14, 30, tzinfo=UTC),
                    "time": datetime(1970, 1, 1, 9, 0, tzinfo=UTC),
                    "published": published,
                    "tstamp": datetime(2024, 1, 1, tzinfo=UTC),
                }
                for job_id, pid, published in [(1, 10, False), (2, 10, True), (3, 20, False)]
            ],
        )

    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
