"""Schema for archives, jobs and their version snapshots. Portable across SQLite and PostgreSQL."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.types import JSON

metadata = MetaData()

# ============================================================================
# JOB ARCHIVES TABLE
# ============================================================================
job_archives_table = Table(
    "job_archives",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False, default=""),
)


# ============================================================================
# JOBS TABLE
# ============================================================================
jobs_table = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("pid", Integer, ForeignKey("job_archives.id"), nullable=False),  # owning archive
    Column("title", String(255), nullable=False, default=""),
    Column("date", DateTime(timezone=True), nullable=False),
    Column("time", DateTime(timezone=True), nullable=False),  # time of day on 1970-01-01
    Column("published", Boolean, nullable=False, default=False),
    Column("tstamp", DateTime(timezone=True), nullable=False),  # last modification
)

Index("idx_jobs_pid", jobs_table.c.pid)


# ============================================================================
# JOB VERSIONS TABLE (append-only snapshots)
# ============================================================================
job_versions_table = Table(
    "job_versions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_kind", String(64), nullable=False),
    Column("record_id", Integer, nullable=False),
    Column("revision", Integer, nullable=False),
    Column("data", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("entity_kind", "record_id", "revision", name="uq_job_versions_revision"),
)
