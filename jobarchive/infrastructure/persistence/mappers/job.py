"""Job mapper - converts between domain and persistence."""

from datetime import UTC, datetime
from typing import Any

from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.value import ArchiveId, JobId
from jobarchive.domain.job.model.version import VersionSnapshot


def to_utc(value: datetime) -> datetime:
    """Normalize for storage. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _read_datetime(value: datetime | str) -> datetime:
    # SQLite hands back naive datetimes (or strings from raw SQL)
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return to_utc(value)


def row_to_job(row: dict[str, Any]) -> Job:
    """Convert database row to Job aggregate."""
    return Job(
        id=JobId(row["id"]),
        pid=ArchiveId(row["pid"]),
        title=row.get("title") or "",
        date=_read_datetime(row["date"]),
        time=_read_datetime(row["time"]),
        published=bool(row["published"]),
        last_modified=_read_datetime(row["tstamp"]),
    )


def row_to_snapshot(row: dict[str, Any]) -> VersionSnapshot:
    return VersionSnapshot(
        entity_kind=row["entity_kind"],
        record_id=row["record_id"],
        revision=row["revision"],
        data=row["data"],
        created_at=_read_datetime(row["created_at"]),
    )
