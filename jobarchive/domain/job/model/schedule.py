"""Date/time canonicalization for the split date and time fields of a job.

A job stores its schedule twice: ``date`` carries the calendar day (and, once
reconciled, the time of day) and ``time`` carries only the time of day,
anchored to the epoch day. All functions are pure; ``tz`` is the calendar the
editor works in.
"""

from datetime import date as date_, datetime, time as time_
from zoneinfo import ZoneInfo

EPOCH_DAY = date_(1970, 1, 1)


def _local(value: datetime | None, tz: ZoneInfo) -> datetime:
    if value is None:
        return datetime.now(tz)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def _local_or_now(value: datetime | None, tz: ZoneInfo) -> datetime:
    # an unset field is stored as the zero instant
    local = _local(value, tz)
    return datetime.now(tz) if local.timestamp() == 0 else local


def _time_of_day(value: datetime) -> time_:
    return time_(value.hour, value.minute, value.second)


def normalize_to_day_start(value: datetime | None, tz: ZoneInfo) -> datetime:
    """Return 00:00:00 of the day ``value`` falls on (today if absent or zero)."""
    local = _local_or_now(value, tz)
    return datetime.combine(local.date(), time_.min, tzinfo=tz)


def normalize_to_time_of_day(value: datetime | None, tz: ZoneInfo) -> datetime:
    """Return ``value``'s hour/minute/second on the epoch day (now if absent or zero)."""
    local = _local_or_now(value, tz)
    return datetime.combine(EPOCH_DAY, _time_of_day(local), tzinfo=tz)


def reconcile(date: datetime, time: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Merge ``date``'s calendar day with ``time``'s time of day.

    Returns ``(new_date, new_time)`` where ``new_time`` is ``new_date``'s time
    of day on the epoch day, so the two always agree.
    """
    day = _local(date, tz).date()
    clock = _time_of_day(_local(time, tz))
    new_date = datetime.combine(day, clock, tzinfo=tz)
    new_time = datetime.combine(EPOCH_DAY, clock, tzinfo=tz)
    return new_date, new_time
