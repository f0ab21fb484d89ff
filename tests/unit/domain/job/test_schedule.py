"""Unit tests for date/time canonicalization of job schedules."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from jobarchive.domain.job.model.schedule import (
    EPOCH_DAY,
    normalize_to_day_start,
    normalize_to_time_of_day,
    reconcile,
)

BERLIN = ZoneInfo("Europe/Berlin")


class TestNormalizeToDayStart:
    def test_truncates_to_midnight(self) -> None:
        value = datetime(2024, 3, 15, 14, 30, 12, tzinfo=UTC)

        result = normalize_to_day_start(value, UTC)

        assert result == datetime(2024, 3, 15, tzinfo=UTC)

    def test_uses_calendar_day_of_configured_zone(self) -> None:
        # 23:30 UTC is already the next day in Berlin
        value = datetime(2024, 3, 15, 23, 30, tzinfo=UTC)

        result = normalize_to_day_start(value, BERLIN)

        assert result == datetime(2024, 3, 16, tzinfo=BERLIN)

    def test_naive_value_is_taken_as_local(self) -> None:
        result = normalize_to_day_start(datetime(2024, 3, 15, 1, 0), BERLIN)

        assert result == datetime(2024, 3, 15, tzinfo=BERLIN)

    def test_absent_value_defaults_to_today(self) -> None:
        result = normalize_to_day_start(None, UTC)

        assert result.date() == datetime.now(UTC).date()
        assert (result.hour, result.minute, result.second) == (0, 0, 0)

    def test_zero_instant_defaults_to_today(self) -> None:
        result = normalize_to_day_start(datetime(1970, 1, 1, tzinfo=UTC), UTC)

        assert result.date() == datetime.now(UTC).date()
        assert (result.hour, result.minute, result.second) == (0, 0, 0)


class TestNormalizeToTimeOfDay:
    def test_moves_clock_to_epoch_day(self) -> None:
        value = datetime(2024, 3, 15, 14, 30, 12, tzinfo=UTC)

        result = normalize_to_time_of_day(value, UTC)

        assert result == datetime(1970, 1, 1, 14, 30, 12, tzinfo=UTC)

    def test_drops_microseconds(self) -> None:
        value = datetime(2024, 3, 15, 14, 30, 12, 999_999, tzinfo=UTC)

        assert normalize_to_time_of_day(value, UTC).microsecond == 0

    def test_absent_value_defaults_to_now(self) -> None:
        result = normalize_to_time_of_day(None, UTC)

        assert result.date() == EPOCH_DAY

    def test_zero_instant_defaults_to_now(self) -> None:
        before = datetime.now(BERLIN).replace(microsecond=0)
        result = normalize_to_time_of_day(datetime(1970, 1, 1, tzinfo=UTC), BERLIN)
        after = datetime.now(BERLIN)

        assert result.date() == EPOCH_DAY
        assert before.time() <= result.time() <= after.time()


class TestReconcile:
    def test_merges_day_of_date_with_clock_of_time(self) -> None:
        date = datetime(2024, 3, 15, 14, 30, tzinfo=UTC)
        time = datetime(1970, 1, 1, 9, 0, tzinfo=UTC)

        new_date, new_time = reconcile(date, time, UTC)

        assert new_date == datetime(2024, 3, 15, 9, 0, tzinfo=UTC)
        assert new_time == datetime(1970, 1, 1, 9, 0, tzinfo=UTC)

    def test_time_always_mirrors_date_clock(self) -> None:
        date = datetime(2024, 7, 1, 0, 0, tzinfo=BERLIN)
        time = datetime(1970, 1, 1, 17, 45, 30, tzinfo=BERLIN)

        new_date, new_time = reconcile(date, time, BERLIN)

        assert new_time.date() == EPOCH_DAY
        assert (new_date.hour, new_date.minute, new_date.second) == (17, 45, 30)
        assert (new_time.hour, new_time.minute, new_time.second) == (17, 45, 30)

    def test_is_idempotent(self) -> None:
        date = datetime(2024, 3, 15, 14, 30, tzinfo=UTC)
        time = datetime(1970, 1, 1, 9, 0, tzinfo=UTC)

        once = reconcile(date, time, UTC)
        twice = reconcile(*once, UTC)

        assert once == twice
