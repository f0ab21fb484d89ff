"""Unit tests for Job, ToggleIntent and ToggleRequest."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from jobarchive.domain.job.model.aggregate import Job
from jobarchive.domain.job.model.toggle import ToggleIntent, ToggleRequest
from jobarchive.domain.job.model.value import ArchiveId, IconState, JobId
from jobarchive.domain.shared.error import ValidationError


def _make_job(**overrides) -> Job:
    fields = {
        "id": JobId(7),
        "pid": ArchiveId(10),
        "title": "Data Engineer",
        "date": datetime(2024, 3, 15, 9, 0, tzinfo=UTC),
        "time": datetime(1970, 1, 1, 9, 0, tzinfo=UTC),
        "published": False,
        "last_modified": datetime(2024, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return Job(**fields)


class TestJob:
    def test_archive_id_is_pid(self) -> None:
        assert _make_job().archive_id == 10

    def test_icon_state_follows_published(self) -> None:
        assert _make_job().icon_state is IconState.INVISIBLE
        assert _make_job(published=True).icon_state is IconState.VISIBLE

    def test_label_uses_title_and_formatted_date(self) -> None:
        label = _make_job().label("%d.%m.%Y %H:%M", ZoneInfo("Europe/Berlin"))

        assert label == "Data Engineer [15.03.2024 10:00]"

    def test_label_falls_back_to_id(self) -> None:
        assert _make_job(title="").label("%Y-%m-%d", UTC) == "7 [2024-03-15]"

    def test_snapshot_is_json_compatible(self) -> None:
        data = _make_job().snapshot()

        assert data["id"] == 7
        assert data["published"] is False
        assert isinstance(data["date"], str)


class TestToggleIntent:
    def test_params_for_publishing(self) -> None:
        intent = ToggleIntent(job_id=JobId(7), target=True, icon=IconState.INVISIBLE)

        assert intent.params == {"tid": "7", "state": "1"}


class TestToggleRequest:
    def test_round_trips_intent_params(self) -> None:
        intent = ToggleIntent(job_id=JobId(7), target=True, icon=IconState.INVISIBLE)

        request = ToggleRequest.from_params(intent.params)

        assert request == ToggleRequest(job_id=JobId(7), published=True)

    def test_empty_state_unpublishes(self) -> None:
        request = ToggleRequest.from_params({"tid": "7", "state": ""})

        assert request is not None
        assert request.published is False

    def test_no_tid_means_no_toggle(self) -> None:
        assert ToggleRequest.from_params({}) is None
        assert ToggleRequest.from_params({"tid": ""}) is None

    def test_non_numeric_tid_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ToggleRequest.from_params({"tid": "abc", "state": "1"})

        assert exc_info.value.field == "tid"
