from datetime import datetime
from zoneinfo import ZoneInfo

from jobarchive.domain.job.model.value import ArchiveId, IconState, JobId
from jobarchive.domain.shared.model.aggregate import Aggregate


class Job(Aggregate):
    """A job listing item inside a job archive."""

    id: JobId
    pid: ArchiveId
    title: str = ""
    date: datetime
    time: datetime
    published: bool = False
    last_modified: datetime

    @property
    def archive_id(self) -> ArchiveId:
        return self.pid

    @property
    def icon_state(self) -> IconState:
        return IconState.VISIBLE if self.published else IconState.INVISIBLE

    def label(self, datim_format: str, tz: ZoneInfo) -> str:
        """Listing label: the title (or id when untitled) followed by the formatted date."""
        name = self.title or str(self.id)
        return f"{name} [{self.date.astimezone(tz).strftime(datim_format)}]"

    def snapshot(self) -> dict:
        """Full field set as JSON-compatible data, as stored in version snapshots."""
        return self.model_dump(mode="json")
