from enum import StrEnum
from typing import NewType

JobId = NewType("JobId", int)
ArchiveId = NewType("ArchiveId", int)

# Auto-increment ids start at 1, so 0 never names a stored archive.
NO_ARCHIVE = ArchiveId(0)

JOB_KIND = "job"
PUBLISHED_FIELD = "published"


class IconState(StrEnum):
    """Visibility icon shown next to a job in a listing."""

    VISIBLE = "visible"
    INVISIBLE = "invisible"
