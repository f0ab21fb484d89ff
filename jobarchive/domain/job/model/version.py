from datetime import datetime
from typing import Any

from pydantic import Field

from jobarchive.domain.shared.model.value import ValueObject


class VersionSnapshot(ValueObject):
    """Immutable copy of a record's fields at one revision.

    Revisions start at 1 and grow by one per committed mutation.
    """

    entity_kind: str
    record_id: int
    revision: int = Field(ge=1)
    data: dict[str, Any]
    created_at: datetime
