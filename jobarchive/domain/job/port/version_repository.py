from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol

from jobarchive.domain.job.model.version import VersionSnapshot
from jobarchive.domain.shared.port import Port


class VersionRepository(Port, Protocol):
    """Append-only store of record snapshots keyed by (entity_kind, record_id, revision)."""

    @abstractmethod
    async def append(self, entity_kind: str, record_id: int, data: dict[str, Any]) -> VersionSnapshot:
        """Insert a snapshot at the next revision (1 when none exist)."""
        ...

    @abstractmethod
    async def latest_revision(self, entity_kind: str, record_id: int) -> int:
        """Highest stored revision, 0 if there is none."""
        ...

    @abstractmethod
    async def list(self, entity_kind: str, record_id: int) -> list[VersionSnapshot]: ...
