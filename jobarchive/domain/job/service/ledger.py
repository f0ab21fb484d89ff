"""Best-effort audit snapshots around record mutations."""

import logging
from collections import Counter
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from jobarchive.domain.job.model.version import VersionSnapshot
from jobarchive.domain.job.port.version_repository import VersionRepository
from jobarchive.domain.shared.error import VersionStoreError
from jobarchive.domain.shared.port import Port
from jobarchive.domain.shared.service import Service

logger = logging.getLogger(__name__)


class SnapshotSource(Port, Protocol):
    async def snapshot(self, record_id: int) -> dict[str, Any] | None: ...


@dataclass
class VersionBracket:
    """Handle yielded by VersionLedger.track(); the workflow marks it once it has written."""

    mutated: bool = False
    snapshot: VersionSnapshot | None = None

    def mark_mutated(self) -> None:
        self.mutated = True


class VersionLedger(Service):
    """Appends one snapshot per committed mutation.

    ``initialize`` opens tracking for a record and ``commit`` closes it by
    appending the record's state as read at commit time. A commit without a
    matching initialize is a logged no-op: auditing never decides whether a
    mutation succeeds.
    """

    versions: VersionRepository
    sources: Mapping[str, SnapshotSource]
    _open: Counter = field(default_factory=Counter, init=False, repr=False)

    def initialize(self, entity_kind: str, record_id: int) -> None:
        self._open[(entity_kind, record_id)] += 1

    def discard(self, entity_kind: str, record_id: int) -> None:
        """Close tracking without writing a snapshot."""
        self._release((entity_kind, record_id))

    async def commit(self, entity_kind: str, record_id: int) -> VersionSnapshot | None:
        if not self._release((entity_kind, record_id)):
            logger.warning(
                "Version commit without initialize ignored: %s %s", entity_kind, record_id
            )
            return None

        source = self.sources.get(entity_kind)
        if source is None:
            logger.warning("No snapshot source for entity kind %r", entity_kind)
            return None

        data = await source.snapshot(record_id)
        if data is None:
            logger.warning("Record %s %s vanished before snapshot", entity_kind, record_id)
            return None

        snapshot = await self.versions.append(entity_kind, record_id, data)
        logger.debug(
            "Version %d stored for %s %s", snapshot.revision, entity_kind, record_id
        )
        return snapshot

    @asynccontextmanager
    async def track(self, entity_kind: str, record_id: int) -> AsyncIterator[VersionBracket]:
        """Bracket a mutation: the snapshot is committed on exit, even when the body raises.

        Nothing is written unless the body called ``mark_mutated()``. A failing
        snapshot write is logged and does not replace the body's outcome.
        """
        self.initialize(entity_kind, record_id)
        bracket = VersionBracket()
        try:
            yield bracket
        finally:
            if bracket.mutated:
                try:
                    bracket.snapshot = await self.commit(entity_kind, record_id)
                except VersionStoreError:
                    logger.exception(
                        "Snapshot of %s %s failed; mutation kept", entity_kind, record_id
                    )
            else:
                self.discard(entity_kind, record_id)

    async def history(self, entity_kind: str, record_id: int) -> list[VersionSnapshot]:
        return await self.versions.list(entity_kind, record_id)

    def _release(self, key: tuple[str, int]) -> bool:
        if self._open[key] <= 0:
            return False
        self._open[key] -= 1
        if not self._open[key]:
            del self._open[key]
        return True
