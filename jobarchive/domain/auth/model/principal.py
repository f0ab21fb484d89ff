"""The acting backend user with archive and field grants, resolved per-request."""

from dataclasses import dataclass, field

from jobarchive.domain.job.model.value import NO_ARCHIVE, ArchiveId


@dataclass(frozen=True)
class Principal:
    """The authenticated identity of the current requester.

    Resolved per-request from the bearer token. Immutable after creation.
    ``archive_ids`` lists the archives the principal may work in and
    ``allowed_fields`` holds ``"<kind>.<field>"`` grants for field-level
    permissions. Administrators bypass both.
    """

    user_id: str
    is_admin: bool = False
    archive_ids: frozenset[ArchiveId] = field(default_factory=frozenset)
    allowed_fields: frozenset[str] = field(default_factory=frozenset)

    @property
    def archive_scope(self) -> frozenset[ArchiveId]:
        """Permitted archives; an empty grant collapses to a set matching no real archive."""
        return self.archive_ids or frozenset({NO_ARCHIVE})

    def may_access_archive(self, archive_id: ArchiveId | None) -> bool:
        if self.is_admin:
            return True
        return archive_id is not None and archive_id in self.archive_scope

    def has_field(self, kind: str, field_name: str) -> bool:
        return self.is_admin or f"{kind}.{field_name}" in self.allowed_fields
