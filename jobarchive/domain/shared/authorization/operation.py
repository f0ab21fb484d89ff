"""Operations subject to archive-scoped access control."""

from enum import StrEnum

from jobarchive.domain.shared.error import UnrecognizedOperationError


class Operation(StrEnum):
    """Closed set of backend commands; values are the command names used at the boundary."""

    # No explicit command: browsing an archive's listing
    LIST = "list"

    # Always allowed
    PASTE = "paste"

    # Archive-targeted
    CREATE = "create"

    # Single-record
    EDIT = "edit"
    DELETE = "delete"
    SHOW = "show"
    TOGGLE = "toggle"
    DUPLICATE = "duplicate"
    CUT = "cut"
    COPY = "copy"
    FEATURE = "feature"

    # Bulk, targeted at the containing archive
    SELECT = "select"
    EDIT_ALL = "editAll"
    DELETE_ALL = "deleteAll"
    OVERRIDE_ALL = "overrideAll"
    CUT_ALL = "cutAll"
    COPY_ALL = "copyAll"

    @classmethod
    def parse(cls, name: str | None) -> "Operation":
        """Map a command name to an Operation; empty means LIST.

        Raises UnrecognizedOperationError for any other unknown name.
        """
        if not name:
            return cls.LIST
        try:
            return cls(name)
        except ValueError:
            raise UnrecognizedOperationError(name) from None


class TargetScope(StrEnum):
    """What an operation's target id refers to and how it is checked."""

    ANY = "any"  # no check
    ARCHIVE = "archive"  # target is the archive a new record goes into
    RECORD = "record"  # target is a record; its owning archive is checked
    CONTAINER = "container"  # target is the archive being browsed or bulk-edited
