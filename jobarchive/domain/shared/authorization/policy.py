"""Archive-scoped authorization for backend commands.

Contains the Decision type, the default operation table and the policy service.
This is the single source of truth for "who may run which command on which
archive or record".
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.value import ArchiveId, JobId
from jobarchive.domain.shared.authorization.operation import Operation, TargetScope
from jobarchive.domain.shared.error import (
    AuthorizationDeniedError,
    ConfigurationError,
    FieldPermissionError,
    RecordNotFoundError,
    UnrecognizedOperationError,
)
from jobarchive.domain.shared.port import Port
from jobarchive.domain.shared.service import Service

logger = logging.getLogger(__name__)


class Denial(StrEnum):
    INSUFFICIENT_ARCHIVE_PERMISSION = "insufficient archive permission"
    RECORD_NOT_FOUND = "record not found"
    UNRECOGNIZED_OPERATION = "unrecognized operation"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check. Truthy when allowed."""

    allowed: bool
    reason: Denial | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(True)

    @classmethod
    def deny(cls, reason: Denial) -> Decision:
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed

    def __repr__(self) -> str:
        return "Allow" if self.allowed else f"Deny({self.reason!s})"


class ArchiveResolver(Port, Protocol):
    """Resolves a record to the archive that owns it."""

    @abstractmethod
    async def get_archive_id(self, job_id: JobId) -> ArchiveId | None: ...


DEFAULT_RULES: Mapping[Operation, TargetScope] = {
    Operation.PASTE: TargetScope.ANY,
    Operation.CREATE: TargetScope.ARCHIVE,
    Operation.EDIT: TargetScope.RECORD,
    Operation.DELETE: TargetScope.RECORD,
    Operation.SHOW: TargetScope.RECORD,
    Operation.TOGGLE: TargetScope.RECORD,
    Operation.DUPLICATE: TargetScope.RECORD,
    Operation.CUT: TargetScope.RECORD,
    Operation.COPY: TargetScope.RECORD,
    Operation.FEATURE: TargetScope.RECORD,
    Operation.SELECT: TargetScope.CONTAINER,
    Operation.EDIT_ALL: TargetScope.CONTAINER,
    Operation.DELETE_ALL: TargetScope.CONTAINER,
    Operation.OVERRIDE_ALL: TargetScope.CONTAINER,
    Operation.CUT_ALL: TargetScope.CONTAINER,
    Operation.COPY_ALL: TargetScope.CONTAINER,
    Operation.LIST: TargetScope.CONTAINER,
}


class AccessPolicy(Service):
    """Decides whether a principal may run an operation against a target id.

    Administrators are allowed everything. Everyone else is checked against
    ``Principal.archive_scope``; for single-record operations the record's
    owning archive is looked up first.
    """

    resolver: ArchiveResolver
    rules: Mapping[Operation, TargetScope] = field(default_factory=lambda: dict(DEFAULT_RULES))

    async def decide(
        self,
        principal: Principal,
        operation: Operation,
        target: int | None,
    ) -> Decision:
        """Pure decision; never raises for a denial."""
        if principal.is_admin:
            return self._log(principal, operation, target, Decision.allow())

        scope = self.rules.get(operation)
        if scope is None:
            decision = Decision.deny(Denial.UNRECOGNIZED_OPERATION)
        elif scope is TargetScope.ANY:
            decision = Decision.allow()
        elif scope is TargetScope.RECORD:
            decision = await self._decide_record(principal, target)
        else:
            decision = self._decide_archive(principal, target)
        return self._log(principal, operation, target, decision)

    async def decide_command(
        self,
        principal: Principal,
        name: str | None,
        target: int | None,
    ) -> Decision:
        """String-level entry for the command surface."""
        try:
            operation = Operation.parse(name)
        except UnrecognizedOperationError:
            logger.warning(
                "Authorization denied: principal=%s command=%r (unrecognized)",
                principal.user_id,
                name,
            )
            return Decision.deny(Denial.UNRECOGNIZED_OPERATION)
        return await self.decide(principal, operation, target)

    async def guard(
        self,
        principal: Principal,
        operation: Operation,
        target: int | None,
    ) -> None:
        """Raise if the principal may not run ``operation`` on ``target``.

        Record-not-found and unrecognized-operation denials raise their own
        error types so the boundary can tell them apart from a plain denial.
        """
        decision = await self.decide(principal, operation, target)
        if decision:
            return
        if decision.reason is Denial.RECORD_NOT_FOUND:
            raise RecordNotFoundError(target)
        if decision.reason is Denial.UNRECOGNIZED_OPERATION:
            raise UnrecognizedOperationError(str(operation))
        raise AuthorizationDeniedError(str(operation), target, str(decision.reason))

    def may_edit_field(self, principal: Principal, kind: str, field_name: str) -> bool:
        return principal.has_field(kind, field_name)

    def guard_field(self, principal: Principal, kind: str, field_name: str, target: int) -> None:
        """Field-level check, narrower than the record-level one."""
        if self.may_edit_field(principal, kind, field_name):
            return
        logger.warning(
            "Field access denied: principal=%s field=%s.%s target=%s",
            principal.user_id,
            kind,
            field_name,
            target,
        )
        raise FieldPermissionError(kind, field_name, target)

    def validate_coverage(self) -> None:
        """Startup check: every Operation member must have a rule."""
        missing = set(Operation) - set(self.rules)
        if missing:
            raise ConfigurationError(f"Operations without access rules: {sorted(missing)}")

    async def _decide_record(self, principal: Principal, target: int | None) -> Decision:
        if target is None:
            return Decision.deny(Denial.RECORD_NOT_FOUND)
        archive_id = await self.resolver.get_archive_id(JobId(target))
        if archive_id is None:
            return Decision.deny(Denial.RECORD_NOT_FOUND)
        if not principal.may_access_archive(archive_id):
            return Decision.deny(Denial.INSUFFICIENT_ARCHIVE_PERMISSION)
        return Decision.allow()

    def _decide_archive(self, principal: Principal, target: int | None) -> Decision:
        archive_id = ArchiveId(target) if target is not None else None
        if not principal.may_access_archive(archive_id):
            return Decision.deny(Denial.INSUFFICIENT_ARCHIVE_PERMISSION)
        return Decision.allow()

    def _log(
        self,
        principal: Principal,
        operation: Operation,
        target: int | None,
        decision: Decision,
    ) -> Decision:
        if decision:
            logger.info(
                "Authorization allowed: principal=%s operation=%s target=%s",
                principal.user_id,
                operation,
                target,
            )
        else:
            logger.warning(
                "Authorization denied: principal=%s operation=%s target=%s reason=%s",
                principal.user_id,
                operation,
                target,
                decision.reason,
            )
        return decision
