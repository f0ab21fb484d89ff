"""Handler-level authorization gates.

Gates are a coarse pre-filter evaluated before a handler runs (no record
loaded yet). Archive- and field-scoped checks happen inside the services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobarchive.domain.auth.model.principal import Principal


class Gate(ABC):
    @abstractmethod
    def evaluate(self, principal: "Principal") -> bool:
        """Return True if principal may invoke the handler at all."""
        ...


@dataclass(frozen=True)
class Authenticated(Gate):
    """Any resolved principal passes."""

    def evaluate(self, principal: "Principal") -> bool:
        return True


_AUTHENTICATED = Authenticated()


def authenticated() -> Authenticated:
    return _AUTHENTICATED
