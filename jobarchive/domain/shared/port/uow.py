from abc import abstractmethod
from typing import Protocol

from jobarchive.domain.shared.port import Port


class UnitOfWork(Port, Protocol):
    """Transaction boundary for one logical operation."""

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...
