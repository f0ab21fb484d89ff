"""Commands, results and gated handlers.

Every concrete handler declares an ``__auth__`` gate and a ``principal``
field. The gate is checked before ``run`` executes; archive- and field-level
checks come later, inside the services the handler calls.
"""

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from functools import wraps
from typing import Any, Generic, TypeVar, dataclass_transform

from pydantic import BaseModel

from jobarchive.domain.shared.error import AuthorizationError, ConfigurationError


class Command(BaseModel): ...


class Result(BaseModel): ...


CommandT = TypeVar("CommandT", bound=Command)
ResultT = TypeVar("ResultT", bound=Result)


def _gated(run: Any) -> Any:
    @wraps(run)
    async def gated_run(handler: "CommandHandler", cmd: Command) -> Result:
        handler.check_gate()
        return await run(handler, cmd)

    return gated_run


@dataclass_transform()
class _HandlerMeta(ABCMeta):
    """Makes each handler subclass a dataclass and gates its own ``run``."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        handler_cls = super().__new__(mcs, name, bases, namespace)
        if not any(isinstance(base, mcs) for base in bases):
            return handler_cls

        handler_cls = dataclass(handler_cls)
        if "run" in namespace:
            handler_cls.run = _gated(namespace["run"])
        return handler_cls


class CommandHandler(Generic[CommandT, ResultT], metaclass=_HandlerMeta):
    """Base for command handlers.

        class ToggleVisibilityHandler(CommandHandler[ToggleVisibility, ToggleVisibilityResult]):
            __auth__ = authenticated()
            workflow: ToggleWorkflow
            principal: Principal | None = None
    """

    def check_gate(self) -> None:
        gate = getattr(type(self), "__auth__", None)
        if gate is None:
            raise ConfigurationError(f"{type(self).__name__} declares no __auth__ gate")

        principal = getattr(self, "principal", None)
        if principal is None:
            raise AuthorizationError("Authentication required", code="missing_token")
        if not gate.evaluate(principal):
            raise AuthorizationError(
                f"{principal.user_id} may not run {type(self).__name__}",
                code="access_denied",
            )

    @abstractmethod
    async def run(self, cmd: CommandT) -> ResultT: ...
