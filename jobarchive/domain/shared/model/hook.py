"""Typed hook registry for record workflows.

Hooks are registered explicitly per entity kind and phase and run in
registration order:

- LOAD: before the mutation, ``apply(context) -> context``
- FIELD_SAVE: per field, ``apply(value, context) -> value``; may transform the value being saved
- SUBMIT: after the mutation, ``apply(context) -> context``

Hook exceptions are not caught here.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from jobarchive.domain.auth.model.principal import Principal


class HookPhase(StrEnum):
    LOAD = "load"
    FIELD_SAVE = "field_save"
    SUBMIT = "submit"


@dataclass
class HookContext:
    """Mutable context handed from hook to hook during one workflow run.

    ``record`` is the active record, refreshed after the mutation so SUBMIT
    hooks see the written state. ``hint`` is an opaque caller-supplied value.
    """

    entity_kind: str
    record_id: int
    principal: "Principal"
    record: Any = None
    hint: Any = None
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Hook(Protocol):
    async def apply(self, context: HookContext) -> HookContext: ...


@runtime_checkable
class FieldHook(Protocol):
    async def apply(self, value: Any, context: HookContext) -> Any: ...


class HookRegistry:
    """Ordered hook lists keyed by entity kind (and field name for FIELD_SAVE)."""

    def __init__(self) -> None:
        self._hooks: dict[tuple[str, HookPhase], list[Hook]] = defaultdict(list)
        self._field_hooks: dict[tuple[str, str], list[FieldHook]] = defaultdict(list)

    def register(self, entity_kind: str, phase: HookPhase, hook: Hook) -> None:
        if phase is HookPhase.FIELD_SAVE:
            raise ValueError("Field hooks are registered with register_field()")
        self._hooks[(entity_kind, phase)].append(hook)

    def register_field(self, entity_kind: str, field_name: str, hook: FieldHook) -> None:
        self._field_hooks[(entity_kind, field_name)].append(hook)

    def hooks(self, entity_kind: str, phase: HookPhase) -> list[Hook]:
        return list(self._hooks.get((entity_kind, phase), ()))

    def field_hooks(self, entity_kind: str, field_name: str) -> list[FieldHook]:
        return list(self._field_hooks.get((entity_kind, field_name), ()))

    async def run(self, phase: HookPhase, context: HookContext) -> HookContext:
        for hook in self.hooks(context.entity_kind, phase):
            context = await hook.apply(context)
        return context

    async def run_field(self, field_name: str, value: Any, context: HookContext) -> Any:
        for hook in self.field_hooks(context.entity_kind, field_name):
            value = await hook.apply(value, context)
        return value
