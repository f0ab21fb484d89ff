"""Unit tests for HookRegistry ordering and field transforms."""

from typing import Any

import pytest

from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.shared.model.hook import (
    FieldHook,
    Hook,
    HookContext,
    HookPhase,
    HookRegistry,
)


class RecordingHook:
    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log

    async def apply(self, context: HookContext) -> HookContext:
        self.log.append(self.name)
        context.extra[self.name] = True
        return context


class NegateField:
    async def apply(self, value: Any, context: HookContext) -> Any:
        return not value


def _context(kind: str = "job") -> HookContext:
    return HookContext(entity_kind=kind, record_id=1, principal=Principal(user_id="u1"))


class TestHookRegistry:
    @pytest.mark.asyncio
    async def test_runs_hooks_in_registration_order(self) -> None:
        log: list[str] = []
        registry = HookRegistry()
        registry.register("job", HookPhase.LOAD, RecordingHook("first", log))
        registry.register("job", HookPhase.LOAD, RecordingHook("second", log))

        context = await registry.run(HookPhase.LOAD, _context())

        assert log == ["first", "second"]
        assert context.extra == {"first": True, "second": True}

    @pytest.mark.asyncio
    async def test_hooks_are_scoped_by_kind_and_phase(self) -> None:
        log: list[str] = []
        registry = HookRegistry()
        registry.register("job", HookPhase.SUBMIT, RecordingHook("submit", log))
        registry.register("news", HookPhase.LOAD, RecordingHook("news", log))

        await registry.run(HookPhase.LOAD, _context("job"))

        assert log == []

    @pytest.mark.asyncio
    async def test_field_hooks_transform_value(self) -> None:
        registry = HookRegistry()
        registry.register_field("job", "published", NegateField())

        assert await registry.run_field("published", True, _context()) is False
        assert await registry.run_field("title", "kept", _context()) == "kept"

    def test_field_phase_requires_register_field(self) -> None:
        registry = HookRegistry()

        with pytest.raises(ValueError):
            registry.register("job", HookPhase.FIELD_SAVE, RecordingHook("x", []))

    def test_hooks_satisfy_protocols(self) -> None:
        assert isinstance(RecordingHook("x", []), Hook)
        assert isinstance(NegateField(), FieldHook)

    @pytest.mark.asyncio
    async def test_hook_errors_propagate(self) -> None:
        class Boom:
            async def apply(self, context: HookContext) -> HookContext:
                raise RuntimeError("boom")

        registry = HookRegistry()
        registry.register("job", HookPhase.LOAD, Boom())

        with pytest.raises(RuntimeError, match="boom"):
            await registry.run(HookPhase.LOAD, _context())
