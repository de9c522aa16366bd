import pytest

from credstore.core.hooks import HookRegistry


@pytest.mark.asyncio
async def test_fire_runs_hooks_in_order():
    hooks = HookRegistry()
    calls = []

    async def second(ctx):
        calls.append(("second", ctx))

    hooks.register("ready", lambda ctx: calls.append(("first", ctx)))
    hooks.register("ready", second)

    await hooks.fire("ready", "ctx")
    assert calls == [("first", "ctx"), ("second", "ctx")]


@pytest.mark.asyncio
async def test_fire_unknown_name_is_noop():
    hooks = HookRegistry()
    await hooks.fire("nothing", None)
    assert hooks.registered("nothing") == []
