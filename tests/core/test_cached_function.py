from __future__ import annotations

import asyncio

import pytest

from cacheasync import (
    CacheFactory,
    CacheOptionsError,
    MissingValueError,
    ObservableEntryStore,
)


def run_async(coro):
    return asyncio.run(coro)


def test_wrapper_preserves_producer_metadata():
    async def load_profile(user_id: int) -> dict:
        """Load one profile."""
        return {"id": user_id}

    fn = CacheFactory().cache_async(load_profile)

    assert fn.__name__ == "load_profile"
    assert fn.__doc__ == "Load one profile."
    assert fn.__wrapped__ is load_profile
    assert fn.name.endswith("load_profile")
    assert "inmemory" in repr(fn)


def test_explicit_name_is_used_for_labels():
    async def produce() -> int:
        return 1

    fn = CacheFactory().cache_async(produce, name="profiles")
    assert fn.name == "profiles"


def test_set_seeds_entry_without_calling_producer():
    async def scenario() -> None:
        calls: list[str] = []

        async def produce(key: str) -> str:
            calls.append(key)
            return f"loaded-{key}"

        fn = CacheFactory().cache_async(produce, resolver=lambda key: key)
        seeded = fn.set("seeded", "a")
        assert seeded.done()
        assert fn.is_fresh("a") is True
        assert fn.get("a") == "seeded"
        assert await fn("a") == "seeded"
        assert calls == []

    run_async(scenario())


def test_set_without_value_installs_expired_rejection():
    async def scenario() -> None:
        async def produce() -> str:
            return "loaded"

        fn = CacheFactory().cache_async(produce)
        ctx = fn.get_context()
        rejected = ctx.set()

        assert isinstance(rejected.exception(), MissingValueError)
        assert ctx.is_settled() is True
        assert ctx.is_fresh() is False
        assert ctx.get() is None
        assert await fn() == "loaded"

    run_async(scenario())


def test_set_with_explicit_ttl_and_invalid_ttl():
    async def scenario() -> None:
        now = [0.0]

        async def produce() -> str:
            return "loaded"

        fn = CacheFactory(clock=lambda: now[0]).cache_async(produce)
        ctx = fn.get_context()
        ctx.set("short", ttl=10)
        assert ctx.is_fresh() is True
        now[0] = 10.0
        assert ctx.is_fresh() is False
        assert ctx.get() == "short"

        with pytest.raises(CacheOptionsError):
            ctx.set("bad", ttl=-5)
        with pytest.raises(CacheOptionsError):
            ctx.set("bad", ttl=float("nan"))
        with pytest.raises(CacheOptionsError):
            ctx.set("bad", ttl=float("inf"))
        assert ctx.get() == "short"

    run_async(scenario())


def test_facade_set_accepts_keyword_ttl():
    async def scenario() -> None:
        now = [0.0]

        async def produce(key: str) -> str:
            return f"loaded-{key}"

        fn = CacheFactory(clock=lambda: now[0]).cache_async(produce, resolver=lambda key: key)
        seeded = fn.set("v", "a", ttl=10)
        assert await seeded == "v"
        assert fn.store.get("a").expire_at == 10.0
        assert fn.is_fresh("a") is True

        now[0] = 10.0
        assert fn.is_fresh("a") is False
        assert fn.get("a") == "v"
        assert await fn("a") == "loaded-a"

        fn.set("forever", "b")
        assert fn.store.get("b").expire_at == -1

    run_async(scenario())


def test_context_binds_arguments_and_key_once():
    async def scenario() -> None:
        resolved: list[tuple] = []
        produced: list[tuple] = []

        def resolver(region: str, *, day: int) -> tuple[str, int]:
            resolved.append((region, day))
            return region, day

        async def produce(region: str, *, day: int) -> str:
            produced.append((region, day))
            return f"{region}:{day}"

        fn = CacheFactory().cache_async(produce, resolver=resolver)
        ctx = fn.get_context("eu", day=3)
        assert (ctx.group, ctx.key) == ("eu", "3")

        assert await ctx() == "eu:3"
        assert ctx.get() == "eu:3"
        assert ctx.is_fresh() is True
        assert ctx.is_settled() is True
        assert await ctx.reload() == "eu:3"
        ctx.delete()
        assert ctx.get() is None

        assert resolved == [("eu", 3)]
        assert produced == [("eu", 3), ("eu", 3)]
        assert fn.get("eu", day=3) is None

    run_async(scenario())


def test_reload_always_invokes_producer():
    async def scenario() -> None:
        counter: list[int] = []

        async def produce() -> int:
            counter.append(1)
            return len(counter)

        fn = CacheFactory().cache_async(produce)
        assert await fn() == 1
        assert fn.is_fresh() is True
        assert await fn.reload() == 2
        assert await fn() == 2
        assert len(counter) == 2

    run_async(scenario())


def test_delete_uses_group_only():
    async def scenario() -> None:
        async def produce(group: str, version: int) -> str:
            return f"{group}-{version}"

        fn = CacheFactory().cache_async(produce, resolver=lambda group, version: (group, version))
        await fn("a", 1)
        await fn("b", 1)

        fn.delete("a", 99)
        assert fn.store.get("a") is None
        assert fn.get("b", 1) == "b-1"

        fn.clear()
        assert fn.store.get("b") is None

    run_async(scenario())


def test_resolver_errors_reach_every_operation():
    def resolver(value: int) -> str:
        if value < 0:
            raise ValueError("negative key")
        return str(value)

    async def produce(value: int) -> int:
        return value

    fn = CacheFactory().cache_async(produce, resolver=resolver)
    for operation in (fn.get, fn.is_fresh, fn.is_settled, fn.delete, fn.get_context):
        with pytest.raises(ValueError, match="negative key"):
            operation(-1)


def test_producer_returning_plain_awaitable():
    async def scenario() -> None:
        loop = asyncio.get_running_loop()

        def produce() -> asyncio.Future[str]:
            future = loop.create_future()
            loop.call_soon(future.set_result, "from-future")
            return future

        fn = CacheFactory().cache_async(produce)
        assert await fn() == "from-future"
        assert fn.is_fresh() is True

    run_async(scenario())


def test_observable_store_sees_every_transition():
    async def scenario() -> None:
        async def produce() -> str:
            return "value"

        fn = CacheFactory("observable").cache_async(produce)
        assert isinstance(fn.store, ObservableEntryStore)
        states: list[bool | None] = []

        def record(group: str | None) -> None:
            entry = fn.store.get(group) if group is not None else None
            states.append(None if entry is None else entry.settled)

        fn.store.subscribe(record)
        await fn()
        fn.delete()
        assert states == [False, True, None]

    run_async(scenario())
