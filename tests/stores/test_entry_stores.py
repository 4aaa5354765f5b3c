from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

import pytest

from cacheasync import (
    CacheEntry,
    EntryStore,
    EntryStoreError,
    InMemoryEntryStore,
    ObservableEntryStore,
    SharedResult,
    create_entry_store,
    list_entry_store_backends,
    register_entry_store_backend,
)
from cacheasync.stores import resolve_store_factory


def run_async(coro):
    return asyncio.run(coro)


def _entry(key: str, token: int = 1) -> CacheEntry[str]:
    async def build() -> CacheEntry[str]:
        promise = asyncio.get_running_loop().create_future()
        promise.set_result(key)
        return CacheEntry(
            key=key,
            promise=promise,
            handle=SharedResult(promise),
            settled=True,
            expire_at=-1,
            token=token,
            value=key,
        )

    return run_async(build())


def test_in_memory_store_set_get_and_clear():
    store = InMemoryEntryStore[str]()
    entry = _entry("a")

    store.set("g", entry)
    assert store.get("g") is entry
    assert "g" in store

    store.set("g")
    assert store.get("g") is None

    store.set("g1", entry)
    store.set("g2", entry)
    assert len(store) == 2
    store.clear()
    assert len(store) == 0


def test_bundled_stores_satisfy_protocol():
    assert isinstance(InMemoryEntryStore(), EntryStore)
    assert isinstance(ObservableEntryStore(), EntryStore)


def test_observable_store_replaces_snapshot_and_notifies():
    store = ObservableEntryStore[str]()
    seen: list[str | None] = []
    unsubscribe = store.subscribe(seen.append)

    before = store.entries
    store.set("g", _entry("a"))
    after = store.entries

    assert "g" not in before
    assert after["g"].key == "a"

    store.set("g")
    store.set("missing")
    store.clear()
    assert seen == ["g", "g", None]

    unsubscribe()
    store.set("g", _entry("b"))
    assert seen == ["g", "g", None]


def test_observable_store_listener_failure_is_logged(caplog):
    store = ObservableEntryStore[str]()
    seen: list[str | None] = []

    def broken(group: str | None) -> None:
        raise RuntimeError("listener boom")

    store.subscribe(broken)
    store.subscribe(seen.append)

    with caplog.at_level(logging.ERROR, logger="cacheasync.stores"):
        store.set("g", _entry("a"))

    assert seen == ["g"]
    assert store.get("g") is not None
    assert "Entry store listener failed" in caplog.text


def test_registry_builds_new_store_per_call():
    first = create_entry_store()
    second = create_entry_store("inmemory")
    assert isinstance(first, InMemoryEntryStore)
    assert first is not second
    assert isinstance(create_entry_store(" Observable "), ObservableEntryStore)


def test_registry_passes_store_instances_through():
    store = ObservableEntryStore()
    assert create_entry_store(store) is store


def test_registry_custom_backend_registration():
    backend_id = f"custom-{uuid4().hex}"
    register_entry_store_backend(backend_id, InMemoryEntryStore)

    assert backend_id in list_entry_store_backends()
    assert resolve_store_factory(backend_id) is InMemoryEntryStore

    with pytest.raises(EntryStoreError, match="already registered"):
        register_entry_store_backend(backend_id, ObservableEntryStore)

    register_entry_store_backend(backend_id, ObservableEntryStore, overwrite=True)
    assert isinstance(create_entry_store(backend_id), ObservableEntryStore)


def test_registry_rejects_empty_and_unknown_ids():
    with pytest.raises(EntryStoreError, match="non-empty"):
        register_entry_store_backend("   ", InMemoryEntryStore)
    with pytest.raises(EntryStoreError, match="Unknown entry store backend"):
        create_entry_store("does-not-exist")
