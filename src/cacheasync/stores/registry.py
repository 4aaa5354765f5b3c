"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: stores/registry.py.
"""

from __future__ import annotations

from threading import Lock

from ..errors import EntryStoreError
from .base import EntryStore, StoreFactory
from .inmemory import InMemoryEntryStore
from .observable import ObservableEntryStore

DEFAULT_BACKEND = "inmemory"

_REGISTRY: dict[str, StoreFactory] = {}
_LOCK = Lock()


def _normalize_id(backend_id: str) -> str:
    return str(backend_id).strip().lower()


def register_entry_store_backend(
    backend_id: str,
    factory: StoreFactory,
    *,
    overwrite: bool = False,
) -> None:
    """Register one store factory by backend id."""
    key = _normalize_id(backend_id)
    if not key:
        raise EntryStoreError("Entry store backend id must be non-empty")

    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise EntryStoreError(f"Entry store backend already registered: {key}")
        _REGISTRY[key] = factory


def resolve_store_factory(backend: str | StoreFactory | None = None) -> StoreFactory:
    """Resolve a store factory from id/factory/default."""
    if backend is None:
        backend = DEFAULT_BACKEND
    if not isinstance(backend, str):
        return backend

    key = _normalize_id(backend)
    with _LOCK:
        factory = _REGISTRY.get(key)
    if factory is None:
        raise EntryStoreError(f"Unknown entry store backend '{backend}'")
    return factory


def create_entry_store(backend: str | EntryStore | None = None) -> EntryStore:
    """Build a new store from id/default, or pass a store instance through."""
    if backend is not None and not isinstance(backend, str):
        return backend
    return resolve_store_factory(backend)()


def list_entry_store_backends() -> list[str]:
    """List registered store backend ids."""
    with _LOCK:
        return sorted(_REGISTRY.keys())


register_entry_store_backend(InMemoryEntryStore.backend_id, InMemoryEntryStore)
register_entry_store_backend(ObservableEntryStore.backend_id, ObservableEntryStore)
