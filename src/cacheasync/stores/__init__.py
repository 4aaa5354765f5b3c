"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: stores/__init__.py.
"""

from .base import EntryStore, StoreFactory
from .inmemory import InMemoryEntryStore
from .observable import ObservableEntryStore, StoreListener
from .registry import (
    DEFAULT_BACKEND,
    create_entry_store,
    list_entry_store_backends,
    register_entry_store_backend,
    resolve_store_factory,
)

__all__ = [
    "EntryStore",
    "StoreFactory",
    "InMemoryEntryStore",
    "ObservableEntryStore",
    "StoreListener",
    "DEFAULT_BACKEND",
    "register_entry_store_backend",
    "resolve_store_factory",
    "create_entry_store",
    "list_entry_store_backends",
]
