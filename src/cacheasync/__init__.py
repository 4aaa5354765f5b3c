"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Async function cache with per-group dedup, TTL freshness, and guarded reloads.

Quick start::

    from cacheasync import cache_async_factory

    factory = cache_async_factory()

    @factory.cached(resolver=lambda user_id: user_id, ttl=1000)
    async def fetch_user(user_id: int) -> dict:
        ...

    user = await fetch_user(1)      # loads once, concurrent callers share it
    fetch_user.get(1)               # cached value, no await
    fetch_user.reload(1)            # force a new load
    factory.clear_cache()           # drop every cached function's entries
"""

from .cached import CacheContext, CachedFunction
from .engine import CacheLifecycle, monotonic_ms
from .errors import CacheError, CacheOptionsError, EntryStoreError, MissingValueError
from .factory import (
    CacheFactory,
    CachedFunctionRegistry,
    cache_async_factory,
    create_cache_factory_from_env,
)
from .keys import default_resolver, normalize_key, resolve_key
from .metrics import CacheMetrics, NoOpCacheMetrics, PrometheusCacheMetrics
from .options import CacheOptions, build_options
from .stores import (
    EntryStore,
    InMemoryEntryStore,
    ObservableEntryStore,
    create_entry_store,
    list_entry_store_backends,
    register_entry_store_backend,
)
from .types import EXPIRED, MISSING, NEVER_EXPIRES, CacheEntry, KeyTuple, SharedResult

__all__ = [
    "CacheEntry",
    "KeyTuple",
    "SharedResult",
    "MISSING",
    "NEVER_EXPIRES",
    "EXPIRED",
    "CacheOptions",
    "build_options",
    "default_resolver",
    "normalize_key",
    "resolve_key",
    "EntryStore",
    "InMemoryEntryStore",
    "ObservableEntryStore",
    "register_entry_store_backend",
    "create_entry_store",
    "list_entry_store_backends",
    "CacheLifecycle",
    "monotonic_ms",
    "CachedFunction",
    "CacheContext",
    "CacheFactory",
    "CachedFunctionRegistry",
    "cache_async_factory",
    "create_cache_factory_from_env",
    "CacheMetrics",
    "NoOpCacheMetrics",
    "PrometheusCacheMetrics",
    "CacheError",
    "CacheOptionsError",
    "EntryStoreError",
    "MissingValueError",
]
