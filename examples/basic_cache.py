"""
basic_cache.py — Minimal cacheasync example.

Demonstrates per-user caching with a TTL, shared in-flight loads, and a
forced reload.

Usage:
    python examples/basic_cache.py
"""

import asyncio

from cacheasync import cache_async_factory

factory = cache_async_factory()


@factory.cached(resolver=lambda user_id: user_id, ttl=1000)
async def fetch_user(user_id: int) -> dict:
    print(f"loading user {user_id}")
    await asyncio.sleep(0.1)
    return {"id": user_id, "name": f"user-{user_id}"}


async def main() -> None:
    first, second = await asyncio.gather(fetch_user(1), fetch_user(1))
    print(first is second, fetch_user.get(1), fetch_user.is_fresh(1))

    await fetch_user.reload(1)
    factory.clear_cache()
    print(fetch_user.get(1))


if __name__ == "__main__":
    asyncio.run(main())
