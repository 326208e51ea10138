"""
Redis connection pool for the ledger write lock and the event notifier.

The pool is created on first use, so importing the API (or running the test
suite) never needs a reachable Redis.  ``close_redis`` drops it on shutdown.
"""

from typing import Optional

import redis.asyncio as aioredis

from ridemarket.config import settings

_pool: Optional[aioredis.ConnectionPool] = None


async def get_redis() -> aioredis.Redis:
    global _pool
    if _pool is None:
        _pool = aioredis.ConnectionPool.from_url(
            settings.redis_url, decode_responses=True
        )
    return aioredis.Redis(connection_pool=_pool)


async def close_redis() -> None:
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None
