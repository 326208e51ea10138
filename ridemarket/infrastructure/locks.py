"""
Ledger write lock.

Every state-mutating HTTP request holds one Redis key for its whole unit of
work, so requests served by different processes still commit in a single
global order.  The lock never queues: a request that finds it held fails with
``LockNotAcquired`` (served as 503) and the client re-issues it.

Acquire is ``SET NX EX`` with a per-holder token; release is a Lua
compare-and-delete so a holder whose TTL lapsed cannot free a successor's lock.
"""

from __future__ import annotations

import logging
import uuid

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)

KEY_PREFIX = "ridemarket:lock:"

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class LockNotAcquired(RuntimeError):
    """Another request currently holds the ledger write lock."""


class DistributedLock:
    def __init__(self, client: aioredis.Redis, name: str, ttl_seconds: int = 10):
        self.redis = client
        self.key = KEY_PREFIX + name
        self.ttl = ttl_seconds
        self.token = uuid.uuid4().hex

    async def acquire(self) -> bool:
        return bool(await self.redis.set(self.key, self.token, nx=True, ex=self.ttl))

    async def release(self) -> bool:
        """Delete the key if this holder still owns it; report whether it did."""
        released = bool(await self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self.token))
        if not released:
            # TTL ran out mid-request; another writer may have overlapped.
            logger.warning("Lock %s expired before release (ttl=%ds)", self.key, self.ttl)
        return released

    async def __aenter__(self) -> DistributedLock:
        if not await self.acquire():
            raise LockNotAcquired(f"Could not acquire lock: {self.key}")
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()
