"""
Concurrency safety tests.

Demonstrates:
1. Distributed lock prevents simultaneous writers and reports lapsed TTLs.
2. Concurrent claims on one ride leave exactly one driver bound.
3. Ride ids stay gap-free when requests fail.
"""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from conftest import DRIVER, RIDER
from ridemarket.domain.errors import MarketplaceError, NotAvailable
from ridemarket.infrastructure import redis_client
from ridemarket.infrastructure.locks import DistributedLock, LockNotAcquired
from ridemarket.infrastructure.redis_client import close_redis, get_redis


class TestDistributedLock:
    """Tests the Redis distributed lock logic (mocked Redis)."""

    @pytest.mark.asyncio
    async def test_acquire_succeeds(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)

        lock = DistributedLock(mock_redis, "ledger-writes", ttl_seconds=10)
        assert await lock.acquire() is True
        mock_redis.set.assert_awaited_once_with(
            "ridemarket:lock:ledger-writes", lock.token, nx=True, ex=10
        )

    @pytest.mark.asyncio
    async def test_acquire_fails_if_held(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=None)

        lock = DistributedLock(mock_redis, "ledger-writes", ttl_seconds=10)
        assert await lock.acquire() is False

    @pytest.mark.asyncio
    async def test_release_checks_ownership(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)
        mock_redis.eval = AsyncMock(return_value=1)

        lock = DistributedLock(mock_redis, "ledger-writes")
        await lock.acquire()
        assert await lock.release() is True

        args = mock_redis.eval.await_args.args
        assert args[1:] == (1, "ridemarket:lock:ledger-writes", lock.token)

    @pytest.mark.asyncio
    async def test_each_lock_has_its_own_token(self):
        mock_redis = AsyncMock()
        first = DistributedLock(mock_redis, "ledger-writes")
        second = DistributedLock(mock_redis, "ledger-writes")
        assert first.token != second.token

    @pytest.mark.asyncio
    async def test_context_manager_acquire_fail_raises(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=False)

        lock = DistributedLock(mock_redis, "ledger-writes", ttl_seconds=10)
        with pytest.raises(LockNotAcquired, match="Could not acquire lock"):
            async with lock:
                pass
        mock_redis.eval.assert_not_called()

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_error(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)
        mock_redis.eval = AsyncMock(return_value=1)

        with pytest.raises(ValueError):
            async with DistributedLock(mock_redis, "ledger-writes"):
                raise ValueError("boom")
        mock_redis.eval.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_release_after_expiry_is_reported(self, caplog):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)
        mock_redis.eval = AsyncMock(return_value=0)

        lock = DistributedLock(mock_redis, "ledger-writes", ttl_seconds=3)
        await lock.acquire()
        with caplog.at_level(logging.WARNING):
            assert await lock.release() is False
        assert "expired before release" in caplog.text


class TestRedisPool:
    @pytest.mark.asyncio
    async def test_pool_is_created_lazily_and_dropped_on_close(self):
        await close_redis()
        assert redis_client._pool is None

        first = await get_redis()
        second = await get_redis()
        assert first.connection_pool is second.connection_pool

        await close_redis()
        assert redis_client._pool is None


class TestSerializedOperations:
    @pytest.mark.asyncio
    async def test_racing_drivers_bind_exactly_one(self, parties):
        for identity in ("driver-c", "driver-d"):
            await parties.register_driver(identity, identity.title(), "Hatchback")
        ride = await parties.request_ride(RIDER, "A", "B", 5)

        results = await asyncio.gather(
            *(
                parties.accept_ride(driver, ride.id)
                for driver in (DRIVER, "driver-c", "driver-d")
            ),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, BaseException)]
        losers = [r for r in results if isinstance(r, BaseException)]
        assert len(winners) == 1
        assert all(isinstance(exc, NotAvailable) for exc in losers)
        assert (await parties.get_ride_details(ride.id)).driver == winners[0].driver

    @pytest.mark.asyncio
    async def test_ids_stay_dense_across_failures(self, parties):
        ids = []
        for distance in (1, 0, 2, -3, 3):
            try:
                ids.append((await parties.request_ride(RIDER, "A", "B", distance)).id)
            except MarketplaceError:
                pass
        assert ids == [1, 2, 3]
