"""FastAPI dependency injection helpers."""

from typing import AsyncIterator

from fastapi import Header

from ridemarket.config import settings
from ridemarket.domain.fares import FareSchedule
from ridemarket.infrastructure.database import async_session_factory
from ridemarket.infrastructure.locks import DistributedLock
from ridemarket.infrastructure.notifier import (
    CompositeNotifier,
    LoggingNotifier,
    Notifier,
    RedisNotifier,
)
from ridemarket.infrastructure.redis_client import get_redis
from ridemarket.services.marketplace import RideMarketplace

_marketplace: RideMarketplace | None = None


async def build_notifier() -> Notifier:
    backend = settings.notification_backend
    if backend == "log":
        return LoggingNotifier()
    redis_notifier = RedisNotifier(await get_redis(), settings.notification_channel)
    if backend == "redis":
        return redis_notifier
    return CompositeNotifier([LoggingNotifier(), redis_notifier])


async def get_marketplace() -> RideMarketplace:
    """Return the process-wide marketplace, building it on first use."""
    global _marketplace
    if _marketplace is None:
        _marketplace = RideMarketplace(
            async_session_factory,
            platform_owner=settings.platform_owner,
            escrow_account=settings.escrow_account,
            fares=FareSchedule(settings.base_fare, settings.fare_per_unit),
            notifier=await build_notifier(),
        )
    return _marketplace


async def serialize_writes() -> AsyncIterator[None]:
    """Hold the ledger-wide write lock for the duration of the request."""
    redis = await get_redis()
    async with DistributedLock(
        redis, "ledger-writes", ttl_seconds=settings.write_lock_ttl_seconds
    ):
        yield


async def get_caller(x_identity: str = Header(..., min_length=1)) -> str:
    """Identity of the party making the call, taken from ``X-Identity``."""
    return x_identity
