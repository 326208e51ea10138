"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The production ORM models are created as-is;
``FOR UPDATE`` clauses are simply not rendered by the SQLite dialect.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ridemarket.domain.fares import FareSchedule
from ridemarket.infrastructure.database import Base
from ridemarket.infrastructure.notifier import RecordingNotifier
from ridemarket.services.marketplace import RideMarketplace

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

PLATFORM = "platform"
ESCROW = "escrow"
RIDER = "rider-a"
DRIVER = "driver-b"

# Explicit schedule so expectations do not drift with env-configured fares.
FARES = FareSchedule(base_fare=1_000, fare_per_unit=250)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables on a fresh in-memory database, then drop everything."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def marketplace(session_factory, notifier) -> RideMarketplace:
    return RideMarketplace(
        session_factory,
        platform_owner=PLATFORM,
        escrow_account=ESCROW,
        fares=FARES,
        notifier=notifier,
    )


@pytest_asyncio.fixture
async def parties(marketplace: RideMarketplace) -> RideMarketplace:
    """Rider A (wallet 100 000) and driver B, both registered."""
    await marketplace.register_rider(RIDER, "Alice")
    await marketplace.register_driver(DRIVER, "Bob", "Blue Corolla, AB-123")
    await marketplace.fund_wallet(RIDER, 100_000)
    return marketplace


async def ride_in_progress(marketplace: RideMarketplace, distance: int = 10) -> int:
    """Request, accept and start a ride between the default parties."""
    ride = await marketplace.request_ride(RIDER, "Airport", "Downtown", distance)
    await marketplace.accept_ride(DRIVER, ride.id)
    await marketplace.start_ride(DRIVER, ride.id)
    return ride.id
