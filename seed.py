"""
Seed the database with demo accounts and rides.

Run after ``alembic upgrade head``:

    python seed.py

Every record is created through the marketplace operations, so the seed data
obeys the same lifecycle and settlement rules as production traffic.
"""

import asyncio

from sqlalchemy import func, select

from ridemarket.config import settings
from ridemarket.domain.fares import FareSchedule
from ridemarket.infrastructure.database import async_session_factory, engine
from ridemarket.infrastructure.models import RiderModel
from ridemarket.infrastructure.notifier import RecordingNotifier
from ridemarket.services.marketplace import RideMarketplace

RIDERS = [
    {"identity": "rider-aisha", "name": "Aisha Khan", "wallet": 50_000},
    {"identity": "rider-bruno", "name": "Bruno Costa", "wallet": 30_000},
    {"identity": "rider-chen", "name": "Chen Wei", "wallet": 20_000},
]

DRIVERS = [
    {"identity": "driver-dev", "name": "Dev Patel", "vehicle": "Toyota Prius, KA-01-1234"},
    {"identity": "driver-elena", "name": "Elena Rossi", "vehicle": "Honda City, MH-02-5678"},
]

RIDES = [
    # (rider, driver, pickup, destination, distance, final status)
    ("rider-aisha", "driver-dev", "Terminal 2", "Andheri East", 8, "COMPLETED"),
    ("rider-bruno", "driver-elena", "Terminal 1", "Bandra West", 14, "IN_PROGRESS"),
    ("rider-chen", "driver-dev", "Terminal 2", "Powai", 12, "ACCEPTED"),
    ("rider-aisha", None, "Andheri East", "Juhu", 5, "REQUESTED"),
    ("rider-bruno", None, "Bandra West", "Dadar", 6, "CANCELLED"),
]


async def seed():
    async with async_session_factory() as session:
        count = await session.scalar(select(func.count()).select_from(RiderModel))
        if count:
            print("Database already seeded. Skipping.")
            return

    notifier = RecordingNotifier()
    marketplace = RideMarketplace(
        async_session_factory,
        platform_owner=settings.platform_owner,
        escrow_account=settings.escrow_account,
        fares=FareSchedule(settings.base_fare, settings.fare_per_unit),
        notifier=notifier,
    )

    # ── Accounts ──────────────────────────────────────────────────
    for r in RIDERS:
        await marketplace.register_rider(r["identity"], r["name"])
        await marketplace.fund_wallet(r["identity"], r["wallet"])
    print(f"  Created {len(RIDERS)} riders")

    for d in DRIVERS:
        await marketplace.register_driver(d["identity"], d["name"], d["vehicle"])
    print(f"  Created {len(DRIVERS)} drivers")

    # ── Rides ─────────────────────────────────────────────────────
    for rider, driver, pickup, destination, distance, status in RIDES:
        ride = await marketplace.request_ride(rider, pickup, destination, distance)
        if status == "CANCELLED":
            await marketplace.cancel_ride(rider, ride.id, "plans changed")
            continue
        if driver is None:
            continue
        await marketplace.accept_ride(driver, ride.id)
        if status == "ACCEPTED":
            continue
        await marketplace.start_ride(driver, ride.id)
        if status == "IN_PROGRESS":
            continue
        await marketplace.complete_ride(rider, ride.id, ride.fare)
        await marketplace.rate_user(rider, ride.id, 480, target_is_driver=True)
        await marketplace.rate_user(driver, ride.id, 450, target_is_driver=False)
    print(f"  Created {len(RIDES)} rides")

    print(f"\nSeed complete! ({len(notifier.published)} events emitted)")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
