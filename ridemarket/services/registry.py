"""Driver and rider records: registration, availability and ride histories."""

from __future__ import annotations

from ridemarket.domain.entities import DriverProfile, RiderProfile
from ridemarket.domain.enums import NotificationType, ParticipantRole
from ridemarket.domain.errors import AlreadyRegistered, NotRegistered
from ridemarket.domain.guards import ensure, non_empty
from ridemarket.infrastructure.models import DriverModel, RideModel, RiderModel

from .unit_of_work import UnitOfWork


class Registry:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    # ── Registration ──────────────────────────────────────────────

    async def register_driver(
        self, identity: str, name: str, vehicle_info: str
    ) -> DriverProfile:
        ensure(non_empty(name=name, vehicle_info=vehicle_info))
        if await self.uow.drivers.get_by_identity(identity) is not None:
            raise AlreadyRegistered(
                f"Driver {identity} is already registered", {"identity": identity}
            )

        driver = await self.uow.drivers.create(
            identity=identity, name=name, vehicle_info=vehicle_info
        )
        self.uow.record(
            NotificationType.DRIVER_REGISTERED,
            identity=identity,
            name=name,
            vehicle_info=vehicle_info,
        )
        return DriverProfile.from_model(driver)

    async def register_rider(self, identity: str, name: str) -> RiderProfile:
        ensure(non_empty(name=name))
        if await self.uow.riders.get_by_identity(identity) is not None:
            raise AlreadyRegistered(
                f"Rider {identity} is already registered", {"identity": identity}
            )

        rider = await self.uow.riders.create(identity=identity, name=name)
        self.uow.record(NotificationType.RIDER_REGISTERED, identity=identity, name=name)
        return RiderProfile.from_model(rider)

    async def toggle_driver_availability(self, identity: str) -> bool:
        driver = await self.require_driver(identity)
        driver.is_active = not driver.is_active
        await self.uow.session.flush()
        return driver.is_active

    # ── Lookups ───────────────────────────────────────────────────

    async def require_driver(self, identity: str) -> DriverModel:
        driver = await self.uow.drivers.get_by_identity(identity)
        if driver is None:
            raise NotRegistered(
                f"Driver {identity} is not registered", {"identity": identity}
            )
        return driver

    async def require_rider(self, identity: str) -> RiderModel:
        rider = await self.uow.riders.get_by_identity(identity)
        if rider is None:
            raise NotRegistered(
                f"Rider {identity} is not registered", {"identity": identity}
            )
        return rider

    async def get_driver(self, identity: str) -> DriverProfile:
        return DriverProfile.from_model(await self.require_driver(identity))

    async def get_rider(self, identity: str) -> RiderProfile:
        return RiderProfile.from_model(await self.require_rider(identity))

    async def rider_history(self, identity: str) -> list[int]:
        return await self.uow.history.ride_ids(identity, ParticipantRole.RIDER)

    async def driver_history(self, identity: str) -> list[int]:
        return await self.uow.history.ride_ids(identity, ParticipantRole.DRIVER)

    # ── Mutations driven by the ride ledger ───────────────────────

    async def add_to_history(
        self, identity: str, role: ParticipantRole, ride_id: int
    ) -> None:
        await self.uow.history.append(identity, role, ride_id)

    async def record_completion(self, ride: RideModel) -> None:
        """Count a completed ride against both of its parties."""
        rider = await self.require_rider(ride.rider_identity)
        driver = await self.require_driver(ride.driver_identity)
        rider.total_rides += 1
        driver.total_rides += 1
        await self.uow.session.flush()
