"""
Ride ledger (State Pattern)
===========================

Owns the canonical ride records and the lifecycle:

    REQUESTED -> ACCEPTED -> IN_PROGRESS -> COMPLETED
         \\           \\
          +-----------+--> CANCELLED

Every operation runs its guards first, then mutates the ride, and only then
(on completion) hands off to escrow settlement.  Ride ids come from the
``ride`` sequence, which lives in the same transaction as the ride itself.
"""

from __future__ import annotations

from ridemarket.domain.entities import RideDetails
from ridemarket.domain.enums import (
    NotificationType,
    ParticipantRole,
    RideStatus,
    transition,
)
from ridemarket.domain.errors import InvalidRide, NotAvailable
from ridemarket.domain.fares import FareSchedule, split_payment
from ridemarket.domain.guards import (
    caller_is,
    caller_is_party,
    driver_active,
    ensure,
    known_ride_id,
    non_empty,
    positive,
    status_is,
)
from ridemarket.infrastructure.models import RideModel

from .escrow import EscrowSettlement
from .registry import Registry
from .unit_of_work import UnitOfWork


class RideLedger:
    def __init__(
        self,
        uow: UnitOfWork,
        registry: Registry,
        escrow: EscrowSettlement,
        fares: FareSchedule,
    ):
        self.uow = uow
        self.registry = registry
        self.escrow = escrow
        self.fares = fares

    async def load(self, ride_id: int) -> RideModel:
        """Fetch a ride for mutation, raising ``InvalidRide`` for unknown ids."""
        ensure(known_ride_id(ride_id, await self.uow.rides.current_counter()))
        ride = await self.uow.rides.get_for_update(ride_id)
        if ride is None:
            raise InvalidRide(f"Ride {ride_id} does not exist", {"ride_id": ride_id})
        return ride

    async def get_details(self, ride_id: int) -> RideDetails:
        return RideDetails.from_model(await self.load(ride_id))

    # ── Lifecycle ─────────────────────────────────────────────────

    async def request_ride(
        self, rider: str, pickup: str, destination: str, distance: int
    ) -> RideDetails:
        await self.registry.require_rider(rider)
        ensure(
            non_empty(pickup=pickup, destination=destination),
            positive("distance", distance),
        )

        ride = await self.uow.rides.create_ride(
            rider_identity=rider,
            pickup=pickup,
            destination=destination,
            distance=distance,
            fare=self.fares.fare_for(distance),
        )
        await self.registry.add_to_history(rider, ParticipantRole.RIDER, ride.id)

        self.uow.record(
            NotificationType.RIDE_REQUESTED,
            ride_id=ride.id,
            rider=rider,
            pickup=pickup,
            destination=destination,
            distance=distance,
            fare=ride.fare,
        )
        return RideDetails.from_model(ride)

    async def accept_ride(self, driver: str, ride_id: int) -> RideDetails:
        driver_record = await self.registry.require_driver(driver)
        ensure(driver_active(driver, driver_record.is_active))
        ride = await self.load(ride_id)
        ensure(status_is(ride.id, ride.status, RideStatus.REQUESTED, error=NotAvailable))

        ride.status = transition(ride.status, RideStatus.ACCEPTED)
        ride.driver_identity = driver
        await self.uow.session.flush()
        await self.registry.add_to_history(driver, ParticipantRole.DRIVER, ride.id)

        self.uow.record(NotificationType.RIDE_ACCEPTED, ride_id=ride.id, driver=driver)
        return RideDetails.from_model(ride)

    async def start_ride(self, caller: str, ride_id: int) -> RideDetails:
        ride = await self.load(ride_id)
        ensure(
            caller_is(caller, ride.driver_identity, "driver"),
            status_is(ride.id, ride.status, RideStatus.ACCEPTED),
        )

        ride.status = transition(ride.status, RideStatus.IN_PROGRESS)
        await self.uow.session.flush()

        self.uow.record(NotificationType.RIDE_STARTED, ride_id=ride.id, driver=caller)
        return RideDetails.from_model(ride)

    async def complete_ride(
        self, caller: str, ride_id: int, amount_paid: int
    ) -> RideDetails:
        ride = await self.load(ride_id)
        ensure(
            caller_is(caller, ride.rider_identity, "rider"),
            status_is(ride.id, ride.status, RideStatus.IN_PROGRESS),
        )

        split = split_payment(ride.fare, amount_paid)

        # Effects first: status and counters are flushed before any transfer.
        ride.status = transition(ride.status, RideStatus.COMPLETED)
        await self.uow.session.flush()
        await self.registry.record_completion(ride)

        await self.escrow.settle(ride, split)

        self.uow.record(
            NotificationType.RIDE_COMPLETED,
            ride_id=ride.id,
            rider=ride.rider_identity,
            driver=ride.driver_identity,
            fare=split.fare,
            amount_paid=split.amount_paid,
            driver_share=split.driver_share,
            platform_share=split.platform_share,
            refund=split.refund,
        )
        return RideDetails.from_model(ride)

    async def cancel_ride(self, caller: str, ride_id: int, reason: str) -> RideDetails:
        ride = await self.load(ride_id)
        ensure(
            caller_is_party(caller, ride.rider_identity, ride.driver_identity),
            status_is(ride.id, ride.status, RideStatus.REQUESTED, RideStatus.ACCEPTED),
        )

        ride.status = transition(ride.status, RideStatus.CANCELLED)
        ride.cancellation_reason = reason
        await self.uow.session.flush()

        self.uow.record(
            NotificationType.RIDE_CANCELLED,
            ride_id=ride.id,
            cancelled_by=caller,
            reason=reason,
        )
        return RideDetails.from_model(ride)
