"""Post-ride ratings: each party rates the other at most once per completed ride."""

from __future__ import annotations

from ridemarket.domain.enums import NotificationType, RideStatus
from ridemarket.domain.errors import AlreadyRated
from ridemarket.domain.guards import caller_is, ensure, rating_in_range, status_is
from ridemarket.domain.ratings import fold_rating

from .registry import Registry
from .ride_ledger import RideLedger
from .unit_of_work import UnitOfWork


class RatingAggregator:
    def __init__(self, uow: UnitOfWork, registry: Registry, ledger: RideLedger):
        self.uow = uow
        self.registry = registry
        self.ledger = ledger

    async def rate_user(
        self, caller: str, ride_id: int, rating: int, target_is_driver: bool
    ) -> int:
        """Fold *rating* into the other party's average and return the new value.

        Completion already counted this ride against the rated party, so the
        average is weighted by ``total_rides - 1`` prior rides.
        """
        ride = await self.ledger.load(ride_id)
        ensure(
            status_is(ride.id, ride.status, RideStatus.COMPLETED),
            rating_in_range(rating),
        )

        if target_is_driver:
            ensure(caller_is(caller, ride.rider_identity, "rider"))
            already_rated = ride.driver_rated
            target = await self.registry.require_driver(ride.driver_identity)
        else:
            ensure(caller_is(caller, ride.driver_identity, "driver"))
            already_rated = ride.rider_rated
            target = await self.registry.require_rider(ride.rider_identity)

        if already_rated:
            raise AlreadyRated(
                f"Ride {ride.id} already rated this party",
                {"ride_id": ride.id, "target_is_driver": target_is_driver},
            )

        target.rating = fold_rating(target.rating, target.total_rides - 1, rating)
        if target_is_driver:
            ride.driver_rated = True
        else:
            ride.rider_rated = True
        await self.uow.session.flush()

        self.uow.record(
            NotificationType.RATING_GIVEN,
            ride_id=ride.id,
            rater=caller,
            rated=target.identity,
            rating=rating,
            target_is_driver=target_is_driver,
            new_average=target.rating,
        )
        return target.rating
