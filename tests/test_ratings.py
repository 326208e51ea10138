"""Rating arithmetic and the once-per-role rating rule."""

import pytest

from conftest import DRIVER, RIDER, ride_in_progress
from ridemarket.domain.errors import (
    AlreadyRated,
    InvalidRide,
    InvalidTransition,
    OutOfRange,
    StateError,
    Unauthorized,
    ValidationError,
)
from ridemarket.domain.ratings import fold_rating


async def completed_ride(marketplace) -> int:
    ride_id = await ride_in_progress(marketplace)
    fare = (await marketplace.get_ride_details(ride_id)).fare
    await marketplace.complete_ride(RIDER, ride_id, fare)
    return ride_id


class TestFoldRating:
    def test_first_rating_replaces_default(self):
        assert fold_rating(400, 0, 500) == 500

    def test_running_mean(self):
        assert fold_rating(500, 1, 300) == 400
        assert fold_rating(400, 2, 101) == 300  # (800 + 101) // 3

    def test_floor_division(self):
        assert fold_rating(500, 1, 100) == 300
        assert fold_rating(333, 2, 100) == 255  # (666 + 100) // 3

    @pytest.mark.parametrize(
        "ratings",
        [[500], [100, 500], [450, 320, 480], [101, 199, 287, 499, 350, 222]],
    )
    def test_sequence_equals_floor_of_mean_for_two_or_fewer(self, ratings):
        current = 400
        for prior, rating in enumerate(ratings):
            current = fold_rating(current, prior, rating)
        if len(ratings) <= 2:
            assert current == sum(ratings) // len(ratings)
        assert 100 <= current <= 500


class TestRateUser:
    @pytest.mark.asyncio
    async def test_concrete_scenario(self, parties):
        ride_id = await completed_ride(parties)
        assert (await parties.get_driver(DRIVER)).rating == 400

        assert await parties.rate_user(RIDER, ride_id, 500, target_is_driver=True) == 500
        assert await parties.rate_user(DRIVER, ride_id, 300, target_is_driver=False) == 300

        driver = await parties.get_driver(DRIVER)
        rider = await parties.get_rider(RIDER)
        assert (driver.rating, driver.total_rides) == (500, 1)
        assert (rider.rating, rider.total_rides) == (300, 1)

        ride = await parties.get_ride_details(ride_id)
        assert ride.driver_rated and ride.rider_rated

    @pytest.mark.asyncio
    async def test_second_rating_fails_and_leaves_average(self, parties):
        ride_id = await completed_ride(parties)
        await parties.rate_user(RIDER, ride_id, 450, target_is_driver=True)

        with pytest.raises(AlreadyRated) as exc_info:
            await parties.rate_user(RIDER, ride_id, 100, target_is_driver=True)
        assert isinstance(exc_info.value, StateError)
        assert (await parties.get_driver(DRIVER)).rating == 450

    @pytest.mark.asyncio
    async def test_roles_are_rated_independently(self, parties):
        ride_id = await completed_ride(parties)
        await parties.rate_user(DRIVER, ride_id, 200, target_is_driver=False)
        # rider's rating of the driver is still open
        assert await parties.rate_user(RIDER, ride_id, 350, target_is_driver=True) == 350

    @pytest.mark.asyncio
    async def test_average_over_several_rides(self, parties):
        for rating in (500, 300, 250):
            ride_id = await completed_ride(parties)
            await parties.rate_user(RIDER, ride_id, rating, target_is_driver=True)

        driver = await parties.get_driver(DRIVER)
        assert driver.total_rides == 3
        # 500 -> (500 + 300) // 2 = 400 -> (800 + 250) // 3 = 350
        assert driver.rating == 350

    @pytest.mark.asyncio
    async def test_only_the_rider_rates_the_driver(self, parties):
        ride_id = await completed_ride(parties)
        with pytest.raises(Unauthorized):
            await parties.rate_user(DRIVER, ride_id, 500, target_is_driver=True)
        with pytest.raises(Unauthorized):
            await parties.rate_user(RIDER, ride_id, 500, target_is_driver=False)

    @pytest.mark.asyncio
    async def test_ride_must_be_completed(self, parties):
        ride_id = await ride_in_progress(parties)
        with pytest.raises(InvalidTransition):
            await parties.rate_user(RIDER, ride_id, 500, target_is_driver=True)

    @pytest.mark.asyncio
    async def test_cancelled_ride_cannot_be_rated(self, parties):
        ride = await parties.request_ride(RIDER, "A", "B", 2)
        await parties.accept_ride(DRIVER, ride.id)
        await parties.cancel_ride(RIDER, ride.id, "late")
        with pytest.raises(StateError):
            await parties.rate_user(RIDER, ride.id, 100, target_is_driver=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 99, 501, 1000, -300])
    async def test_rating_bounds(self, parties, rating):
        ride_id = await completed_ride(parties)
        with pytest.raises(OutOfRange) as exc_info:
            await parties.rate_user(RIDER, ride_id, rating, target_is_driver=True)
        assert isinstance(exc_info.value, ValidationError)
        assert not (await parties.get_ride_details(ride_id)).driver_rated

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [100, 500])
    async def test_rating_bounds_inclusive(self, parties, rating):
        ride_id = await completed_ride(parties)
        assert await parties.rate_user(RIDER, ride_id, rating, target_is_driver=True) == rating

    @pytest.mark.asyncio
    async def test_unknown_ride(self, parties):
        with pytest.raises(InvalidRide):
            await parties.rate_user(RIDER, 42, 400, target_is_driver=True)
