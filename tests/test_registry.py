"""Registration, availability toggling and profile accessors."""

import dataclasses

import pytest

from ridemarket.domain.errors import (
    AlreadyRegistered,
    NotRegistered,
    ResourceError,
    StateError,
    ValidationError,
)
from ridemarket.domain.ratings import INITIAL_RATING


class TestDriverRegistration:
    @pytest.mark.asyncio
    async def test_register_driver_defaults(self, marketplace):
        driver = await marketplace.register_driver("d1", "Dana", "Civic, XY-42")

        assert driver.identity == "d1"
        assert driver.rating == INITIAL_RATING == 400
        assert driver.total_rides == 0
        assert driver.is_active is True
        assert driver.is_registered is True

    @pytest.mark.asyncio
    async def test_register_driver_twice_fails(self, marketplace):
        await marketplace.register_driver("d1", "Dana", "Civic")
        with pytest.raises(AlreadyRegistered) as exc_info:
            await marketplace.register_driver("d1", "Other", "Van")
        assert isinstance(exc_info.value, StateError)

        # original record untouched
        driver = await marketplace.get_driver("d1")
        assert driver.name == "Dana"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,vehicle", [("", "Civic"), ("Dana", ""), ("   ", "Civic")]
    )
    async def test_register_driver_requires_name_and_vehicle(
        self, marketplace, name, vehicle
    ):
        with pytest.raises(ValidationError):
            await marketplace.register_driver("d1", name, vehicle)
        with pytest.raises(NotRegistered):
            await marketplace.get_driver("d1")


class TestRiderRegistration:
    @pytest.mark.asyncio
    async def test_register_rider_defaults(self, marketplace):
        rider = await marketplace.register_rider("r1", "Riley")
        assert rider.rating == 400
        assert rider.total_rides == 0
        assert rider.is_registered is True

    @pytest.mark.asyncio
    async def test_register_rider_twice_fails(self, marketplace):
        await marketplace.register_rider("r1", "Riley")
        with pytest.raises(AlreadyRegistered):
            await marketplace.register_rider("r1", "Riley")

    @pytest.mark.asyncio
    async def test_input_is_validated_before_duplicate_check(self, marketplace):
        await marketplace.register_rider("r1", "Riley")
        await marketplace.register_driver("d1", "Dana", "Civic")

        with pytest.raises(ValidationError):
            await marketplace.register_rider("r1", "")
        with pytest.raises(ValidationError):
            await marketplace.register_driver("d1", "Dana", "")

    @pytest.mark.asyncio
    async def test_register_rider_requires_name(self, marketplace):
        with pytest.raises(ValidationError):
            await marketplace.register_rider("r1", "")

    @pytest.mark.asyncio
    async def test_same_identity_can_hold_both_roles(self, marketplace):
        await marketplace.register_rider("x", "Xan")
        await marketplace.register_driver("x", "Xan", "Bike")
        assert (await marketplace.get_rider("x")).name == "Xan"
        assert (await marketplace.get_driver("x")).vehicle_info == "Bike"


class TestAvailability:
    @pytest.mark.asyncio
    async def test_toggle_flips_flag(self, marketplace):
        await marketplace.register_driver("d1", "Dana", "Civic")

        assert await marketplace.toggle_driver_availability("d1") is False
        assert (await marketplace.get_driver("d1")).is_active is False
        assert await marketplace.toggle_driver_availability("d1") is True

    @pytest.mark.asyncio
    async def test_toggle_unknown_driver_fails(self, marketplace):
        with pytest.raises(NotRegistered) as exc_info:
            await marketplace.toggle_driver_availability("ghost")
        assert isinstance(exc_info.value, ResourceError)

    @pytest.mark.asyncio
    async def test_rider_cannot_toggle(self, marketplace):
        await marketplace.register_rider("r1", "Riley")
        with pytest.raises(NotRegistered):
            await marketplace.toggle_driver_availability("r1")


class TestAccessors:
    @pytest.mark.asyncio
    async def test_unknown_rider_lookup_fails(self, marketplace):
        with pytest.raises(NotRegistered):
            await marketplace.get_rider("nobody")

    @pytest.mark.asyncio
    async def test_profiles_are_immutable_snapshots(self, marketplace):
        driver = await marketplace.register_driver("d1", "Dana", "Civic")
        with pytest.raises(dataclasses.FrozenInstanceError):
            driver.rating = 500

    @pytest.mark.asyncio
    async def test_history_of_unknown_identity_is_empty(self, marketplace):
        assert await marketplace.get_rider_history("nobody") == []
        assert await marketplace.get_driver_history("nobody") == []
