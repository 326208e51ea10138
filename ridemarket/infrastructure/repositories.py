"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Nothing here commits; the caller owns the
transaction boundary.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    AccountModel,
    DriverModel,
    RideHistoryModel,
    RideModel,
    RiderModel,
    SequenceModel,
)
from ridemarket.domain.enums import ParticipantRole, RideStatus
from ridemarket.domain.errors import InsufficientFunds

RIDE_SEQUENCE = "ride"


class DriverRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_identity(self, identity: str) -> Optional[DriverModel]:
        return await self.session.get(DriverModel, identity)

    async def create(self, *, identity: str, name: str, vehicle_info: str) -> DriverModel:
        driver = DriverModel(identity=identity, name=name, vehicle_info=vehicle_info)
        self.session.add(driver)
        await self.session.flush()
        return driver


class RiderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_identity(self, identity: str) -> Optional[RiderModel]:
        return await self.session.get(RiderModel, identity)

    async def create(self, *, identity: str, name: str) -> RiderModel:
        rider = RiderModel(identity=identity, name=name)
        self.session.add(rider)
        await self.session.flush()
        return rider


class SequenceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def current(self, name: str) -> int:
        row = await self.session.get(SequenceModel, name)
        return row.value if row else 0

    async def next_value(self, name: str) -> int:
        """Advance *name* by one inside the current transaction."""
        result = await self.session.execute(
            select(SequenceModel).where(SequenceModel.name == name).with_for_update()
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = SequenceModel(name=name, value=0)
            self.session.add(row)
        row.value += 1
        await self.session.flush()
        return row.value


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.sequences = SequenceRepository(session)

    async def current_counter(self) -> int:
        return await self.sequences.current(RIDE_SEQUENCE)

    async def create_ride(
        self,
        *,
        rider_identity: str,
        pickup: str,
        destination: str,
        distance: int,
        fare: int,
    ) -> RideModel:
        ride = RideModel(
            id=await self.sequences.next_value(RIDE_SEQUENCE),
            rider_identity=rider_identity,
            pickup=pickup,
            destination=destination,
            distance=distance,
            fare=fare,
            status=RideStatus.REQUESTED,
            rider_rated=False,
            driver_rated=False,
        )
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: int) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def get_for_update(self, ride_id: int) -> Optional[RideModel]:
        """SELECT ... FOR UPDATE so concurrent transitions serialise on the row."""
        result = await self.session.execute(
            select(RideModel).where(RideModel.id == ride_id).with_for_update()
        )
        return result.scalar_one_or_none()


class RideHistoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, identity: str, role: ParticipantRole, ride_id: int) -> None:
        self.session.add(RideHistoryModel(identity=identity, role=role, ride_id=ride_id))
        await self.session.flush()

    async def ride_ids(self, identity: str, role: ParticipantRole) -> list[int]:
        result = await self.session.execute(
            select(RideHistoryModel.ride_id)
            .where(RideHistoryModel.identity == identity, RideHistoryModel.role == role)
            .order_by(RideHistoryModel.id)
        )
        return list(result.scalars().all())


class AccountRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_or_create(self, identity: str) -> AccountModel:
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.identity == identity).with_for_update()
        )
        account = result.scalar_one_or_none()
        if account is None:
            account = AccountModel(identity=identity, balance=0)
            self.session.add(account)
        return account

    async def balance(self, identity: str) -> int:
        account = await self.session.get(AccountModel, identity)
        return account.balance if account else 0

    async def credit(self, identity: str, amount: int) -> int:
        account = await self._get_or_create(identity)
        account.balance += amount
        await self.session.flush()
        return account.balance

    async def debit(self, identity: str, amount: int) -> int:
        account = await self._get_or_create(identity)
        if account.balance < amount:
            raise InsufficientFunds(
                f"Account {identity} holds {account.balance}, needs {amount}",
                {"identity": identity, "balance": account.balance, "amount": amount},
            )
        account.balance -= amount
        await self.session.flush()
        return account.balance

    async def move(self, source: str, recipient: str, amount: int) -> None:
        await self.debit(source, amount)
        await self.credit(recipient, amount)
