"""
Marketplace facade
==================

The only public entry point for state changes.  Every method below runs
inside its own unit of work:

* guards run first, then record mutations, then fund transfers;
* any ``MarketplaceError`` (or unexpected exception) rolls the whole
  operation back;
* notifications go out once, after the commit.

Read accessors return frozen snapshots so callers cannot mutate records
behind the state machine's back.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ridemarket.domain.entities import DriverProfile, RideDetails, RiderProfile
from ridemarket.domain.errors import MarketplaceError
from ridemarket.domain.fares import FareSchedule
from ridemarket.domain.guards import ensure, positive
from ridemarket.infrastructure.notifier import LoggingNotifier, Notifier
from ridemarket.infrastructure.payouts import LedgerPayoutGateway, PayoutGateway

from .escrow import EscrowSettlement
from .ratings import RatingAggregator
from .registry import Registry
from .ride_ledger import RideLedger
from .unit_of_work import UnitOfWork, unit_of_work

logger = logging.getLogger(__name__)


@dataclass
class _Components:
    uow: UnitOfWork
    registry: Registry
    escrow: EscrowSettlement
    ledger: RideLedger
    ratings: RatingAggregator


class RideMarketplace:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        platform_owner: str,
        escrow_account: str = "escrow",
        fares: Optional[FareSchedule] = None,
        notifier: Optional[Notifier] = None,
        gateway: Optional[PayoutGateway] = None,
    ):
        self.session_factory = session_factory
        self.platform_owner = platform_owner
        self.escrow_account = escrow_account
        self.fares = fares or FareSchedule()
        self.notifier = notifier or LoggingNotifier()
        self.gateway = gateway or LedgerPayoutGateway()
        # Operations in this process run one at a time, in arrival order.
        self._serial = asyncio.Lock()

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[_Components]:
        try:
            async with self._serial, unit_of_work(
                self.session_factory, self.notifier
            ) as uow:
                registry = Registry(uow)
                escrow = EscrowSettlement(
                    uow,
                    self.gateway,
                    platform_identity=self.platform_owner,
                    escrow_identity=self.escrow_account,
                )
                ledger = RideLedger(uow, registry, escrow, self.fares)
                yield _Components(
                    uow=uow,
                    registry=registry,
                    escrow=escrow,
                    ledger=ledger,
                    ratings=RatingAggregator(uow, registry, ledger),
                )
        except MarketplaceError as exc:
            logger.warning("%s rejected (%s): %s", name, type(exc).__name__, exc.message)
            raise

    # ── Registry ──────────────────────────────────────────────────

    async def register_driver(
        self, identity: str, name: str, vehicle_info: str
    ) -> DriverProfile:
        async with self._operation("register_driver") as op:
            return await op.registry.register_driver(identity, name, vehicle_info)

    async def register_rider(self, identity: str, name: str) -> RiderProfile:
        async with self._operation("register_rider") as op:
            return await op.registry.register_rider(identity, name)

    async def toggle_driver_availability(self, identity: str) -> bool:
        async with self._operation("toggle_driver_availability") as op:
            return await op.registry.toggle_driver_availability(identity)

    async def get_driver(self, identity: str) -> DriverProfile:
        async with self._operation("get_driver") as op:
            return await op.registry.get_driver(identity)

    async def get_rider(self, identity: str) -> RiderProfile:
        async with self._operation("get_rider") as op:
            return await op.registry.get_rider(identity)

    async def get_rider_history(self, identity: str) -> list[int]:
        async with self._operation("get_rider_history") as op:
            return await op.registry.rider_history(identity)

    async def get_driver_history(self, identity: str) -> list[int]:
        async with self._operation("get_driver_history") as op:
            return await op.registry.driver_history(identity)

    # ── Ride lifecycle ────────────────────────────────────────────

    async def request_ride(
        self, rider: str, pickup: str, destination: str, distance: int
    ) -> RideDetails:
        async with self._operation("request_ride") as op:
            return await op.ledger.request_ride(rider, pickup, destination, distance)

    async def accept_ride(self, driver: str, ride_id: int) -> RideDetails:
        async with self._operation("accept_ride") as op:
            return await op.ledger.accept_ride(driver, ride_id)

    async def start_ride(self, caller: str, ride_id: int) -> RideDetails:
        async with self._operation("start_ride") as op:
            return await op.ledger.start_ride(caller, ride_id)

    async def complete_ride(
        self, caller: str, ride_id: int, amount_paid: int
    ) -> RideDetails:
        async with self._operation("complete_ride") as op:
            return await op.ledger.complete_ride(caller, ride_id, amount_paid)

    async def cancel_ride(
        self, caller: str, ride_id: int, reason: str = ""
    ) -> RideDetails:
        async with self._operation("cancel_ride") as op:
            return await op.ledger.cancel_ride(caller, ride_id, reason)

    async def get_ride_details(self, ride_id: int) -> RideDetails:
        async with self._operation("get_ride_details") as op:
            return await op.ledger.get_details(ride_id)

    # ── Ratings ───────────────────────────────────────────────────

    async def rate_user(
        self, caller: str, ride_id: int, rating: int, target_is_driver: bool
    ) -> int:
        async with self._operation("rate_user") as op:
            return await op.ratings.rate_user(caller, ride_id, rating, target_is_driver)

    # ── Funds ─────────────────────────────────────────────────────

    async def fund_wallet(self, identity: str, amount: int) -> int:
        async with self._operation("fund_wallet") as op:
            ensure(positive("amount", amount))
            return await op.uow.accounts.credit(identity, amount)

    async def get_balance(self, identity: str) -> int:
        async with self._operation("get_balance") as op:
            return await op.uow.accounts.balance(identity)

    async def emergency_withdraw(self, caller: str) -> int:
        async with self._operation("emergency_withdraw") as op:
            return await op.escrow.sweep(caller)
