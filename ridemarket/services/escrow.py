"""
Escrow settlement
=================

At completion the rider's payment moves into the escrow account and is paid
out in three transfers:

1. ``floor(fare x 95 / 100)`` to the driver
2. the remainder of the fare to the platform
3. any overpayment back to the rider

The ride ledger flushes the ``COMPLETED`` status and both ride counters
before calling ``settle``, so a payee can never observe a half-settled ride.
Any transfer failure propagates as ``TransferFailed`` and the unit of work
rolls back the whole completion.
"""

from __future__ import annotations

import logging

from ridemarket.domain.errors import TransferFailed
from ridemarket.domain.fares import SettlementSplit
from ridemarket.domain.guards import caller_is, ensure
from ridemarket.infrastructure.models import RideModel
from ridemarket.infrastructure.payouts import PayoutGateway

from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class EscrowSettlement:
    def __init__(
        self,
        uow: UnitOfWork,
        gateway: PayoutGateway,
        *,
        platform_identity: str,
        escrow_identity: str,
    ):
        self.uow = uow
        self.gateway = gateway
        self.platform_identity = platform_identity
        self.escrow_identity = escrow_identity

    async def settle(self, ride: RideModel, split: SettlementSplit) -> None:
        # Rider pays into escrow first; a short wallet aborts the completion.
        await self.uow.accounts.move(
            ride.rider_identity, self.escrow_identity, split.amount_paid
        )

        await self._pay(ride.driver_identity, split.driver_share, ride.id)
        await self._pay(self.platform_identity, split.platform_share, ride.id)
        await self._pay(ride.rider_identity, split.refund, ride.id)

        logger.info(
            "Ride %d settled: driver=%d platform=%d refund=%d",
            ride.id,
            split.driver_share,
            split.platform_share,
            split.refund,
        )

    async def sweep(self, caller: str) -> int:
        """Move the whole escrow balance to the platform (owner only)."""
        ensure(caller_is(caller, self.platform_identity, "platform owner"))

        amount = await self.uow.accounts.balance(self.escrow_identity)
        await self._pay(self.platform_identity, amount, ride_id=None)
        logger.warning("Emergency withdraw: %d swept from escrow", amount)
        return amount

    async def _pay(self, recipient: str, amount: int, ride_id: int | None) -> None:
        if amount <= 0:
            return
        try:
            await self.gateway.transfer(
                self.uow.accounts, self.escrow_identity, recipient, amount
            )
        except Exception as exc:
            raise TransferFailed(
                f"Transfer of {amount} to {recipient} failed: {exc}",
                {"recipient": recipient, "amount": amount, "ride_id": ride_id},
            ) from exc
