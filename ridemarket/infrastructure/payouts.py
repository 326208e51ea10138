"""
Payout gateways.

Escrow settlement pays the driver, the platform and any refund through a
``PayoutGateway``.  A gateway must perform its transfer inside the caller's
unit of work so that a later failure rolls every earlier transfer back with
the rest of the operation.  ``LedgerPayoutGateway`` does exactly that by
moving balance out of the escrow account in the same session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .repositories import AccountRepository


class PayoutGateway(ABC):
    @abstractmethod
    async def transfer(
        self, accounts: AccountRepository, source: str, recipient: str, amount: int
    ) -> None: ...


class LedgerPayoutGateway(PayoutGateway):
    async def transfer(
        self, accounts: AccountRepository, source: str, recipient: str, amount: int
    ) -> None:
        await accounts.move(source, recipient, amount)
