"""
Unit of work: one database transaction per marketplace operation.

Commits on success and rolls back on any exception, so an operation either
persists all of its effects (status, counters, balances) or none of them.
Notifications recorded during the operation are dispatched only after the
commit succeeds.  A delivery failure is logged; it never turns a committed
operation into a reported failure.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ridemarket.domain.entities import Notification
from ridemarket.domain.enums import NotificationType
from ridemarket.infrastructure.notifier import Notifier
from ridemarket.infrastructure.repositories import (
    AccountRepository,
    DriverRepository,
    RideHistoryRepository,
    RideRepository,
    RiderRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.drivers = DriverRepository(session)
        self.riders = RiderRepository(session)
        self.rides = RideRepository(session)
        self.history = RideHistoryRepository(session)
        self.accounts = AccountRepository(session)
        self.notifications: list[Notification] = []

    def record(self, type_: NotificationType, **payload) -> None:
        self.notifications.append(Notification(type_, payload))


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: Optional[Notifier] = None,
) -> AsyncIterator[UnitOfWork]:
    async with session_factory() as session:
        uow = UnitOfWork(session)
        try:
            yield uow
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    if notifier is None:
        return
    # Committed effects stand even when delivery fails.
    for notification in uow.notifications:
        try:
            await notifier.publish(notification)
        except Exception:
            logger.exception(
                "Delivery of %s failed after commit", notification.type.value
            )
