"""
Notification delivery (Observer Pattern)
========================================

The marketplace hands every committed operation's ``Notification`` to a
single injected ``Notifier``.  Delivery is decoupled from the state machine:
swap the logging notifier for Redis pub/sub, or fan out to both, without
touching the core.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ridemarket.domain.entities import Notification

logger = logging.getLogger(__name__)


class Notifier(ABC):
    @abstractmethod
    async def publish(self, notification: Notification) -> None: ...


class LoggingNotifier(Notifier):
    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    async def publish(self, notification: Notification) -> None:
        self.log.info(
            "event=%s payload=%s", notification.type.value, notification.payload
        )


class RedisNotifier(Notifier):
    """Publishes notifications as JSON on a Redis pub/sub channel."""

    def __init__(self, client: aioredis.Redis, channel: str):
        self.redis = client
        self.channel = channel

    async def publish(self, notification: Notification) -> None:
        message = json.dumps(notification.as_message(), default=str)
        try:
            await self.redis.publish(self.channel, message)
        except RedisError as exc:
            logger.error(
                "Failed to publish %s to channel %s: %s",
                notification.type.value,
                self.channel,
                exc,
            )


class CompositeNotifier(Notifier):
    def __init__(self, notifiers: Iterable[Notifier]):
        self.notifiers = list(notifiers)

    async def publish(self, notification: Notification) -> None:
        for notifier in self.notifiers:
            await notifier.publish(notification)


class RecordingNotifier(Notifier):
    """Keeps every notification in memory; used by tests and the seed script."""

    def __init__(self):
        self.published: list[Notification] = []

    async def publish(self, notification: Notification) -> None:
        self.published.append(notification)
