"""
Read-only domain snapshots.

Services never hand live ORM rows to callers.  Every accessor returns one of
these frozen dataclasses, so the only way to change a record is through a
marketplace operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .enums import NotificationType, RideStatus


@dataclass(frozen=True)
class DriverProfile:
    identity: str
    name: str
    vehicle_info: str
    rating: int
    total_rides: int
    is_active: bool
    is_registered: bool = True

    @classmethod
    def from_model(cls, model) -> DriverProfile:
        return cls(
            identity=model.identity,
            name=model.name,
            vehicle_info=model.vehicle_info,
            rating=model.rating,
            total_rides=model.total_rides,
            is_active=model.is_active,
            is_registered=model.is_registered,
        )


@dataclass(frozen=True)
class RiderProfile:
    identity: str
    name: str
    rating: int
    total_rides: int
    is_registered: bool = True

    @classmethod
    def from_model(cls, model) -> RiderProfile:
        return cls(
            identity=model.identity,
            name=model.name,
            rating=model.rating,
            total_rides=model.total_rides,
            is_registered=model.is_registered,
        )


@dataclass(frozen=True)
class RideDetails:
    id: int
    rider: str
    driver: Optional[str]
    pickup: str
    destination: str
    distance: int
    fare: int
    status: RideStatus
    created_at: Optional[datetime]
    rider_rated: bool = False
    driver_rated: bool = False
    cancellation_reason: Optional[str] = None

    @classmethod
    def from_model(cls, model) -> RideDetails:
        return cls(
            id=model.id,
            rider=model.rider_identity,
            driver=model.driver_identity,
            pickup=model.pickup,
            destination=model.destination,
            distance=model.distance,
            fare=model.fare,
            status=RideStatus(model.status),
            created_at=model.created_at,
            rider_rated=model.rider_rated,
            driver_rated=model.driver_rated,
            cancellation_reason=model.cancellation_reason,
        )


@dataclass(frozen=True)
class Notification:
    type: NotificationType
    payload: dict[str, Any] = field(default_factory=dict)

    def as_message(self) -> dict[str, Any]:
        return {"type": self.type.value, **self.payload}
