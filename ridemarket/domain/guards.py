"""
Precondition guards.

Each guard returns ``None`` when its condition holds and the matching
``MarketplaceError`` otherwise.  Operations compose them with ``ensure`` at
the top, before any state is touched.
"""

from __future__ import annotations

from typing import Optional

from .enums import RideStatus
from .errors import (
    DriverInactive,
    InvalidRide,
    InvalidTransition,
    MarketplaceError,
    OutOfRange,
    Unauthorized,
    ValidationError,
)
from .ratings import MAX_RATING, MIN_RATING

GuardResult = Optional[MarketplaceError]


def ensure(*results: GuardResult) -> None:
    """Raise the first failed guard, if any."""
    for result in results:
        if result is not None:
            raise result


def non_empty(**fields: str) -> GuardResult:
    empty = [name for name, value in fields.items() if not value or not value.strip()]
    if empty:
        return ValidationError(
            f"Fields must not be empty: {', '.join(empty)}", {"fields": empty}
        )
    return None


def positive(name: str, value: int) -> GuardResult:
    if value <= 0:
        return ValidationError(f"{name} must be positive", {name: value})
    return None


def rating_in_range(rating: int) -> GuardResult:
    if not MIN_RATING <= rating <= MAX_RATING:
        return OutOfRange(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            {"rating": rating},
        )
    return None


def known_ride_id(ride_id: int, counter: int) -> GuardResult:
    if ride_id <= 0 or ride_id > counter:
        return InvalidRide(f"Ride {ride_id} does not exist", {"ride_id": ride_id})
    return None


def driver_active(identity: str, is_active: bool) -> GuardResult:
    if not is_active:
        return DriverInactive(
            f"Driver {identity} is not accepting rides", {"identity": identity}
        )
    return None


def caller_is(caller: str, expected: Optional[str], role: str) -> GuardResult:
    if expected is None or caller != expected:
        return Unauthorized(
            f"Only the ride's {role} may perform this action",
            {"caller": caller, "role": role},
        )
    return None


def caller_is_party(caller: str, rider: str, driver: Optional[str]) -> GuardResult:
    if caller != rider and caller != driver:
        return Unauthorized(
            "Only the ride's rider or driver may perform this action",
            {"caller": caller},
        )
    return None


def status_is(
    ride_id: int,
    current: RideStatus,
    *allowed: RideStatus,
    error: type[MarketplaceError] = InvalidTransition,
) -> GuardResult:
    if current not in allowed:
        return error(
            f"Ride {ride_id} is {current.value}",
            {
                "ride_id": ride_id,
                "status": current.value,
                "expected": [s.value for s in allowed],
            },
        )
    return None
