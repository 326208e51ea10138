"""Domain enumerations and state-transition rules."""

import enum

from .errors import InvalidTransition


class RideStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# State machine: maps current status -> set of valid next statuses
RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.REQUESTED: {RideStatus.ACCEPTED, RideStatus.CANCELLED},
    RideStatus.ACCEPTED: {RideStatus.IN_PROGRESS, RideStatus.CANCELLED},
    RideStatus.IN_PROGRESS: {RideStatus.COMPLETED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})


class ParticipantRole(str, enum.Enum):
    RIDER = "RIDER"
    DRIVER = "DRIVER"


class NotificationType(str, enum.Enum):
    RIDE_REQUESTED = "ride_requested"
    RIDE_ACCEPTED = "ride_accepted"
    RIDE_STARTED = "ride_started"
    RIDE_COMPLETED = "ride_completed"
    RIDE_CANCELLED = "ride_cancelled"
    DRIVER_REGISTERED = "driver_registered"
    RIDER_REGISTERED = "rider_registered"
    RATING_GIVEN = "rating_given"


def can_transition(current: RideStatus, new_status: RideStatus) -> bool:
    return new_status in RIDE_TRANSITIONS.get(current, set())


def transition(current: RideStatus, new_status: RideStatus) -> RideStatus:
    """Return *new_status* if the move from *current* is legal, else raise."""
    if not can_transition(current, new_status):
        raise InvalidTransition(
            f"Cannot transition from {current.value} to {new_status.value}",
            {"from": current.value, "to": new_status.value},
        )
    return new_status
