"""
Error taxonomy for marketplace operations.

Every operation either commits all of its effects or raises one of the
errors below with nothing persisted.  The five category classes map onto
HTTP status codes in the API layer; the concrete subclasses tell the caller
exactly which precondition failed.
"""

from typing import Any


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    category = "marketplace"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ── Categories ────────────────────────────────────────────────────────


class ValidationError(MarketplaceError):
    """Malformed input: empty strings, non-positive amounts, bad ratings."""

    category = "validation"
    status_code = 422


class AuthorizationError(MarketplaceError):
    """Caller lacks the required role or relationship to the ride."""

    category = "authorization"
    status_code = 403


class StateError(MarketplaceError):
    """Operation attempted from a status that forbids it."""

    category = "state"
    status_code = 409


class ResourceError(MarketplaceError):
    """Unknown ride, unregistered identity or inactive driver."""

    category = "resource"
    status_code = 404


class PaymentError(MarketplaceError):
    """Insufficient payment offered, or a transfer failed during settlement."""

    category = "payment"
    status_code = 402


# ── Concrete errors ───────────────────────────────────────────────────


class OutOfRange(ValidationError):
    pass


class Unauthorized(AuthorizationError):
    pass


class InvalidTransition(StateError):
    """Raised when a ride status change violates the state machine."""


class NotAvailable(StateError):
    """Ride is no longer open for a driver to claim."""


class AlreadyRated(StateError):
    pass


class AlreadyRegistered(StateError):
    pass


class InvalidRide(ResourceError):
    pass


class NotRegistered(ResourceError):
    pass


class DriverInactive(ResourceError):
    status_code = 409


class InsufficientPayment(PaymentError):
    pass


class InsufficientFunds(PaymentError):
    """Wallet balance too low to cover a debit."""


class TransferFailed(PaymentError):
    pass
