"""
Fare computation and escrow split
=================================

Formula
-------
Fare = BASE_FARE + Distance x FARE_PER_UNIT

Split at completion
-------------------
* **Driver share** = floor(Fare x 95 / 100)
* **Platform share** = Fare - Driver share  (rounding remainder goes here)
* **Refund** = Amount paid - Fare

All amounts are integers in the smallest currency unit; no floating point
touches money.  Complexity: O(1) per call.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InsufficientPayment, ValidationError

BASE_FARE = 1_000
FARE_PER_UNIT = 250

DRIVER_SHARE_PERCENT = 95
PLATFORM_SHARE_PERCENT = 100 - DRIVER_SHARE_PERCENT


@dataclass(frozen=True)
class FareSchedule:
    base_fare: int = BASE_FARE
    fare_per_unit: int = FARE_PER_UNIT

    def fare_for(self, distance: int) -> int:
        if distance <= 0:
            raise ValidationError(
                "Distance must be a positive integer", {"distance": distance}
            )
        return self.base_fare + self.fare_per_unit * distance


@dataclass(frozen=True)
class SettlementSplit:
    fare: int
    amount_paid: int
    driver_share: int
    platform_share: int
    refund: int


def split_payment(fare: int, amount_paid: int) -> SettlementSplit:
    """Divide *amount_paid* for a ride of *fare* between driver, platform and rider."""
    if amount_paid < fare:
        raise InsufficientPayment(
            f"Payment of {amount_paid} does not cover fare of {fare}",
            {"fare": fare, "amount_paid": amount_paid},
        )
    driver_share = fare * DRIVER_SHARE_PERCENT // 100
    return SettlementSplit(
        fare=fare,
        amount_paid=amount_paid,
        driver_share=driver_share,
        platform_share=fare - driver_share,
        refund=amount_paid - fare,
    )
