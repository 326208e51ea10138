"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ridemarket.domain.enums import RideStatus


# ── Requests ──────────────────────────────────────────────────────────


class DriverRegisterRequest(BaseModel):
    name: str
    vehicle_info: str


class RiderRegisterRequest(BaseModel):
    name: str


class RideCreateRequest(BaseModel):
    pickup: str
    destination: str
    distance: int = Field(..., description="Trip length in whole distance units.")


class RideCompleteRequest(BaseModel):
    amount_paid: int = Field(
        ...,
        description="Amount offered in the smallest currency unit; overpayment is refunded.",
    )


class RideCancelRequest(BaseModel):
    reason: str = ""


class RatingRequest(BaseModel):
    rating: int = Field(..., description="Scaled by 100: 100 (1.00) to 500 (5.00).")
    target_is_driver: bool


class DepositRequest(BaseModel):
    amount: int


# ── Responses ─────────────────────────────────────────────────────────


class DriverResponse(BaseModel):
    identity: str
    name: str
    vehicle_info: str
    rating: int
    total_rides: int
    is_active: bool
    is_registered: bool

    model_config = {"from_attributes": True}


class RiderResponse(BaseModel):
    identity: str
    name: str
    rating: int
    total_rides: int
    is_registered: bool

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    identity: str
    is_active: bool


class RideResponse(BaseModel):
    id: int
    rider: str
    driver: Optional[str] = None
    pickup: str
    destination: str
    distance: int
    fare: int
    status: RideStatus
    created_at: Optional[datetime] = None
    rider_rated: bool
    driver_rated: bool
    cancellation_reason: Optional[str] = None

    model_config = {"from_attributes": True}


class RideHistoryResponse(BaseModel):
    identity: str
    ride_ids: list[int]


class RatingResponse(BaseModel):
    ride_id: int
    new_rating: int


class BalanceResponse(BaseModel):
    identity: str
    balance: int


class WithdrawResponse(BaseModel):
    swept: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
    error: str
    category: str
