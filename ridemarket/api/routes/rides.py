"""
Ride endpoints
==============

POST /api/v1/rides                    -- request a ride (rider)
GET  /api/v1/rides/{ride_id}          -- ride details
POST /api/v1/rides/{ride_id}/accept   -- claim a requested ride (driver)
POST /api/v1/rides/{ride_id}/start    -- start an accepted ride (driver)
POST /api/v1/rides/{ride_id}/complete -- complete and settle payment (rider)
POST /api/v1/rides/{ride_id}/cancel   -- cancel before the trip starts
POST /api/v1/rides/{ride_id}/ratings  -- rate the other party once

The caller is identified by the ``X-Identity`` header.
"""

from fastapi import APIRouter, Depends, Request

from ridemarket.api.dependencies import get_caller, get_marketplace, serialize_writes
from ridemarket.api.middleware import RATE_LIMIT, limiter
from ridemarket.api.schemas import (
    ErrorResponse,
    RatingRequest,
    RatingResponse,
    RideCancelRequest,
    RideCompleteRequest,
    RideCreateRequest,
    RideResponse,
)
from ridemarket.services.marketplace import RideMarketplace

router = APIRouter(
    prefix="/rides",
    tags=["rides"],
    responses={
        402: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    status_code=201,
    response_model=RideResponse,
    summary="Request a ride",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def request_ride(
    request: Request,
    body: RideCreateRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.request_ride(
        caller, body.pickup, body.destination, body.distance
    )


@router.get("/{ride_id}", response_model=RideResponse, summary="Get ride details")
@limiter.limit(RATE_LIMIT)
async def get_ride(
    request: Request,
    ride_id: int,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.get_ride_details(ride_id)


@router.post(
    "/{ride_id}/accept",
    response_model=RideResponse,
    summary="Accept a requested ride",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def accept_ride(
    request: Request,
    ride_id: int,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.accept_ride(caller, ride_id)


@router.post(
    "/{ride_id}/start",
    response_model=RideResponse,
    summary="Start an accepted ride",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def start_ride(
    request: Request,
    ride_id: int,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.start_ride(caller, ride_id)


@router.post(
    "/{ride_id}/complete",
    response_model=RideResponse,
    summary="Complete a ride and settle payment",
    description=(
        "Debits ``amount_paid`` from the rider's wallet, pays 95 % of the fare "
        "to the driver and the rest to the platform, and refunds any "
        "overpayment.  Either every transfer happens or none does."
    ),
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def complete_ride(
    request: Request,
    ride_id: int,
    body: RideCompleteRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.complete_ride(caller, ride_id, body.amount_paid)


@router.post(
    "/{ride_id}/cancel",
    response_model=RideResponse,
    summary="Cancel a ride",
    description="Only REQUESTED or ACCEPTED rides can be cancelled.",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def cancel_ride(
    request: Request,
    ride_id: int,
    body: RideCancelRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.cancel_ride(caller, ride_id, body.reason)


@router.post(
    "/{ride_id}/ratings",
    response_model=RatingResponse,
    summary="Rate the other party of a completed ride",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def rate_user(
    request: Request,
    ride_id: int,
    body: RatingRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    new_rating = await marketplace.rate_user(
        caller, ride_id, body.rating, body.target_is_driver
    )
    return RatingResponse(ride_id=ride_id, new_rating=new_rating)
