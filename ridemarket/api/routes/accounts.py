"""
Account endpoints
=================

POST  /api/v1/accounts/drivers                    -- register caller as driver
POST  /api/v1/accounts/riders                     -- register caller as rider
PATCH /api/v1/accounts/drivers/availability       -- toggle caller's availability
GET   /api/v1/accounts/drivers/{identity}         -- driver profile
GET   /api/v1/accounts/riders/{identity}          -- rider profile
GET   /api/v1/accounts/drivers/{identity}/rides   -- rides claimed by a driver
GET   /api/v1/accounts/riders/{identity}/rides    -- rides requested by a rider
POST  /api/v1/accounts/wallet/deposits            -- fund caller's wallet
GET   /api/v1/accounts/wallet/{identity}          -- wallet balance
"""

from fastapi import APIRouter, Depends, Request

from ridemarket.api.dependencies import get_caller, get_marketplace, serialize_writes
from ridemarket.api.middleware import RATE_LIMIT, limiter
from ridemarket.api.schemas import (
    AvailabilityResponse,
    BalanceResponse,
    DepositRequest,
    DriverRegisterRequest,
    DriverResponse,
    ErrorResponse,
    RideHistoryResponse,
    RiderRegisterRequest,
    RiderResponse,
)
from ridemarket.services.marketplace import RideMarketplace

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)


@router.post(
    "/drivers",
    status_code=201,
    response_model=DriverResponse,
    summary="Register the caller as a driver",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def register_driver(
    request: Request,
    body: DriverRegisterRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.register_driver(caller, body.name, body.vehicle_info)


@router.post(
    "/riders",
    status_code=201,
    response_model=RiderResponse,
    summary="Register the caller as a rider",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def register_rider(
    request: Request,
    body: RiderRegisterRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.register_rider(caller, body.name)


@router.patch(
    "/drivers/availability",
    response_model=AvailabilityResponse,
    summary="Toggle the caller's availability",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def toggle_availability(
    request: Request,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    is_active = await marketplace.toggle_driver_availability(caller)
    return AvailabilityResponse(identity=caller, is_active=is_active)


@router.get("/drivers/{identity}", response_model=DriverResponse)
@limiter.limit(RATE_LIMIT)
async def get_driver(
    request: Request,
    identity: str,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.get_driver(identity)


@router.get("/riders/{identity}", response_model=RiderResponse)
@limiter.limit(RATE_LIMIT)
async def get_rider(
    request: Request,
    identity: str,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    return await marketplace.get_rider(identity)


@router.get("/drivers/{identity}/rides", response_model=RideHistoryResponse)
@limiter.limit(RATE_LIMIT)
async def get_driver_history(
    request: Request,
    identity: str,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    ride_ids = await marketplace.get_driver_history(identity)
    return RideHistoryResponse(identity=identity, ride_ids=ride_ids)


@router.get("/riders/{identity}/rides", response_model=RideHistoryResponse)
@limiter.limit(RATE_LIMIT)
async def get_rider_history(
    request: Request,
    identity: str,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    ride_ids = await marketplace.get_rider_history(identity)
    return RideHistoryResponse(identity=identity, ride_ids=ride_ids)


@router.post(
    "/wallet/deposits",
    response_model=BalanceResponse,
    summary="Fund the caller's wallet",
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def deposit(
    request: Request,
    body: DepositRequest,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    balance = await marketplace.fund_wallet(caller, body.amount)
    return BalanceResponse(identity=caller, balance=balance)


@router.get("/wallet/{identity}", response_model=BalanceResponse)
@limiter.limit(RATE_LIMIT)
async def get_balance(
    request: Request,
    identity: str,
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    balance = await marketplace.get_balance(identity)
    return BalanceResponse(identity=identity, balance=balance)
