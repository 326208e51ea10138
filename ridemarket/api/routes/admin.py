"""
Admin / maintenance endpoints
=============================

GET  /api/v1/admin/health             -- simple health check
POST /api/v1/admin/emergency-withdraw -- sweep escrow to the platform (owner only)
"""

from fastapi import APIRouter, Depends, Request

from ridemarket.api.dependencies import get_caller, get_marketplace, serialize_writes
from ridemarket.api.middleware import RATE_LIMIT, limiter
from ridemarket.api.schemas import ErrorResponse, HealthResponse, WithdrawResponse
from ridemarket.services.marketplace import RideMarketplace

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/emergency-withdraw",
    response_model=WithdrawResponse,
    summary="Sweep the escrow balance to the platform",
    responses={403: {"model": ErrorResponse}},
    dependencies=[Depends(serialize_writes)],
)
@limiter.limit(RATE_LIMIT)
async def emergency_withdraw(
    request: Request,
    caller: str = Depends(get_caller),
    marketplace: RideMarketplace = Depends(get_marketplace),
):
    swept = await marketplace.emergency_withdraw(caller)
    return WithdrawResponse(swept=swept)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
