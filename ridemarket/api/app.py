"""
FastAPI application factory.

* Registers routes for accounts, rides and admin.
* Maps the marketplace error taxonomy onto HTTP status codes.
* Releases the database engine and Redis pool on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ridemarket.api.middleware import limiter
from ridemarket.api.routes import accounts, admin, rides
from ridemarket.config import settings
from ridemarket.domain.errors import MarketplaceError
from ridemarket.infrastructure.database import engine
from ridemarket.infrastructure.locks import LockNotAcquired
from ridemarket.infrastructure.redis_client import close_redis

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Ride marketplace API starting (platform owner=%s)", settings.platform_owner)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Ride marketplace API stopped")


async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error": type(exc).__name__,
            "category": exc.category,
        },
    )


async def lock_not_acquired_handler(request: Request, exc: LockNotAcquired):
    return JSONResponse(
        status_code=503,
        content={
            "detail": "Ledger is busy with another write; retry the request",
            "error": "LedgerBusy",
            "category": "concurrency",
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ride Marketplace API",
        description=(
            "Peer-to-peer ride marketplace with an ordered ride lifecycle, "
            "atomic escrow settlement of fares and bilateral ratings."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(LockNotAcquired, lock_not_acquired_handler)

    # Routers
    app.include_router(accounts.router, prefix="/api/v1")
    app.include_router(rides.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
