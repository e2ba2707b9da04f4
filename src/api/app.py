"""
FastAPI application factory.

* Registers routes for trips, bookings, the route catalog and admin.
* Renders every error in the ``{success, message, error}`` envelope.
* Applies rate-limiting middleware.
* Disposes the DB engine on shutdown via lifespan events.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.errors import (
    http_error_handler,
    request_validation_handler,
    trip_error_handler,
    unhandled_error_handler,
)
from src.api.middleware import limiter
from src.api.routes import admin, bookings, catalog, trips
from src.domain.errors import TripError
from src.infrastructure.database import engine

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled DB connections on shutdown."""
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Carpool Trips API",
        description=(
            "Drivers publish scheduled trips along fixed commuter routes "
            "and passengers book seats.  Seat accounting is safe under "
            "concurrent bookings."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error envelope
    app.add_exception_handler(TripError, trip_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Routers
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(catalog.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
