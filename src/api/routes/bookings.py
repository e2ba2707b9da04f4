"""
Booking endpoints
=================

POST   /api/v1/book/{trip_id} -- reserve one seat for the caller
DELETE /api/v1/book/{trip_id} -- give the caller's seat back
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user_id, get_db
from src.api.middleware import limiter
from src.api.schemas import ApiResponse, BookingResponse, ErrorResponse
from src.config import settings
from src.infrastructure.repositories import TripRepository
from src.services.booking import BookingEngine

router = APIRouter(prefix="/book", tags=["bookings"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Already booked / no seats"},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse, "description": "Too much contention, retry"},
}


@router.post(
    "/{trip_id}",
    response_model=ApiResponse[BookingResponse],
    summary="Book a seat on a trip",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def book_trip(
    request: Request,
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    confirmation = await BookingEngine(TripRepository(db)).book(trip_id, user_id)
    return ApiResponse[BookingResponse](
        message="Trip booked",
        data=BookingResponse.model_validate(confirmation),
    )


@router.delete(
    "/{trip_id}",
    response_model=ApiResponse[BookingResponse],
    summary="Cancel a booking",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def cancel_booking(
    request: Request,
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    confirmation = await BookingEngine(TripRepository(db)).cancel(trip_id, user_id)
    return ApiResponse[BookingResponse](
        message="Booking cancelled",
        data=BookingResponse.model_validate(confirmation),
    )
