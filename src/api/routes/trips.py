"""
Trip endpoints
==============

POST   /api/v1/trips           -- publish a trip (driver with a vehicle)
GET    /api/v1/trips           -- list trips (?route_tag=&date=&max_cost=)
GET    /api/v1/trips/{trip_id} -- get one trip
PUT    /api/v1/trips/{trip_id} -- update a trip (owner only)
DELETE /api/v1/trips/{trip_id} -- delete a trip (owner only)
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user_id, get_db
from src.api.middleware import limiter
from src.api.schemas import ApiResponse, ErrorResponse, TripResponse
from src.config import settings
from src.domain.validation import validate_search
from src.infrastructure.repositories import TripRepository, UserRepository
from src.services.trips import TripService

router = APIRouter(prefix="/trips", tags=["trips"])

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def _service(db: AsyncSession) -> TripService:
    return TripService(TripRepository(db), UserRepository(db))


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[TripResponse],
    summary="Publish a trip",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def create_trip(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    trip = await _service(db).create_trip(user_id, payload)
    return ApiResponse[TripResponse](
        message="Trip created", data=TripResponse.model_validate(trip)
    )


@router.get(
    "",
    response_model=ApiResponse[list[TripResponse]],
    summary="List trips",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def list_trips(
    request: Request,
    route_tag: Optional[str] = Query(None),
    trip_date: Optional[str] = Query(None, alias="date"),
    max_cost: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    trip_filter = validate_search(trip_date, route_tag, max_cost)
    trips = await _service(db).list_trips(trip_filter)
    return ApiResponse[list[TripResponse]](
        data=[TripResponse.model_validate(t) for t in trips]
    )


@router.get(
    "/{trip_id}",
    response_model=ApiResponse[TripResponse],
    summary="Get a trip",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_trip(
    request: Request,
    trip_id: str,
    db: AsyncSession = Depends(get_db),
):
    trip = await _service(db).get_trip(trip_id)
    return ApiResponse[TripResponse](data=TripResponse.model_validate(trip))


@router.put(
    "/{trip_id}",
    response_model=ApiResponse[TripResponse],
    summary="Update a trip",
    description="Only the driver who published the trip may update it.",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def update_trip(
    request: Request,
    trip_id: str,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    trip = await _service(db).update_trip(trip_id, user_id, payload)
    return ApiResponse[TripResponse](
        message="Trip updated", data=TripResponse.model_validate(trip)
    )


@router.delete(
    "/{trip_id}",
    response_model=ApiResponse[None],
    summary="Delete a trip",
    description="Only the driver who published the trip may delete it.",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def delete_trip(
    request: Request,
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await _service(db).delete_trip(trip_id, user_id)
    return ApiResponse[None](message="Trip deleted")
