"""Pydantic response schemas and the shared response envelope."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from src.domain.enums import TripStatus

T = TypeVar("T")


# ── Envelope ──────────────────────────────────────────────────────────


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message, data}`` wrapper used by every endpoint."""

    success: bool = True
    message: str = ""
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[dict[str, Any]] = None


# ── Trips ─────────────────────────────────────────────────────────────


class VehicleResponse(BaseModel):
    plate: str
    color: str
    brand: str
    model: str
    capacity: int


class TripResponse(BaseModel):
    id: str
    driver_id: str
    driver_name: Optional[str] = None
    driver_vehicle: VehicleResponse
    trip_date: date
    departure_time: str
    arrival_time: str
    origin: str
    destination: str
    cost: float
    payment_methods: list[str]
    route_tag: str
    affinity: Optional[str] = None
    description: Optional[str] = None
    status: TripStatus
    passengers: list[str] = []
    available_seats: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    trip_id: str
    user_id: str
    available_seats: int
    passengers: list[str] = []

    model_config = {"from_attributes": True}


# ── Catalog / admin ───────────────────────────────────────────────────


class RouteResponse(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"
