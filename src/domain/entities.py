"""
Domain entities and value objects.

- ``SeatLedger`` encapsulates the seat invariant
  ``available_seats == capacity - len(passengers)`` and never lets the
  counter go negative or a passenger appear twice.
- ``is_owner`` is the single ownership predicate used by update / delete.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Protocol

from .errors import AlreadyBooked, NotBooked, SeatsUnavailable


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class VehicleSnapshot:
    """Copy of the driver's vehicle taken when the trip is created."""

    plate: str
    color: str
    brand: str
    model: str
    capacity: int

    @classmethod
    def from_profile(cls, vehicle: Mapping[str, Any]) -> "VehicleSnapshot":
        """Raises ``ValueError`` when the seat capacity is not a whole number >= 0."""
        capacity = vehicle.get("capacity", 0)
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f"invalid vehicle capacity: {capacity!r}")
        return cls(
            plate=str(vehicle.get("plate", "")),
            color=str(vehicle.get("color", "")),
            brand=str(vehicle.get("brand", "")),
            model=str(vehicle.get("model", "")),
            capacity=capacity,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ValidatedTrip:
    """Normalised trip payload produced by the validator."""

    trip_date: date
    origin: str
    destination: str
    departure_time: str
    arrival_time: str
    cost: float
    payment_methods: list[str]
    route_tag: str
    affinity: Optional[str] = None
    description: Optional[str] = None

    def as_fields(self) -> dict[str, Any]:
        """Columns written on create / update.  Unset optionals are skipped."""
        fields = asdict(self)
        for name in ("affinity", "description"):
            if fields[name] is None:
                del fields[name]
        return fields


@dataclass(frozen=True)
class TripFilter:
    route_tag: Optional[str] = None
    trip_date: Optional[date] = None
    max_cost: Optional[float] = None


@dataclass(frozen=True)
class BookingConfirmation:
    trip_id: str
    user_id: str
    available_seats: int
    passengers: list[str] = field(default_factory=list)


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class SeatLedger:
    trip_id: str
    passengers: list[str]
    available_seats: int

    def reserve(self, user_id: str) -> None:
        """Add *user_id* and take one seat, or raise without mutating."""
        if user_id in self.passengers:
            raise AlreadyBooked(self.trip_id, user_id)
        if self.available_seats <= 0:
            raise SeatsUnavailable(self.trip_id)
        self.passengers = [*self.passengers, user_id]
        self.available_seats -= 1

    def release(self, user_id: str) -> None:
        """Remove *user_id* and give the seat back."""
        if user_id not in self.passengers:
            raise NotBooked(self.trip_id, user_id)
        self.passengers = [p for p in self.passengers if p != user_id]
        self.available_seats += 1


class OwnedTrip(Protocol):
    driver_id: str


def is_owner(trip: OwnedTrip, user_id: str) -> bool:
    return trip.driver_id == user_id
