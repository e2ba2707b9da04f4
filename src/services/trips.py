"""
Trip Lifecycle Service
======================

Creates, lists, updates and deletes trips.

* Payloads are validated before anything is read or written.
* The driver's vehicle is snapshotted into the trip at creation; later
  changes to the profile do not affect existing trips.
* Only the owning driver may update or delete a trip (``is_owner``).
* Seat fields (``passengers`` / ``available_seats``) are never written
  here after creation; they belong to the booking engine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional
from zoneinfo import ZoneInfo

from src.config import settings
from src.domain.entities import TripFilter, VehicleSnapshot, is_owner
from src.domain.enums import TripStatus
from src.domain.errors import (
    InvalidVehicle,
    NoVehicleRegistered,
    NotTripOwner,
    PersistenceInconsistency,
    UserNotFound,
)
from src.domain.validation import validate_trip
from src.infrastructure.models import TripModel
from src.infrastructure.repositories import TripRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_AFFINITY = "Not specified"


def local_now() -> datetime:
    """Current time in the configured commuter timezone."""
    return datetime.now(ZoneInfo(settings.timezone))


class TripService:
    def __init__(
        self,
        trips: TripRepository,
        users: UserRepository,
        clock: Callable[[], datetime] = local_now,
    ):
        self.trips = trips
        self.users = users
        self.clock = clock

    async def create_trip(
        self, driver_id: str, payload: Mapping[str, Any]
    ) -> TripModel:
        trip_data = validate_trip(payload, self.clock())

        driver = await self.users.get_by_id(driver_id)
        if driver is None:
            raise UserNotFound(driver_id)
        if not driver.vehicle:
            raise NoVehicleRegistered(driver_id)

        try:
            vehicle = VehicleSnapshot.from_profile(driver.vehicle)
        except ValueError as exc:
            raise InvalidVehicle(driver_id, str(exc)) from exc
        fields = trip_data.as_fields()
        if not fields.get("affinity"):
            fields["affinity"] = DEFAULT_AFFINITY
        fields.setdefault("description", "")

        trip = await self.trips.create(
            driver_id=driver_id,
            driver_name=driver.name,
            driver_vehicle=vehicle.as_dict(),
            status=TripStatus.SCHEDULED,
            passengers=[],
            available_seats=vehicle.capacity,
            version=1,
            created_at=datetime.now(timezone.utc),
            **fields,
        )

        saved = await self.trips.get(trip.id)
        if not saved.route_tag:
            raise PersistenceInconsistency(
                "Route tag was not saved correctly", {"trip_id": trip.id}
            )

        logger.info(
            "Trip %s created by %s on route %s", saved.id, driver_id, saved.route_tag
        )
        return saved

    async def list_trips(
        self, trip_filter: Optional[TripFilter] = None
    ) -> list[TripModel]:
        return await self.trips.list(trip_filter)

    async def get_trip(self, trip_id: str) -> TripModel:
        return await self.trips.get(trip_id)

    async def update_trip(
        self, trip_id: str, driver_id: str, payload: Mapping[str, Any]
    ) -> TripModel:
        trip_data = validate_trip(payload, self.clock())

        trip = await self.trips.get(trip_id)
        if not is_owner(trip, driver_id):
            raise NotTripOwner(trip_id, "modify")

        await self.trips.update(
            trip_id,
            {**trip_data.as_fields(), "updated_at": datetime.now(timezone.utc)},
        )
        logger.info("Trip %s updated by %s", trip_id, driver_id)
        return await self.trips.get(trip_id)

    async def delete_trip(self, trip_id: str, driver_id: str) -> None:
        trip = await self.trips.get(trip_id)
        if not is_owner(trip, driver_id):
            raise NotTripOwner(trip_id, "delete")

        await self.trips.delete(trip_id)
        logger.info("Trip %s deleted by %s", trip_id, driver_id)
