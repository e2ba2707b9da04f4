"""
Booking Engine
==============

Reserves (and releases) seats on a trip.

Concurrency safety
------------------
Two passengers racing for the last seat must not both succeed, so the
read-check-write sequence is closed by a **compare-and-swap** on the
trip's ``version`` column:

1. read the trip and its version
2. apply the change to a ``SeatLedger`` (raises on AlreadyBooked /
   SeatsUnavailable / NotBooked, touching nothing)
3. ``UPDATE trips ... WHERE id = :id AND version = :version``

If step 3 matches no row another writer committed in between; re-read
and start over, at most ``max_retries`` times.  Every attempt that fails
a business rule raises before any write is issued.
"""

from __future__ import annotations

import logging
from typing import Callable

from src.config import settings
from src.domain.entities import BookingConfirmation, SeatLedger
from src.domain.errors import ConcurrentModification
from src.infrastructure.repositories import TripRepository

logger = logging.getLogger(__name__)


class BookingEngine:
    def __init__(
        self, trips: TripRepository, max_retries: int | None = None
    ):
        self.trips = trips
        if max_retries is None:
            max_retries = settings.booking_max_retries
        self.max_retries = max_retries

    async def book(self, trip_id: str, user_id: str) -> BookingConfirmation:
        """Reserve one seat on *trip_id* for *user_id*."""
        confirmation = await self._apply(
            trip_id, user_id, lambda ledger: ledger.reserve(user_id)
        )
        logger.info(
            "Trip %s booked by %s (%d seats left)",
            trip_id,
            user_id,
            confirmation.available_seats,
        )
        return confirmation

    async def cancel(self, trip_id: str, user_id: str) -> BookingConfirmation:
        """Release the seat *user_id* holds on *trip_id*."""
        confirmation = await self._apply(
            trip_id, user_id, lambda ledger: ledger.release(user_id)
        )
        logger.info(
            "Booking on trip %s cancelled by %s (%d seats left)",
            trip_id,
            user_id,
            confirmation.available_seats,
        )
        return confirmation

    async def _apply(
        self,
        trip_id: str,
        user_id: str,
        change: Callable[[SeatLedger], None],
    ) -> BookingConfirmation:
        for attempt in range(1, self.max_retries + 1):
            trip = await self.trips.get(trip_id)
            ledger = SeatLedger(
                trip_id=trip_id,
                passengers=list(trip.passengers or []),
                available_seats=trip.available_seats,
            )
            change(ledger)

            swapped = await self.trips.swap_seats(
                trip_id,
                expected_version=trip.version,
                passengers=ledger.passengers,
                available_seats=ledger.available_seats,
            )
            if swapped:
                return BookingConfirmation(
                    trip_id=trip_id,
                    user_id=user_id,
                    available_seats=ledger.available_seats,
                    passengers=ledger.passengers,
                )
            logger.debug(
                "Lost seat update race on trip %s (attempt %d/%d)",
                trip_id,
                attempt,
                self.max_retries,
            )

        logger.warning(
            "Giving up on trip %s after %d attempts", trip_id, self.max_retries
        )
        raise ConcurrentModification(trip_id, self.max_retries)
