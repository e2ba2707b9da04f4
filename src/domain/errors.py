"""
Error taxonomy shared by the validator, services and repositories.

Every error carries a machine-readable ``code`` and a ``details`` dict so
the API layer can render it without knowing the concrete class.
"""

from __future__ import annotations

from typing import Any, Optional


class TripError(Exception):
    code = "trip_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ── Caller's fault ────────────────────────────────────────────────────


class TripValidationError(TripError):
    """Malformed or out-of-range input.  Nothing was mutated."""

    def __init__(
        self, code: str, message: str, details: Optional[dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.code = code


class NoVehicleRegistered(TripError):
    code = "no_vehicle_registered"

    def __init__(self, user_id: str):
        super().__init__(
            "The user has no registered vehicle", {"user_id": user_id}
        )


class InvalidVehicle(NoVehicleRegistered):
    code = "invalid_vehicle"

    def __init__(self, user_id: str, reason: str):
        TripError.__init__(
            self,
            "The registered vehicle is incomplete or invalid",
            {"user_id": user_id, "reason": reason},
        )


# ── Missing entities ──────────────────────────────────────────────────


class NotFound(TripError):
    code = "not_found"


class TripNotFound(NotFound):
    code = "trip_not_found"

    def __init__(self, trip_id: str):
        super().__init__("Trip not found", {"trip_id": trip_id})


class UserNotFound(NotFound):
    code = "user_not_found"

    def __init__(self, user_id: str):
        super().__init__("User not found", {"user_id": user_id})


# ── Authorization ─────────────────────────────────────────────────────


class Forbidden(TripError):
    code = "forbidden"


class NotTripOwner(Forbidden):
    code = "not_trip_owner"

    def __init__(self, trip_id: str, action: str = "modify"):
        super().__init__(
            f"You are not allowed to {action} this trip", {"trip_id": trip_id}
        )


# ── Business-rule refusals (no mutation) ──────────────────────────────


class BookingConflict(TripError):
    code = "booking_conflict"


class AlreadyBooked(BookingConflict):
    code = "already_booked"

    def __init__(self, trip_id: str, user_id: str):
        super().__init__(
            "The user is already a passenger on this trip",
            {"trip_id": trip_id, "user_id": user_id},
        )


class SeatsUnavailable(BookingConflict):
    code = "seats_unavailable"

    def __init__(self, trip_id: str):
        super().__init__(
            "There are no seats available on this trip", {"trip_id": trip_id}
        )


class NotBooked(BookingConflict):
    code = "not_booked"

    def __init__(self, trip_id: str, user_id: str):
        super().__init__(
            "The user is not a passenger on this trip",
            {"trip_id": trip_id, "user_id": user_id},
        )


class ConcurrentModification(TripError):
    """Compare-and-swap kept losing; the caller may retry."""

    code = "concurrent_modification"

    def __init__(self, trip_id: str, attempts: int):
        super().__init__(
            "The trip is being modified concurrently, please retry",
            {"trip_id": trip_id, "attempts": attempts},
        )


# ── Internal ──────────────────────────────────────────────────────────


class PersistenceInconsistency(TripError):
    code = "persistence_inconsistency"


class StoreError(TripError):
    code = "store_error"
