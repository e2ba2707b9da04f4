"""
Trip Validator
==============

Checks a loosely-typed trip payload before any domain logic runs and
returns a normalised ``ValidatedTrip``.  Checks run in a fixed order and
the first failing category raises ``TripValidationError``:

 1. required fields present
 2. origin / destination are non-blank text
 3. cost is a finite number within [MIN_COST, MAX_COST]
 4. trip_date is ``YYYY-MM-DD``, a real date, not before today
 5. departure / arrival are ``HH:MM`` (24 h)
 6. departure is not in the past
 7. arrival is strictly after departure
 8. the trip lasts at most MAX_TRIP_DURATION
 9. payment methods are a non-empty list of known methods
10. route_tag is in the Route Catalog
11. optional affinity / description are text

The validator is pure: the current time is passed in by the caller.

``validate_search`` is the looser counterpart for list-query parameters.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional

from .catalog import is_valid_route, routes_as_dicts
from .entities import TripFilter, ValidatedTrip
from .enums import PAYMENT_METHODS
from .errors import TripValidationError

MIN_COST = 1_000
MAX_COST = 100_000
MAX_TRIP_DURATION = timedelta(hours=3)

REQUIRED_FIELDS = (
    "trip_date",
    "origin",
    "destination",
    "arrival_time",
    "departure_time",
    "cost",
    "payment_methods",
    "route_tag",
)
TEXT_FIELDS = ("origin", "destination")
OPTIONAL_TEXT_FIELDS = ("affinity", "description")

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_RE = re.compile(r"([01]?[0-9]|2[0-3]):([0-5][0-9])")


def validate_trip(payload: Mapping[str, Any], now: datetime) -> ValidatedTrip:
    """Validate *payload* against the trip rules as of *now*.

    *now* should be timezone-aware; trip times are interpreted in its
    timezone.
    """
    missing = [f for f in REQUIRED_FIELDS if _is_missing(payload.get(f))]
    if missing:
        raise TripValidationError(
            "missing_fields",
            "Required fields are missing",
            {"missing_fields": missing},
        )

    for name in TEXT_FIELDS:
        value = payload[name]
        if not isinstance(value, str) or not value.strip():
            raise TripValidationError(
                "empty_text_field",
                f"The field {name} must be non-empty text",
                {"field": name},
            )

    cost = _parse_cost(payload["cost"])

    trip_date = _parse_trip_date(payload["trip_date"], now)

    departure_at = _combine(trip_date, payload["departure_time"], now)
    arrival_at = _combine(trip_date, payload["arrival_time"], now)

    if departure_at < now:
        raise TripValidationError(
            "departure_in_past", "The departure time cannot be in the past"
        )
    if arrival_at <= departure_at:
        raise TripValidationError(
            "arrival_before_departure",
            "The arrival time must be later than the departure time",
        )
    if arrival_at - departure_at > MAX_TRIP_DURATION:
        raise TripValidationError(
            "trip_too_long",
            "A trip cannot last more than 3 hours",
            {"max_hours": MAX_TRIP_DURATION.total_seconds() / 3600},
        )

    payment_methods = _parse_payment_methods(payload["payment_methods"])

    route_tag = payload["route_tag"]
    if not is_valid_route(route_tag):
        raise TripValidationError(
            "invalid_route", "Invalid route", {"valid_routes": routes_as_dicts()}
        )

    for name in OPTIONAL_TEXT_FIELDS:
        value = payload.get(name)
        if value is not None and not isinstance(value, str):
            raise TripValidationError(
                "invalid_optional_field",
                f"The field {name} must be text",
                {"field": name},
            )

    return ValidatedTrip(
        trip_date=trip_date,
        origin=payload["origin"].strip(),
        destination=payload["destination"].strip(),
        departure_time=departure_at.strftime("%H:%M"),
        arrival_time=arrival_at.strftime("%H:%M"),
        cost=cost,
        payment_methods=payment_methods,
        route_tag=route_tag,
        affinity=payload.get("affinity"),
        description=payload.get("description"),
    )


def validate_search(
    date_: Optional[str] = None,
    route_tag: Optional[str] = None,
    max_cost: Optional[str] = None,
) -> TripFilter:
    """Validate list-query parameters.  Every parameter is optional."""
    trip_date = None
    if date_:
        try:
            if not _DATE_RE.fullmatch(date_):
                raise ValueError(date_)
            trip_date = date.fromisoformat(date_)
        except ValueError:
            raise TripValidationError(
                "invalid_date_format", "Invalid date format, expected YYYY-MM-DD"
            ) from None

    if route_tag and not is_valid_route(route_tag):
        raise TripValidationError(
            "invalid_route", "Invalid route", {"valid_routes": routes_as_dicts()}
        )

    cost = None
    if max_cost:
        cost = _to_number(max_cost)
        if cost is None or cost <= 0:
            raise TripValidationError(
                "invalid_max_cost", "max_cost must be a number greater than 0"
            )

    return TripFilter(route_tag=route_tag or None, trip_date=trip_date, max_cost=cost)


# ── Helpers ───────────────────────────────────────────────────────────


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _to_number(value: Any) -> Optional[float]:
    """Parse *value* as a finite float, or return None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_cost(value: Any) -> float:
    cost = _to_number(value)
    if cost is None:
        raise TripValidationError("invalid_cost", "The cost must be a valid number")
    if not MIN_COST <= cost <= MAX_COST:
        raise TripValidationError(
            "cost_out_of_range",
            f"The cost must be between {MIN_COST} and {MAX_COST}",
            {"min_cost": MIN_COST, "max_cost": MAX_COST},
        )
    return cost


def _parse_trip_date(value: Any, now: datetime) -> date:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise TripValidationError(
            "invalid_date_format", "The date format must be YYYY-MM-DD"
        )
    try:
        trip_date = date.fromisoformat(value)
    except ValueError:
        raise TripValidationError("invalid_date", "Invalid date") from None
    if trip_date < now.date():
        raise TripValidationError(
            "date_in_past", "The trip date cannot be earlier than today"
        )
    return trip_date


def _combine(trip_date: date, value: Any, now: datetime) -> datetime:
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise TripValidationError(
            "invalid_time_format", "The time format must be HH:MM"
        )
    try:
        clock = time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        raise TripValidationError("invalid_time", "Invalid times") from None
    return datetime.combine(trip_date, clock, tzinfo=now.tzinfo)


def _parse_payment_methods(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)) or not value:
        raise TripValidationError(
            "payment_methods_required", "At least one payment method is required"
        )
    invalid = [m for m in value if m not in PAYMENT_METHODS]
    if invalid:
        raise TripValidationError(
            "invalid_payment_methods",
            "Invalid payment methods",
            {
                "invalid_payment_methods": invalid,
                "valid_payment_methods": list(PAYMENT_METHODS),
            },
        )
    return list(dict.fromkeys(value))
