"""
Route Catalog
=============

Static list of the commuter corridors a trip can be tagged with.  Pure
lookup table: no state, no I/O, no failure modes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Route:
    id: str
    name: str


VALID_ROUTES: tuple[Route, ...] = (
    Route("boyaca", "Boyacá"),
    Route("autopista", "Autopista Norte"),
    Route("septima", "7ma"),
    Route("novena", "9na"),
    Route("zipa", "Zipa"),
    Route("heroes", "Héroes"),
    Route("suba", "Suba"),
    Route("mosquera", "Mosquera"),
    Route("calle80", "Calle 80"),
    Route("chia", "Chía"),
)

_ROUTE_IDS = frozenset(r.id for r in VALID_ROUTES)


def is_valid_route(tag: object) -> bool:
    return isinstance(tag, str) and tag in _ROUTE_IDS


def list_routes() -> tuple[Route, ...]:
    """Return every route in catalog order."""
    return VALID_ROUTES


def routes_as_dicts() -> list[dict[str, str]]:
    """JSON-friendly form used in error details and the catalog endpoint."""
    return [asdict(r) for r in VALID_ROUTES]
