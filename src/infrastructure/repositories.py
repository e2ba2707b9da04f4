"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Missing rows surface as ``NotFound``
errors and driver failures as ``StoreError``; nothing else leaks out.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import TripModel, UserModel
from src.domain.entities import TripFilter
from src.domain.errors import StoreError, TripNotFound

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure during %s", operation)
        raise StoreError(f"Store failure during {operation}: {exc}") from exc


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, trip_id: str) -> TripModel:
        """Load a trip, always re-reading the row from the database."""
        with _store_errors("get"):
            trip = await self.session.get(
                TripModel, trip_id, populate_existing=True
            )
        if trip is None:
            raise TripNotFound(trip_id)
        return trip

    async def create(self, **fields: Any) -> TripModel:
        trip = TripModel(**fields)
        with _store_errors("create"):
            self.session.add(trip)
            await self.session.flush()
        return trip

    async def update(self, trip_id: str, fields: dict[str, Any]) -> None:
        """Partial merge of *fields* into the trip row."""
        with _store_errors("update"):
            result = await self.session.execute(
                update(TripModel)
                .where(TripModel.id == trip_id)
                .values(**fields, version=TripModel.version + 1)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise TripNotFound(trip_id)

    async def delete(self, trip_id: str) -> None:
        with _store_errors("delete"):
            result = await self.session.execute(
                delete(TripModel)
                .where(TripModel.id == trip_id)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise TripNotFound(trip_id)

    async def list(self, trip_filter: Optional[TripFilter] = None) -> list[TripModel]:
        query = select(TripModel).order_by(
            TripModel.trip_date, TripModel.departure_time
        )
        if trip_filter is not None:
            if trip_filter.route_tag:
                query = query.where(TripModel.route_tag == trip_filter.route_tag)
            if trip_filter.trip_date:
                query = query.where(TripModel.trip_date == trip_filter.trip_date)
            if trip_filter.max_cost is not None:
                query = query.where(TripModel.cost <= trip_filter.max_cost)
        with _store_errors("list"):
            result = await self.session.execute(query)
        return list(result.scalars().all())

    async def swap_seats(
        self,
        trip_id: str,
        *,
        expected_version: int,
        passengers: list[str],
        available_seats: int,
    ) -> bool:
        """Compare-and-swap the seat fields.

        The UPDATE only matches while the row still carries
        *expected_version*; returns False when another writer got there
        first (or the trip is gone).
        """
        with _store_errors("swap_seats"):
            result = await self.session.execute(
                update(TripModel)
                .where(
                    TripModel.id == trip_id,
                    TripModel.version == expected_version,
                )
                .values(
                    passengers=passengers,
                    available_seats=available_seats,
                    version=TripModel.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
        return result.rowcount == 1


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[UserModel]:
        with _store_errors("get_user"):
            return await self.session.get(UserModel, user_id)
