"""
SQLAlchemy ORM models.

Tables
------
* ``users`` -- user profiles; ``vehicle`` is the registered vehicle, if any
* ``trips`` -- scheduled trips published by drivers

A trip is stored as one row so that every write to it is atomic.
``passengers``, ``payment_methods`` and ``driver_vehicle`` are JSON
columns; ``version`` is bumped on every write and is the
compare-and-swap token used by the booking engine.

Indexes
-------
* **B-Tree** on ``driver_id``, ``route_tag`` and ``trip_date`` for the
  ownership checks and list filters.
"""

import uuid

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
)

from .database import Base
from src.domain.enums import TripStatus


def _new_id() -> str:
    return uuid.uuid4().hex


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    # {"plate", "color", "brand", "model", "capacity"}
    vehicle = Column(JSON, nullable=True)


class TripModel(Base):
    __tablename__ = "trips"

    id = Column(String(64), primary_key=True, default=_new_id)
    driver_id = Column(String(64), nullable=False)
    driver_name = Column(String(120), nullable=True)
    driver_vehicle = Column(JSON, nullable=False)

    trip_date = Column(Date, nullable=False)
    departure_time = Column(String(5), nullable=False)
    arrival_time = Column(String(5), nullable=False)
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    cost = Column(Float, nullable=False)
    payment_methods = Column(JSON, nullable=False)
    route_tag = Column(String(32), nullable=False)
    affinity = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    status = Column(
        Enum(TripStatus, values_callable=lambda e: [m.value for m in e]),
        default=TripStatus.SCHEDULED,
        nullable=False,
    )
    passengers = Column(JSON, nullable=False, default=list)
    available_seats = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="ck_trips_seats_non_negative"),
        Index("idx_trips_driver", "driver_id"),
        Index("idx_trips_route", "route_tag"),
        Index("idx_trips_date", "trip_date"),
    )
