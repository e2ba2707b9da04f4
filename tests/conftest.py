"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models carry no dialect-specific
columns, so the real metadata is created as-is.
"""

from typing import AsyncGenerator, Optional

import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.infrastructure.database import Base
from src.infrastructure.models import UserModel
from tests.factories import VEHICLE

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test (one shared connection)."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def users(db_session: AsyncSession) -> dict[str, UserModel]:
    """A driver with a vehicle, a user without one, and two passengers."""
    rows = {
        "driver": _user("driver-1", "Laura", vehicle=VEHICLE),
        "other_driver": _user(
            "driver-2", "Andrés", vehicle={**VEHICLE, "plate": "XYZ789"}
        ),
        "walker": _user("walker-1", "Mateo"),
        "alice": _user("alice", "Alice"),
        "bob": _user("bob", "Bob"),
    }
    db_session.add_all(rows.values())
    await db_session.commit()
    return rows


def _user(user_id: str, name: str, vehicle: Optional[dict] = None) -> UserModel:
    return UserModel(
        id=user_id, name=name, email=f"{user_id}@example.com", vehicle=vehicle
    )
