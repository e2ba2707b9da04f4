"""
Integration tests for the REST API endpoints.

Uses an in-memory SQLite database; the ``get_db`` dependency is
overridden so routes run against it.  Bearer tokens are minted with the
configured secret.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.api.middleware import limiter
from src.infrastructure.models import UserModel
from src.services.trips import TripService, local_now
from tests.factories import VEHICLE, auth_header, make_token, trip_payload


def _payload(**overrides):
    return trip_payload(day=local_now().date() + timedelta(days=7), **overrides)


# ── Fixture ───────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(session_factory, users):
    """AsyncClient backed by SQLite."""

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from src.api.app import create_app
    from src.api.dependencies import get_db

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create(client: AsyncClient, driver: str = "driver-1", **overrides) -> dict:
    resp = await client.post(
        "/api/v1/trips", json=_payload(**overrides), headers=auth_header(driver)
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


# ── Tests ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/admin/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_catalog(client: AsyncClient):
    routes = (await client.get("/api/v1/catalog/routes")).json()
    assert routes["success"] is True
    assert routes["data"][0] == {"id": "boyaca", "name": "Boyacá"}

    methods = (await client.get("/api/v1/catalog/payment-methods")).json()
    assert methods["data"] == ["nequi", "daviplata", "efectivo"]


class TestTripsApi:
    @pytest.mark.asyncio
    async def test_create_returns_201_envelope(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/trips", json=_payload(cost="50000"), headers=auth_header("driver-1")
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["id"]
        assert body["data"]["cost"] == 50000.0
        assert body["data"]["status"] == "scheduled"
        assert body["data"]["available_seats"] == 4
        assert body["data"]["driver_vehicle"]["plate"] == "ABC123"

    @pytest.mark.asyncio
    async def test_create_requires_token(self, client: AsyncClient):
        resp = await client.post("/api/v1/trips", json=_payload())
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    @pytest.mark.asyncio
    async def test_create_rejects_bad_token(self, client: AsyncClient):
        token = make_token("driver-1", secret="not-the-secret")
        resp = await client.post(
            "/api/v1/trips",
            json=_payload(),
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_create_reports_missing_fields(self, client: AsyncClient):
        payload = _payload()
        del payload["route_tag"]
        resp = await client.post(
            "/api/v1/trips", json=payload, headers=auth_header("driver-1")
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "missing_fields"
        assert body["error"]["missing_fields"] == ["route_tag"]

    @pytest.mark.asyncio
    async def test_create_unknown_route(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/trips",
            json=_payload(route_tag="unknown"),
            headers=auth_header("driver-1"),
        )
        assert resp.status_code == 400
        assert len(resp.json()["error"]["valid_routes"]) == 10

    @pytest.mark.asyncio
    async def test_create_non_object_body(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/trips", json=["nope"], headers=auth_header("driver-1")
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_request"

    @pytest.mark.asyncio
    async def test_create_without_vehicle(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/trips", json=_payload(), headers=auth_header("walker-1")
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "no_vehicle_registered"

    @pytest.mark.asyncio
    async def test_create_unknown_profile(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/trips", json=_payload(), headers=auth_header("ghost")
        )
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "user_not_found"

    @pytest.mark.asyncio
    async def test_list_and_filter(self, client: AsyncClient):
        await _create(client, route_tag="suba")
        await _create(client, route_tag="chia", cost=20000)

        everything = (await client.get("/api/v1/trips")).json()["data"]
        assert len(everything) == 2

        suba = (await client.get("/api/v1/trips", params={"route_tag": "suba"})).json()
        assert [t["route_tag"] for t in suba["data"]] == ["suba"]

        cheap = (await client.get("/api/v1/trips", params={"max_cost": "10000"})).json()
        assert len(cheap["data"]) == 1

    @pytest.mark.asyncio
    async def test_list_rejects_bad_filter(self, client: AsyncClient):
        resp = await client.get("/api/v1/trips", params={"route_tag": "nowhere"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_route"

        resp = await client.get("/api/v1/trips", params={"max_cost": "-1"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_get_trip(self, client: AsyncClient):
        trip = await _create(client)
        resp = await client.get(f"/api/v1/trips/{trip['id']}")
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == trip["id"]

    @pytest.mark.asyncio
    async def test_get_trip_not_found(self, client: AsyncClient):
        resp = await client.get("/api/v1/trips/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "trip_not_found"

    @pytest.mark.asyncio
    async def test_update_owner_only(self, client: AsyncClient):
        trip = await _create(client)
        url = f"/api/v1/trips/{trip['id']}"

        resp = await client.put(url, json=_payload(cost=9000), headers=auth_header("driver-2"))
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "not_trip_owner"
        assert (await client.get(url)).json()["data"]["cost"] == 6000.0

        resp = await client.put(url, json=_payload(cost=9000), headers=auth_header("driver-1"))
        assert resp.status_code == 200
        assert resp.json()["data"]["cost"] == 9000.0

    @pytest.mark.asyncio
    async def test_update_missing_trip(self, client: AsyncClient):
        resp = await client.put(
            "/api/v1/trips/missing", json=_payload(), headers=auth_header("driver-1")
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_owner_only(self, client: AsyncClient):
        trip = await _create(client)
        url = f"/api/v1/trips/{trip['id']}"

        resp = await client.delete(url, headers=auth_header("alice"))
        assert resp.status_code == 403

        resp = await client.delete(url, headers=auth_header("driver-1"))
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert (await client.get(url)).status_code == 404


class TestBookingApi:
    @pytest.mark.asyncio
    async def test_book_then_rebook(self, client: AsyncClient):
        trip = await _create(client)
        url = f"/api/v1/book/{trip['id']}"

        resp = await client.post(url, headers=auth_header("alice"))
        assert resp.status_code == 200
        assert resp.json()["data"]["available_seats"] == 3

        resp = await client.post(url, headers=auth_header("alice"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "already_booked"

        data = (await client.get(f"/api/v1/trips/{trip['id']}")).json()["data"]
        assert data["passengers"] == ["alice"]
        assert data["available_seats"] == 3

    @pytest.mark.asyncio
    async def test_book_full_trip(self, client: AsyncClient):
        trip = await _create(client)
        url = f"/api/v1/book/{trip['id']}"
        for user in ("alice", "bob", "carol", "dave"):
            assert (await client.post(url, headers=auth_header(user))).status_code == 200

        resp = await client.post(url, headers=auth_header("erin"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "seats_unavailable"

    @pytest.mark.asyncio
    async def test_book_missing_trip(self, client: AsyncClient):
        resp = await client.post("/api/v1/book/missing", headers=auth_header("alice"))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_book_requires_token(self, client: AsyncClient):
        trip = await _create(client)
        resp = await client.post(f"/api/v1/book/{trip['id']}")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_cancel_booking(self, client: AsyncClient):
        trip = await _create(client)
        url = f"/api/v1/book/{trip['id']}"

        resp = await client.delete(url, headers=auth_header("alice"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "not_booked"

        await client.post(url, headers=auth_header("alice"))
        resp = await client.delete(url, headers=auth_header("alice"))
        assert resp.status_code == 200
        assert resp.json()["data"]["available_seats"] == 4
        assert resp.json()["data"]["passengers"] == []


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_malformed_vehicle_is_refused(
        self, client: AsyncClient, session_factory
    ):
        async with session_factory() as session:
            session.add(
                UserModel(
                    id="broken-1",
                    name="Camilo",
                    email="broken-1@example.com",
                    vehicle={**VEHICLE, "capacity": "four"},
                )
            )
            await session.commit()

        resp = await client.post(
            "/api/v1/trips", json=_payload(), headers=auth_header("broken-1")
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "invalid_vehicle"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_enveloped(
        self, client: AsyncClient, monkeypatch
    ):
        async def explode(self, trip_filter=None):
            raise RuntimeError("connection reset by peer")

        monkeypatch.setattr(TripService, "list_trips", explode)

        resp = await client.get("/api/v1/trips")
        assert resp.status_code == 500
        assert resp.headers["content-type"] == "application/json"
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "connection reset by peer"
        assert body["error"] == {"code": "internal_error", "type": "RuntimeError"}
