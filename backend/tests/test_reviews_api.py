"""
ComfortMap Backend — Review API Tests
=======================================

What:  End-to-end tests of /api/notes and /health over HTTP.
How:   HTTPX AsyncClient → ASGI app → SQLite review store (see conftest.py).

What we test:
    ✅ Empty store lists as []
    ✅ Create → List returns the record with every field byte-equal
    ✅ Newest first ordering
    ✅ Store failures map to the static 500 bodies
    ✅ Request IDs on every response
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from comfortmap.database import get_db_session


class TestListReviews:

    @pytest.mark.asyncio
    async def test_empty_store(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client, sample_review_data):
        for name in ("First", "Second", "Third"):
            await test_client.post("/api/notes", json={**sample_review_data, "restaurant": name})

        response = await test_client.get("/api/notes")

        assert [r["restaurant"] for r in response.json()] == ["Third", "Second", "First"]


class TestCreateReview:

    @pytest.mark.asyncio
    async def test_create_returns_stored_record(self, test_client, sample_review_data):
        response = await test_client.post("/api/notes", json=sample_review_data)

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["createdAt"]
        for field, value in sample_review_data.items():
            assert body[field] == value

    @pytest.mark.asyncio
    async def test_create_then_list_round_trip(self, test_client, sample_review_data):
        created = (await test_client.post("/api/notes", json=sample_review_data)).json()

        listed = (await test_client.get("/api/notes")).json()

        assert len(listed) == 1
        assert listed[0] == created
        for field, value in sample_review_data.items():
            assert listed[0][field] == value

    @pytest.mark.asyncio
    async def test_numeric_string_scale_is_cast(self, test_client, sample_review_data):
        response = await test_client.post("/api/notes", json={**sample_review_data, "scale": "9"})

        assert response.status_code == 201
        assert response.json()["scale"] == 9

    @pytest.mark.asyncio
    async def test_optional_fields_may_be_missing(self, test_client):
        response = await test_client.post("/api/notes", json={"text": "just text"})

        assert response.status_code == 201
        body = response.json()
        assert body["text"] == "just text"
        assert body["lat"] is None
        assert body["restaurant"] is None

    @pytest.mark.asyncio
    async def test_missing_text_is_a_store_failure(self, test_client, sample_review_data):
        payload = {k: v for k, v in sample_review_data.items() if k != "text"}

        response = await test_client.post("/api/notes", json=payload)

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}
        assert (await test_client.get("/api/notes")).json() == []

    @pytest.mark.asyncio
    async def test_uncastable_scale_is_a_store_failure(self, test_client, sample_review_data):
        response = await test_client.post(
            "/api/notes", json={**sample_review_data, "scale": "very good"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scale", ["nan", "Infinity", "1_000"])
    async def test_non_decimal_scale_is_a_store_failure(self, test_client, scale):
        response = await test_client.post("/api/notes", json={"text": "t", "scale": scale})

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}
        assert (await test_client.get("/api/notes")).json() == []

    @pytest.mark.asyncio
    async def test_boolean_scale_is_cast(self, test_client):
        response = await test_client.post("/api/notes", json={"text": "t", "scale": True})

        assert response.status_code == 201
        assert response.json()["scale"] == 1

    @pytest.mark.asyncio
    async def test_empty_body_is_a_store_failure(self, test_client):
        response = await test_client.post("/api/notes")

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1], [{"text": "t"}], "text", None])
    async def test_non_object_body_is_a_store_failure(self, test_client, body):
        response = await test_client.post("/api/notes", json=body)

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}
        assert (await test_client.get("/api/notes")).json() == []

    @pytest.mark.asyncio
    async def test_response_has_request_id(self, test_client, sample_review_data):
        response = await test_client.post(
            "/api/notes", json=sample_review_data, headers={"X-Request-ID": "abc123"}
        )

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_unusable_request_id_is_replaced(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "<not an id>"})

        rid = response.headers["X-Request-ID"]
        assert rid != "<not an id>"
        assert len(rid) == 8


def _failing_store_client(session):
    from comfortmap.main import create_app

    app = create_app(serve_static=False)

    async def override_session():
        yield session

    app.dependency_overrides[get_db_session] = override_session
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestStoreUnavailable:

    @pytest.mark.asyncio
    async def test_list_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )

        async with _failing_store_client(mock_db_session) as client:
            response = await client.get("/api/notes")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load notes"}
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_create_failure(self, mock_db_session, sample_review_data):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("connection refused"))
        )

        async with _failing_store_client(mock_db_session) as client:
            response = await client.post("/api/notes", json=sample_review_data)

        assert response.status_code == 500
        assert response.json() == {"error": "Could not create note"}


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("comfortmap.routes.health.check_database", AsyncMock(return_value=True)):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_store_down(self, test_client):
        with patch("comfortmap.routes.health.check_database", AsyncMock(return_value=False)):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestStaticFrontend:

    @pytest.mark.asyncio
    async def test_index_is_served(self):
        from comfortmap.main import create_app

        transport = ASGITransport(app=create_app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/")

        assert response.status_code == 200
        assert "note-form" in response.text
