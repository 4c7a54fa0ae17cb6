"""
Hidden Gems Backend — Gem Endpoint Tests
=========================================

What:  HTTP-level tests for /, /health and /api/gems.
How:   Requests go through the full middleware and exception-handler stack
       via HTTPX ASGITransport; MongoDB is the InMemoryGemCollection double.
"""

import logging
from unittest.mock import AsyncMock

import bson
import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect


async def _create(client, payload):
    response = await client.post("/api/gems", json=payload)
    assert response.status_code == 201
    return response.json()


class TestRootAndHealth:

    @pytest.mark.asyncio
    async def test_root_liveness_message(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.text == "Dee Why Hidden Gems API is running!"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_disconnected(self, test_client, mock_connection):
        mock_connection.ping = AsyncMock(return_value=False)

        body = (await test_client.get("/health")).json()

        assert body["status"] == "unhealthy"
        assert body["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin(self, test_client):
        response = await test_client.get("/api/gems", headers={"Origin": "http://example.com"})
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_large_responses_are_gzipped(self, test_client, sample_gem_payload):
        for _ in range(5):
            await _create(test_client, sample_gem_payload)

        response = await test_client.get("/api/gems", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-encoding"] == "gzip"
        assert response.headers["X-Request-ID"]
        assert len(response.json()) == 5


class TestGemLifecycle:

    @pytest.mark.asyncio
    async def test_hidden_beach_scenario(self, test_client, sample_gem_payload):
        created = await _create(test_client, sample_gem_payload)
        gem_id = created["insertedId"]
        assert gem_id
        assert created["message"] == "Hidden gem added successfully"

        fetched = await test_client.get(f"/api/gems/{gem_id}")
        assert fetched.status_code == 200
        gem = fetched.json()
        for key, value in sample_gem_payload.items():
            assert gem[key] == value
        assert gem["_id"] == gem_id
        assert gem["submissionDate"]

        updated = await test_client.put(f"/api/gems/{gem_id}", json={"category": "Nature & Parks"})
        assert updated.status_code == 200
        assert updated.json()["message"] == "Hidden gem updated successfully"

        deleted = await test_client.delete(f"/api/gems/{gem_id}")
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Hidden gem deleted successfully"

        gone = await test_client.get(f"/api/gems/{gem_id}")
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_created_gem_round_trips(self, test_client, sample_gem_payload):
        created = await _create(test_client, dict(sample_gem_payload, rating=5))

        fetched = (await test_client.get(f"/api/gems/{created['insertedId']}")).json()

        assert fetched == created["newGem"]

    @pytest.mark.asyncio
    async def test_client_submission_date_ignored_on_create(self, test_client, sample_gem_payload):
        created = await _create(test_client, dict(sample_gem_payload, submissionDate="1999-01-01"))
        assert created["newGem"]["submissionDate"] != "1999-01-01"

    @pytest.mark.asyncio
    async def test_list_gems(self, test_client, sample_gem_payload):
        assert (await test_client.get("/api/gems")).json() == []

        await _create(test_client, sample_gem_payload)
        await _create(test_client, dict(sample_gem_payload, title="Rock Pool"))

        response = await test_client.get("/api/gems")
        assert response.status_code == 200
        assert sorted(g["title"] for g in response.json()) == ["Hidden Beach", "Rock Pool"]

    @pytest.mark.asyncio
    async def test_identical_update_reports_no_changes(self, test_client, sample_gem_payload):
        created = await _create(test_client, sample_gem_payload)
        gem_id = created["insertedId"]

        response = await test_client.put(f"/api/gems/{gem_id}", json=sample_gem_payload)

        assert response.status_code == 200
        assert response.json()["message"] == "No changes made to the hidden gem (data was identical)"
        fetched = (await test_client.get(f"/api/gems/{gem_id}")).json()
        assert fetched == created["newGem"]

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, test_client, sample_gem_payload):
        gem_id = (await _create(test_client, sample_gem_payload))["insertedId"]

        await test_client.put(f"/api/gems/{gem_id}", json={"_id": str(ObjectId()), "rating": 4})

        fetched = (await test_client.get(f"/api/gems/{gem_id}")).json()
        assert fetched["_id"] == gem_id
        assert fetched["rating"] == 4
        assert fetched["title"] == "Hidden Beach"


class TestGemErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "description", "category"])
    async def test_create_missing_field(self, test_client, gem_collection, sample_gem_payload, missing):
        payload = dict(sample_gem_payload, **{missing: ""})

        response = await test_client.post("/api/gems", json=payload)

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "validation_error"
        assert missing in body["message"]
        assert body["details"]["missing_fields"] == [missing]
        assert gem_collection.documents == {}

    @pytest.mark.asyncio
    async def test_create_non_object_body(self, test_client):
        response = await test_client.post("/api/gems", json=["not", "an", "object"])
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, kwargs",
        [("get", {}), ("put", {"json": {"title": "x"}}), ("delete", {})],
    )
    async def test_invalid_id_format(self, test_client, method, kwargs):
        response = await getattr(test_client, method)("/api/gems/not-a-valid-id", **kwargs)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid Gem ID format"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, kwargs, message",
        [
            ("get", {}, "Hidden gem not found"),
            ("put", {"json": {"title": "x"}}, "Hidden gem not found"),
            ("delete", {}, "Hidden gem not found or already deleted"),
        ],
    )
    async def test_unknown_id(self, test_client, method, kwargs, message):
        response = await getattr(test_client, method)(f"/api/gems/{ObjectId()}", **kwargs)

        assert response.status_code == 404
        assert response.json()["message"] == message

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_500(self, test_client, gem_collection):
        gem_collection.find_one = AsyncMock(side_effect=AutoReconnect("connection reset by peer"))

        response = await test_client.get(f"/api/gems/{ObjectId()}")

        body = response.json()
        assert response.status_code == 500
        assert body["message"] == "Failed to fetch hidden gem"
        assert "connection reset" not in response.text
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_unencodable_value_is_store_failure(self, test_client, gem_collection, sample_gem_payload):
        # The real driver encodes to BSON inside insert_one
        store_insert = gem_collection.insert_one

        async def encoding_insert(document):
            bson.encode(document)
            return await store_insert(document)

        gem_collection.insert_one = encoding_insert

        response = await test_client.post("/api/gems", json=dict(sample_gem_payload, n=2**64))

        body = response.json()
        assert response.status_code == 500
        assert body["error"] == "server_error"
        assert body["message"] == "Failed to add hidden gem"
        assert response.headers["X-Request-ID"] == body["request_id"]
        assert gem_collection.documents == {}

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_logged(self, test_client, caplog):
        gem_id = str(ObjectId())

        with caplog.at_level(logging.INFO, logger="app.routes.gems"):
            response = await test_client.put(f"/api/gems/{gem_id}", json={"title": "x"})

        assert response.status_code == 404
        assert f"Update for unknown gem {gem_id}" in caplog.text
