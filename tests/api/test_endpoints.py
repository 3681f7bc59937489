"""End-to-end tests for the HTTP endpoints."""

import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from tests.utils import TEST_BASE_URL


async def shorten(client, url):
    return await client.post("/shorten", json={"url": url})


async def shorten_custom(client, url, code):
    return await client.post("/shorten/custom", json={"url": url, "custom_code": code})


@pytest.mark.api
class TestShortenEndpoint:

    @pytest.mark.asyncio
    async def test_shorten(self, client):
        response = await shorten(client, "https://example.com/long/path")

        assert response.status_code == 201
        body = response.json()
        assert len(body["code"]) == 6
        assert body["short_url"] == f"{TEST_BASE_URL}/{body['code']}"
        assert body["original_url"] == "https://example.com/long/path"

    @pytest.mark.asyncio
    async def test_shorten_without_scheme_echoes_normalized_url(self, client):
        response = await shorten(client, "example.com/page")

        assert response.status_code == 201
        assert response.json()["original_url"] == "https://example.com/page"

    @pytest.mark.asyncio
    async def test_shorten_is_idempotent(self, client):
        first = await shorten(client, "example.com/same")
        second = await shorten(client, "https://example.com/same")

        assert second.status_code == 201
        assert first.json()["code"] == second.json()["code"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "   "])
    async def test_empty_url(self, client, url):
        response = await shorten(client, url)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input", "message": "URL cannot be empty"}

    @pytest.mark.asyncio
    async def test_invalid_url(self, client):
        response = await shorten(client, "http://")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL"

    @pytest.mark.asyncio
    async def test_malformed_escape_rejected(self, client):
        response = await shorten(client, "https://example.com/%zz")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL"

    @pytest.mark.asyncio
    async def test_commit_failure(self, client):
        error = OperationalError("COMMIT", {}, Exception("connection reset"))
        with patch.object(AsyncSession, "commit", side_effect=error):
            response = await shorten(client, "https://example.com/unsaved")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Database operation failed",
        }

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        response = await client.post(
            "/shorten", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"

    @pytest.mark.asyncio
    async def test_missing_field(self, client):
        response = await client.post("/shorten", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"


@pytest.mark.api
class TestCustomShortenEndpoint:

    @pytest.mark.asyncio
    async def test_custom_code(self, client):
        response = await shorten_custom(client, "https://example.com/custom", "my-code_1")

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "my-code_1"
        assert body["short_url"] == f"{TEST_BASE_URL}/my-code_1"

    @pytest.mark.asyncio
    async def test_custom_code_taken(self, client):
        await shorten_custom(client, "https://example.com/one", "taken")

        response = await shorten_custom(client, "https://example.com/two", "taken")

        assert response.status_code == 409
        assert response.json()["error"] == "Code already exists"
        assert "'taken'" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_url_already_shortened(self, client):
        existing = (await shorten(client, "https://example.com/dup")).json()["code"]

        response = await shorten_custom(client, "example.com/dup", "fresh")

        assert response.status_code == 409
        assert response.json() == {
            "error": "URL already shortened",
            "message": f"URL already exists with code: {existing}",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code, message", [
        ("ab", "length must be between 3 and 50 characters"),
        ("abc$de", "only alphanumeric characters, hyphens, and underscores allowed"),
        ("Admin", "'Admin' is a reserved word"),
    ])
    async def test_invalid_custom_code(self, client, code, message):
        response = await shorten_custom(client, "https://example.com/x", code)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid custom code"
        assert message in response.json()["message"]

    @pytest.mark.asyncio
    async def test_blank_fields(self, client):
        response = await shorten_custom(client, "https://example.com", "  ")

        assert response.status_code == 400
        assert response.json()["message"] == "URL and custom code cannot be empty"


@pytest.mark.api
class TestRedirectEndpoint:

    @pytest.mark.asyncio
    async def test_redirect(self, client, click_tracker):
        await shorten_custom(client, "example.com/dest", "go-here")

        response = await client.get("/go-here")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/dest"

    @pytest.mark.asyncio
    async def test_redirect_updates_stats(self, client, click_tracker):
        await shorten_custom(client, "https://example.com/count", "counted")

        await client.get("/counted")
        await client.get("/counted")
        await click_tracker.drain(timeout=5)

        stats = (await client.get("/stats/counted")).json()
        assert stats["click_count"] == 2
        assert "last_accessed" in stats

    @pytest.mark.asyncio
    async def test_unknown_code(self, client):
        response = await client.get("/nothere")

        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "message": "Short URL not found"}

    @pytest.mark.asyncio
    async def test_blank_code(self, client):
        response = await client.get("/%20")

        assert response.status_code == 400
        assert response.json()["message"] == "Short code is required"


@pytest.mark.api
class TestStatsEndpoint:

    @pytest.mark.asyncio
    async def test_stats_for_new_url(self, client):
        await shorten_custom(client, "https://example.com/stats", "statme")

        response = await client.get("/stats/statme")

        assert response.status_code == 200
        body = response.json()
        assert body["short_code"] == "statme"
        assert body["original_url"] == "https://example.com/stats"
        assert body["click_count"] == 0
        assert "created_at" in body
        assert "last_accessed" not in body

    @pytest.mark.asyncio
    async def test_stats_unknown_code(self, client):
        response = await client.get("/stats/missing")

        assert response.status_code == 404


@pytest.mark.api
class TestDeleteEndpoint:

    @pytest.mark.asyncio
    async def test_delete_twice(self, client):
        await shorten_custom(client, "https://example.com/gone", "gone")

        first = await client.delete("/delete/gone")
        second = await client.delete("/delete/gone")

        assert first.status_code == 200
        assert first.json() == {"message": "Short URL deleted successfully"}
        assert second.status_code == 404
        assert (await client.get("/gone")).status_code == 404


@pytest.mark.api
class TestHealthEndpoints:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "url-shortener"}

    @pytest.mark.asyncio
    async def test_readiness(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["ready"] is True
        assert body["components"]["database"]["status"] == "healthy"
        assert body["schema_revision"] is None
