"""Middleware tests: request ID, rate limiting, CORS, error handling."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from skillpath.exceptions import ConflictError, NotFoundError
from skillpath.main import create_app


def _fake_redis(count: int | Exception) -> MagicMock:
    pipe = MagicMock()
    if isinstance(count, Exception):
        pipe.execute = AsyncMock(side_effect=count)
    else:
        pipe.execute = AsyncMock(return_value=[count, True])
    redis = MagicMock()
    redis.pipeline.return_value = pipe
    return redis


async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


async def test_no_rate_limit_headers_without_redis(client: AsyncClient) -> None:
    response = await client.get("/version")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


async def test_rate_limit_headers(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("skillpath.middleware.rate_limit.get_redis", lambda: _fake_redis(1))
    response = await client.get("/version")
    assert response.headers["x-ratelimit-limit"] == "100"
    assert response.headers["x-ratelimit-remaining"] == "99"


async def test_rate_limit_blocks_excess(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """101st request in a window returns 429 with Retry-After header."""
    monkeypatch.setattr("skillpath.middleware.rate_limit.get_redis", lambda: _fake_redis(101))
    response = await client.get("/version")
    assert response.status_code == 429
    assert response.headers["retry-after"] == "60"
    assert "detail" in response.json()


async def test_health_exempt_from_rate_limit(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("skillpath.middleware.rate_limit.get_redis", lambda: _fake_redis(10_000))
    response = await client.get("/health")
    assert response.status_code == 200


async def test_rate_limit_fails_open_on_redis_error(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "skillpath.middleware.rate_limit.get_redis",
        lambda: _fake_redis(RedisConnectionError("down")),
    )
    response = await client.get("/version")
    assert response.status_code == 200


async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with JSON body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"
    assert response.headers["content-type"] == "application/json"


async def test_domain_errors_and_500_return_json(database: str) -> None:
    """Domain errors escaping a route map to their status; anything else is a JSON 500."""
    app = create_app()

    @app.get("/raise/not-found")
    async def raise_not_found() -> None:
        raise NotFoundError("User not found")

    @app.get("/raise/conflict")
    async def raise_conflict() -> None:
        raise ConflictError("Email already registered")

    @app.get("/raise/boom")
    async def raise_boom() -> None:
        raise RuntimeError("boom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/raise/not-found")
        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

        response = await ac.get("/raise/conflict")
        assert response.status_code == 409

        response = await ac.get("/raise/boom")
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
