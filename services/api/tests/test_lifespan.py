"""Tests for application startup wiring."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

import skinvest.main as main_module
from skinvest.main import create_app, lifespan


def _unreachable_redis() -> MagicMock:
    client = MagicMock()
    client.ping = AsyncMock(side_effect=RedisConnectionError("Connection refused"))
    client.json.return_value.get = AsyncMock(side_effect=RedisConnectionError("Connection refused"))
    client.aclose = AsyncMock()
    return client


def _unreachable_db() -> MagicMock:
    db = MagicMock()
    db.ping = AsyncMock(side_effect=OSError("Connection refused"))
    db.close = AsyncMock()
    return db


@pytest.mark.asyncio
async def test_redis_down_at_startup_answers_cache_failure_not_500(monkeypatch):
    redis_client = _unreachable_redis()
    db = _unreachable_db()
    monkeypatch.setattr(main_module, "create_redis_client", lambda: redis_client)
    monkeypatch.setattr(main_module, "init_db", lambda: db)
    app = create_app()

    async with lifespan(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/v1/prices", params={"market_hash_name": "AK-47 | Redline (Field-Tested)"})

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "CACHE_READ_FAILED"
    redis_client.aclose.assert_awaited_once()
    db.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_requests_recover_once_redis_is_back(monkeypatch):
    redis_client = _unreachable_redis()
    monkeypatch.setattr(main_module, "create_redis_client", lambda: redis_client)
    monkeypatch.setattr(main_module, "init_db", _unreachable_db)
    app = create_app()

    async with lifespan(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            down = await client.get("/v1/currencies")
            redis_client.json.return_value.get = AsyncMock(return_value=[{"USD": 1.0, "EUR": 0.92, "CNY": 7.19}])
            up = await client.get("/v1/currencies")

    assert down.status_code == 503
    assert up.status_code == 200
    assert up.json() == {"USD": 1.0, "EUR": 0.92, "CNY": 7.19}
