from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from echo_service.config import get_settings
from echo_service.main import create_app
from echo_service.observability.metrics import MetricsRegistry


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NAME", "DevOps Challenge API")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("ENABLE_METRICS_ENDPOINT", raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def metrics(app: FastAPI) -> MetricsRegistry:
    return app.state.metrics


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
