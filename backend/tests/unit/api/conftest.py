"""Fixtures for route tests: the app with its process-wide objects overridden."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gunce.api.deps import (
    get_gate,
    get_sentiment_service,
    get_settings_store,
    get_storage_adapter,
    get_sync_service,
)
from gunce.main import app


@pytest_asyncio.fixture
async def client(local_adapter, settings_store, gate):
    app.dependency_overrides[get_storage_adapter] = lambda: local_adapter
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    app.dependency_overrides[get_gate] = lambda: gate
    app.dependency_overrides[get_sentiment_service] = lambda: None
    app.dependency_overrides[get_sync_service] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
