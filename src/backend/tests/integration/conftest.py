"""
Integration test fixtures

Fixtures for integration tests that drive the FastAPI app end to end.
Collaborators that would reach the storefront database are replaced with
in-memory sources and mocks through dependency_overrides.
"""

import os
import tempfile
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the rotating log file out of the source tree
os.environ.setdefault("LOG_FILE_PATH", os.path.join(tempfile.mkdtemp(), "storefront-catalog.log"))


@pytest.fixture
def catalog_source(sample_items):
    """In-memory catalog over the sample accessories, reloadable"""
    from storefront.services.catalog import InMemorySource

    return InMemorySource(sample_items, loader=AsyncMock(return_value=sample_items[:3]))


@pytest.fixture
def search_backend():
    """Mock live search backend"""
    return AsyncMock(return_value=[])


@pytest_asyncio.fixture
async def api_client(catalog_source, search_backend, test_config_dir, monkeypatch):
    """
    HTTP client for API integration testing

    Usage:
        async def test_health_endpoint(api_client):
            response = await api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    monkeypatch.setenv("CATALOG_CONFIG_DIR", str(test_config_dir))

    from storefront.api.v1.catalog import get_catalog_snapshot_dep, get_catalog_source_dep
    from storefront.api.v1.search import get_search_dep
    from storefront.main import app

    # monkeypatch restores the overrides main.py installed
    monkeypatch.setitem(app.dependency_overrides, get_catalog_source_dep, lambda: catalog_source)
    monkeypatch.setitem(app.dependency_overrides, get_catalog_snapshot_dep, lambda: catalog_source)
    monkeypatch.setitem(app.dependency_overrides, get_search_dep, lambda: search_backend)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
