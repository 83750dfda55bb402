"""
Unit test fixtures

Fixtures for unit tests that mock external collaborators.
Unit tests should be fast (< 100ms) and isolated.
"""

import pytest
from unittest.mock import AsyncMock

from storefront.models.catalog import CatalogItem, ItemKind
from storefront.services.navigator import NavigatorSettings
from storefront.services.search import SuggestionSettings


@pytest.fixture
def mock_search():
    """Mock search backend: async (term, mode) -> results"""
    return AsyncMock(return_value=[])


@pytest.fixture
def mock_lookups():
    """Mock navigator lookups (brands, models, parts) with a small device tree"""
    get_brands = AsyncMock(return_value=["Apple", "Samsung"])
    get_models = AsyncMock(return_value=[
        {"model": "iPhone 15", "series": "iPhone 15 Series"},
        {"model": "iPhone 15 Pro", "series": "iPhone 15 Series"},
        {"model": "iPhone SE", "series": None},
    ])
    get_parts = AsyncMock(return_value=[
        CatalogItem(id="p-1", name="iPhone 15 Screen", kind=ItemKind.PART, price=99.0, stock=3),
    ])
    return get_brands, get_models, get_parts


@pytest.fixture
def suggestion_settings():
    return SuggestionSettings()


@pytest.fixture
def navigator_settings():
    return NavigatorSettings()
