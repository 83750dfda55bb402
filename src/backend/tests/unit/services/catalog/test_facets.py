"""
Unit tests for facet statistics (category counts, brands, models, price bounds)
"""

import pytest

from storefront.services.catalog.facets import (
    available_brands,
    available_models,
    category_counts,
    price_bounds,
)


@pytest.mark.unit
class TestFacets:

    def test_category_counts_only_in_stock_by_default(self, sample_items):
        counts = category_counts(sample_items)
        assert "CHARGER" not in counts
        assert counts == {"CASE": 1, "CABLE": 1, "SCREEN_PROTECTOR": 1, "STAND": 1}

    def test_category_counts_all_items(self, sample_items):
        counts = category_counts(sample_items, in_stock_only=False)
        assert counts["CHARGER"] == 1
        assert sum(counts.values()) == len(sample_items)

    def test_available_brands_sorted_and_distinct(self, sample_items, sample_parts):
        assert available_brands(sample_items + sample_parts) == ["Apple", "Samsung"]

    def test_available_models_narrowed_by_brand(self, sample_parts):
        assert available_models(sample_parts) == ["Samsung Galaxy S24 Ultra", "iPhone 15"]
        assert available_models(sample_parts, brand="Samsung") == ["Samsung Galaxy S24 Ultra"]
        assert available_models(sample_parts, device_type="TABLET") == []

    def test_price_bounds(self, sample_items):
        assert price_bounds(sample_items) == (9.5, 35.0)

    def test_price_bounds_empty(self):
        assert price_bounds([]) == (0.0, 0.0)

    def test_snapshot_is_read_only(self, sample_items):
        snapshot = tuple(sample_items)
        category_counts(snapshot)
        available_brands(snapshot)
        assert snapshot == tuple(sample_items)
