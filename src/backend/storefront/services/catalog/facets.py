"""
Facet statistics for the filter sidebar.

All helpers read the catalog snapshot without modifying it, so they can
share the snapshot with the filter engine.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from storefront.models.catalog import CatalogItem
from .brand_resolver import BrandResolver


def category_counts(items: Sequence[CatalogItem], in_stock_only: bool = True) -> Dict[str, int]:
    """Count items per category; items without a category are not counted"""
    counts: Counter = Counter(
        item.category
        for item in items
        if item.category and (item.in_stock or not in_stock_only)
    )
    return dict(counts)


def available_brands(
    items: Sequence[CatalogItem],
    resolver: Optional[BrandResolver] = None,
) -> List[str]:
    """Sorted distinct brands that resolve from the snapshot"""
    resolver = resolver or BrandResolver()
    return sorted({brand for brand in (resolver.resolve(item) for item in items) if brand})


def available_models(
    items: Sequence[CatalogItem],
    device_type: Optional[str] = None,
    brand: Optional[str] = None,
    resolver: Optional[BrandResolver] = None,
) -> List[str]:
    """Sorted distinct device models, narrowed by device type and brand"""
    resolver = resolver or BrandResolver()
    models = set()
    for item in items:
        if not item.device_model:
            continue
        if device_type and item.device_type != device_type:
            continue
        if brand and resolver.resolve(item) != brand:
            continue
        models.add(item.device_model)
    return sorted(models)


def price_bounds(items: Sequence[CatalogItem]) -> Tuple[float, float]:
    """(min, max) price of the snapshot, (0, 0) when empty"""
    if not items:
        return 0.0, 0.0
    prices = [item.price for item in items]
    return min(prices), max(prices)
