"""
Catalog Filter Engine

Narrows an in-memory catalog snapshot by the active facets of a listing
page. Filtering is pure and order-preserving: the output is always a
subsequence of the input, and the input is never modified.

Facets combine with AND; values selected within one facet combine with OR.
An empty facet places no constraint.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from storefront.models.catalog import CatalogItem, FilterSpec, PriceRange
from .brand_resolver import BrandResolver

logger = logging.getLogger(__name__)


def split_compatibility(compatibility: Optional[str]) -> List[str]:
    """Split a comma-separated compatibility string into trimmed tokens"""
    if not compatibility:
        return []
    return [token.strip() for token in compatibility.split(",") if token.strip()]


class CatalogFilterEngine:
    """
    Faceted filter over catalog items.

    Usage:
        engine = CatalogFilterEngine()
        visible = engine.filter(items, FilterSpec(categories={"CASE"}, in_stock_only=True))
    """

    def __init__(self, brand_resolver: Optional[BrandResolver] = None):
        self.brand_resolver = brand_resolver or BrandResolver()

    def filter(self, items: Sequence[CatalogItem], spec: FilterSpec) -> List[CatalogItem]:
        """
        Return the items matching every facet of spec, in input order.

        An inverted price range is swapped rather than rejected, since specs
        are built from UI state and must never break a render.
        """
        if not items:
            return []
        if spec.is_empty():
            return list(items)

        price_range = spec.price_range
        if price_range.is_inverted():
            logger.warning(
                f"Inverted price range [{price_range.min}, {price_range.max}], swapping bounds"
            )
            price_range = price_range.normalized()

        search_term = spec.search_term.strip().lower()
        compatibility = [tag.strip().lower() for tag in spec.compatibility if tag.strip()]

        result = [
            item for item in items
            if self._matches(item, spec, price_range, search_term, compatibility)
        ]

        logger.debug(f"Filtered {len(items)} items down to {len(result)}")
        return result

    def matches(self, item: CatalogItem, spec: FilterSpec) -> bool:
        """Check a single item against spec"""
        return bool(self.filter([item], spec))

    def _matches(
        self,
        item: CatalogItem,
        spec: FilterSpec,
        price_range: PriceRange,
        search_term: str,
        compatibility: List[str],
    ) -> bool:
        if spec.categories and item.category not in spec.categories:
            return False

        if spec.brands and self.brand_resolver.resolve(item) not in spec.brands:
            return False

        if compatibility and not self._compatibility_intersects(item, compatibility):
            return False

        if spec.device_types and item.device_type not in spec.device_types:
            return False

        if spec.device_models and item.device_model not in spec.device_models:
            return False

        if not price_range.contains(item.price):
            return False

        if spec.in_stock_only and item.stock <= 0:
            return False

        if search_term and not self._matches_search(item, search_term):
            return False

        return True

    @staticmethod
    def _compatibility_intersects(item: CatalogItem, selected: Iterable[str]) -> bool:
        # Either side may be the more specific one ("iPhone 15" vs "iPhone 15 Pro")
        tokens = [token.lower() for token in split_compatibility(item.compatibility)]
        return any(
            tag in token or token in tag
            for tag in selected
            for token in tokens
        )

    @staticmethod
    def _matches_search(item: CatalogItem, search_term: str) -> bool:
        fields = (item.name, item.description or "", item.compatibility or "")
        return any(search_term in field.lower() for field in fields)


def filter_items(
    items: Sequence[CatalogItem],
    spec: FilterSpec,
    engine: Optional[CatalogFilterEngine] = None,
) -> List[CatalogItem]:
    """Module-level shortcut for CatalogFilterEngine().filter()"""
    return (engine or CatalogFilterEngine()).filter(items, spec)
