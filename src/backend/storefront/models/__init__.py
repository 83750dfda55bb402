"""Models package - catalog items, filters, pages and search results"""

from .catalog import (
    AccessoryCategory,
    CatalogItem,
    CatalogPage,
    DeviceType,
    FilterSpec,
    ItemKind,
    PaginationInfo,
    PriceRange,
)

from .search import (
    SearchMode,
    SearchResult,
    SuggestionQuery,
)

__all__ = [
    "AccessoryCategory",
    "CatalogItem",
    "CatalogPage",
    "DeviceType",
    "FilterSpec",
    "ItemKind",
    "PaginationInfo",
    "PriceRange",
    "SearchMode",
    "SearchResult",
    "SuggestionQuery",
]
