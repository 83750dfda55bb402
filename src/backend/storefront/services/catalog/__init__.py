"""
Catalog Package

Browsing engine for the parts and accessories listings:
- CatalogFilterEngine: pure faceted filtering over a snapshot
- BrandResolver: brand extraction heuristic for records without a brand
- InMemorySource / RemoteSource: one browse() interface over a local
  snapshot or the server-paginated API
- Facet statistics and related search generation
"""

from .brand_resolver import BrandResolver
from .errors import CatalogSourceError
from .facets import available_brands, available_models, category_counts, price_bounds
from .filter_engine import CatalogFilterEngine, filter_items
from .related_searches import related_searches
from .sources import CatalogSource, InMemorySource, RemoteSource, parse_catalog_item

__all__ = [
    "BrandResolver",
    "CatalogSourceError",
    "CatalogFilterEngine",
    "filter_items",
    "CatalogSource",
    "InMemorySource",
    "RemoteSource",
    "parse_catalog_item",
    "available_brands",
    "available_models",
    "category_counts",
    "price_bounds",
    "related_searches",
]
