"""
Catalog Browsing API
FastAPI router for the parts/accessories listing pages:
filtered + paginated browsing, facet statistics and related searches
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...models.catalog import CatalogPage, FilterSpec
from ...services.catalog import (
    CatalogSource,
    CatalogSourceError,
    InMemorySource,
    available_brands,
    available_models,
    category_counts,
    price_bounds,
    related_searches,
)
from ...services.config.configuration_service import get_config_service
from ...utils.logging_context import bind_browse_context, log_performance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


# Dependency injection placeholders (overridden in main.py)
def get_catalog_source_dep() -> CatalogSource:
    """Dependency injection placeholder for the browse source - overridden in main.py"""
    raise RuntimeError("Catalog source dependency not initialized")


def get_catalog_snapshot_dep() -> InMemorySource:
    """Dependency injection placeholder for the facet snapshot - overridden in main.py"""
    raise RuntimeError("Catalog snapshot dependency not initialized")


class BrowseRequest(BaseModel):
    """Request model for one listing page"""

    filters: FilterSpec = Field(default_factory=FilterSpec)
    page: int = 1
    per_page: Optional[int] = None


class PriceBounds(BaseModel):
    min: float
    max: float


class FacetsResponse(BaseModel):
    """Sidebar facet statistics"""

    total_items: int
    categories: Dict[str, int]
    brands: List[str]
    models: List[str]
    price: PriceBounds


class RelatedSearchesResponse(BaseModel):
    query: str
    related: List[str]


@router.post("/browse", response_model=CatalogPage)
async def browse_catalog(
    request: BrowseRequest,
    source: CatalogSource = Depends(get_catalog_source_dep),
):
    """
    Filter and paginate the catalog

    Out-of-range pages are clamped, never rejected. per_page must be one
    of the configured page sizes.

    Example:
        POST /api/v1/catalog/browse
        {"filters": {"categories": ["CASE"], "in_stock_only": true}, "page": 2, "per_page": 24}
    """
    config = get_config_service()
    per_page = request.per_page or config.get_default_page_size()
    allowed = config.get_allowed_page_sizes()

    if per_page not in allowed:
        raise HTTPException(
            status_code=422,
            detail=f"per_page must be one of {allowed}, got {per_page}"
        )

    bind_browse_context(kind=source.get_name(), page=request.page, per_page=per_page)

    try:
        with log_performance("catalog_browse"):
            page = await source.browse(request.filters, page=request.page, per_page=per_page)
    except CatalogSourceError as e:
        logger.error(f"Catalog browse failed: {e}")
        raise HTTPException(status_code=502, detail=f"Catalog source unavailable: {e}")

    logger.info(
        f"Served page {page.pagination.current_page}/{page.pagination.total_pages} "
        f"({page.pagination.total_items} matching items)"
    )
    return page


@router.get("/facets", response_model=FacetsResponse)
async def get_facets(
    in_stock_only: bool = True,
    device_type: Optional[str] = None,
    brand: Optional[str] = None,
    source: InMemorySource = Depends(get_catalog_snapshot_dep),
):
    """
    Facet statistics over the loaded snapshot

    Category counts only include in-stock items unless in_stock_only=false.
    Models are narrowed by device_type and brand when given.
    """
    items = source.snapshot
    low, high = price_bounds(items)

    return FacetsResponse(
        total_items=len(items),
        categories=category_counts(items, in_stock_only=in_stock_only),
        brands=available_brands(items),
        models=available_models(items, device_type=device_type, brand=brand),
        price=PriceBounds(min=low, max=high),
    )


@router.get("/related", response_model=RelatedSearchesResponse)
async def get_related_searches(
    q: str = Query(..., description="Current search term"),
    limit: Optional[int] = Query(None, ge=1, le=20),
    source: InMemorySource = Depends(get_catalog_snapshot_dep),
):
    """
    Related search terms for the "people also searched" strip

    Example:
        GET /api/v1/catalog/related?q=iphone 15

        Response:
        {"query": "iphone 15", "related": ["iphone 14", "iphone 16"]}
    """
    related = related_searches(q, source.snapshot, limit=limit)
    return RelatedSearchesResponse(query=q, related=related)


@router.post("/reload")
async def reload_catalog(source: InMemorySource = Depends(get_catalog_snapshot_dep)) -> Dict[str, Any]:
    """Swap in a fresh catalog snapshot; the old one keeps serving on failure"""
    try:
        snapshot = await source.reload()
    except CatalogSourceError as e:
        logger.error(f"Catalog reload failed: {e}")
        raise HTTPException(status_code=502, detail=f"Catalog reload failed: {e}")

    return {"reloaded": True, "total_items": len(snapshot)}
