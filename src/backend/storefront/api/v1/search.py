"""
Live Search API
Suggestion lookups for the search box and routing of free-text searches
"""

import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...models.catalog import ItemKind
from ...models.search import SearchMode, SearchResult
from ...services.catalog import CatalogSourceError
from ...services.config.configuration_service import get_config_service
from ...services.search import (
    best_match,
    generic_search_url,
    listing_url,
    smart_destination,
    spans_both_kinds,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/search", tags=["search"])

SearchFn = Callable[[str, SearchMode], Awaitable[Sequence[SearchResult]]]


# Dependency injection placeholder (overridden in main.py)
def get_search_dep() -> SearchFn:
    """Dependency injection placeholder for the search backend - overridden in main.py"""
    raise RuntimeError("Search dependency not initialized")


class SuggestionsResponse(BaseModel):
    query: str
    mode: SearchMode
    results: List[SearchResult] = Field(default_factory=list)


class DestinationRequest(BaseModel):
    """Request model for routing a free-text search"""

    term: str
    results: List[SearchResult] = Field(default_factory=list)


class DestinationResponse(BaseModel):
    destination: ItemKind
    url: str
    best_match: Optional[SearchResult] = None
    spans_both_kinds: bool = False


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(
    q: str = Query(""),
    mode: SearchMode = SearchMode.ALL,
    search: SearchFn = Depends(get_search_dep),
):
    """
    Suggestions for the dropdown

    Terms shorter than the configured minimum return no results without
    touching the backend.
    """
    min_length = get_config_service().get_search_settings()["min_query_length"]
    term = q.strip()

    if len(term) < min_length:
        return SuggestionsResponse(query=term, mode=mode)

    try:
        results = await search(term, mode)
    except CatalogSourceError as e:
        logger.error(f"Suggestion lookup failed for '{term}': {e}")
        raise HTTPException(status_code=502, detail=f"Search backend unavailable: {e}")

    return SuggestionsResponse(query=term, mode=mode, results=list(results))


@router.post("/destination", response_model=DestinationResponse)
async def route_search(request: DestinationRequest):
    """
    Decide where a free-text search lands

    With no results the generic search page is used; otherwise the
    listing the results lean towards (count, then best score, then parts).

    Example:
        POST /api/v1/search/destination
        {"term": "screen", "results": [...]}

        Response:
        {"destination": "accessory", "url": "/accessories?search=screen", ...}
    """
    term = request.term.strip()
    if not term:
        raise HTTPException(status_code=422, detail="term must not be blank")

    destinations = get_config_service().get_destinations()
    kind = smart_destination(request.results)

    if request.results:
        url = listing_url(kind, term, destinations)
    else:
        url = generic_search_url(term, destinations)

    return DestinationResponse(
        destination=kind,
        url=url,
        best_match=best_match(request.results),
        spans_both_kinds=spans_both_kinds(request.results),
    )
