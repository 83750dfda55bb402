"""
Search routing heuristics

Decides where a free-text search goes when the user does not click a
specific suggestion:
- best_match(): the single highest-scoring hit, ties to the earliest
- smart_destination(): parts listing or accessories listing, whichever
  the hits lean towards
"""

from typing import Dict, Optional, Sequence
from urllib.parse import urlencode

from storefront.models.catalog import ItemKind
from storefront.models.search import SearchResult

DEFAULT_DESTINATIONS: Dict[str, str] = {
    "parts": "/repairs",
    "accessories": "/accessories",
    "generic": "/search",
}


def best_match(results: Sequence[SearchResult]) -> Optional[SearchResult]:
    """Highest relevance hit; the first one seen wins a tie. None if empty."""
    best: Optional[SearchResult] = None
    for result in results:
        if best is None or result.relevance > best.relevance:
            best = result
    return best


def smart_destination(results: Sequence[SearchResult]) -> ItemKind:
    """
    Pick the listing a search should land on.

    1. The kind with strictly more hits wins
    2. On a count tie, the kind with the higher best score wins
    3. On a full tie (including no hits at all), parts
    """
    parts = [r for r in results if r.kind == ItemKind.PART]
    accessories = [r for r in results if r.kind == ItemKind.ACCESSORY]

    if len(parts) > len(accessories):
        return ItemKind.PART
    if len(accessories) > len(parts):
        return ItemKind.ACCESSORY

    best_part = max((r.relevance for r in parts), default=0.0)
    best_accessory = max((r.relevance for r in accessories), default=0.0)

    return ItemKind.ACCESSORY if best_accessory > best_part else ItemKind.PART


def spans_both_kinds(results: Sequence[SearchResult]) -> bool:
    kinds = {r.kind for r in results}
    return ItemKind.PART in kinds and ItemKind.ACCESSORY in kinds


def listing_url(kind: ItemKind, term: str, destinations: Optional[Dict[str, str]] = None) -> str:
    """Listing page for kind, pre-filtered with term"""
    destinations = destinations or DEFAULT_DESTINATIONS
    base = destinations["parts"] if kind == ItemKind.PART else destinations["accessories"]
    return f"{base}?{urlencode({'search': term.strip()})}"


def generic_search_url(term: str, destinations: Optional[Dict[str, str]] = None) -> str:
    """Catch-all search results page for term"""
    destinations = destinations or DEFAULT_DESTINATIONS
    return f"{destinations['generic']}?{urlencode({'q': term.strip()})}"
