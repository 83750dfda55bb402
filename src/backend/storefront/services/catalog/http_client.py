"""
Storefront HTTP Client

Async client for the storefront JSON API. Implements the data
collaborators the browsing engine depends on:

- fetch_catalog / fetch_catalog_page  -> InMemorySource / RemoteSource
- search                              -> SuggestionController
- get_brands_by_type / get_models_by_brand / get_parts_by_model
                                      -> CatalogNavigator

Every transport or decoding failure is raised as CatalogSourceError so
callers only have one exception type to degrade on.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from storefront.models.catalog import CatalogItem, ItemKind
from storefront.models.search import SearchMode, SearchResult
from .errors import CatalogSourceError
from .sources import parse_catalog_item

logger = logging.getLogger(__name__)

CATALOG_PATHS = {
    ItemKind.PART: "/api/parts",
    ItemKind.ACCESSORY: "/api/accessories",
}

SEARCH_PATHS = {
    ItemKind.PART: "/api/search/repairs",
    ItemKind.ACCESSORY: "/api/search/accessories",
}


def parse_search_result(payload: Dict[str, Any], kind: ItemKind) -> SearchResult:
    """Build a SearchResult from a storefront search record"""
    item_id = str(payload["id"])
    default_url = f"/parts/{item_id}" if kind == ItemKind.PART else f"/accessories/{item_id}"
    return SearchResult(
        id=item_id,
        title=payload.get("title") or payload.get("name") or "",
        kind=ItemKind(payload.get("type", kind)),
        url=payload.get("url") or default_url,
        category=payload.get("category"),
        price=payload.get("price"),
        score=payload.get("matchScore", payload.get("score")),
        description=payload.get("description"),
        device_type=payload.get("deviceType"),
        image_url=payload.get("imageUrl"),
    )


class StorefrontHttpClient:
    """
    httpx-based client for the storefront API.

    Usage:
        async with StorefrontHttpClient("https://shop.example") as client:
            brands = await client.get_brands_by_type("SMARTPHONE")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Storefront root URL (defaults to STOREFRONT_API_URL)
            timeout: Per-request timeout in seconds
            client: Pre-built AsyncClient (tests inject one with a MockTransport)
        """
        self.base_url = base_url or os.getenv("STOREFRONT_API_URL", "http://localhost:3000")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)
        logger.info(f"StorefrontHttpClient initialized for {self.base_url}")

    async def __aenter__(self) -> "StorefrontHttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"GET {path} returned {e.response.status_code}")
            raise CatalogSourceError(f"GET {path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"GET {path} failed: {e}")
            raise CatalogSourceError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            logger.error(f"GET {path} returned invalid JSON: {e}")
            raise CatalogSourceError(f"GET {path} returned invalid JSON") from e

    async def fetch_catalog(self, kind: ItemKind = ItemKind.ACCESSORY) -> List[CatalogItem]:
        """Full catalog snapshot of one kind"""
        records = await self._get_json(CATALOG_PATHS[kind])
        try:
            return [parse_catalog_item(record, kind) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogSourceError(f"Malformed catalog record: {e}") from e

    async def fetch_catalog_page(
        self,
        params: Dict[str, Any],
        kind: ItemKind = ItemKind.ACCESSORY,
    ) -> Dict[str, Any]:
        """One server-side page: {"data": [...], "pagination": {...}}"""
        query = {
            key: (str(value).lower() if isinstance(value, bool) else value)
            for key, value in params.items()
        }
        payload = await self._get_json(CATALOG_PATHS[kind], params=query)
        if not isinstance(payload, dict) or "data" not in payload:
            raise CatalogSourceError("Catalog page response has no data field")
        return payload

    async def search(self, term: str, mode: SearchMode = SearchMode.ALL) -> List[SearchResult]:
        """
        Live search. In ALL mode part hits come before accessory hits,
        each in backend relevance order.
        """
        kinds = []
        if mode in (SearchMode.ALL, SearchMode.PARTS):
            kinds.append(ItemKind.PART)
        if mode in (SearchMode.ALL, SearchMode.ACCESSORIES):
            kinds.append(ItemKind.ACCESSORY)

        results: List[SearchResult] = []
        for kind in kinds:
            records = await self._get_json(SEARCH_PATHS[kind], params={"q": term})
            try:
                results.extend(parse_search_result(record, kind) for record in records)
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogSourceError(f"Malformed search record: {e}") from e
        return results

    async def get_brands_by_type(self, device_type: str) -> List[str]:
        brands = await self._get_json("/api/devices/brands", params={"type": device_type})
        return [str(brand) for brand in brands]

    async def get_models_by_brand(self, device_type: str, brand: str) -> List[Dict[str, Optional[str]]]:
        """Models of a brand as [{"model": ..., "series": ...}]"""
        records = await self._get_json(
            "/api/devices/models", params={"type": device_type, "brand": brand}
        )
        models = []
        try:
            for record in records:
                if isinstance(record, str):
                    models.append({"model": record, "series": None})
                else:
                    models.append({"model": record["model"], "series": record.get("series")})
        except (KeyError, TypeError) as e:
            raise CatalogSourceError(f"Malformed model record: {e}") from e
        return models

    async def get_parts_by_model(self, device_type: str, brand: str, model: str) -> List[CatalogItem]:
        records = await self._get_json(
            "/api/devices/parts", params={"type": device_type, "brand": brand, "model": model}
        )
        try:
            return [parse_catalog_item(record, ItemKind.PART) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogSourceError(f"Malformed part record: {e}") from e
