"""
Catalog Sources

A listing page can browse the catalog two ways:
- InMemorySource: the full snapshot is loaded once and filtered/paginated
  locally (accessories page, admin catalog)
- RemoteSource: each page is fetched from the storefront API when every
  active facet is one the API understands; otherwise the matching records
  are fetched in full and filtered/paginated locally

Both sit behind the same CatalogSource interface so that the choice is a
configuration decision rather than a second code path.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from storefront.models.catalog import CatalogItem, CatalogPage, FilterSpec, ItemKind, PaginationInfo
from storefront.services.config.configuration_service import get_config_service
from storefront.services.pagination.paginator import Paginator
from .errors import CatalogSourceError
from .filter_engine import CatalogFilterEngine

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Awaitable[Sequence[CatalogItem]]]
PageFetcher = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


def parse_catalog_item(payload: Dict[str, Any], kind: ItemKind = ItemKind.ACCESSORY) -> CatalogItem:
    """
    Build a CatalogItem from a storefront API record.

    Accepts the camelCase field names the storefront API returns. Parts
    expose cost instead of price; negative stock counts are treated as 0.
    """
    stock = payload.get("inStock", payload.get("stock", 0)) or 0
    if stock < 0:
        logger.warning(f"Item {payload.get('id')} has negative stock {stock}, treating as 0")
        stock = 0

    price = payload.get("price")
    if price is None:
        price = payload.get("cost", 0.0)

    return CatalogItem(
        id=str(payload["id"]),
        name=payload.get("name") or payload.get("title") or "",
        kind=ItemKind(payload.get("type", kind)),
        price=float(price or 0.0),
        stock=int(stock),
        min_stock=max(0, int(payload.get("minStock", payload.get("min_stock", 0)) or 0)),
        description=payload.get("description"),
        compatibility=payload.get("compatibility"),
        device_model=payload.get("deviceModel", payload.get("device_model")),
        device_type=payload.get("deviceType", payload.get("device_type")),
        category=payload.get("category"),
        brand=payload.get("brand"),
        quality=payload.get("quality"),
        created_at=payload.get("createdAt", payload.get("created_at")),
        updated_at=payload.get("updatedAt", payload.get("updated_at")),
    )


class CatalogSource(ABC):
    """
    Abstract base class for catalog sources.

    Each source answers browse() with one filtered page of the catalog.
    """

    def __init__(
        self,
        engine: Optional[CatalogFilterEngine] = None,
        visible_page_delta: Optional[int] = None,
    ):
        self.engine = engine or CatalogFilterEngine()
        if visible_page_delta is None:
            visible_page_delta = get_config_service().get_visible_page_delta()
        self.visible_page_delta = visible_page_delta

    def _page_of(self, paginator: Paginator, data: List[CatalogItem], spec: FilterSpec) -> CatalogPage:
        return CatalogPage(
            data=data,
            pagination=PaginationInfo(
                **paginator.to_metadata(),
                visible_pages=paginator.visible_pages(self.visible_page_delta),
            ),
            filters_applied=spec.model_dump(mode="json"),
        )

    def _filter_and_paginate(
        self,
        items: Sequence[CatalogItem],
        spec: FilterSpec,
        page: int,
        per_page: int,
    ) -> CatalogPage:
        """Filter the full item set, then cut the requested page from the result"""
        filtered = self.engine.filter(items, spec)
        paginator = Paginator(total_items=len(filtered), items_per_page=per_page, initial_page=page)
        return self._page_of(paginator, paginator.slice(filtered), spec)

    @abstractmethod
    async def browse(self, spec: FilterSpec, page: int = 1, per_page: int = 12) -> CatalogPage:
        """
        Return one page of the catalog filtered by spec.

        Args:
            spec: Active facets
            page: 1-indexed page, clamped into range
            per_page: Page size

        Raises:
            CatalogSourceError: If the underlying data source fails
        """
        pass

    def get_name(self) -> str:
        return self.__class__.__name__.replace("Source", "").lower()


class InMemorySource(CatalogSource):
    """
    Full catalog snapshot filtered and paginated locally.

    The snapshot is an immutable tuple; reload() swaps in a new one from the
    loader and never edits the old one in place, so readers holding the
    previous snapshot are unaffected.
    """

    def __init__(
        self,
        items: Iterable[CatalogItem] = (),
        loader: Optional[CatalogLoader] = None,
        engine: Optional[CatalogFilterEngine] = None,
        visible_page_delta: Optional[int] = None,
    ):
        super().__init__(engine, visible_page_delta)
        self._snapshot: Tuple[CatalogItem, ...] = tuple(items)
        self._loader = loader

    @property
    def snapshot(self) -> Tuple[CatalogItem, ...]:
        return self._snapshot

    async def reload(self) -> Tuple[CatalogItem, ...]:
        """
        Replace the snapshot with a fresh load.

        Raises:
            CatalogSourceError: If no loader is configured or it fails; the
                previous snapshot is kept
        """
        if self._loader is None:
            raise CatalogSourceError("InMemorySource has no loader configured")

        try:
            items = await self._loader()
        except CatalogSourceError:
            raise
        except Exception as e:
            logger.error(f"Catalog reload failed: {e}")
            raise CatalogSourceError(f"Catalog reload failed: {e}") from e

        self._snapshot = tuple(items)
        logger.info(f"Catalog snapshot reloaded with {len(self._snapshot)} items")
        return self._snapshot

    async def browse(self, spec: FilterSpec, page: int = 1, per_page: int = 12) -> CatalogPage:
        return self._filter_and_paginate(self._snapshot, spec, page, per_page)


class RemoteSource(CatalogSource):
    """
    Server-paginated catalog.

    Filter hints the storefront API understands (single category, search,
    in-stock flag) are sent with the page request, and the server's page and
    pagination block are used as-is. When the spec also has facets the API
    cannot apply (brands, compatibility, device types/models, price, several
    categories), the records matching the sent hints are fetched page by
    page and the full spec is filtered and paginated locally, so the
    pagination block always describes the filtered collection.
    """

    # Page size used when walking the whole filtered collection
    FULL_FETCH_PAGE_SIZE = 100

    # Upper bound on pages walked by one browse
    MAX_FULL_FETCH_PAGES = 200

    def __init__(
        self,
        fetch_page: PageFetcher,
        kind: ItemKind = ItemKind.ACCESSORY,
        engine: Optional[CatalogFilterEngine] = None,
        visible_page_delta: Optional[int] = None,
    ):
        super().__init__(engine, visible_page_delta)
        self._fetch_page = fetch_page
        self.kind = kind

    @staticmethod
    def build_params(spec: FilterSpec, page: int, per_page: int) -> Dict[str, Any]:
        """Translate a spec into storefront API query parameters"""
        params: Dict[str, Any] = {
            "page": max(1, page),
            "limit": per_page,
            "inStockOnly": spec.in_stock_only,
        }
        if len(spec.categories) == 1:
            params["category"] = next(iter(spec.categories))
        if spec.search_term.strip():
            params["search"] = spec.search_term.strip()
        return params

    @staticmethod
    def local_facets(spec: FilterSpec) -> List[str]:
        """Names of the active facets build_params cannot send to the server"""
        facets = []
        if len(spec.categories) > 1:
            facets.append("categories")
        for name in ("brands", "compatibility", "device_types", "device_models"):
            if getattr(spec, name):
                facets.append(name)
        if spec.price_range.min is not None or spec.price_range.max is not None:
            facets.append("price_range")
        return facets

    async def _request(self, params: Dict[str, Any]) -> Tuple[List[CatalogItem], Dict[str, Any]]:
        try:
            response = await self._fetch_page(params)
        except CatalogSourceError:
            raise
        except Exception as e:
            logger.error(f"Remote catalog page fetch failed: {e}")
            raise CatalogSourceError(f"Remote catalog page fetch failed: {e}") from e

        try:
            items = [parse_catalog_item(record, self.kind) for record in response.get("data", [])]
            remote_pagination = dict(response.get("pagination") or {})
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed catalog page response: {e}")
            raise CatalogSourceError(f"Malformed catalog page response: {e}") from e

        return items, remote_pagination

    async def _fetch_all(self, spec: FilterSpec) -> List[CatalogItem]:
        """Every record matching the server-side hints of spec"""
        collected: List[CatalogItem] = []
        page = 1

        while page <= self.MAX_FULL_FETCH_PAGES:
            params = self.build_params(spec, page, self.FULL_FETCH_PAGE_SIZE)
            items, remote_pagination = await self._request(params)
            collected.extend(items)

            try:
                total_pages = int(remote_pagination.get("totalPages", page))
            except (TypeError, ValueError) as e:
                raise CatalogSourceError(f"Malformed catalog page response: {e}") from e

            if not items or page >= total_pages:
                return collected
            page += 1

        logger.warning(
            f"Stopped walking the remote catalog after {self.MAX_FULL_FETCH_PAGES} pages "
            f"({len(collected)} records)"
        )
        return collected

    async def browse(self, spec: FilterSpec, page: int = 1, per_page: int = 12) -> CatalogPage:
        local = self.local_facets(spec)
        if local:
            logger.info(f"Facets {local} are not supported server-side, filtering the full collection")
            items = await self._fetch_all(spec)
            return self._filter_and_paginate(items, spec, page, per_page)

        params = self.build_params(spec, page, per_page)
        items, remote_pagination = await self._request(params)

        try:
            total_items = int(remote_pagination.get("totalItems", len(items)))
            current_page = int(remote_pagination.get("currentPage", params["page"]))
        except (TypeError, ValueError) as e:
            logger.error(f"Malformed catalog page response: {e}")
            raise CatalogSourceError(f"Malformed catalog page response: {e}") from e

        paginator = Paginator(total_items=total_items, items_per_page=per_page, initial_page=current_page)
        return self._page_of(paginator, items, spec)
