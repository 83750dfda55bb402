"""
Unit tests for StorefrontHttpClient against an httpx.MockTransport
"""

import json

import httpx
import pytest

from storefront.models.catalog import ItemKind
from storefront.models.search import SearchMode
from storefront.services.catalog import CatalogSourceError
from storefront.services.catalog.http_client import StorefrontHttpClient, parse_search_result


def make_client(handler):
    transport = httpx.MockTransport(handler)
    return StorefrontHttpClient(
        base_url="http://storefront.test",
        client=httpx.AsyncClient(transport=transport, base_url="http://storefront.test"),
    )


@pytest.mark.unit
class TestStorefrontHttpClient:

    @pytest.mark.asyncio
    async def test_search_all_queries_both_catalogs_parts_first(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, request.url.params["q"]))
            if request.url.path == "/api/search/repairs":
                return httpx.Response(200, json=[{"id": 1, "title": "Screen", "matchScore": 0.7}])
            return httpx.Response(200, json=[{"id": 9, "name": "Case", "score": 0.9}])

        client = make_client(handler)
        results = await client.search("iphone", SearchMode.ALL)

        assert seen == [("/api/search/repairs", "iphone"), ("/api/search/accessories", "iphone")]
        assert [r.kind for r in results] == [ItemKind.PART, ItemKind.ACCESSORY]
        assert results[0].url == "/parts/1"
        assert results[0].score == 0.7
        assert results[1].url == "/accessories/9"

    @pytest.mark.asyncio
    async def test_search_single_mode(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json=[])

        await make_client(handler).search("case", SearchMode.ACCESSORIES)
        assert paths == ["/api/search/accessories"]

    @pytest.mark.asyncio
    async def test_http_error_becomes_source_error(self):
        client = make_client(lambda request: httpx.Response(503))
        with pytest.raises(CatalogSourceError):
            await client.get_brands_by_type("SMARTPHONE")

    @pytest.mark.asyncio
    async def test_transport_error_becomes_source_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CatalogSourceError):
            await make_client(handler).fetch_catalog()

    @pytest.mark.asyncio
    async def test_invalid_json_becomes_source_error(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(CatalogSourceError):
            await client.get_brands_by_type("SMARTPHONE")

    @pytest.mark.asyncio
    async def test_models_accept_strings_and_records(self):
        def handler(request):
            assert request.url.params["type"] == "SMARTPHONE"
            assert request.url.params["brand"] == "Apple"
            return httpx.Response(200, json=["iPhone SE", {"model": "iPhone 15", "series": "iPhone 15 Series"}])

        models = await make_client(handler).get_models_by_brand("SMARTPHONE", "Apple")

        assert models == [
            {"model": "iPhone SE", "series": None},
            {"model": "iPhone 15", "series": "iPhone 15 Series"},
        ]

    @pytest.mark.asyncio
    async def test_malformed_model_record(self):
        client = make_client(lambda request: httpx.Response(200, json=[{"series": "X"}]))
        with pytest.raises(CatalogSourceError):
            await client.get_models_by_brand("SMARTPHONE", "Apple")

    @pytest.mark.asyncio
    async def test_parts_by_model(self):
        def handler(request):
            assert request.url.path == "/api/devices/parts"
            assert request.url.params["model"] == "iPhone 15"
            return httpx.Response(200, json=[{"id": "p1", "name": "Battery", "cost": 39, "stock": 2}])

        parts = await make_client(handler).get_parts_by_model("SMARTPHONE", "Apple", "iPhone 15")

        assert len(parts) == 1
        assert parts[0].kind == ItemKind.PART
        assert parts[0].price == 39.0

    @pytest.mark.asyncio
    async def test_catalog_page_lowercases_booleans(self):
        def handler(request):
            assert request.url.params["inStockOnly"] == "true"
            return httpx.Response(200, content=json.dumps({"data": [], "pagination": {}}))

        payload = await make_client(handler).fetch_catalog_page({"page": 1, "inStockOnly": True})
        assert payload["data"] == []

    @pytest.mark.asyncio
    async def test_catalog_page_without_data(self):
        client = make_client(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(CatalogSourceError):
            await client.fetch_catalog_page({"page": 1})

    @pytest.mark.asyncio
    async def test_context_manager_leaves_injected_client_open(self):
        inner = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
        async with StorefrontHttpClient(client=inner):
            pass
        assert not inner.is_closed
        await inner.aclose()


@pytest.mark.unit
def test_parse_search_result_prefers_explicit_url():
    result = parse_search_result({"id": "5", "title": "Case", "url": "/accessories/case-5"}, ItemKind.ACCESSORY)
    assert result.url == "/accessories/case-5"
