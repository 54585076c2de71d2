from __future__ import annotations

import httpx
import pytest

from shop_assistant.config import Settings
from shop_assistant.services.catalog_gateway import CatalogGateway, CatalogGatewayError

BASE = "https://iris-essentials.myshopify.com/admin/api/2023-07"


class RecordingHandler:
    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


def _gateway(settings: Settings, handler) -> CatalogGateway:
    return CatalogGateway(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_products_sends_token_and_limit(settings) -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "products": [
                    {"id": 1, "title": "Rose Face Serum", "handle": "rose-serum", "variants": [{"id": 10, "price": "24.00"}]},
                    "not-a-product",
                ]
            },
        )
    )

    products = await _gateway(settings, handler).list_products(5, trace_id="abc")

    (request,) = handler.requests
    assert str(request.url).startswith(f"{BASE}/products.json")
    assert request.url.params["limit"] == "5"
    assert request.headers["x-shopify-access-token"] == "shpat_test"
    assert request.headers["x-request-id"] == "abc"
    assert [p.title for p in products] == ["Rose Face Serum"]
    assert products[0].variants[0].price == "24.00"


@pytest.mark.asyncio
async def test_list_products_for_collection(settings) -> None:
    handler = RecordingHandler(httpx.Response(200, json={"products": []}))

    products = await _gateway(settings, handler).list_products(5, 202)

    assert products == []
    assert handler.requests[0].url.path == "/admin/api/2023-07/collections/202/products.json"


@pytest.mark.asyncio
async def test_list_collections(settings) -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"custom_collections": [{"id": 202, "title": "Kitchen Essentials"}]})
    )

    collections = await _gateway(settings, handler).list_collections()

    assert handler.requests[0].url.path == "/admin/api/2023-07/custom_collections.json"
    assert [(c.id, c.title) for c in collections] == [(202, "Kitchen Essentials")]


@pytest.mark.asyncio
async def test_get_shop(settings) -> None:
    handler = RecordingHandler(httpx.Response(200, json={"shop": {"name": "Iris Essentials"}}))

    shop = await _gateway(settings, handler).get_shop()

    assert shop == {"name": "Iris Essentials"}


@pytest.mark.asyncio
async def test_bare_host_is_accepted() -> None:
    settings = Settings(shopify_shop_url="iris-essentials.myshopify.com", shopify_access_token="t")
    handler = RecordingHandler(httpx.Response(200, json={"products": []}))

    await _gateway(settings, handler).get_raw_products()

    assert str(handler.requests[0].url) == f"{BASE}/products.json"


@pytest.mark.asyncio
async def test_upstream_status_and_message_are_kept(settings) -> None:
    handler = RecordingHandler(httpx.Response(401, json={"errors": "[API] Invalid API key or access token"}))

    with pytest.raises(CatalogGatewayError) as exc_info:
        await _gateway(settings, handler).get_raw_products()

    assert exc_info.value.http_status == 401
    assert exc_info.value.message == "[API] Invalid API key or access token"
    assert exc_info.value.error_type == "CatalogAPIError"


@pytest.mark.asyncio
async def test_transport_error_is_bad_gateway(settings) -> None:
    handler = RecordingHandler(error=httpx.ConnectError("name resolution failed"))

    with pytest.raises(CatalogGatewayError) as exc_info:
        await _gateway(settings, handler).list_products(5)

    assert exc_info.value.http_status == 502
    assert exc_info.value.reason == "catalog_transport_error"


@pytest.mark.asyncio
async def test_invalid_json_is_bad_gateway(settings) -> None:
    handler = RecordingHandler(httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(CatalogGatewayError) as exc_info:
        await _gateway(settings, handler).list_collections()

    assert exc_info.value.http_status == 502


@pytest.mark.asyncio
async def test_not_configured_makes_no_call() -> None:
    settings = Settings(shopify_shop_url="", shopify_access_token="")
    handler = RecordingHandler(httpx.Response(200, json={}))
    gateway = _gateway(settings, handler)

    assert not gateway.is_configured
    with pytest.raises(CatalogGatewayError) as exc_info:
        await gateway.list_products(5)

    assert exc_info.value.http_status == 503
    assert handler.requests == []


@pytest.mark.asyncio
async def test_malformed_shop_url_is_not_configured() -> None:
    settings = Settings(shopify_shop_url="https://iris\x7f.myshopify.com", shopify_access_token="t")
    handler = RecordingHandler(httpx.Response(200, json={}))
    gateway = _gateway(settings, handler)

    assert not gateway.is_configured
    with pytest.raises(CatalogGatewayError) as exc_info:
        await gateway.list_collections()

    assert exc_info.value.http_status == 503
    assert handler.requests == []


@pytest.mark.asyncio
async def test_malformed_api_version_is_not_configured() -> None:
    settings = Settings(
        shopify_shop_url="iris-essentials.myshopify.com",
        shopify_access_token="t",
        shopify_api_version="2023-07\x7f",
    )
    handler = RecordingHandler(httpx.Response(200, json={}))

    with pytest.raises(CatalogGatewayError) as exc_info:
        await _gateway(settings, handler).list_products(5)

    assert exc_info.value.http_status == 503
    assert exc_info.value.reason == "catalog_invalid_url"
    assert handler.requests == []
