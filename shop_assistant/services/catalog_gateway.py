from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Union

import httpx
from fastapi import status
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..models import CatalogCollection, CatalogProduct
from ..utils.logging import get_request_logger
from .error_handling import UpstreamError

logger = logging.getLogger(__name__)


class CatalogGatewayError(UpstreamError):
    """Raised when the commerce platform cannot serve a catalog read."""

    error_type = "CatalogAPIError"


class CatalogGateway:
    """Read-only client for the Shopify Admin REST API (products and collections)."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._base_url = self._resolve_base_url(settings)

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and self._settings.shopify_access_token)

    async def list_products(
        self,
        limit: int,
        collection_id: Optional[Union[int, str]] = None,
        *,
        trace_id: Optional[str] = None,
    ) -> List[CatalogProduct]:
        if collection_id is not None:
            path = f"collections/{collection_id}/products.json"
        else:
            path = "products.json"
        data = await self._get(path, params={"limit": limit}, trace_id=trace_id)
        return [self._parse(CatalogProduct, item) for item in self._items(data, "products")]

    async def list_collections(self, *, trace_id: Optional[str] = None) -> List[CatalogCollection]:
        data = await self._get("custom_collections.json", trace_id=trace_id)
        return [self._parse(CatalogCollection, item) for item in self._items(data, "custom_collections")]

    async def get_shop(self, *, trace_id: Optional[str] = None) -> Dict[str, Any]:
        data = await self._get("shop.json", trace_id=trace_id)
        shop = data.get("shop") if isinstance(data, dict) else None
        return shop if isinstance(shop, dict) else {}

    async def get_raw_products(self, *, trace_id: Optional[str] = None) -> Dict[str, Any]:
        """Unparsed products payload, as served by the platform."""
        return await self._get("products.json", trace_id=trace_id)

    async def _get(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.is_configured:
            raise CatalogGatewayError(
                "Catalog is not configured",
                reason="catalog_not_configured",
                http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        url = f"{self._base_url}/{path}"
        headers = {
            "X-Shopify-Access-Token": self._settings.shopify_access_token,
            "Accept": "application/json",
        }
        if trace_id:
            headers["X-Request-Id"] = trace_id

        req_logger = get_request_logger(logger, trace_id=trace_id)
        timeout = httpx.Timeout(self._settings.http_timeout_seconds)
        start = time.perf_counter()
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            try:
                response = await client.get(url, headers=headers, params=params)
                elapsed_ms = (time.perf_counter() - start) * 1000
                req_logger.info(
                    "catalog_gateway.get path=%s status=%s latency_ms=%.1f",
                    path,
                    response.status_code,
                    elapsed_ms,
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                body = exc.response.text
                req_logger.error(
                    "catalog_gateway error path=%s status=%s body=%s",
                    path,
                    exc.response.status_code,
                    body,
                )
                raise CatalogGatewayError(
                    self._upstream_message(exc.response) or str(exc),
                    reason="catalog_http_error",
                    http_status=exc.response.status_code,
                ) from exc
            except httpx.InvalidURL as exc:
                req_logger.error("catalog_gateway invalid url path=%s error=%s", path, exc)
                raise CatalogGatewayError(
                    "Catalog is not configured",
                    reason="catalog_invalid_url",
                    http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
                ) from exc
            except httpx.HTTPError as exc:
                req_logger.error("catalog_gateway transport error path=%s error=%s", path, exc)
                raise CatalogGatewayError(
                    str(exc) or exc.__class__.__name__,
                    reason="catalog_transport_error",
                    http_status=status.HTTP_502_BAD_GATEWAY,
                ) from exc
            except ValueError as exc:
                req_logger.error("catalog_gateway invalid json path=%s error=%s", path, exc)
                raise CatalogGatewayError(
                    "Catalog returned an invalid response",
                    reason="catalog_invalid_json",
                    http_status=status.HTTP_502_BAD_GATEWAY,
                ) from exc
        if not isinstance(data, dict):
            raise CatalogGatewayError(
                "Catalog returned an invalid response",
                reason="catalog_invalid_payload",
                http_status=status.HTTP_502_BAD_GATEWAY,
            )
        return data

    @staticmethod
    def _items(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
        items = data.get(key)
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _parse(model: type, item: Dict[str, Any]):
        try:
            return model.model_validate(item)
        except PydanticValidationError as exc:
            raise CatalogGatewayError(
                "Catalog returned an unexpected record",
                reason="catalog_invalid_record",
                http_status=status.HTTP_502_BAD_GATEWAY,
            ) from exc

    @staticmethod
    def _upstream_message(response: httpx.Response) -> Optional[str]:
        # Shopify reports failures as {"errors": "..."} or {"errors": {...}}.
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and payload.get("errors"):
            return str(payload["errors"])
        return None

    @staticmethod
    def _resolve_base_url(settings: Settings) -> str:
        raw = (settings.shopify_shop_url or "").strip()
        if not raw:
            return ""
        if "://" not in raw:
            raw = f"https://{raw}"
        try:
            host = httpx.URL(raw).host
        except httpx.InvalidURL as exc:
            logger.warning("Ignoring malformed SHOPIFY_SHOP_URL: %s", exc)
            return ""
        if not host:
            return ""
        return f"https://{host}/admin/api/{settings.shopify_api_version}"
