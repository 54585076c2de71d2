from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..services.catalog_gateway import CatalogGateway, CatalogGatewayError
from ..services.metrics import get_metrics_service
from .deps import get_catalog_gateway

router = APIRouter(prefix="/api", tags=["catalog"])
logger = logging.getLogger(__name__)

# Sample size for the connectivity check.
CONNECTION_CHECK_LIMIT = 3


@router.get("/products")
async def list_products(gateway: CatalogGateway = Depends(get_catalog_gateway)) -> Dict[str, Any]:
    """Catalog listing as returned by the platform; failures keep the upstream status."""
    return await gateway.get_raw_products()


@router.get("/test-connection")
async def test_connection(gateway: CatalogGateway = Depends(get_catalog_gateway)):
    try:
        shop = await gateway.get_shop()
        products = await gateway.list_products(CONNECTION_CHECK_LIMIT)
    except CatalogGatewayError as exc:
        get_metrics_service().record_catalog_error()
        logger.error("Catalog connection test failed reason=%s error=%s", exc.reason, exc)
        status_code = exc.http_status or 500
        return JSONResponse(
            status_code=status_code,
            content={
                "status": "error",
                "connection": "Shopify connection failed",
                "error": {
                    "message": exc.message or str(exc),
                    "status": status_code,
                    "type": exc.error_type,
                },
            },
        )

    return {
        "status": "success",
        "connection": "Shopify connection successful",
        "shop": shop,
        "productCount": len(products),
        "sampleProducts": [
            {"id": product.id, "title": product.title, "handle": product.handle}
            for product in products
        ],
    }
