from __future__ import annotations

import logging
from typing import List, Optional

from ..intents import IntentType
from ..models import CatalogCollection, CatalogProduct
from ..utils.logging import get_request_logger
from .catalog_formatting import format_listing_line
from .catalog_gateway import CatalogGateway, CatalogGatewayError
from .content import CollectionQualifier, StorefrontContent
from .intent_classifier import IntentClassifier
from .metrics import get_metrics_service

logger = logging.getLogger(__name__)

# Products shown in a rule-based catalog reply.
PRODUCT_LISTING_LIMIT = 5


class ResponseComposer:
    """Produces rule-based reply text for a classified intent."""

    def __init__(
        self,
        *,
        content: StorefrontContent,
        gateway: CatalogGateway,
        classifier: IntentClassifier,
    ) -> None:
        self._content = content
        self._gateway = gateway
        self._classifier = classifier

    async def compose(self, intent: IntentType, message: str, *, trace_id: Optional[str] = None) -> str:
        if intent is IntentType.GENERIC_PRODUCT:
            return await self._compose_product_listing(message, trace_id=trace_id)
        # Canned copy, including the highlighted product block.
        return self._content.reply_for(intent)

    async def _compose_product_listing(self, message: str, *, trace_id: Optional[str]) -> str:
        copy = self._content.catalog
        req_logger = get_request_logger(logger, trace_id=trace_id)
        qualifier = self._classifier.match_collection(message)

        try:
            collection = await self._find_collection(qualifier, trace_id=trace_id) if qualifier else None
            products = await self._gateway.list_products(
                PRODUCT_LISTING_LIMIT,
                collection.id if collection else None,
                trace_id=trace_id,
            )
        except CatalogGatewayError as exc:
            get_metrics_service().record_catalog_error()
            req_logger.warning("Catalog unavailable for product reply reason=%s error=%s", exc.reason, exc)
            return copy.unavailable

        req_logger.info(
            "Product listing qualifier=%s collection=%s products=%d",
            qualifier.name if qualifier else "-",
            collection.title if collection else "-",
            len(products),
        )
        if not products:
            if collection:
                return copy.empty_collection.format(collection=collection.title)
            return copy.empty_store

        return self._format_listing(products, collection)

    async def _find_collection(
        self,
        qualifier: CollectionQualifier,
        *,
        trace_id: Optional[str],
    ) -> Optional[CatalogCollection]:
        collections = await self._gateway.list_collections(trace_id=trace_id)
        for collection in collections:
            if qualifier.title_pattern.search(collection.title or ""):
                return collection
        return None

    def _format_listing(self, products: List[CatalogProduct], collection: Optional[CatalogCollection]) -> str:
        copy = self._content.catalog
        intro = (
            copy.listing_intro_collection.format(collection=collection.title)
            if collection
            else copy.listing_intro_store
        )
        lines = "\n".join(
            format_listing_line(product, copy, self._content.currency_symbol) for product in products
        )
        return f"{intro}\n\n{lines}\n\n{copy.listing_outro}"
