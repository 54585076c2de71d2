from __future__ import annotations

import logging
from typing import Optional

from ..models import ConversationContext
from ..utils.logging import get_request_logger
from .catalog_formatting import to_snapshot
from .catalog_gateway import CatalogGateway, CatalogGatewayError
from .content import StorefrontContent
from .intent_classifier import IntentClassifier
from .metrics import get_metrics_service

logger = logging.getLogger(__name__)

# Products attached to the LLM context for product-related questions.
CONTEXT_PRODUCT_LIMIT = 10


class ContextBuilder:
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

    async def build(self, message: str, *, trace_id: Optional[str] = None) -> ConversationContext:
        """Shop identity and policies, plus a catalog snapshot for product questions.

        A catalog failure leaves the products out rather than failing the request.
        """
        context = ConversationContext(
            shop_name=self._content.shop_name,
            website=self._content.website,
            policies=self._content.policies,
        )
        if not self._classifier.is_product_related(message):
            return context

        req_logger = get_request_logger(logger, trace_id=trace_id)
        try:
            products = await self._gateway.list_products(CONTEXT_PRODUCT_LIMIT, trace_id=trace_id)
        except CatalogGatewayError as exc:
            get_metrics_service().record_catalog_error()
            req_logger.warning("Catalog unavailable for LLM context reason=%s error=%s", exc.reason, exc)
            return context

        copy = self._content.catalog
        symbol = self._content.currency_symbol
        return context.model_copy(
            update={"products": [to_snapshot(product, copy, symbol) for product in products]}
        )
