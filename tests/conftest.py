"""Shared pytest fixtures for all tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from shop_assistant.config import Settings
from shop_assistant.models import (
    CatalogCollection,
    CatalogProduct,
    ConversationContext,
    ProviderConfig,
)
from shop_assistant.services.content import StorefrontContent, get_storefront_content
from shop_assistant.services.intent_classifier import IntentClassifier
from shop_assistant.services.llm_invoker import LLMResult, LLMStatus


class StubCatalogGateway:
    """In-memory catalog that records every call."""

    def __init__(
        self,
        products: Optional[List[CatalogProduct]] = None,
        collections: Optional[List[CatalogCollection]] = None,
        collection_products: Optional[Dict[Any, List[CatalogProduct]]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.products = products or []
        self.collections = collections or []
        self.collection_products = collection_products or {}
        self.error = error
        self.calls: List[tuple] = []

    async def list_products(self, limit, collection_id=None, *, trace_id=None):
        self.calls.append(("list_products", limit, collection_id))
        if self.error:
            raise self.error
        if collection_id is not None:
            return list(self.collection_products.get(collection_id, []))[:limit]
        return list(self.products)[:limit]

    async def list_collections(self, *, trace_id=None):
        self.calls.append(("list_collections",))
        if self.error:
            raise self.error
        return list(self.collections)

    async def get_shop(self, *, trace_id=None):
        self.calls.append(("get_shop",))
        if self.error:
            raise self.error
        return {"name": "Iris Essentials", "domain": "irisessentials.com"}

    async def get_raw_products(self, *, trace_id=None):
        self.calls.append(("get_raw_products",))
        if self.error:
            raise self.error
        return {"products": [product.model_dump() for product in self.products]}


class StubLLMInvoker:
    """LLM invoker returning a canned result and recording its inputs."""

    def __init__(self, result: Optional[LLMResult] = None) -> None:
        self.result = result or LLMResult(status=LLMStatus.ANSWERED, text="Hello from the LLM", provider="openai")
        self.calls: List[Dict[str, Any]] = []

    async def invoke(self, message: str, context: ConversationContext, config: ProviderConfig, *, trace_id=None):
        self.calls.append({"message": message, "context": context, "config": config})
        return self.result


@pytest.fixture
def settings() -> Settings:
    """Default settings for tests: no LLM, catalog pointing at a fake shop."""
    return Settings(
        llm_provider="",
        llm_api_key="",
        llm_model=None,
        shopify_shop_url="https://iris-essentials.myshopify.com",
        shopify_access_token="shpat_test",
        storefront_content_path=None,
    )


@pytest.fixture
def content() -> StorefrontContent:
    return get_storefront_content()


@pytest.fixture
def classifier(content: StorefrontContent) -> IntentClassifier:
    return IntentClassifier(content)


@pytest.fixture
def kitchen_catalog() -> StubCatalogGateway:
    """Catalog with a beauty and a kitchen collection; only kitchen has products."""
    return StubCatalogGateway(
        products=[
            CatalogProduct(id=1, title="Rose Face Serum", variants=[{"price": "24.00"}]),
        ],
        collections=[
            CatalogCollection(id=101, title="Beauty Essentials"),
            CatalogCollection(id=202, title="Kitchen Essentials"),
        ],
        collection_products={
            202: [
                CatalogProduct(id=11, title="Bamboo Chopping Board", variants=[{"price": "18.5"}]),
                CatalogProduct(id=12, title="Ceramic Mixing Bowl", variants=[{"price": "0.00"}, {"price": "12"}]),
            ],
        },
    )


@pytest.fixture
def stub_gateway_factory():
    return StubCatalogGateway


@pytest.fixture
def stub_invoker_factory():
    return StubLLMInvoker


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(provider="openai", api_key="sk-test")


@pytest.fixture
def no_provider_config() -> ProviderConfig:
    return ProviderConfig()
