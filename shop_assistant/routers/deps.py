from __future__ import annotations

from fastapi import Depends

from ..config import Settings, get_settings
from ..services.catalog_gateway import CatalogGateway
from ..services.llm_invoker import LLMInvoker
from ..services.orchestrator import Orchestrator, build_orchestrator
from ..services.provider_config_store import ProviderConfigStore, get_provider_config_store


def get_catalog_gateway(settings: Settings = Depends(get_settings)) -> CatalogGateway:
    return CatalogGateway(settings)


def get_llm_invoker(settings: Settings = Depends(get_settings)) -> LLMInvoker:
    return LLMInvoker(settings)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    gateway: CatalogGateway = Depends(get_catalog_gateway),
    llm_invoker: LLMInvoker = Depends(get_llm_invoker),
) -> Orchestrator:
    return build_orchestrator(settings, gateway=gateway, llm_invoker=llm_invoker)


def get_provider_config_store_dependency() -> ProviderConfigStore:
    return get_provider_config_store()
