from __future__ import annotations

from .catalog import CatalogCollection, CatalogProduct, CatalogVariant
from .chat import (
    ChatReply,
    ChatRequest,
    ChatResponse,
    ConversationContext,
    ProductSnapshot,
    StorePolicies,
)
from .provider import MASKED_API_KEY, ProviderConfig, ProviderName, SettingsUpdate, SettingsView

__all__ = [
    "CatalogCollection",
    "CatalogProduct",
    "CatalogVariant",
    "ChatReply",
    "ChatRequest",
    "ChatResponse",
    "ConversationContext",
    "MASKED_API_KEY",
    "ProductSnapshot",
    "ProviderConfig",
    "ProviderName",
    "SettingsUpdate",
    "SettingsView",
    "StorePolicies",
]
