from __future__ import annotations

from typing import Dict, Optional

from .anthropic_adapter import AnthropicAdapter
from .base import ProviderAdapter
from .gemini_adapter import GeminiAdapter
from .openai_adapter import OpenAIAdapter

_ADAPTERS: Dict[str, ProviderAdapter] = {
    adapter.name: adapter
    for adapter in (OpenAIAdapter(), AnthropicAdapter(), GeminiAdapter())
}


def get_adapter(provider: str | None) -> Optional[ProviderAdapter]:
    """Return the adapter registered for the provider tag, or None if unsupported."""
    if not provider:
        return None
    return _ADAPTERS.get(provider.strip().lower())


def supported_providers() -> list[str]:
    return sorted(_ADAPTERS)
