"""
LLM provider adapters.

Each adapter turns a (system context, user message) pair into one vendor's
HTTP request and pulls plain reply text back out of that vendor's response:

- OpenAIAdapter: Chat Completions
- AnthropicAdapter: Messages
- GeminiAdapter: generateContent (v1 for gemini-pro, v1beta otherwise)
"""

from .anthropic_adapter import AnthropicAdapter
from .base import ProviderAdapter, ProviderRequest
from .gemini_adapter import GeminiAdapter
from .openai_adapter import OpenAIAdapter
from .registry import get_adapter, supported_providers

__all__ = [
    "AnthropicAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "ProviderAdapter",
    "ProviderRequest",
    "get_adapter",
    "supported_providers",
]
