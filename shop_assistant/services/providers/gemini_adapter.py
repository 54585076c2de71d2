from __future__ import annotations

from typing import Any, Optional

from ...models import ProviderConfig, ProviderName
from .base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ProviderAdapter,
    ProviderRequest,
    combined_prompt,
    dig,
    text_or_none,
)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com"
# Served from the stable v1 API, which takes the key as a header. Every other
# model goes to v1beta with the key in the query string.
GEMINI_STABLE_MODEL = "gemini-pro"


class GeminiAdapter(ProviderAdapter):
    """generateContent API; endpoint version and key placement depend on the model."""

    name = ProviderName.GEMINI.value
    default_model = GEMINI_STABLE_MODEL

    def build_request(self, system_context: str, user_message: str, config: ProviderConfig) -> ProviderRequest:
        model = self.resolve_model(config)
        headers = {"Content-Type": "application/json"}
        params: dict[str, str] = {}
        if model == GEMINI_STABLE_MODEL:
            url = f"{GEMINI_API_BASE}/v1/models/{model}:generateContent"
            headers["x-goog-api-key"] = config.api_key
        else:
            url = f"{GEMINI_API_BASE}/v1beta/models/{model}:generateContent"
            params["key"] = config.api_key

        return ProviderRequest(
            url=url,
            headers=headers,
            params=params,
            json={
                "contents": [
                    {
                        "role": "user",
                        "parts": [{"text": combined_prompt(system_context, user_message)}],
                    }
                ],
                "generationConfig": {
                    "temperature": DEFAULT_TEMPERATURE,
                    "maxOutputTokens": DEFAULT_MAX_TOKENS,
                },
            },
        )

    def extract_reply(self, response: Any) -> Optional[str]:
        return text_or_none(dig(response, "candidates", 0, "content", "parts", 0, "text"))
