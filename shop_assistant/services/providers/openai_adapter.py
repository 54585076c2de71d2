from __future__ import annotations

from typing import Any, Optional

from ...models import ProviderConfig, ProviderName
from .base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ProviderAdapter,
    ProviderRequest,
    dig,
    text_or_none,
)

OPENAI_CHAT_ENDPOINT = "https://api.openai.com/v1/chat/completions"


class OpenAIAdapter(ProviderAdapter):
    """Chat Completions API: system and user messages travel as separate entries."""

    name = ProviderName.OPENAI.value
    default_model = "gpt-3.5-turbo"

    def build_request(self, system_context: str, user_message: str, config: ProviderConfig) -> ProviderRequest:
        return ProviderRequest(
            url=OPENAI_CHAT_ENDPOINT,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self.resolve_model(config),
                "messages": [
                    {"role": "system", "content": system_context},
                    {"role": "user", "content": user_message},
                ],
                "temperature": DEFAULT_TEMPERATURE,
                "max_tokens": DEFAULT_MAX_TOKENS,
            },
        )

    def extract_reply(self, response: Any) -> Optional[str]:
        return text_or_none(dig(response, "choices", 0, "message", "content"))
