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

ANTHROPIC_MESSAGES_ENDPOINT = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"


class AnthropicAdapter(ProviderAdapter):
    """Messages API with the system text folded into the single user turn."""

    name = ProviderName.ANTHROPIC.value
    default_model = "claude-3-sonnet-20240229"

    def build_request(self, system_context: str, user_message: str, config: ProviderConfig) -> ProviderRequest:
        return ProviderRequest(
            url=ANTHROPIC_MESSAGES_ENDPOINT,
            headers={
                "x-api-key": config.api_key,
                "anthropic-version": ANTHROPIC_API_VERSION,
                "Content-Type": "application/json",
            },
            json={
                "model": self.resolve_model(config),
                "messages": [
                    {"role": "user", "content": combined_prompt(system_context, user_message)},
                ],
                "max_tokens": DEFAULT_MAX_TOKENS,
                "temperature": DEFAULT_TEMPERATURE,
            },
        )

    def extract_reply(self, response: Any) -> Optional[str]:
        return text_or_none(dig(response, "content", 0, "text"))
