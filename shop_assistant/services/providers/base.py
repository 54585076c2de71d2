from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from ...models import ProviderConfig

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 500


@dataclass(frozen=True)
class ProviderRequest:
    """Provider-specific HTTP call, ready to be sent."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    json: Dict[str, Any] = field(default_factory=dict)
    method: str = "POST"

    @property
    def full_url(self) -> str:
        return str(httpx.URL(self.url, params=self.params or None))


def dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def text_or_none(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def combined_prompt(system_context: str, user_message: str) -> str:
    """Single-turn prompt for vendors that take the system text inside the user turn."""
    return f"{system_context}\n\nCustomer question: {user_message}"


class ProviderAdapter(ABC):
    """Translates a (system context, user message) pair into one vendor's wire format."""

    name: str
    default_model: str

    def resolve_model(self, config: ProviderConfig) -> str:
        return config.model or self.default_model

    @abstractmethod
    def build_request(self, system_context: str, user_message: str, config: ProviderConfig) -> ProviderRequest:
        ...

    @abstractmethod
    def extract_reply(self, response: Any) -> Optional[str]:
        ...
