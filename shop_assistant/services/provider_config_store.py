from __future__ import annotations

import logging
from threading import Lock

from ..config import get_settings
from ..models import ProviderConfig, SettingsUpdate

logger = logging.getLogger(__name__)


class ProviderConfigStore:
    """Process-wide LLM provider selection.

    Seeded from the environment and changed only through the settings endpoint.
    Readers take an immutable snapshot per request, so an update never affects a
    request already in flight. Nothing is persisted across restarts.
    """

    def __init__(self, initial: ProviderConfig | None = None) -> None:
        self._config = initial or ProviderConfig()
        self._lock = Lock()

    def snapshot(self) -> ProviderConfig:
        with self._lock:
            return self._config

    def update(self, changes: SettingsUpdate) -> ProviderConfig:
        """Apply non-empty fields from the update and return the new snapshot."""
        with self._lock:
            data = self._config.model_dump()
            if changes.llm_provider:
                data["provider"] = changes.llm_provider
            if changes.llm_api_key:
                data["api_key"] = changes.llm_api_key
            if changes.llm_model:
                data["model"] = changes.llm_model
            self._config = ProviderConfig(**data)
            logger.info(
                "Provider settings updated provider=%s model=%s api_key_set=%s",
                self._config.provider or "-",
                self._config.model or "-",
                bool(self._config.api_key),
            )
            return self._config


_provider_config_store: ProviderConfigStore | None = None


def get_provider_config_store() -> ProviderConfigStore:
    """Return the singleton store, seeding it from settings on first use."""
    global _provider_config_store
    if _provider_config_store is None:
        settings = get_settings()
        _provider_config_store = ProviderConfigStore(
            ProviderConfig(
                provider=settings.llm_provider,
                api_key=settings.llm_api_key,
                model=settings.llm_model,
            )
        )
    return _provider_config_store


def reset_provider_config_store() -> None:
    """Drop the singleton (for tests)."""
    global _provider_config_store
    _provider_config_store = None
