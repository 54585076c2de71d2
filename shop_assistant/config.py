from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")

    # Initial LLM provider selection; the settings endpoint may change it at runtime.
    llm_provider: str = Field(default="", alias="LLM_PROVIDER")
    llm_api_key: str = Field(default="", alias="LLM_API_KEY")
    llm_model: Optional[str] = Field(default=None, alias="LLM_MODEL")
    llm_timeout_seconds: float = Field(default=8.0, alias="LLM_TIMEOUT_SECONDS")

    shopify_shop_url: str = Field(default="", alias="SHOPIFY_SHOP_URL")
    shopify_access_token: str = Field(default="", alias="SHOPIFY_ACCESS_TOKEN")
    shopify_api_version: str = Field(default="2023-07", alias="SHOPIFY_API_VERSION")
    http_timeout_seconds: float = Field(default=5.0, alias="HTTP_TIMEOUT_SECONDS")

    storefront_content_path: Optional[str] = Field(default=None, alias="STOREFRONT_CONTENT_PATH")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="CORS_ORIGINS",
    )

    # LangSmith tracing
    langsmith_api_key: str | None = Field(default=None, alias="LANGSMITH_API_KEY")
    langsmith_project: str | None = Field(default=None, alias="LANGSMITH_PROJECT")
    langsmith_tracing_v2: bool = Field(default=False, alias="LANGCHAIN_TRACING_V2")
    enable_request_tracing: bool = Field(default=True, alias="ENABLE_REQUEST_TRACING")

    app_version: str = Field(default="1.0.0")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
