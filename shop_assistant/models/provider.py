from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MASKED_API_KEY = "********"


class ProviderName(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    NONE = "none"


class ProviderConfig(BaseModel):
    """Snapshot of the LLM provider selection taken at the start of a request."""

    model_config = ConfigDict(frozen=True)

    provider: str = ""
    api_key: str = ""
    model: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @field_validator("model", mode="before")
    @classmethod
    def _blank_model_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.provider) and self.provider != ProviderName.NONE


class SettingsUpdate(BaseModel):
    """Body of POST /api/settings; empty fields leave the current value untouched."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    llm_provider: Optional[str] = Field(default=None, alias="llmProvider")
    llm_api_key: Optional[str] = Field(default=None, alias="llmApiKey")
    llm_model: Optional[str] = Field(default=None, alias="llmModel")


class SettingsView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    llm_provider: Optional[str] = Field(default=None, serialization_alias="llmProvider")
    llm_api_key: Optional[str] = Field(default=None, serialization_alias="llmApiKey")
    llm_model: Optional[str] = Field(default=None, serialization_alias="llmModel")

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "SettingsView":
        return cls(
            llm_provider=config.provider or None,
            llm_api_key=MASKED_API_KEY if config.api_key else None,
            llm_model=config.model,
        )
