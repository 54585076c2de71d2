from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..intents import IntentType, ReplySource


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = ""


class ChatResponse(BaseModel):
    reply: str
    source: ReplySource


class ChatReply(BaseModel):
    """Final reply text plus the tier that produced it."""

    model_config = ConfigDict(frozen=True)

    text: str
    source: ReplySource
    intent: Optional[IntentType] = None


class ProductSnapshot(BaseModel):
    """Catalog item as handed to the LLM."""

    title: str
    price: str
    description: str


class StorePolicies(BaseModel):
    shipping: str
    returns: str
    rewards: str


class ConversationContext(BaseModel):
    """Per-request bundle of shop identity, policy text and optional catalog snapshot."""

    shop_name: str
    website: str
    policies: StorePolicies
    products: Optional[List[ProductSnapshot]] = Field(default=None)

    def to_prompt_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
