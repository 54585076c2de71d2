from __future__ import annotations

from enum import StrEnum


class IntentType(StrEnum):
    """Closed set of shopper intents understood by the rule-based responder."""

    FAQ = "faq"
    REFUND = "refund"
    SHIPPING = "shipping"
    PRIVACY = "privacy"
    TERMS = "terms"
    CONTACT = "contact"
    SOCIAL = "social"
    REWARDS = "rewards"
    SPECIFIC_PRODUCT = "specific_product"
    GENERIC_PRODUCT = "generic_product"
    DEFAULT = "default"


class ReplySource(StrEnum):
    """Which tier produced the final reply."""

    LLM = "llm"
    RULE_BASED = "rule_based"


# Vocabularies overlap ("refund this product", "help with my order"), so the
# evaluation order is observable. The content file may override it.
DEFAULT_INTENT_PRIORITY: tuple[IntentType, ...] = (
    IntentType.FAQ,
    IntentType.REFUND,
    IntentType.SHIPPING,
    IntentType.PRIVACY,
    IntentType.TERMS,
    IntentType.CONTACT,
    IntentType.SOCIAL,
    IntentType.REWARDS,
    IntentType.SPECIFIC_PRODUCT,
    IntentType.GENERIC_PRODUCT,
)
