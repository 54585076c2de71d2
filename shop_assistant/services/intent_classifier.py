from __future__ import annotations

import logging
from typing import Optional

from langsmith import traceable

from ..intents import IntentType
from .content import CollectionQualifier, StorefrontContent

logger = logging.getLogger(__name__)


class IntentClassifier:
    """Deterministic keyword classifier.

    Vocabularies are evaluated in the configured priority order and the first
    intent whose vocabulary occurs anywhere in the message wins. Messages that
    match nothing resolve to IntentType.DEFAULT.
    """

    def __init__(self, content: StorefrontContent) -> None:
        self._content = content

    @traceable(run_type="chain", name="intent_classify")
    def classify(self, message: str) -> IntentType:
        text = (message or "").strip()
        if not text:
            return IntentType.DEFAULT
        for intent in self._content.intent_priority:
            pattern = self._content.intent_patterns.get(intent)
            if pattern is not None and pattern.search(text):
                logger.debug("Intent matched intent=%s pattern=%s", intent, pattern.pattern)
                return intent
        return IntentType.DEFAULT

    def is_product_related(self, message: str) -> bool:
        """True when the message uses generic product vocabulary."""
        pattern = self._content.intent_patterns.get(IntentType.GENERIC_PRODUCT)
        return bool(pattern and pattern.search(message or ""))

    def match_collection(self, message: str) -> Optional[CollectionQualifier]:
        for qualifier in self._content.collections:
            if qualifier.query_pattern.search(message or ""):
                return qualifier
        return None
