"""
Storefront content: shop identity, policy text, intent vocabularies and every
canned reply, loaded from YAML so copy and keywords can change without code.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Pattern, Tuple

import yaml

from ..config import Settings
from ..intents import DEFAULT_INTENT_PRIORITY, IntentType
from ..models import StorePolicies

logger = logging.getLogger(__name__)

CONTENT_PATH = Path(__file__).resolve().parents[1] / "data" / "storefront.yaml"


class ContentConfigError(RuntimeError):
    """Raised when the storefront content file is missing or malformed."""


@dataclass(frozen=True)
class CollectionQualifier:
    """Maps shopper vocabulary ("skincare") to a collection title pattern ("beauty")."""

    name: str
    query_pattern: Pattern[str]
    title_pattern: Pattern[str]


@dataclass(frozen=True)
class CatalogCopy:
    listing_intro_store: str
    listing_intro_collection: str
    listing_outro: str
    empty_store: str
    empty_collection: str
    unavailable: str
    price_not_available: str
    no_description: str


@dataclass(frozen=True)
class StorefrontContent:
    shop_name: str
    website: str
    currency_symbol: str
    policies: StorePolicies
    intent_priority: Tuple[IntentType, ...]
    intent_patterns: Dict[IntentType, Pattern[str]]
    collections: Tuple[CollectionQualifier, ...]
    replies: Dict[IntentType, str]
    catalog: CatalogCopy

    def reply_for(self, intent: IntentType) -> str:
        return self.replies.get(intent) or self.replies[IntentType.DEFAULT]


def compile_vocabulary(terms: List[str]) -> Pattern[str]:
    """Join vocabulary entries into one case-insensitive alternation."""
    cleaned = [str(term) for term in terms if str(term).strip()]
    if not cleaned:
        # Matches nothing.
        return re.compile(r"(?!x)x")
    return re.compile("|".join(f"(?:{term})" for term in cleaned), re.IGNORECASE)


def _require(data: dict, key: str, path: Path) -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ContentConfigError(f"Section '{key}' missing or invalid in {path}")
    return value


def _parse_priority(raw: List[str] | None) -> Tuple[IntentType, ...]:
    if not raw:
        return DEFAULT_INTENT_PRIORITY
    priority: List[IntentType] = []
    for name in raw:
        try:
            intent = IntentType(str(name))
        except ValueError:
            logger.warning("Unknown intent in priority list: %s", name)
            continue
        if intent is IntentType.DEFAULT or intent in priority:
            continue
        priority.append(intent)
    return tuple(priority)


@functools.lru_cache(maxsize=4)
def _load_content(path: Path) -> StorefrontContent:
    if not path.exists():
        raise ContentConfigError(f"Storefront content not found at {path}")

    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}

    shop = _require(data, "shop", path)
    policies = _require(data, "policies", path)
    replies_raw = _require(data, "replies", path)
    catalog_raw = _require(data, "catalog", path)

    intent_patterns: Dict[IntentType, Pattern[str]] = {}
    for intent_name, terms in (data.get("intents") or {}).items():
        try:
            intent = IntentType(intent_name)
        except ValueError:
            logger.warning("Unknown intent in content: %s", intent_name)
            continue
        intent_patterns[intent] = compile_vocabulary(list(terms or []))

    collections = tuple(
        CollectionQualifier(
            name=str(item.get("name") or ""),
            query_pattern=compile_vocabulary(list(item.get("query") or [])),
            title_pattern=compile_vocabulary(list(item.get("title") or [])),
        )
        for item in data.get("collections") or []
    )

    replies: Dict[IntentType, str] = {}
    for intent_name, text in replies_raw.items():
        try:
            replies[IntentType(intent_name)] = str(text)
        except ValueError:
            logger.warning("Reply defined for unknown intent: %s", intent_name)
    if IntentType.DEFAULT not in replies:
        raise ContentConfigError(f"A 'default' reply is required in {path}")

    try:
        catalog = CatalogCopy(**{key: str(value) for key, value in catalog_raw.items()})
    except TypeError as exc:
        raise ContentConfigError(f"Invalid 'catalog' section in {path}: {exc}") from exc

    logger.info("Loaded storefront content from %s", path)
    return StorefrontContent(
        shop_name=str(shop.get("name") or ""),
        website=str(shop.get("website") or ""),
        currency_symbol=str(shop.get("currency_symbol") or "£"),
        policies=StorePolicies(**policies),
        intent_priority=_parse_priority(data.get("intent_priority")),
        intent_patterns=intent_patterns,
        collections=collections,
        replies=replies,
        catalog=catalog,
    )


def get_storefront_content(settings: Settings | None = None) -> StorefrontContent:
    """Return the parsed content file, honouring STOREFRONT_CONTENT_PATH."""
    path = CONTENT_PATH
    if settings is not None and settings.storefront_content_path:
        path = Path(settings.storefront_content_path)
    return _load_content(path.resolve())
