from __future__ import annotations

import html
import math
import re
from typing import Optional

from ..models import CatalogProduct, ProductSnapshot
from .content import CatalogCopy

_TAG_RE = re.compile(r"<[^>]*>")


def parse_price(value: object) -> Optional[float]:
    """Return a strictly positive price, or None if missing/unparseable/zero."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value).strip()
        # Accept leading numeric prefixes ("12.5 GBP"), like a lenient float parse.
        match = re.match(r"[+-]?(\d+(\.\d*)?|\.\d+)", text)
        if not match:
            return None
        amount = float(match.group(0))
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def format_price(product: CatalogProduct, copy: CatalogCopy, currency_symbol: str = "£") -> str:
    """First positive variant price, then a positive top-level price, else the fallback text."""
    for variant in product.variants:
        amount = parse_price(variant.price)
        if amount is not None:
            return f"{currency_symbol}{amount:.2f}"
    amount = parse_price(product.price)
    if amount is not None:
        return f"{currency_symbol}{amount:.2f}"
    return copy.price_not_available


def strip_html(value: Optional[str]) -> str:
    if not value:
        return ""
    return html.unescape(_TAG_RE.sub("", value)).strip()


def to_snapshot(product: CatalogProduct, copy: CatalogCopy, currency_symbol: str = "£") -> ProductSnapshot:
    return ProductSnapshot(
        title=product.title,
        price=format_price(product, copy, currency_symbol),
        description=strip_html(product.body_html) or copy.no_description,
    )


def format_listing_line(product: CatalogProduct, copy: CatalogCopy, currency_symbol: str = "£") -> str:
    return f"• {product.title}: {format_price(product, copy, currency_symbol)}"
