from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PriceValue = Union[str, float, int, None]


class CatalogVariant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = None
    price: PriceValue = None


class CatalogProduct(BaseModel):
    """Shopify product record reduced to the fields the assistant reads."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = None
    title: str = ""
    handle: Optional[str] = None
    body_html: Optional[str] = None
    # Some catalog exports carry a top-level price besides the variant prices.
    price: PriceValue = None
    variants: List[CatalogVariant] = Field(default_factory=list)


class CatalogCollection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    title: str = ""
