# src/providers/schemas.py

"""Typed views of the raw provider payloads.

Upstream schemas are undocumented and drift, so every field is
optional and unknown keys are ignored.  Only the price field is
validated strictly: an item whose price cannot be read is dropped.
Optional fields holding something unreadable (``"N/A"``,
``"4.2 out of 5"``, a nested object sent as a string) become absent
and the listing survives.
"""

from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
)


class _RawModel(BaseModel):
    """Lenient base for upstream payload fragments."""

    model_config = ConfigDict(extra="ignore")


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


def _number_or_none(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        for cast in (int, float):
            try:
                return cast(text)
            except ValueError:
                continue
    return None


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _text_or_none(value: Any) -> str | None:
    """Keep strings, render bare numbers (``2`` days) as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


# Integers stay integers so ``999`` is not reported as ``999.0``
Price = int | float | None
OptionalNumber = Annotated[
    int | float | None, BeforeValidator(_number_or_none)
]
OptionalUrl = Annotated[str | None, BeforeValidator(_string_or_none)]
OptionalText = Annotated[str | None, BeforeValidator(_text_or_none)]


# --- Envelopes --------------------------------------------------------------

class ProductsEnvelope(_RawModel):
    """``{"products": [...]}`` wrapper used by Flipkart and Reliance."""

    products: list[Any]


# Amazon returns the listing array as the whole body
AMAZON_ENVELOPE: TypeAdapter[list[Any]] = TypeAdapter(list[Any])


# --- Amazon -----------------------------------------------------------------

class AmazonPrice(_RawModel):
    current_price: Price = None
    original_price: OptionalNumber = None


class AmazonRating(_RawModel):
    average_rating: OptionalNumber = None
    total_reviews: OptionalNumber = None


class AmazonDelivery(_RawModel):
    delivery_time: OptionalText = None


class AmazonItem(_RawModel):
    """One entry of the Amazon Price API search array."""

    price: Annotated[
        AmazonPrice | None, BeforeValidator(_mapping_or_none)
    ] = None
    url: OptionalUrl = None
    rating: Annotated[
        AmazonRating | None, BeforeValidator(_mapping_or_none)
    ] = None
    delivery: Annotated[
        AmazonDelivery | None, BeforeValidator(_mapping_or_none)
    ] = None


# --- Flipkart ---------------------------------------------------------------

class FlipkartRating(_RawModel):
    average: OptionalNumber = None
    review_count: OptionalNumber = Field(default=None, alias="reviewCount")


class FlipkartItem(_RawModel):
    """One entry of the Flipkart ``products`` array."""

    price: Price = None
    mrp: OptionalNumber = None
    url: OptionalUrl = None
    rating: Annotated[
        FlipkartRating | None, BeforeValidator(_mapping_or_none)
    ] = None


# --- Reliance Digital -------------------------------------------------------

class RelianceRating(_RawModel):
    average: OptionalNumber = None
    count: OptionalNumber = None


class RelianceItem(_RawModel):
    """One entry of the Reliance Digital ``products`` array."""

    current_price: Price = Field(default=None, alias="currentPrice")
    mrp: OptionalNumber = None
    product_url: OptionalUrl = Field(default=None, alias="productUrl")
    rating: Annotated[
        RelianceRating | None, BeforeValidator(_mapping_or_none)
    ] = None
    delivery_time: OptionalText = Field(default=None, alias="deliveryTime")
