# src/models/price_listing.py

"""Normalised price listing shared by every provider."""

from dataclasses import dataclass


@dataclass
class PriceListing:
    """One product offer from one store."""

    store: str
    price: float
    original_price: float | None = None
    url: str = ""
    rating: float | None = None
    review_count: int | float | None = None
    delivery_days: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase shape returned to callers."""
        return {
            "store": self.store,
            "price": self.price,
            "originalPrice": self.original_price,
            "url": self.url,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "deliveryDays": self.delivery_days,
        }
