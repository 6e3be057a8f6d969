# src/providers/amazon_provider.py

"""Provider for the Amazon Price API (India marketplace) on RapidAPI."""

from typing import Any

from src.models.price_listing import PriceListing
from src.providers.base_provider import BaseProvider
from src.providers.schemas import AMAZON_ENVELOPE, AmazonItem


class AmazonProvider(BaseProvider):
    """Provider for the Amazon Price API (India marketplace)."""

    SOURCE_ID = "amazon"
    STORE_NAME = "Amazon"
    SEARCH_URL = "https://amazon-price1.p.rapidapi.com/search"
    API_HOST = "amazon-price1.p.rapidapi.com"

    def _build_params(self, query: str) -> dict[str, str]:
        return {"keywords": query, "marketplace": "IN"}

    def _decode_items(self, body: Any) -> list[Any]:
        """The search body is the listing array itself."""
        return AMAZON_ENVELOPE.validate_python(body)

    def _parse_item(self, raw: Any) -> PriceListing:
        """Parse a single Amazon search entry into a PriceListing."""
        item = AmazonItem.model_validate(raw)
        price = item.price
        rating = item.rating
        delivery_time = (
            item.delivery.delivery_time if item.delivery else None
        )
        return PriceListing(
            store=self.STORE_NAME,
            price=(price.current_price if price else None) or 0,
            original_price=price.original_price if price else None,
            url=item.url or "",
            rating=rating.average_rating if rating else None,
            review_count=rating.total_reviews if rating else None,
            delivery_days=(
                delivery_time
                or self.settings.DEFAULT_DELIVERY_DAYS
            ),
        )
