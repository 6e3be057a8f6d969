# src/providers/flipkart_provider.py

"""Provider for the Real-Time Flipkart API on RapidAPI."""

from typing import Any

from src.models.price_listing import PriceListing
from src.providers.base_provider import BaseProvider
from src.providers.schemas import FlipkartItem, ProductsEnvelope


class FlipkartProvider(BaseProvider):
    """Provider for the Real-Time Flipkart API product search.

    Flipkart's search payload carries no delivery estimate, so
    ``delivery_days`` is always ``None`` for this store.
    """

    SOURCE_ID = "flipkart"
    STORE_NAME = "Flipkart"
    SEARCH_URL = (
        "https://real-time-flipkart-api.p.rapidapi.com/product-search"
    )
    API_HOST = "real-time-flipkart-api.p.rapidapi.com"

    RESULT_COUNT = "10"
    SORT_ORDER = "relevance"

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "q": query,
            "count": self.RESULT_COUNT,
            "sort": self.SORT_ORDER,
        }

    def _decode_items(self, body: Any) -> list[Any]:
        return ProductsEnvelope.model_validate(body).products

    def _parse_item(self, raw: Any) -> PriceListing:
        """Parse a single Flipkart product into a PriceListing."""
        item = FlipkartItem.model_validate(raw)
        rating = item.rating
        return PriceListing(
            store=self.STORE_NAME,
            price=item.price or 0,
            original_price=item.mrp or None,
            url=item.url or "",
            rating=(rating.average if rating else None) or None,
            review_count=(
                (rating.review_count if rating else None) or None
            ),
            delivery_days=None,
        )
