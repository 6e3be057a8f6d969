# src/providers/reliance_provider.py

"""Provider for the Reliance Digital API on RapidAPI."""

from typing import Any

from src.models.price_listing import PriceListing
from src.providers.base_provider import BaseProvider
from src.providers.schemas import ProductsEnvelope, RelianceItem


class RelianceProvider(BaseProvider):
    """Provider for the Reliance Digital search API."""

    SOURCE_ID = "reliance"
    STORE_NAME = "Reliance Digital"
    SEARCH_URL = "https://reliance-digital-api.p.rapidapi.com/search"
    API_HOST = "reliance-digital-api.p.rapidapi.com"

    RESULT_LIMIT = "10"

    def _build_params(self, query: str) -> dict[str, str]:
        return {"query": query, "limit": self.RESULT_LIMIT}

    def _decode_items(self, body: Any) -> list[Any]:
        return ProductsEnvelope.model_validate(body).products

    def _parse_item(self, raw: Any) -> PriceListing:
        item = RelianceItem.model_validate(raw)
        rating = item.rating
        return PriceListing(
            store=self.STORE_NAME,
            price=item.current_price or 0,
            original_price=item.mrp or None,
            url=item.product_url or "",
            rating=(rating.average if rating else None) or None,
            review_count=(rating.count if rating else None) or None,
            delivery_days=(
                item.delivery_time
                or self.settings.DEFAULT_DELIVERY_DAYS
            ),
        )
