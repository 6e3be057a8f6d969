# src/filters/listing_validator.py

"""Listing validation: drop offers without a usable price."""

import logging

from src.models.price_listing import PriceListing

logger = logging.getLogger("price_aggregator.filters")


class ListingValidator:
    """Validate listings and drop those with a zero or negative price."""

    @staticmethod
    def validate(
        listings: list[PriceListing],
    ) -> tuple[list[PriceListing], int]:
        """Drop listings whose price is not strictly positive.

        Order of the surviving listings is preserved.  Returns the
        valid listings and the count of dropped items.
        """
        valid: list[PriceListing] = []
        dropped = 0

        for listing in listings:
            if not listing.price > 0:
                logger.debug(
                    "Dropped listing with zero/negative "
                    "price (store=%s, url=%s)",
                    listing.store,
                    listing.url,
                )
                dropped += 1
                continue
            valid.append(listing)

        if dropped:
            logger.info(
                "Validation dropped %d invalid listings",
                dropped,
            )

        return valid, dropped
