# src/storage/file_manager.py

"""Handles saving aggregated listings to disk."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.models.price_listing import PriceListing

logger = logging.getLogger("price_aggregator.storage")


def _by_price(listings: list[PriceListing]) -> list[PriceListing]:
    return sorted(
        listings,
        key=lambda p: p.price if p.price > 0 else float("inf"),
    )


class FileManager:
    """Handles saving aggregated listings to disk."""

    def __init__(self) -> None:
        self.results_dir: Path = Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    def save_results(
        self, query: str, listings: list[PriceListing], source: str
    ) -> Path:
        """Save listings to a timestamped JSON file, in aggregation order."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{source}_{query.replace(' ', '_')}_{timestamp}.json"
        filepath = self.results_dir / filename

        data = [listing.to_dict() for listing in listings]

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(
            "Saved %d listings for query '%s' to %s",
            len(listings),
            query,
            filepath,
        )
        return filepath

    def export_csv(
        self, query: str, listings: list[PriceListing], source: str
    ) -> Path:
        """Export listings to a human-readable CSV file sorted by price."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"export_{source}_{query.replace(' ', '_')}_{timestamp}.csv"
        filepath = self.results_dir / filename

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                [
                    "Store",
                    "Price",
                    "Original Price",
                    "Rating",
                    "Reviews",
                    "Delivery",
                    "URL",
                ]
            )
            for p in _by_price(listings):
                writer.writerow(
                    [
                        p.store,
                        p.price,
                        "" if p.original_price is None else p.original_price,
                        "" if p.rating is None else p.rating,
                        "" if p.review_count is None else p.review_count,
                        p.delivery_days or "",
                        p.url,
                    ]
                )

        logger.info(
            "Exported %d listings for query '%s' to %s",
            len(listings),
            query,
            filepath,
        )
        return filepath
