# src/services/price_aggregator.py

"""Aggregates price listings for one query across every provider."""

import asyncio
import importlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import ApiCredentials, Settings
from src.models.price_listing import PriceListing
from src.models.provider_outcome import (
    ErrorKind,
    OutcomeStatus,
    ProviderOutcome,
)
from src.providers.errors import PriceFetchError, ProviderError

logger = logging.getLogger("price_aggregator.aggregator")


@dataclass
class AggregationResult:
    """Container for a completed aggregation across all providers."""

    query: str
    outcomes: list[ProviderOutcome] = field(
        default_factory=lambda: list[ProviderOutcome]()
    )

    @property
    def listings(self) -> list[PriceListing]:
        """All listings, in provider order then upstream order."""
        combined: list[PriceListing] = []
        for outcome in self.outcomes:
            combined.extend(outcome.listings)
        return combined

    @property
    def errors(self) -> list[str]:
        return [
            f"{o.source_id}: {o.message}"
            for o in self.outcomes
            if o.failed
        ]

    @property
    def invalid_count(self) -> int:
        return sum(o.dropped_count for o in self.outcomes)

    @property
    def required_failures(self) -> list[ProviderOutcome]:
        """Failed outcomes of providers flagged ``required``."""
        return [
            o for o in self.outcomes if o.failed and o.required
        ]


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class PriceAggregator:
    """Runs every configured provider concurrently and joins the results."""

    def __init__(
        self,
        credentials: ApiCredentials | None = None,
        sources: list[dict[str, Any]] | None = None,
    ) -> None:
        self.settings = Settings()
        self.credentials = (
            credentials
            if credentials is not None
            else ApiCredentials.from_env()
        )
        self.sources = (
            sources
            if sources is not None
            else self.settings.AVAILABLE_SOURCES
        )

    # ── Private helpers ──────────────────────────────────

    async def _run_provider(
        self,
        query: str,
        source: dict[str, Any],
    ) -> ProviderOutcome:
        """Run one provider and capture its result as an outcome.

        Never raises: every failure becomes a FAILED outcome so that
        one provider cannot abort the others.
        """
        source_id: str = source["id"]
        required = bool(source.get("required", False))
        timeout = float(
            source.get("timeout", self.settings.PROVIDER_TIMEOUT)
        )
        start = time.monotonic()

        def failed(kind: ErrorKind, message: str) -> ProviderOutcome:
            return ProviderOutcome(
                source_id=source_id,
                store=str(source.get("label", source_id)),
                status=OutcomeStatus.FAILED,
                error_kind=kind,
                message=message,
                required=required,
                latency_ms=(time.monotonic() - start) * 1000,
            )

        try:
            provider_cls = _load_provider_class(source["provider"])
            provider = provider_cls(self.credentials)
            listings, dropped = await asyncio.wait_for(
                asyncio.to_thread(provider.fetch_listings, query),
                timeout=timeout,
            )
        except ProviderError as exc:
            logger.warning(
                "Provider %s failed for query '%s' (%s): %s",
                source_id,
                query,
                exc.kind.value,
                exc.message,
            )
            return failed(exc.kind, exc.message)
        except TimeoutError:
            logger.warning(
                "Provider %s timed out after %.1fs for query '%s'",
                source_id,
                timeout,
                query,
            )
            return failed(
                ErrorKind.TIMEOUT, f"Timed out after {timeout:.1f}s"
            )
        except Exception as exc:
            logger.error(
                "Provider %s raised unexpectedly for query '%s': %s",
                source_id,
                query,
                exc,
                exc_info=True,
            )
            return failed(ErrorKind.UNEXPECTED, str(exc))

        return ProviderOutcome(
            source_id=source_id,
            store=str(getattr(provider, "STORE_NAME", source_id)),
            status=(
                OutcomeStatus.OK if listings else OutcomeStatus.EMPTY
            ),
            listings=listings,
            dropped_count=dropped,
            required=required,
            latency_ms=(time.monotonic() - start) * 1000,
        )

    # ── Public API ───────────────────────────────────────

    async def aggregate(self, query: str) -> AggregationResult:
        """Query every provider concurrently for *query*.

        ``asyncio.gather`` returns outcomes in the order the sources
        were given, regardless of which provider finished first.
        """
        outcomes: list[ProviderOutcome] = list(
            await asyncio.gather(
                *(self._run_provider(query, src) for src in self.sources)
            )
        )
        result = AggregationResult(query=query, outcomes=outcomes)
        logger.info(
            "Aggregated %d listings for '%s' (%s)",
            len(result.listings),
            query,
            ", ".join(
                f"{o.source_id}={o.status.value}" for o in outcomes
            ),
        )
        return result

    async def get_product_prices(
        self, query: str,
    ) -> list[PriceListing]:
        """Return combined listings, failing if a required provider failed.

        Raises:
            PriceFetchError: a provider flagged ``required`` in the
                source registry failed.  Upstream detail is only logged.
        """
        result = await self.aggregate(query)
        if result.required_failures:
            logger.error(
                "Required provider(s) failed for '%s': %s",
                query,
                "; ".join(
                    f"{o.source_id}: {o.message}"
                    for o in result.required_failures
                ),
            )
            raise PriceFetchError("Failed to fetch product prices")
        return result.listings


async def get_product_prices(
    query: str,
    credentials: ApiCredentials | None = None,
) -> list[PriceListing]:
    """Aggregate listings for *query* across all configured providers."""
    return await PriceAggregator(credentials).get_product_prices(query)
