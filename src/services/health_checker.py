# src/services/health_checker.py

"""Provider connectivity and credential health checker."""

import asyncio
import importlib
import logging
import time
from dataclasses import dataclass
from typing import Any

from src.config.settings import ApiCredentials, Settings
from src.providers.errors import ProviderError

logger = logging.getLogger("price_aggregator.health")


@dataclass
class HealthResult:
    """Result of a single provider health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_source(
    source: dict[str, Any],
    credentials: ApiCredentials,
) -> HealthResult:
    """Probe a single provider with one real search request."""
    source_id = source["id"]
    dotted_path = source["provider"]

    if credentials.for_source(source_id) is None:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message=f"Missing credential ({source['credential_env']})",
        )

    try:
        module_path, class_name = dotted_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        provider_cls = getattr(module, class_name)
        provider = provider_cls(credentials)
    except Exception as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message=f"Failed to load provider: {exc}",
        )

    start = time.monotonic()
    try:
        listings, _dropped = provider.fetch_listings(
            Settings.HEALTH_PROBE_QUERY
        )
    except ProviderError as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=exc.message[:80],
        )
    except Exception as exc:
        logger.error(
            "Health probe for %s raised: %s",
            source_id,
            exc,
            exc_info=True,
        )
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )
    elapsed_ms = (time.monotonic() - start) * 1000

    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            source_id=source_id,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )

    return HealthResult(
        source_id=source_id,
        status="ok",
        latency_ms=elapsed_ms,
        message=f"{len(listings)} listings",
    )


class HealthChecker:
    """Runs concurrent health probes against all providers."""

    def __init__(
        self, credentials: ApiCredentials | None = None,
    ) -> None:
        self.sources = Settings.AVAILABLE_SOURCES
        self.credentials = (
            credentials
            if credentials is not None
            else ApiCredentials.from_env()
        )

    async def check_all(self) -> list[HealthResult]:
        """Probe every registered provider concurrently."""
        tasks = [
            asyncio.to_thread(probe_source, src, self.credentials)
            for src in self.sources
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
