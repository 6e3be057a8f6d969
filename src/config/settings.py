# src/config/settings.py

"""Central configuration for the price_aggregator engine."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_aggregator engine."""

    # --- Requests ---
    REQUEST_DELAY: float = 1.0          # Base backoff between retries
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    MAX_RETRIES: int = 2                # Attempts per provider request
    # Must cover MAX_RETRIES * REQUEST_TIMEOUT plus backoff: a timed-out
    # worker thread keeps running and delays interpreter exit.
    PROVIDER_TIMEOUT: float = 30.0      # Wall-clock budget per provider
    RETRYABLE_STATUSES: frozenset[int] = frozenset(
        {429, 500, 502, 503, 504}
    )

    # --- Normalisation ---
    DEFAULT_DELIVERY_DAYS: str = "2-3 days"

    # --- Health checks ---
    HEALTH_PROBE_QUERY: str = "phone"
    HEALTH_SLOW_MS: float = 5000.0

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (canonical aggregation order) ---
    AVAILABLE_SOURCES: list[dict[str, Any]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "provider": "src.providers.amazon_provider.AmazonProvider",
            "credential_env": "RAPIDAPI_KEY",
            "required": True,
        },
        {
            "id": "flipkart",
            "label": "Flipkart",
            "provider": "src.providers.flipkart_provider.FlipkartProvider",
            "credential_env": "FLIPKART_RAPIDAPI_KEY",
            "required": False,
        },
        {
            "id": "reliance",
            "label": "Reliance Digital",
            "provider": "src.providers.reliance_provider.RelianceProvider",
            "credential_env": "RELIANCE_RAPIDAPI_KEY",
            "required": False,
        },
    ]


@dataclass(frozen=True)
class ApiCredentials:
    """RapidAPI keys for each provider, injected into adapters."""

    amazon: str | None = None
    flipkart: str | None = None
    reliance: str | None = None

    @classmethod
    def from_env(cls) -> "ApiCredentials":
        """Read every provider key from the process environment."""
        env_names = {
            s["id"]: s["credential_env"]
            for s in Settings.AVAILABLE_SOURCES
        }
        return cls(
            amazon=os.getenv(env_names["amazon"]),
            flipkart=os.getenv(env_names["flipkart"]),
            reliance=os.getenv(env_names["reliance"]),
        )

    def for_source(self, source_id: str) -> str | None:
        """Return the key for *source_id*, or ``None`` if unset or blank."""
        key: str | None = getattr(self, source_id, None)
        if key is None or not key.strip():
            return None
        return key
