# src/models/provider_outcome.py

"""Tagged per-provider result of a single aggregation."""

from dataclasses import dataclass, field
from enum import Enum

from src.models.price_listing import PriceListing


class OutcomeStatus(Enum):
    """How a provider's part of the aggregation ended."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class ErrorKind(Enum):
    """Why a provider failed."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_RESPONSE = "invalid_response"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


@dataclass
class ProviderOutcome:
    """Listings (or the failure reason) contributed by one provider."""

    source_id: str
    store: str
    status: OutcomeStatus
    listings: list[PriceListing] = field(
        default_factory=lambda: list[PriceListing]()
    )
    error_kind: ErrorKind | None = None
    message: str = ""
    dropped_count: int = 0
    required: bool = False
    latency_ms: float = 0.0

    @property
    def failed(self) -> bool:
        """True when the provider did not complete its request."""
        return self.status is OutcomeStatus.FAILED
