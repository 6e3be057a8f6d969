# src/providers/errors.py

"""Exceptions raised by provider adapters and the aggregator."""

from src.models.provider_outcome import ErrorKind


class ProviderError(Exception):
    """Base class for a provider request that could not complete."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, source_id: str, message: str) -> None:
        super().__init__(message)
        self.source_id = source_id
        self.message = message


class MissingCredentialError(ProviderError):
    """The provider's RapidAPI key is not configured."""

    kind = ErrorKind.MISSING_CREDENTIAL


class InvalidResponseError(ProviderError):
    """The response body did not contain a listing collection."""

    kind = ErrorKind.INVALID_RESPONSE


class TransportError(ProviderError):
    """Network failure, non-success status, or a non-JSON body."""

    kind = ErrorKind.TRANSPORT


class PriceFetchError(Exception):
    """A required provider failed, so the aggregation as a whole failed."""
