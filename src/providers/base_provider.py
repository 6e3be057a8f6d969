# src/providers/base_provider.py

"""Abstract base class for all RapidAPI price providers."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests
from pydantic import ValidationError

from src.config.settings import ApiCredentials, Settings
from src.filters.listing_validator import ListingValidator
from src.models.price_listing import PriceListing
from src.providers.errors import (
    InvalidResponseError,
    MissingCredentialError,
    TransportError,
)


class BaseProvider(ABC):
    """Abstract base class for all RapidAPI price providers.

    Subclasses describe one upstream: where to send the search, which
    query parameters it takes, how to find the listing array in the
    response, and how to map a raw item onto a :class:`PriceListing`.
    """

    SOURCE_ID: str = ""
    STORE_NAME: str = ""
    SEARCH_URL: str = ""
    API_HOST: str = ""

    def __init__(
        self, credentials: ApiCredentials | None = None,
    ) -> None:
        self.settings = Settings()
        self.credentials = (
            credentials
            if credentials is not None
            else ApiCredentials.from_env()
        )
        self.logger = logging.getLogger(
            f"price_aggregator.{self.SOURCE_ID}"
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = (
            self.settings.REQUEST_TIMEOUT
        )

    def _credential_env(self) -> str:
        """Name of the environment variable holding this provider's key."""
        for source in self.settings.AVAILABLE_SOURCES:
            if source["id"] == self.SOURCE_ID:
                return str(source["credential_env"])
        return f"{self.SOURCE_ID.upper()}_RAPIDAPI_KEY"

    def _require_api_key(self) -> str:
        """Return the configured key or raise MissingCredentialError."""
        api_key = self.credentials.for_source(self.SOURCE_ID)
        if api_key is None:
            self.logger.error(
                "[%s] %s is not configured",
                self.SOURCE_ID,
                self._credential_env(),
            )
            raise MissingCredentialError(
                self.SOURCE_ID,
                f"{self._credential_env()} is not configured",
            )
        return api_key

    def _fetch_json(
        self,
        params: dict[str, str],
        api_key: str,
    ) -> Any:
        """GET the search endpoint with retries and return decoded JSON."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "X-RapidAPI-Key": api_key,
            "X-RapidAPI-Host": self.API_HOST,
        }
        last_error = "no attempts made"
        attempts = 0
        for attempt in range(self.settings.MAX_RETRIES):
            attempts = attempt + 1
            try:
                resp = self.session.get(
                    self.SEARCH_URL,
                    params=params,
                    headers=headers,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                last_error = f"request error: {exc}"
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.SOURCE_ID,
                    attempts,
                    exc,
                    exc_info=True,
                )
                time.sleep(
                    self.settings.REQUEST_DELAY * attempts
                )
                continue

            if resp.status_code == 200:
                try:
                    return resp.json()
                except ValueError as exc:
                    raise TransportError(
                        self.SOURCE_ID,
                        f"Response body is not JSON: {exc}",
                    ) from exc

            last_error = f"HTTP {resp.status_code}"
            self.logger.warning(
                "[%s] HTTP %d on attempt %d",
                self.SOURCE_ID,
                resp.status_code,
                attempts,
            )
            if (
                resp.status_code
                not in self.settings.RETRYABLE_STATUSES
            ):
                break
            time.sleep(self.settings.REQUEST_DELAY * attempts)

        raise TransportError(
            self.SOURCE_ID,
            f"Request failed after {attempts} attempt(s): "
            f"{last_error}",
        )

    def _decode_envelope(self, body: Any) -> list[Any]:
        """Locate the raw listing array or raise InvalidResponseError."""
        try:
            return self._decode_items(body)
        except ValidationError as exc:
            self.logger.error(
                "[%s] Invalid response from %s API: %s",
                self.SOURCE_ID,
                self.STORE_NAME,
                exc.errors(include_url=False),
            )
            raise InvalidResponseError(
                self.SOURCE_ID,
                f"Invalid response from {self.STORE_NAME} API",
            ) from exc

    def fetch_listings(
        self, query: str,
    ) -> tuple[list[PriceListing], int]:
        """Search the provider and return valid listings plus a drop count.

        Raises:
            MissingCredentialError: the provider key is not configured.
            TransportError: the request failed or returned non-JSON.
            InvalidResponseError: the body holds no listing array.
        """
        api_key = self._require_api_key()
        self.logger.info(
            "[%s] Searching for '%s'", self.SOURCE_ID, query
        )
        body = self._fetch_json(self._build_params(query), api_key)
        raw_items = self._decode_envelope(body)

        listings: list[PriceListing] = []
        undecodable = 0
        for raw in raw_items:
            try:
                listings.append(self._parse_item(raw))
            except ValidationError as exc:
                undecodable += 1
                self.logger.debug(
                    "[%s] Skipped undecodable item: %s",
                    self.SOURCE_ID,
                    exc.errors(include_url=False),
                )

        valid, invalid = ListingValidator.validate(listings)
        self.logger.info(
            "[%s] %d listings for '%s' (%d of %d items dropped)",
            self.SOURCE_ID,
            len(valid),
            query,
            undecodable + invalid,
            len(raw_items),
        )
        return valid, undecodable + invalid

    def search(self, query: str) -> list[PriceListing]:
        """Search the provider and return only the valid listings."""
        listings, _dropped = self.fetch_listings(query)
        return listings

    @abstractmethod
    def _build_params(self, query: str) -> dict[str, str]:
        """Return the query-string parameters for a search."""
        ...

    @abstractmethod
    def _decode_items(self, body: Any) -> list[Any]:
        """Return the raw listing array; raise ValidationError if absent."""
        ...

    @abstractmethod
    def _parse_item(self, raw: Any) -> PriceListing:
        """Map one raw upstream item onto a PriceListing."""
        ...
