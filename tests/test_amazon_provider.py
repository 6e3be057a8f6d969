# tests/test_amazon_provider.py

"""Tests for the Amazon provider using mocked HTTP responses."""

import json
import unittest
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from src.config.settings import ApiCredentials, Settings
from src.models.price_listing import PriceListing
from src.providers.amazon_provider import AmazonProvider
from src.providers.errors import (
    InvalidResponseError,
    MissingCredentialError,
    TransportError,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SESSION_PATH = "src.providers.base_provider.curl_requests.Session"


def _make_response(status_code: int = 200, body: Any = None) -> MagicMock:
    """Build a mock curl_cffi response returning *body* as JSON."""
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.json.return_value = body
    mock_resp.text = json.dumps(body)
    return mock_resp


def _load_fixture(name: str) -> Any:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


class TestAmazonProvider(unittest.TestCase):
    """Tests for the Amazon provider using mocked HTTP responses."""

    def setUp(self) -> None:
        patcher = patch(SESSION_PATH)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.session = MagicMock()
        self.provider = AmazonProvider(
            ApiCredentials(amazon="test-amazon-key")
        )
        self.provider.session = self.session

    def _serve_fixture(self) -> None:
        self.session.get.return_value = _make_response(
            body=_load_fixture("amazon_search.json")
        )

    def test_search_returns_valid_listings(self) -> None:
        """Items without a positive current price are dropped."""
        self._serve_fixture()
        listings = self.provider.search("iphone")

        self.assertEqual(len(listings), 3)
        self.assertTrue(all(p.store == "Amazon" for p in listings))
        self.assertTrue(all(p.price > 0 for p in listings))

    def test_full_item_normalised(self) -> None:
        """Nested price, rating and delivery fields map onto the listing."""
        self._serve_fixture()
        first = self.provider.search("iphone")[0]

        self.assertEqual(
            first,
            PriceListing(
                store="Amazon",
                price=999,
                original_price=1299,
                url="u",
                rating=4.2,
                review_count=50,
                delivery_days="1 day",
            ),
        )

    def test_missing_optional_fields_are_none(self) -> None:
        """Absent rating and delivery give None and the default estimate."""
        self._serve_fixture()
        second = self.provider.search("iphone")[1]

        self.assertEqual(second.price, 74999.0)
        self.assertIsNone(second.original_price)
        self.assertIsNone(second.rating)
        self.assertIsNone(second.review_count)
        self.assertEqual(
            second.delivery_days, Settings.DEFAULT_DELIVERY_DAYS
        )

    def test_missing_current_price_excluded(self) -> None:
        """The OnePlus entry has no current_price and never appears."""
        self._serve_fixture()
        urls = [p.url for p in self.provider.search("iphone")]
        self.assertNotIn("https://www.amazon.in/dp/B0CQPGG8KG", urls)

    def test_non_mapping_rating_treated_as_absent(self) -> None:
        """A string rating does not invalidate the whole item."""
        self._serve_fixture()
        pixel = self.provider.search("iphone")[2]

        self.assertEqual(pixel.price, 39999)
        self.assertIsNone(pixel.rating)
        self.assertEqual(
            pixel.delivery_days, Settings.DEFAULT_DELIVERY_DAYS
        )

    def test_dropped_count_includes_undecodable_items(self) -> None:
        """Zero-price and non-object entries both count as dropped."""
        self._serve_fixture()
        listings, dropped = self.provider.fetch_listings("iphone")
        self.assertEqual(len(listings), 3)
        self.assertEqual(dropped, 2)

    def test_unreadable_optional_fields_keep_listing(self) -> None:
        """Free-text ratings and numeric delivery times do not drop items."""
        self.session.get.return_value = _make_response(
            body=[
                {
                    "price": {"current_price": 999},
                    "rating": {
                        "average_rating": "4.2 out of 5",
                        "total_reviews": "N/A",
                    },
                },
                {
                    "price": {"current_price": 500},
                    "delivery": {"delivery_time": 2},
                },
            ]
        )
        listings, dropped = self.provider.fetch_listings("iphone")

        self.assertEqual(dropped, 0)
        self.assertEqual([p.price for p in listings], [999, 500])
        self.assertIsNone(listings[0].rating)
        self.assertIsNone(listings[0].review_count)
        self.assertEqual(listings[1].delivery_days, "2")

    def test_numeric_strings_in_optional_fields_parsed(self) -> None:
        self.session.get.return_value = _make_response(
            body=[
                {
                    "price": {"current_price": 999, "original_price": "1299"},
                    "rating": {"average_rating": " 4.5 "},
                }
            ]
        )
        listing = self.provider.search("iphone")[0]
        self.assertEqual(listing.original_price, 1299)
        self.assertEqual(listing.rating, 4.5)

    def test_unreadable_price_drops_item(self) -> None:
        self.session.get.return_value = _make_response(
            body=[
                {"price": {"current_price": "call for price"}},
                {"price": {"current_price": 10}},
            ]
        )
        listings, dropped = self.provider.fetch_listings("iphone")
        self.assertEqual([p.price for p in listings], [10])
        self.assertEqual(dropped, 1)

    def test_integer_price_stays_integer(self) -> None:
        """Whole-number prices serialise as 999, not 999.0."""
        self._serve_fixture()
        first = self.provider.search("iphone")[0]
        self.assertIsInstance(first.price, int)
        self.assertEqual(json.dumps(first.to_dict()["price"]), "999")

    def test_request_params_and_headers(self) -> None:
        """The search sends keywords, marketplace and RapidAPI headers."""
        self._serve_fixture()
        self.provider.search("iphone 15")

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], AmazonProvider.SEARCH_URL)
        self.assertEqual(
            kwargs["params"],
            {"keywords": "iphone 15", "marketplace": "IN"},
        )
        self.assertEqual(
            kwargs["headers"]["X-RapidAPI-Key"], "test-amazon-key"
        )
        self.assertEqual(
            kwargs["headers"]["X-RapidAPI-Host"],
            "amazon-price1.p.rapidapi.com",
        )
        self.assertEqual(kwargs["timeout"], Settings.REQUEST_TIMEOUT)

    def test_missing_credential_raises_without_request(self) -> None:
        """No key configured means no request is made."""
        self.provider.credentials = ApiCredentials()
        with self.assertRaises(MissingCredentialError):
            self.provider.search("iphone")
        self.session.get.assert_not_called()

    def test_blank_credential_treated_as_missing(self) -> None:
        self.provider.credentials = ApiCredentials(amazon="   ")
        with self.assertRaises(MissingCredentialError):
            self.provider.search("iphone")

    def test_object_body_is_invalid_response(self) -> None:
        """Amazon must return a bare array."""
        self.session.get.return_value = _make_response(
            body={"products": []}
        )
        with self.assertRaises(InvalidResponseError):
            self.provider.search("iphone")

    def test_null_body_is_invalid_response(self) -> None:
        self.session.get.return_value = _make_response(body=None)
        with self.assertRaises(InvalidResponseError):
            self.provider.search("iphone")

    def test_empty_array_returns_empty(self) -> None:
        self.session.get.return_value = _make_response(body=[])
        self.assertEqual(self.provider.search("nothing_matches"), [])

    def test_client_error_not_retried(self) -> None:
        """A 403 fails immediately as a transport error."""
        self.session.get.return_value = _make_response(403)
        with self.assertRaises(TransportError) as ctx:
            self.provider.search("iphone")
        self.assertIn("HTTP 403", ctx.exception.message)
        self.assertEqual(self.session.get.call_count, 1)

    def test_server_error_retried(self) -> None:
        """A 503 is retried up to MAX_RETRIES attempts."""
        self.session.get.return_value = _make_response(503)
        with self.assertRaises(TransportError):
            self.provider.search("iphone")
        self.assertEqual(
            self.session.get.call_count, Settings.MAX_RETRIES
        )

    def test_retry_recovers_after_rate_limit(self) -> None:
        """A 429 followed by a 200 succeeds."""
        self.session.get.side_effect = [
            _make_response(429),
            _make_response(body=_load_fixture("amazon_search.json")),
        ]
        self.assertEqual(len(self.provider.search("iphone")), 3)

    def test_network_exception_is_transport_error(self) -> None:
        self.session.get.side_effect = ConnectionError(
            "Network unreachable"
        )
        with self.assertRaises(TransportError) as ctx:
            self.provider.search("iphone")
        self.assertIn("Network unreachable", ctx.exception.message)

    def test_non_json_body_is_transport_error(self) -> None:
        mock_resp = _make_response()
        mock_resp.json.side_effect = ValueError("Expecting value")
        self.session.get.return_value = mock_resp
        with self.assertRaises(TransportError):
            self.provider.search("iphone")


if __name__ == "__main__":
    unittest.main()
