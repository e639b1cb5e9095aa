# tests/test_providers.py

"""Tests for the SerpApi provider adapters with mocked HTTP."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from fashion_search.providers.amazon_provider import AmazonProvider
from fashion_search.providers.base_provider import BaseProvider, ProviderError
from fashion_search.providers.google_shopping_provider import (
    GoogleShoppingProvider,
)
from fashion_search.providers.site_search_provider import SiteSearchProvider


def _response(status: int, payload: Any) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = json.dumps(payload)
    return resp


def _with_session(provider: BaseProvider, *responses: MagicMock) -> MagicMock:
    session = MagicMock()
    session.get.side_effect = list(responses)
    provider.session = session
    provider.settings.SERPAPI_API_KEY = "test-key"
    return session


class TestBaseProviderTransport(unittest.TestCase):
    """Verify retries, error payloads and the missing-key guard."""

    def test_missing_api_key_raises(self) -> None:
        provider = GoogleShoppingProvider()
        provider.settings.SERPAPI_API_KEY = ""
        with self.assertRaisesRegex(ProviderError, "SERPAPI_API_KEY"):
            provider.search("kurta")

    def test_locale_and_key_params_sent(self) -> None:
        provider = GoogleShoppingProvider()
        session = _with_session(provider, _response(200, {"shopping_results": []}))
        provider.search("kurta")
        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["gl"], "in")
        self.assertEqual(params["hl"], "en")
        self.assertEqual(params["google_domain"], "google.co.in")
        self.assertEqual(params["engine"], "google_shopping")
        self.assertEqual(params["num"], "20")
        self.assertEqual(params["api_key"], "test-key")

    def test_retries_transient_failures(self) -> None:
        provider = GoogleShoppingProvider()
        provider.settings.MAX_RETRIES = 2
        session = _with_session(
            provider,
            _response(503, {}),
            _response(200, {"shopping_results": [{"title": "Tee", "link": "https://a"}]}),
        )
        products = provider.search("tee")
        self.assertEqual(len(products), 1)
        self.assertEqual(session.get.call_count, 2)

    def test_error_payload_raises_without_retry(self) -> None:
        provider = GoogleShoppingProvider()
        session = _with_session(provider, _response(200, {"error": "Invalid API key"}))
        with self.assertRaisesRegex(ProviderError, "Invalid API key"):
            provider.search("tee")
        self.assertEqual(session.get.call_count, 1)

    def test_client_error_not_retried(self) -> None:
        provider = GoogleShoppingProvider()
        provider.settings.MAX_RETRIES = 3
        session = _with_session(provider, _response(401, {}), _response(200, {}))
        with self.assertRaises(ProviderError):
            provider.search("tee")
        self.assertEqual(session.get.call_count, 1)

    def test_transport_exception_exhausts_retries(self) -> None:
        provider = AmazonProvider()
        provider.settings.MAX_RETRIES = 2
        session = MagicMock()
        session.get.side_effect = ConnectionError("reset")
        provider.session = session
        provider.settings.SERPAPI_API_KEY = "k"
        with self.assertRaisesRegex(ProviderError, "reset"):
            provider.search("tee")
        self.assertEqual(session.get.call_count, 2)


class TestGoogleShoppingParsing(unittest.TestCase):
    """Verify shopping_results mapping."""

    def test_maps_fields_and_inr_extracted_price(self) -> None:
        provider = GoogleShoppingProvider()
        _with_session(
            provider,
            _response(
                200,
                {
                    "shopping_results": [
                        {
                            "title": "Cotton Kurta",
                            "price": "₹799.00",
                            "link": "https://myntra.com/k1",
                            "source": "Myntra",
                            "thumbnail": "https://img/k1",
                        },
                        {
                            "title": "Linen Shirt",
                            "extracted_price": 1299,
                            "currency": "INR",
                            "product_link": "https://google.com/p/2",
                            "source": "Ajio",
                        },
                        {
                            "title": "Imported Tee",
                            "extracted_price": 25,
                            "currency": "USD",
                            "link": "https://x.com/t",
                        },
                    ]
                },
            ),
        )
        products = provider.search("shirt")
        self.assertEqual(products[0].price, "₹799.00")
        self.assertEqual(products[0].source, "Myntra")
        self.assertEqual(products[1].price, "₹1299")
        self.assertEqual(products[1].link, "https://google.com/p/2")
        self.assertIsNone(products[2].price)


class TestAmazonParsing(unittest.TestCase):
    """Verify amazon engine parameters and price handling."""

    def test_params_use_amazon_domain(self) -> None:
        provider = AmazonProvider()
        session = _with_session(provider, _response(200, {"organic_results": []}))
        provider.search("sneakers")
        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["engine"], "amazon")
        self.assertEqual(params["k"], "sneakers")
        self.assertEqual(params["amazon_domain"], "amazon.in")
        self.assertNotIn("google_domain", params)

    def test_price_variants(self) -> None:
        provider = AmazonProvider()
        _with_session(
            provider,
            _response(
                200,
                {
                    "organic_results": [
                        {"title": "A", "link": "https://amazon.in/a", "price": "₹1,499"},
                        {"title": "B", "link": "https://amazon.in/b", "price": "999", "currency": "INR"},
                        {"title": "C", "link": "https://amazon.in/c", "price": {"raw": "₹650"}},
                        {"title": "D", "link": "https://amazon.in/d", "extracted_price": 349.0},
                        {"title": "E", "link_clean": "https://amazon.in/e"},
                    ]
                },
            ),
        )
        products = provider.search("tee")
        self.assertEqual(
            [p.price for p in products], ["₹1,499", "₹999", "₹650", "₹349", None]
        )
        self.assertEqual(products[4].link, "https://amazon.in/e")
        self.assertTrue(all(p.source == "Amazon" for p in products))


class TestSiteSearchParsing(unittest.TestCase):
    """Verify site-restricted search and rich-snippet prices."""

    def test_query_is_site_restricted(self) -> None:
        provider = SiteSearchProvider("www.flipkart.com")
        session = _with_session(provider, _response(200, {"organic_results": []}))
        provider.search("kurta")
        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["engine"], "google")
        self.assertEqual(params["q"], "site:www.flipkart.com kurta")
        self.assertEqual(provider.display_name, "flipkart.com")

    def test_snippet_price_only_in_rupees(self) -> None:
        provider = SiteSearchProvider("myntra.com")
        _with_session(
            provider,
            _response(
                200,
                {
                    "organic_results": [
                        {
                            "title": "Roadster Jeans",
                            "link": "https://myntra.com/j",
                            "rich_snippet": {
                                "top": {
                                    "detected_extensions": {
                                        "price": 1199,
                                        "currency": "₹",
                                    }
                                }
                            },
                        },
                        {
                            "title": "Dollar Jeans",
                            "link": "https://myntra.com/d",
                            "rich_snippet": {
                                "bottom": {
                                    "detected_extensions": {
                                        "price": 30,
                                        "currency": "$",
                                    }
                                }
                            },
                        },
                        {"title": "No Price", "link": "https://myntra.com/n"},
                    ]
                },
            ),
        )
        products = provider.search("jeans")
        self.assertEqual([p.price for p in products], ["₹1199", None, None])
        self.assertTrue(all(p.source == "myntra.com" for p in products))


class TestSessionConstruction(unittest.TestCase):
    def test_session_impersonates_browser(self) -> None:
        with patch(
            "fashion_search.providers.base_provider.curl_requests.Session"
        ) as mock_session:
            GoogleShoppingProvider()
        mock_session.assert_called_once_with(impersonate="chrome131")
