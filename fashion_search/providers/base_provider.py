# fashion_search/providers/base_provider.py

"""Abstract base class for all SerpApi-backed shopping providers."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from fashion_search.config.settings import Settings
from fashion_search.filters.price_parser import format_price, parse_price
from fashion_search.models.product import Product


class ProviderError(Exception):
    """A provider could not produce results (config, HTTP or payload)."""


class BaseProvider(ABC):
    """Shared transport, locale pinning and retries for provider adapters.

    Subclasses supply the engine-specific request parameters and the
    parsing of the engine's JSON response.  ``search`` raises
    :class:`ProviderError` on failure; the orchestrator treats that as
    zero results from this provider.
    """

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"fashion_search.providers.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _locale_params(self) -> dict[str, str]:
        """Country/domain parameters shared by every engine."""
        return dict(self.settings.LOCALE_PARAMS)

    def _fetch_json(self, params: dict[str, str]) -> dict[str, Any]:
        """GET the SerpApi endpoint with retries and linear backoff."""
        last_error = "no attempt made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    self.settings.SERPAPI_ENDPOINT,
                    params=params,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
                if resp.status_code == 200:
                    data: dict[str, Any] = json.loads(resp.text)
                    if data.get("error"):
                        last_error = str(data["error"])
                        break
                    return data
                last_error = f"HTTP {resp.status_code}"
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.source_name,
                    resp.status_code,
                    attempt + 1,
                )
                if 400 <= resp.status_code < 500 and resp.status_code != 429:
                    break
            except Exception as exc:
                last_error = str(exc)
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_name,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))

        msg = f"{self.source_name} search failed: {last_error}"
        raise ProviderError(msg)

    @staticmethod
    def _is_inr(currency: Any) -> bool:
        return str(currency or "").strip() in Settings.CURRENCY_CODES

    @staticmethod
    def _price_from_number(value: Any, currency: Any) -> str | None:
        """Format a numeric price, but only in the pinned currency."""
        if not BaseProvider._is_inr(currency):
            return None
        number = parse_price(value)
        return format_price(number) if number is not None else None

    @staticmethod
    def _text(value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def search(self, query: str) -> list[Product]:
        """Search this provider for products matching the query."""
        if not self.settings.SERPAPI_API_KEY:
            msg = "SERPAPI_API_KEY is not configured"
            raise ProviderError(msg)

        params = {
            **self._locale_params(),
            **self._build_params(query),
            "api_key": self.settings.SERPAPI_API_KEY,
        }
        data = self._fetch_json(params)
        products = self._parse_results(data)
        self.logger.info(
            "[%s] %d products for '%s'",
            self.source_name,
            len(products),
            query,
        )
        return products

    @abstractmethod
    def _build_params(self, query: str) -> dict[str, str]:
        """Return the engine-specific query parameters."""
        ...

    @abstractmethod
    def _parse_results(self, data: dict[str, Any]) -> list[Product]:
        """Convert the engine's JSON response to products."""
        ...
