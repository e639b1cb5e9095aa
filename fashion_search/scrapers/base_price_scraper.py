# fashion_search/scrapers/base_price_scraper.py

"""Abstract base class for retailer product-page price scrapers."""

import json
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from fashion_search.config.settings import Settings
from fashion_search.filters.price_parser import parse_price


class BasePriceScraper(ABC):
    """Fetch a retailer product page and pull the live price out of it.

    Each subclass owns the HTML knowledge for one retailer, so markup
    churn on one site stays inside one class.  ``fetch_price`` never
    raises: every failure ends in ``None``.
    """

    source: str = ""
    homepage: str = ""

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            f"fashion_search.scrapers.{self.source}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._consecutive_failures: int = 0
        self._circuit_open: bool = False
        self._circuit_opened_at: float = 0.0
        self._request_timeout: int = (
            self.settings.SCRAPE_REQUEST_TIMEOUT
        )

    def matches(self, source: str | None) -> bool:
        """True when a product's source belongs to this retailer."""
        return self.source in (source or "").lower()

    def _validate_response(
        self, resp: curl_requests.Response,
    ) -> bool:
        """Check for Cloudflare challenge pages and CAPTCHA indicators."""
        text = resp.text
        lower = text.lower()

        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.source,
                    marker,
                )
                return False

        # Skip the keyword scan on real product pages to avoid
        # false positives from scripts mentioning "captcha"
        has_body_content = (
            "<body" in lower and len(text) > 5000
        )
        if not has_body_content:
            for keyword in self.settings.CAPTCHA_KEYWORDS:
                if keyword in lower:
                    self.logger.warning(
                        "[%s] CAPTCHA keyword '%s' detected",
                        self.source,
                        keyword,
                    )
                    return False
        return True

    def _check_circuit(self) -> bool:
        """Return True if the circuit breaker blocks this request.

        After CIRCUIT_BREAKER_COOLDOWN seconds the breaker enters
        a half-open state, allowing a single probe request through.
        """
        if not self._circuit_open:
            return False
        elapsed = time.time() - self._circuit_opened_at
        if elapsed >= self.settings.CIRCUIT_BREAKER_COOLDOWN:
            self.logger.info(
                "[%s] Circuit breaker half-open after %.0fs",
                self.source,
                elapsed,
            )
            self._circuit_open = False
            return False
        return True

    def _record_success(self) -> None:
        self._consecutive_failures = 0
        self._circuit_open = False
        self._circuit_opened_at = 0.0

    def _record_failure(self) -> None:
        """Track failure and open circuit breaker if needed."""
        self._consecutive_failures += 1
        if (
            self._consecutive_failures
            >= self.settings.CIRCUIT_BREAKER_THRESHOLD
        ):
            self._circuit_open = True
            self._circuit_opened_at = time.time()
            self.logger.error(
                "[%s] Circuit breaker opened after %d "
                "consecutive failures",
                self.source,
                self._consecutive_failures,
            )

    def _fetch_get(self, url: str) -> str | None:
        """GET a product page with retries and the circuit breaker."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self.homepage,
        }
        for attempt in range(self.settings.SCRAPE_MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                )
                if resp.status_code == 200:
                    if not self._validate_response(resp):
                        break
                    self._record_success()
                    return str(resp.text)
                self.logger.debug(
                    "[%s] HTTP %d on attempt %d",
                    self.source,
                    resp.status_code,
                    attempt + 1,
                )
            except Exception as exc:
                self.logger.debug(
                    "[%s] Request error on attempt %d: %s",
                    self.source,
                    attempt + 1,
                    exc,
                )
        return None

    def _get_html(self, url: str) -> str | None:
        """Fetch a page, falling back to cloudscraper on failure."""
        if self._check_circuit():
            return None

        html = self._fetch_get(url)
        if html is not None:
            return html

        self.logger.debug(
            "[%s] curl_cffi exhausted, falling back to cloudscraper",
            self.source,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers={"Referer": self.homepage},
                timeout=self._request_timeout,
            )
            if fallback_resp.status_code == 200:
                self._record_success()
                return str(fallback_resp.text)
        except Exception as exc:
            self.logger.warning(
                "[%s] cloudscraper fallback also failed: %s",
                self.source,
                exc,
            )

        self._record_failure()
        return None

    def fetch_price(self, url: str) -> float | None:
        """Return the live price on *url*, or ``None`` on any failure."""
        try:
            html = self._get_html(url)
            if html is None:
                return None
            price = self.try_extract_price(html)
            self.logger.debug(
                "[%s] Live price for %s: %s", self.source, url, price
            )
            return price
        except Exception as exc:
            self.logger.warning(
                "[%s] Price scrape failed for %s: %s",
                self.source,
                url,
                exc,
                exc_info=True,
            )
            return None

    # ── Extraction helpers shared by subclasses ──────────

    @staticmethod
    def _price_from_selectors(
        soup: BeautifulSoup,
        selectors: list[str],
    ) -> float | None:
        """First positive price found under any of the CSS selectors."""
        for selector in selectors:
            for element in soup.select(selector):
                price = parse_price(element.get_text(" ", strip=True))
                if price is not None and price > 0:
                    return price
        return None

    @staticmethod
    def _price_from_patterns(
        html: str,
        patterns: list[re.Pattern[str]],
    ) -> float | None:
        """First positive price captured by any of the regexes."""
        for pattern in patterns:
            match = pattern.search(html)
            if match:
                price = parse_price(match.group(1))
                if price is not None and price > 0:
                    return price
        return None

    @staticmethod
    def _price_from_json_ld(soup: BeautifulSoup) -> float | None:
        """Price from a schema.org ``Product`` JSON-LD block, if any."""
        for script in soup.select('script[type="application/ld+json"]'):
            try:
                data: Any = json.loads(script.string or "")
            except ValueError:
                continue
            nodes = data if isinstance(data, list) else [data]
            for node in nodes:
                if not isinstance(node, dict):
                    continue
                offers: Any = node.get("offers")
                if isinstance(offers, list):
                    offers = offers[0] if offers else None
                if not isinstance(offers, dict):
                    continue
                raw = offers.get("price") or offers.get("lowPrice")
                price = parse_price(raw)
                if price is not None and price > 0:
                    return price
        return None

    @abstractmethod
    def try_extract_price(self, html: str) -> float | None:
        """Extract the selling price from a product page."""
        ...
