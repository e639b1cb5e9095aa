# fashion_search/scrapers/flipkart_price_scraper.py

"""Live price scraper for flipkart.com product pages."""

import re

from bs4 import BeautifulSoup

from fashion_search.scrapers.base_price_scraper import BasePriceScraper


class FlipkartPriceScraper(BasePriceScraper):
    """Live price scraper for flipkart.com product pages.

    Flipkart ships obfuscated class names that rotate every few
    months; the current and the two previous generations are kept.
    """

    source = "flipkart"
    homepage = "https://www.flipkart.com/"

    PRICE_SELECTORS: list[str] = [
        "div.Nx9bqj.CxhGGd",
        "div.Nx9bqj",
        "div._30jeq3._16Jk6d",
        "div._30jeq3",
        "div._1vC4OE",
    ]
    PRICE_PATTERNS: list[re.Pattern[str]] = [
        re.compile(r'"finalPrice"\s*:\s*\{[^}]*?"value"\s*:\s*(\d+)'),
        re.compile(r'"sellingPrice"\s*:\s*\{[^}]*?"value"\s*:\s*(\d+)'),
    ]

    def try_extract_price(self, html: str) -> float | None:
        soup = BeautifulSoup(html, "lxml")
        price = self._price_from_selectors(soup, self.PRICE_SELECTORS)
        if price is None:
            price = self._price_from_json_ld(soup)
        if price is None:
            price = self._price_from_patterns(html, self.PRICE_PATTERNS)
        return price
