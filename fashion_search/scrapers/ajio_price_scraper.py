# fashion_search/scrapers/ajio_price_scraper.py

"""Live price scraper for ajio.com product pages."""

import re

from bs4 import BeautifulSoup

from fashion_search.scrapers.base_price_scraper import BasePriceScraper


class AjioPriceScraper(BasePriceScraper):
    """Live price scraper for ajio.com product pages."""

    source = "ajio"
    homepage = "https://www.ajio.com/"

    PRICE_SELECTORS: list[str] = [
        ".prod-sp",
        ".discounted-price",
        ".price",
        ".prod-mrp",
    ]
    PRICE_PATTERNS: list[re.Pattern[str]] = [
        re.compile(r'"offerPrice"\s*:\s*\{[^}]*?"value"\s*:\s*([\d.]+)'),
        re.compile(r'"sellingPrice"\s*:\s*([\d.]+)'),
    ]

    def try_extract_price(self, html: str) -> float | None:
        soup = BeautifulSoup(html, "lxml")
        price = self._price_from_selectors(soup, self.PRICE_SELECTORS)
        if price is None:
            price = self._price_from_json_ld(soup)
        if price is None:
            price = self._price_from_patterns(html, self.PRICE_PATTERNS)
        return price
