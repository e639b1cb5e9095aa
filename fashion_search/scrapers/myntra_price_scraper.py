# fashion_search/scrapers/myntra_price_scraper.py

"""Live price scraper for myntra.com product pages.

Myntra renders client-side; the selling price is usually only present
in the ``pdpData`` JSON blob embedded in the initial HTML.
"""

import re

from bs4 import BeautifulSoup

from fashion_search.scrapers.base_price_scraper import BasePriceScraper


class MyntraPriceScraper(BasePriceScraper):
    """Live price scraper for myntra.com product pages."""

    source = "myntra"
    homepage = "https://www.myntra.com/"

    PRICE_SELECTORS: list[str] = [
        ".pdp-price strong",
        ".pdp-discounted-price",
        ".pdp-price",
        '[data-testid="price"]',
    ]
    PRICE_PATTERNS: list[re.Pattern[str]] = [
        re.compile(r'"discounted"\s*:\s*(\d+(?:\.\d+)?)'),
        re.compile(r'"mrp"\s*:\s*(\d+(?:\.\d+)?)'),
    ]

    def try_extract_price(self, html: str) -> float | None:
        soup = BeautifulSoup(html, "lxml")
        price = self._price_from_selectors(soup, self.PRICE_SELECTORS)
        if price is None:
            price = self._price_from_patterns(html, self.PRICE_PATTERNS)
        if price is None:
            price = self._price_from_json_ld(soup)
        return price
