# fashion_search/scrapers/snapdeal_price_scraper.py

"""Live price scraper for snapdeal.com product pages."""

import re

from bs4 import BeautifulSoup

from fashion_search.scrapers.base_price_scraper import BasePriceScraper


class SnapdealPriceScraper(BasePriceScraper):
    """Live price scraper for snapdeal.com product pages."""

    source = "snapdeal"
    homepage = "https://www.snapdeal.com/"

    PRICE_SELECTORS: list[str] = [
        ".pdp-final-price .payBlkBig",
        ".payBlkBig",
        ".pdp-final-price",
    ]
    PRICE_PATTERNS: list[re.Pattern[str]] = [
        re.compile(r'itemprop="price"\s+content="([\d.]+)"'),
    ]

    def try_extract_price(self, html: str) -> float | None:
        soup = BeautifulSoup(html, "lxml")
        price = self._price_from_selectors(soup, self.PRICE_SELECTORS)
        if price is None:
            price = self._price_from_patterns(html, self.PRICE_PATTERNS)
        return price
