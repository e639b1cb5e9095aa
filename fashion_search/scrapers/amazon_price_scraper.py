# fashion_search/scrapers/amazon_price_scraper.py

"""Live price scraper for amazon.in product pages."""

import re

from bs4 import BeautifulSoup

from fashion_search.scrapers.base_price_scraper import BasePriceScraper


class AmazonPriceScraper(BasePriceScraper):
    """Live price scraper for amazon.in product pages."""

    source = "amazon"
    homepage = "https://www.amazon.in/"

    PRICE_SELECTORS: list[str] = [
        "#corePriceDisplay_desktop_feature_div .a-price .a-offscreen",
        "#corePrice_feature_div .a-price .a-offscreen",
        "#priceblock_dealprice",
        "#priceblock_ourprice",
        ".a-price .a-offscreen",
        ".a-price-whole",
    ]
    PRICE_PATTERNS: list[re.Pattern[str]] = [
        re.compile(r'"priceAmount"\s*:\s*([\d.]+)'),
    ]

    def try_extract_price(self, html: str) -> float | None:
        soup = BeautifulSoup(html, "lxml")
        price = self._price_from_selectors(soup, self.PRICE_SELECTORS)
        if price is None:
            price = self._price_from_patterns(html, self.PRICE_PATTERNS)
        return price
