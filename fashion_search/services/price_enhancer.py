# fashion_search/services/price_enhancer.py

"""Best-effort live price refresh from retailer product pages."""

import asyncio
import importlib
import logging
from collections.abc import Callable
from typing import Any

from fashion_search.config.settings import Settings
from fashion_search.filters.price_parser import (
    extract_price_from_title,
    format_price,
    parse_price,
)
from fashion_search.models.product import Product
from fashion_search.scrapers.base_price_scraper import BasePriceScraper

logger = logging.getLogger("fashion_search.enhancer")


def _load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def load_scrapers() -> list[BasePriceScraper]:
    """Instantiate every retailer scraper in ``Settings.PRICE_SCRAPERS``."""
    scrapers: list[BasePriceScraper] = []
    for entry in Settings.PRICE_SCRAPERS:
        try:
            scrapers.append(_load_scraper_class(entry["scraper"])())
        except Exception as exc:
            logger.error(
                "Failed to load price scraper %s: %s",
                entry["id"],
                exc,
                exc_info=True,
            )
    return scrapers


class PriceEnhancer:
    """Replace listing prices with live ones and normalise the rest.

    Scrapers come from ``scraper_factory`` afresh on every ``enhance``
    call, so circuit breakers and sessions never outlive one request.
    Only the first ``head_limit`` products are scraped; each scrape is
    raced against ``scrape_timeout`` and a failure leaves the product
    as it was.  Running ``enhance`` twice gives the same result as
    running it once (modulo live price changes).
    """

    def __init__(
        self,
        scraper_factory: Callable[[], list[BasePriceScraper]] = load_scrapers,
        scrape_timeout: float | None = None,
        concurrency: int | None = None,
    ) -> None:
        self.scraper_factory = scraper_factory
        self.scrape_timeout = scrape_timeout or Settings.SCRAPE_TIMEOUT
        self.concurrency = concurrency or Settings.SCRAPE_CONCURRENCY

    @staticmethod
    def scraper_for(
        product: Product,
        scrapers: list[BasePriceScraper],
    ) -> BasePriceScraper | None:
        for scraper in scrapers:
            if scraper.matches(product.source):
                return scraper
        return None

    async def _scrape_price(
        self,
        scraper: BasePriceScraper,
        url: str,
    ) -> float | None:
        return await asyncio.to_thread(scraper.fetch_price, url)

    async def _refresh_one(
        self,
        product: Product,
        scrapers: list[BasePriceScraper],
        semaphore: asyncio.Semaphore,
    ) -> None:
        scraper = self.scraper_for(product, scrapers)
        if scraper is None or not product.link:
            return
        async with semaphore:
            try:
                price = await asyncio.wait_for(
                    self._scrape_price(scraper, product.link),
                    timeout=self.scrape_timeout,
                )
            except asyncio.TimeoutError:
                logger.debug(
                    "Live price scrape timed out after %.1fs: %s",
                    self.scrape_timeout,
                    product.link,
                )
                return
            except Exception as exc:
                logger.warning(
                    "Live price scrape failed for %s: %s",
                    product.link,
                    exc,
                    exc_info=True,
                )
                return

        if price is not None and price > 0:
            product.price = format_price(price)
            product.price_number = float(round(price))
            product.price_updated = True

    @staticmethod
    def _normalise(product: Product) -> None:
        """Title fallback for missing prices, then canonical display form."""
        number = parse_price(product.price)
        if number is None:
            number = extract_price_from_title(product.title)
        if number is None:
            product.price_number = None
            return
        product.price = format_price(number)
        product.price_number = float(round(number))

    async def enhance(
        self,
        products: list[Product],
        head_limit: int | None = Settings.ENHANCE_HEAD_LIMIT,
    ) -> list[Product]:
        """Refresh prices in place and return the same, ordered list.

        ``head_limit=None`` scrapes every linked product.
        """
        head = products if head_limit is None else products[:head_limit]
        targets = [p for p in head if p.link]
        scrapers = self.scraper_factory() if targets else []
        if scrapers:
            semaphore = asyncio.Semaphore(self.concurrency)
            await asyncio.gather(
                *(self._refresh_one(p, scrapers, semaphore) for p in targets)
            )

        for product in products:
            self._normalise(product)

        updated = sum(1 for p in products if p.price_updated)
        logger.info(
            "Price enhancement: %d scraped, %d live prices",
            len(targets),
            updated,
        )
        return products
