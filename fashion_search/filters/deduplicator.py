# fashion_search/filters/deduplicator.py

"""Product deduplication across multiple shopping sources."""

import logging

from fashion_search.filters.product_validator import ProductValidator
from fashion_search.models.product import Product

logger = logging.getLogger("fashion_search.filters")


class ProductDeduplicator:
    """Collapse listings that share a (stripped link, title) key."""

    @staticmethod
    def _normalise_link(link: str) -> str:
        """Drop the query string and lowercase the link."""
        return link.split("?", 1)[0].lower()

    @staticmethod
    def dedup_key(product: Product) -> str:
        """Key used to detect the same listing returned twice."""
        link_key = ProductDeduplicator._normalise_link(product.link or "")
        title_key = (product.title or "").strip().lower()
        return f"{link_key}|{title_key}"

    @staticmethod
    def deduplicate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Remove duplicate products; the first occurrence wins.

        Products without a title or link are dropped first (they
        cannot form a key) and are not counted as duplicates.

        Returns the deduplicated list and the count of removed dupes.
        """
        if not products:
            return [], 0

        valid, _ = ProductValidator.validate(products)

        seen: set[str] = set()
        kept: list[Product] = []
        removed = 0

        for product in valid:
            key = ProductDeduplicator.dedup_key(product)
            if key in seen:
                removed += 1
                continue
            seen.add(key)
            kept.append(product)

        if removed:
            logger.info(
                "Deduplication removed %d duplicate products",
                removed,
            )

        return kept, removed
