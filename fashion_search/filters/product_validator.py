# fashion_search/filters/product_validator.py

"""Product validation: drop invalid listings before deduplication."""

import logging

from fashion_search.models.product import Product

logger = logging.getLogger("fashion_search.filters")


class ProductValidator:
    """Validate products and drop those with missing essential fields."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products with an empty title or no link.

        Missing prices are fine here; they are filled in later or
        reported as unknown.

        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            if not (product.title or "").strip():
                logger.debug(
                    "Dropped product with empty title "
                    "(source=%s, link=%s)",
                    product.source,
                    product.link,
                )
                dropped += 1
                continue
            if not (product.link or "").strip():
                logger.debug(
                    "Dropped product without link "
                    "(title=%s, source=%s)",
                    product.title,
                    product.source,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
