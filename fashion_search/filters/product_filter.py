# fashion_search/filters/product_filter.py

"""Post-search product filtering by price range and facet tokens."""

import logging

from fashion_search.models.product import Product
from fashion_search.models.search_request import SearchFilters

logger = logging.getLogger("fashion_search.filters")


class ProductFilter:
    """Filter products against user-supplied price bounds and facets."""

    @staticmethod
    def _within_price(
        product: Product,
        min_price: float | None,
        max_price: float | None,
    ) -> bool:
        """Inclusive bounds; products with unknown price always pass."""
        price = product.price_number
        if price is None:
            return True
        if min_price is not None and price < min_price:
            return False
        if max_price is not None and price > max_price:
            return False
        return True

    @staticmethod
    def _matches_facet(haystack: str, terms: list[str]) -> bool:
        """OR within a facet; an empty facet matches everything."""
        if not terms:
            return True
        return any(term in haystack for term in terms)

    @staticmethod
    def apply_filters(
        products: list[Product],
        filters: SearchFilters,
    ) -> tuple[list[Product], int]:
        """Keep products satisfying every facet (AND across facets).

        Colors and sizes are matched against the lowercase title,
        brands against title, source and link.

        Returns the filtered list and the count of excluded products.
        """
        colors = [c.lower() for c in filters.colors]
        sizes = [s.lower() for s in filters.sizes]
        brands = [b.lower() for b in filters.brands]

        kept: list[Product] = []
        excluded = 0
        for product in products:
            title = product.title_lower
            brand_haystack = (
                f"{title} {product.source_lower} {product.link_lower}"
            )
            if (
                ProductFilter._within_price(
                    product, filters.min_price, filters.max_price
                )
                and ProductFilter._matches_facet(title, colors)
                and ProductFilter._matches_facet(title, sizes)
                and ProductFilter._matches_facet(brand_haystack, brands)
            ):
                kept.append(product)
            else:
                excluded += 1

        if excluded:
            logger.info(
                "Filtered out %d products not matching filters",
                excluded,
            )

        return kept, excluded
