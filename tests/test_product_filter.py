# tests/test_product_filter.py

"""Tests for price-range and facet filtering."""

import unittest

from fashion_search.filters.product_filter import ProductFilter
from fashion_search.models.product import Product
from fashion_search.models.search_request import SearchFilters


def _p(
    title: str,
    price: float | None = None,
    source: str = "Shop",
    link: str = "https://shop.in/x",
) -> Product:
    return Product(title=title, price_number=price, source=source, link=link)


class TestPriceBounds(unittest.TestCase):
    """Verify inclusive bounds and the unknown-price pass-through."""

    def setUp(self) -> None:
        self.products = [
            _p("A", 499.0),
            _p("B", 500.0),
            _p("C", 1000.0),
            _p("D", 1001.0),
            _p("E", None),
        ]

    def test_inclusive_bounds(self) -> None:
        kept, excluded = ProductFilter.apply_filters(
            self.products, SearchFilters(min_price=500, max_price=1000)
        )
        self.assertEqual([p.title for p in kept], ["B", "C", "E"])
        self.assertEqual(excluded, 2)

    def test_unknown_price_always_passes(self) -> None:
        kept, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(min_price=10_000)
        )
        self.assertEqual([p.title for p in kept], ["E"])

    def test_no_filters_keeps_everything(self) -> None:
        kept, excluded = ProductFilter.apply_filters(self.products, SearchFilters())
        self.assertEqual(kept, self.products)
        self.assertEqual(excluded, 0)


class TestFacets(unittest.TestCase):
    """Verify OR within a facet and AND across facets."""

    def setUp(self) -> None:
        self.products = [
            _p("Red Cotton Kurta Size M"),
            _p("Blue Denim Jacket Size L"),
            _p("Red Silk Saree"),
            _p("Black Tee XL", source="Puma"),
            _p("White Sneakers", link="https://nike.com/p/1"),
        ]

    def test_colors_or(self) -> None:
        kept, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(colors=["red", "blue"])
        )
        self.assertEqual(len(kept), 3)

    def test_colors_and_sizes_and(self) -> None:
        kept, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(colors=["red"], sizes=["size m"])
        )
        self.assertEqual([p.title for p in kept], ["Red Cotton Kurta Size M"])

    def test_brand_matches_source_and_link(self) -> None:
        kept, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(brands=["puma", "nike"])
        )
        self.assertEqual(
            [p.title for p in kept], ["Black Tee XL", "White Sneakers"]
        )

    def test_adding_a_facet_never_grows_the_result(self) -> None:
        loose, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(colors=["red"])
        )
        strict, _ = ProductFilter.apply_filters(
            self.products, SearchFilters(colors=["red"], sizes=["size m"])
        )
        self.assertLessEqual(len(strict), len(loose))
        self.assertTrue(all(p in loose for p in strict))
