# tests/test_comparison_builder.py

"""Tests for the company-wise comparison builder."""

import unittest

from fashion_search.models.product import Product
from fashion_search.services.comparison_builder import (
    build_comparison,
    summarize_companies,
)


def _p(title: str, source: str | None, price: float | None) -> Product:
    return Product(
        title=title,
        link=f"https://shop.in/{title}",
        source=source,
        price=f"₹{price:.0f}" if price is not None else None,
        price_number=price,
    )


class TestBuildComparison(unittest.TestCase):
    """Verify grouping, statistics and best deals."""

    def test_empty_input_gives_empty_shape(self) -> None:
        self.assertEqual(
            build_comparison([]).to_dict(),
            {
                "companies": [],
                "companyGroups": {},
                "priceStats": None,
                "bestDeals": [],
                "totalProducts": 0,
                "priceRange": None,
            },
        )

    def test_no_prices_means_no_stats(self) -> None:
        data = build_comparison([_p("a", "Myntra", None), _p("b", "Ajio", None)])
        self.assertIsNone(data.price_stats)
        self.assertIsNone(data.price_range)
        self.assertEqual(data.best_deals, [])
        self.assertEqual(data.total_products, 2)

    def test_statistics(self) -> None:
        products = [
            _p("a", "Myntra", 500.0),
            _p("b", "Myntra", 300.0),
            _p("c", "Ajio", 1000.0),
            _p("d", "Ajio", None),
            _p("e", None, 200.0),
        ]
        data = build_comparison(products)
        assert data.price_stats is not None and data.price_range is not None
        self.assertEqual(data.price_stats.min, 200.0)
        self.assertEqual(data.price_stats.max, 1000.0)
        self.assertEqual(data.price_stats.total, 2000.0)
        self.assertEqual(data.price_stats.count, 4)
        self.assertEqual(data.price_stats.avg, 500.0)
        self.assertEqual(data.price_range.difference, 800.0)

    def test_groups_and_company_order(self) -> None:
        products = [
            _p("a", "Ajio", 100.0),
            _p("b", "Myntra", 100.0),
            _p("c", "Myntra", 100.0),
            _p("d", None, None),
        ]
        data = build_comparison(products)
        self.assertEqual(data.companies[0], "Myntra")
        self.assertIn("Unknown", data.company_groups)
        self.assertEqual(len(data.company_groups["Myntra"]), 2)

    def test_best_deals_one_per_company_ascending(self) -> None:
        products = [
            _p("a", "Myntra", 500.0),
            _p("b", "Myntra", 300.0),
            _p("c", "Ajio", 250.0),
            _p("d", "Amazon", None),
        ]
        deals = build_comparison(products).best_deals
        self.assertEqual([(d.company, d.price) for d in deals], [("Ajio", 250.0), ("Myntra", 300.0)])
        self.assertEqual(deals[1].product.title, "b")

    def test_wire_keys(self) -> None:
        data = build_comparison([_p("a", "Myntra", 500.0)]).to_dict()
        self.assertEqual(data["bestDeals"][0]["product"]["title"], "a")
        self.assertEqual(data["priceStats"]["count"], 1)


class TestSummarizeCompanies(unittest.TestCase):
    def test_counts_and_average(self) -> None:
        summaries = summarize_companies(
            [
                _p("a", "Myntra", 400.0),
                _p("b", "Myntra", 600.0),
                _p("c", "Myntra", None),
                _p("d", "Ajio", None),
            ]
        )
        self.assertEqual(summaries[0].company, "Myntra")
        self.assertEqual(summaries[0].count, 3)
        self.assertEqual(summaries[0].priced_count, 2)
        self.assertEqual(summaries[0].avg_price, 500.0)
        self.assertIsNone(summaries[1].avg_price)
        self.assertEqual(
            summaries[0].to_dict()["avgPrice"], 500.0
        )
