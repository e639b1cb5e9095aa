# tests/test_ranker.py

"""Tests for relevance re-ranking and price sorting."""

import unittest

from fashion_search.filters.ranker import (
    query_tokens,
    rerank,
    score_product,
    sort_by_price,
)
from fashion_search.models.product import Product


class TestQueryTokens(unittest.TestCase):
    def test_short_tokens_dropped(self) -> None:
        self.assertEqual(query_tokens("A red t-shirt"), ["red", "shirt"])


class TestScoring(unittest.TestCase):
    """Verify the individual score contributions."""

    def test_whole_word_beats_partial(self) -> None:
        whole = Product(title="Red Kurta")
        partial = Product(title="Kurtas Collection")
        self.assertGreater(
            score_product(whole, ["kurta"]), score_product(partial, ["kurta"])
        )

    def test_price_and_thumbnail_bonuses(self) -> None:
        bare = Product(title="Plain")
        rich = Product(title="Plain", price="₹499", thumbnail="https://img")
        self.assertAlmostEqual(
            score_product(rich, ["zzz"]) - score_product(bare, ["zzz"]), 1.5
        )

    def test_source_match(self) -> None:
        self.assertEqual(
            score_product(Product(title="x", source="myntra.com"), ["myntra"]), 1.0
        )


class TestRerank(unittest.TestCase):
    """Verify stable descending order."""

    def test_most_relevant_first(self) -> None:
        products = [
            Product(title="Generic Item"),
            Product(title="Black Leather Jacket"),
            Product(title="Leather Wallet"),
        ]
        ranked = rerank(products, "black leather jacket")
        self.assertEqual(ranked[0].title, "Black Leather Jacket")
        self.assertEqual(ranked[-1].title, "Generic Item")

    def test_ties_keep_upstream_order(self) -> None:
        products = [Product(title=f"Thing {i}") for i in range(5)]
        self.assertEqual(rerank(products, "unrelated query"), products)

    def test_empty_query_returns_copy(self) -> None:
        products = [Product(title="A"), Product(title="B")]
        ranked = rerank(products, "")
        self.assertEqual(ranked, products)
        self.assertIsNot(ranked, products)


class TestSortByPrice(unittest.TestCase):
    """Verify ordering and nulls-last for both directions."""

    def setUp(self) -> None:
        self.products = [
            Product(title="mid", price_number=500.0),
            Product(title="none1", price_number=None),
            Product(title="low", price_number=100.0),
            Product(title="high", price_number=900.0),
            Product(title="none2", price_number=None),
        ]

    def test_ascending(self) -> None:
        result = sort_by_price(self.products, "asc")
        self.assertEqual(
            [p.title for p in result], ["low", "mid", "high", "none1", "none2"]
        )

    def test_descending_nulls_still_last(self) -> None:
        result = sort_by_price(self.products, "desc")
        self.assertEqual(
            [p.title for p in result], ["high", "mid", "low", "none1", "none2"]
        )

    def test_priced_prefix_is_monotonic(self) -> None:
        result = sort_by_price(self.products, "asc")
        prices = [p.price_number for p in result if p.price_number is not None]
        self.assertEqual(prices, sorted(prices))
