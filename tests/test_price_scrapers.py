# tests/test_price_scrapers.py

"""Tests for retailer price extraction from product-page HTML."""

import unittest

from fashion_search.scrapers.ajio_price_scraper import AjioPriceScraper
from fashion_search.scrapers.amazon_price_scraper import AmazonPriceScraper
from fashion_search.scrapers.flipkart_price_scraper import FlipkartPriceScraper
from fashion_search.scrapers.myntra_price_scraper import MyntraPriceScraper
from fashion_search.scrapers.snapdeal_price_scraper import SnapdealPriceScraper


class TestAmazonPriceScraper(unittest.TestCase):
    def setUp(self) -> None:
        self.scraper = AmazonPriceScraper()

    def test_offscreen_price(self) -> None:
        html = (
            '<div id="corePrice_feature_div"><span class="a-price">'
            '<span class="a-offscreen">₹1,299.00</span></span></div>'
        )
        self.assertEqual(self.scraper.try_extract_price(html), 1299.0)

    def test_embedded_price_amount(self) -> None:
        html = '<script>var data = {"priceAmount":849.00};</script>'
        self.assertEqual(self.scraper.try_extract_price(html), 849.0)

    def test_no_price(self) -> None:
        self.assertIsNone(self.scraper.try_extract_price("<html></html>"))

    def test_matches_source(self) -> None:
        self.assertTrue(self.scraper.matches("Amazon.in"))


class TestMyntraPriceScraper(unittest.TestCase):
    def setUp(self) -> None:
        self.scraper = MyntraPriceScraper()

    def test_pdp_price(self) -> None:
        html = '<p class="pdp-price"><strong>₹ 899</strong></p>'
        self.assertEqual(self.scraper.try_extract_price(html), 899.0)

    def test_pdp_data_blob(self) -> None:
        html = '<script>window.__myx = {"price":{"mrp":1999,"discounted":1199}}</script>'
        self.assertEqual(self.scraper.try_extract_price(html), 1199.0)


class TestAjioPriceScraper(unittest.TestCase):
    def setUp(self) -> None:
        self.scraper = AjioPriceScraper()

    def test_selling_price_selector(self) -> None:
        html = '<div class="prod-sp">₹1,049</div><div class="prod-mrp">₹2,099</div>'
        self.assertEqual(self.scraper.try_extract_price(html), 1049.0)

    def test_offer_price_blob(self) -> None:
        html = '<script>{"offerPrice":{"currency":"INR","value":749.0}}</script>'
        self.assertEqual(self.scraper.try_extract_price(html), 749.0)


class TestFlipkartPriceScraper(unittest.TestCase):
    def setUp(self) -> None:
        self.scraper = FlipkartPriceScraper()

    def test_current_class_names(self) -> None:
        html = '<div class="Nx9bqj CxhGGd">₹599</div>'
        self.assertEqual(self.scraper.try_extract_price(html), 599.0)

    def test_legacy_class_names(self) -> None:
        html = '<div class="_30jeq3 _16Jk6d">₹1,899</div>'
        self.assertEqual(self.scraper.try_extract_price(html), 1899.0)

    def test_json_ld(self) -> None:
        html = (
            '<script type="application/ld+json">'
            '[{"@type":"Product","offers":{"price":450}}]</script>'
        )
        self.assertEqual(self.scraper.try_extract_price(html), 450.0)


class TestSnapdealPriceScraper(unittest.TestCase):
    def setUp(self) -> None:
        self.scraper = SnapdealPriceScraper()

    def test_pay_block(self) -> None:
        html = '<span class="payBlkBig" itemprop="price">399</span>'
        self.assertEqual(self.scraper.try_extract_price(html), 399.0)

    def test_itemprop_meta(self) -> None:
        html = '<meta itemprop="price" content="279">'
        self.assertEqual(self.scraper.try_extract_price(html), 279.0)
