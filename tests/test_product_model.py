# tests/test_product_model.py

"""Tests for the Product dataclass."""

import unittest

from fashion_search.models.product import Product


class TestProduct(unittest.TestCase):
    """Verify Product defaults, derived fields and serialisation."""

    def test_defaults(self) -> None:
        p = Product()
        self.assertIsNone(p.title)
        self.assertIsNone(p.price_number)
        self.assertFalse(p.price_updated)

    def test_lowercase_shadows(self) -> None:
        p = Product(title="Red KURTA", source="Myntra", link="HTTPS://X.COM/A")
        self.assertEqual(p.title_lower, "red kurta")
        self.assertEqual(p.source_lower, "myntra")
        self.assertEqual(p.link_lower, "https://x.com/a")

    def test_lowercase_shadows_of_missing_fields(self) -> None:
        self.assertEqual(Product().title_lower, "")

    def test_to_dict_emits_public_fields_only(self) -> None:
        p = Product(
            title="Tee",
            price="₹499",
            link="https://shop.in/tee",
            source="Ajio",
            thumbnail="https://img/1.jpg",
            price_number=499.0,
            price_updated=True,
        )
        self.assertEqual(
            p.to_dict(),
            {
                "title": "Tee",
                "price": "₹499",
                "link": "https://shop.in/tee",
                "source": "Ajio",
                "thumbnail": "https://img/1.jpg",
            },
        )

    def test_from_dict_accepts_image_alias(self) -> None:
        p = Product.from_dict(
            {"title": "Tee", "link": "https://a", "image": "https://img", "price": ""}
        )
        self.assertEqual(p.thumbnail, "https://img")
        self.assertIsNone(p.price)
