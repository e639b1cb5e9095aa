# fashion_search/providers/google_shopping_provider.py

"""Google Shopping (India) via SerpApi's ``google_shopping`` engine."""

from typing import Any

from fashion_search.models.product import Product
from fashion_search.providers.base_provider import BaseProvider


class GoogleShoppingProvider(BaseProvider):
    """General shopping search across Indian retailers."""

    RESULT_COUNT = "20"

    def __init__(self) -> None:
        super().__init__("google_shopping")

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "engine": "google_shopping",
            "q": query,
            "num": self.RESULT_COUNT,
        }

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Parse a single ``shopping_results`` entry into a Product."""
        currency = item.get("currency") or item.get("currency_symbol")
        price = self._text(item.get("price"))
        if price is None and item.get("extracted_price") is not None:
            price = self._price_from_number(
                item["extracted_price"], currency
            )
        return Product(
            title=self._text(item.get("title")),
            price=price,
            link=self._text(
                item.get("link") or item.get("product_link")
            ),
            source=self._text(item.get("source")),
            thumbnail=self._text(item.get("thumbnail")),
        )

    def _parse_results(self, data: dict[str, Any]) -> list[Product]:
        items: list[dict[str, Any]] = data.get("shopping_results") or []
        return [self._parse_item(item) for item in items]
