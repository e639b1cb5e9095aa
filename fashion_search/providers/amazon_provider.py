# fashion_search/providers/amazon_provider.py

"""Amazon.in via SerpApi's ``amazon`` engine."""

from typing import Any

from fashion_search.config.settings import Settings
from fashion_search.models.product import Product
from fashion_search.providers.base_provider import BaseProvider


class AmazonProvider(BaseProvider):
    """Marketplace-specific search on amazon.in."""

    RESULT_COUNT = "10"

    def __init__(self) -> None:
        super().__init__("amazon")

    def _locale_params(self) -> dict[str, str]:
        # The amazon engine takes its own domain parameter
        params = super()._locale_params()
        params.pop("google_domain", None)
        params["amazon_domain"] = self.settings.AMAZON_DOMAIN
        return params

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "engine": "amazon",
            "k": query,
            "num": self.RESULT_COUNT,
        }

    def _parse_price(self, item: dict[str, Any]) -> str | None:
        """Prefer the display price; prefix ₹ for bare INR amounts."""
        currency = item.get("currency")
        price = item.get("price") or item.get("price_raw")
        if isinstance(price, dict):
            price = price.get("raw") or price.get("value")
        if isinstance(price, (int, float)):
            return self._price_from_number(price, currency or "INR")

        text = self._text(price)
        if text is not None:
            if Settings.CURRENCY_SYMBOL not in text and self._is_inr(
                currency
            ):
                digits = "".join(
                    ch for ch in text if ch.isdigit() or ch == "."
                )
                return f"{Settings.CURRENCY_SYMBOL}{digits}" if digits else None
            return text

        if item.get("extracted_price") is not None:
            return self._price_from_number(
                item["extracted_price"], currency or "INR"
            )
        return None

    def _parse_item(self, item: dict[str, Any]) -> Product:
        return Product(
            title=self._text(item.get("title")),
            price=self._parse_price(item),
            link=self._text(item.get("link") or item.get("link_clean")),
            source="Amazon",
            thumbnail=self._text(item.get("thumbnail")),
        )

    def _parse_results(self, data: dict[str, Any]) -> list[Product]:
        items: list[dict[str, Any]] = data.get("organic_results") or []
        return [self._parse_item(item) for item in items]
