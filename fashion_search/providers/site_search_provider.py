# fashion_search/providers/site_search_provider.py

"""Site-restricted Google web search (``site:<domain> <query>``)."""

from typing import Any

from fashion_search.models.product import Product
from fashion_search.providers.base_provider import BaseProvider


class SiteSearchProvider(BaseProvider):
    """Organic Google results restricted to one retailer domain.

    Organic results rarely carry a price; one is taken from the rich
    snippet only when it is quoted in rupees.
    """

    def __init__(self, site: str) -> None:
        self.site = site
        self.display_name = site.removeprefix("www.")
        super().__init__(f"site.{self.display_name}")

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "engine": "google",
            "q": f"site:{self.site} {query}",
        }

    def _snippet_price(self, item: dict[str, Any]) -> str | None:
        """Best-effort price from ``rich_snippet.*.detected_extensions``."""
        snippet = item.get("rich_snippet") or {}
        for block in ("top", "bottom"):
            extensions = (snippet.get(block) or {}).get(
                "detected_extensions"
            ) or {}
            if "price" in extensions:
                return self._price_from_number(
                    extensions["price"], extensions.get("currency")
                )
        return None

    def _parse_item(self, item: dict[str, Any]) -> Product:
        return Product(
            title=self._text(item.get("title")),
            price=self._snippet_price(item),
            link=self._text(item.get("link")),
            source=self.display_name,
            thumbnail=self._text(
                item.get("thumbnail") or item.get("thumbnail_url")
            ),
        )

    def _parse_results(self, data: dict[str, Any]) -> list[Product]:
        items: list[dict[str, Any]] = data.get("organic_results") or []
        return [self._parse_item(item) for item in items]
