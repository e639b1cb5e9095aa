# fashion_search/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Product:
    """Represents a single product listing from any shopping source.

    ``price`` is the display string (currency prefixed).  The parsed
    ``price_number`` and the ``price_updated`` flag are pipeline
    internals and never serialised.
    """

    title: str | None = None
    price: str | None = None
    link: str | None = None
    source: str | None = None
    thumbnail: str | None = None
    price_number: float | None = None
    price_updated: bool = False

    @property
    def title_lower(self) -> str:
        return (self.title or "").lower()

    @property
    def source_lower(self) -> str:
        return (self.source or "").lower()

    @property
    def link_lower(self) -> str:
        return (self.link or "").lower()

    def to_dict(self) -> dict[str, str | None]:
        """Serialise the public fields for JSON output."""
        return {
            "title": self.title,
            "price": self.price,
            "link": self.link,
            "source": self.source,
            "thumbnail": self.thumbnail,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from a previously returned JSON object."""

        def _text(key: str) -> str | None:
            value = data.get(key)
            if value is None or value == "":
                return None
            return str(value)

        return cls(
            title=_text("title"),
            price=_text("price"),
            link=_text("link"),
            source=_text("source"),
            thumbnail=_text("thumbnail") or _text("image"),
        )
