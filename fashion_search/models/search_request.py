# fashion_search/models/search_request.py

"""Inbound search request, filter parameters and input validation."""

import re
from dataclasses import dataclass, field
from typing import Any

from fashion_search.config.settings import Settings

_FACET_SPLIT_RE = re.compile(r"[,|]")


class SearchInputError(ValueError):
    """Raised for requests that must be rejected before the pipeline runs.

    The message is safe to show to the end user.
    """


def to_facet_list(value: Any) -> list[str]:
    """Normalise a facet value (list or "a,b|c" string) to lowercase terms."""
    if not value:
        return []
    if isinstance(value, (list, tuple, set)):
        items = [str(v) for v in value if v]
    else:
        items = _FACET_SPLIT_RE.split(str(value))
    return [item.strip().lower() for item in items if item.strip()]


def _to_price_bound(value: Any) -> float | None:
    """Convert a user price bound, treating blanks as unset."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid price bound: {value!r}"
        raise SearchInputError(msg) from exc


@dataclass
class SearchFilters:
    """User-supplied filter and sort parameters."""

    min_price: float | None = None
    max_price: float | None = None
    colors: list[str] = field(default_factory=lambda: list[str]())
    sizes: list[str] = field(default_factory=lambda: list[str]())
    brands: list[str] = field(default_factory=lambda: list[str]())
    sort_by: str | None = None
    sort_order: str = "asc"

    @classmethod
    def from_raw(
        cls,
        min_price: Any = None,
        max_price: Any = None,
        colors: Any = None,
        sizes: Any = None,
        brands: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
    ) -> "SearchFilters":
        """Build filters from loosely typed request values."""
        sort_by_norm = str(sort_by).strip().lower() if sort_by else None
        if sort_by_norm not in (None, "price"):
            msg = f"Unsupported sortBy: {sort_by!r} (only 'price')"
            raise SearchInputError(msg)

        order = str(sort_order or "asc").strip().lower()
        if order not in ("asc", "desc"):
            msg = f"Unsupported sortOrder: {sort_order!r}"
            raise SearchInputError(msg)

        return cls(
            min_price=_to_price_bound(min_price),
            max_price=_to_price_bound(max_price),
            colors=to_facet_list(colors),
            sizes=to_facet_list(sizes),
            brands=to_facet_list(brands),
            sort_by=sort_by_norm,
            sort_order=order,
        )

    @property
    def has_explicit_sort(self) -> bool:
        return self.sort_by is not None

    def filters_dict(self) -> dict[str, Any]:
        """Echo of the filters that were applied."""
        return {
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "colors": list(self.colors),
            "sizes": list(self.sizes),
            "brands": list(self.brands),
        }

    def sort_dict(self) -> dict[str, str | None]:
        return {"sortBy": self.sort_by, "sortOrder": self.sort_order}


@dataclass
class SearchRequest:
    """A single inbound search: text, an image, an image URL, or a mix.

    When both text and an image are given, the text is used as a
    caption for the image analysis.
    """

    text: str | None = None
    image_bytes: bytes | None = None
    image_mime: str | None = None
    image_url: str | None = None
    raw: bool = False
    platform: str = "google_shopping"
    filters: SearchFilters = field(default_factory=SearchFilters)

    @property
    def clean_text(self) -> str:
        return (self.text or "").strip()

    @property
    def has_image(self) -> bool:
        return bool(self.image_bytes) or bool(
            (self.image_url or "").strip()
        )

    def validate(self) -> None:
        """Reject requests without a search signal or with a bad image.

        Raises:
            SearchInputError: With a user-facing message.
        """
        if not self.clean_text and not self.has_image:
            msg = "Provide text, imageUrl, or an image file"
            raise SearchInputError(msg)

        if self.image_bytes is not None:
            mime = (self.image_mime or "").lower()
            if mime not in Settings.ALLOWED_IMAGE_TYPES:
                msg = (
                    "Invalid image format. Please upload a JPEG, PNG, "
                    "GIF, WebP, or BMP image."
                )
                raise SearchInputError(msg)
            if len(self.image_bytes) > Settings.MAX_IMAGE_BYTES:
                limit_mb = Settings.MAX_IMAGE_BYTES // (1024 * 1024)
                msg = f"File too large. Maximum size is {limit_mb}MB."
                raise SearchInputError(msg)
