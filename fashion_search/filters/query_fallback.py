# fashion_search/filters/query_fallback.py

"""Deterministic shopping-query heuristics used when the AI call fails."""

import logging
import re

from fashion_search.config.settings import ImageSizeThresholds, Settings
from fashion_search.filters.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger("fashion_search.filters")

DEFAULT_QUERY = "fashion clothing style"

_NON_QUERY_CHARS_RE = re.compile(r"[^\w\s'&-]+")
_WHITESPACE_RE = re.compile(r"\s+")


def _clean(text: str | None) -> str:
    """Lowercase, drop punctuation noise and collapse whitespace."""
    lowered = (text or "").lower()
    stripped = _NON_QUERY_CHARS_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", stripped).strip(" -'&")


def _mentions(text: str, term: str) -> bool:
    """True when *term* starts a word in *text* ("shirt" in "t-shirts")."""
    return re.search(rf"\b{re.escape(term)}", text) is not None


def clamp_query(query: str, max_length: int | None = None) -> str:
    """Trim a query to the length limit on a word boundary."""
    limit = max_length or Settings.MAX_QUERY_LENGTH
    query = query.strip()
    if len(query) <= limit:
        return query
    cut = query[:limit].rsplit(" ", 1)[0].strip()
    return cut or query[:limit]


class QueryFallback:
    """Build a shopping query from text or image metadata without the AI."""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        size_thresholds: ImageSizeThresholds | None = None,
    ) -> None:
        self.vocabulary = vocabulary
        self.size_thresholds = (
            size_thresholds or Settings.IMAGE_SIZE_THRESHOLDS
        )

    def _garment_suffix(self, text: str) -> str | None:
        for terms, suffix in self.vocabulary.garment_categories:
            if any(_mentions(text, term) for term in terms):
                return suffix
        return None

    def _seasonal_expansion(self, text: str) -> str | None:
        for word, expansion in self.vocabulary.seasonal_expansions.items():
            if _mentions(text, word):
                return expansion
        return None

    def from_text(self, text: str | None) -> str:
        """Heuristic query for free text; never returns an empty string."""
        cleaned = _clean(text)
        if not cleaned:
            return DEFAULT_QUERY

        suffix = self._garment_suffix(cleaned)
        if suffix is not None:
            query = f"{cleaned} {suffix}"
        else:
            expansion = self._seasonal_expansion(cleaned)
            if expansion is not None:
                query = expansion
            else:
                query = f"{cleaned} {DEFAULT_QUERY}"

        logger.debug("Text fallback: %r -> %r", text, query)
        return clamp_query(query)

    def _url_hint(self, image_url: str | None) -> str | None:
        url = (image_url or "").lower()
        if not url:
            return None
        for terms, hint in self.vocabulary.url_hints:
            if any(term in url for term in terms):
                return hint
        return None

    def _size_bucket(self, size: int) -> str:
        thresholds = self.size_thresholds
        if size > thresholds.large:
            return "fashion clothing outfit style casual wear trendy"
        if size > thresholds.medium:
            return "fashion clothing style casual wear"
        if size < thresholds.small:
            return "fashion accessories jewelry bags shoes"
        return "fashion clothing style trendy casual wear"

    def from_image(
        self,
        image_size: int,
        caption: str | None = None,
        image_url: str | None = None,
    ) -> str:
        """Heuristic query for an image the model could not describe."""
        if caption and _clean(caption):
            return self.from_text(caption)

        hint = self._url_hint(image_url)
        if hint is not None:
            query = f"{hint} fashion style"
        else:
            query = self._size_bucket(image_size)

        logger.debug(
            "Image fallback (size=%d, url=%s) -> %r",
            image_size,
            image_url,
            query,
        )
        return query
