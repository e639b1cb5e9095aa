# fashion_search/filters/ranker.py

"""Relevance re-ranking and price sorting of product lists."""

import logging
import re

from fashion_search.filters.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from fashion_search.models.product import Product

logger = logging.getLogger("fashion_search.filters")

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")

WHOLE_WORD_WEIGHT = 5.0
PARTIAL_WEIGHT = 2.0
SOURCE_WEIGHT = 1.0
FASHION_TERM_WEIGHT = 0.5
COLOR_TERM_WEIGHT = 0.3
PRICE_BONUS = 1.0
THUMBNAIL_BONUS = 0.5


def query_tokens(query: str) -> list[str]:
    """Lowercase alphanumeric tokens of at least two characters."""
    return [
        tok
        for tok in _TOKEN_SPLIT_RE.split(query.lower())
        if len(tok) >= 2
    ]


def _has_price(product: Product) -> bool:
    price = (product.price or "").strip()
    return bool(price) and price.lower() != "null"


def score_product(
    product: Product,
    tokens: list[str],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> float:
    """Heuristic relevance of one product to the query tokens."""
    title = product.title_lower
    source = product.source_lower
    score = 0.0

    for tok in tokens:
        if re.search(rf"\b{re.escape(tok)}\b", title):
            score += WHOLE_WORD_WEIGHT
        elif tok in title:
            score += PARTIAL_WEIGHT
        if tok in source:
            score += SOURCE_WEIGHT

    score += FASHION_TERM_WEIGHT * sum(
        1 for term in vocabulary.fashion_terms if term in title
    )
    score += COLOR_TERM_WEIGHT * sum(
        1 for color in vocabulary.color_terms if color in title
    )
    if _has_price(product):
        score += PRICE_BONUS
    if product.thumbnail:
        score += THUMBNAIL_BONUS
    return score


def rerank(
    products: list[Product],
    query: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[Product]:
    """Stable sort by descending relevance to *query*."""
    tokens = query_tokens(query or "")
    if not products or not tokens:
        return list(products)

    scored = [
        (score_product(p, tokens, vocabulary), p) for p in products
    ]
    # sorted() is stable, so equal scores keep upstream order
    ranked = sorted(scored, key=lambda pair: -pair[0])
    logger.debug(
        "Re-ranked %d products for %r (vocabulary %s)",
        len(products),
        query,
        vocabulary.version,
    )
    return [p for _, p in ranked]


def sort_by_price(
    products: list[Product],
    order: str = "asc",
) -> list[Product]:
    """Sort by ``price_number``; unknown prices always go last."""
    priced = [p for p in products if p.price_number is not None]
    unpriced = [p for p in products if p.price_number is None]
    priced.sort(
        key=lambda p: p.price_number or 0.0,
        reverse=order.lower() == "desc",
    )
    return priced + unpriced
