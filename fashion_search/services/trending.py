# fashion_search/services/trending.py

"""Trending-products discovery with TF-IDF diversity selection."""

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Any

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from fashion_search.config.settings import Settings
from fashion_search.filters.deduplicator import ProductDeduplicator
from fashion_search.filters.price_parser import parse_price
from fashion_search.filters.vocabulary import TRENDING_STOPWORDS
from fashion_search.models.product import Product
from fashion_search.providers.site_search_provider import SiteSearchProvider

logger = logging.getLogger("fashion_search.trending")


def build_similarity_matrix(
    titles: list[str],
    stopwords: frozenset[str] = TRENDING_STOPWORDS,
) -> np.ndarray:
    """Pairwise cosine similarity of the TF-IDF vectors of *titles*.

    Titles made only of stopwords share nothing with anything, so an
    empty vocabulary degrades to the identity matrix.
    """
    if not titles:
        return np.zeros((0, 0))
    vectorizer = TfidfVectorizer(
        lowercase=True,
        stop_words=sorted(stopwords),
        token_pattern=r"(?u)\b[a-z0-9][a-z0-9-]+\b",
    )
    try:
        matrix = vectorizer.fit_transform(titles)
    except ValueError:
        logger.debug("Empty TF-IDF vocabulary for %d titles", len(titles))
        return np.eye(len(titles))
    return np.asarray(cosine_similarity(matrix))


def select_diverse(similarity: np.ndarray, k: int) -> list[int]:
    """Greedy max-min selection over a similarity matrix.

    Starts from item 0 and repeatedly adds the candidate whose minimum
    similarity to the already-selected items is largest.  Ties go to
    the lowest index, so the result is deterministic.  Returns indices
    in selection order.
    """
    n = similarity.shape[0]
    if k <= 0 or n == 0:
        return []
    if n <= k:
        return list(range(n))

    selected = [0]
    # Lowest similarity of each item to anything selected so far
    lowest = np.minimum(similarity[0].astype(float), 1.0)
    remaining = list(range(1, n))
    while len(selected) < k and remaining:
        best = max(remaining, key=lambda i: lowest[i])
        selected.append(best)
        remaining.remove(best)
        lowest = np.minimum(lowest, similarity[best])
    return selected


def shuffle_products(
    products: list[Product],
    rng: random.Random | None = None,
) -> list[Product]:
    """Return a shuffled copy; pass a seeded *rng* for repeatable order."""
    shuffled = list(products)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


class TrendingDiscoverer:
    """Sample fashion keywords across retailer sites and pick a diverse set."""

    def __init__(
        self,
        rng: random.Random | None = None,
        provider_factory: Callable[[str], Any] = SiteSearchProvider,
        sites: list[str] | None = None,
        keywords: list[str] | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.provider_factory = provider_factory
        self.sites = sites or list(Settings.TRENDING_SITES)
        self.keywords = keywords or list(Settings.TRENDING_KEYWORDS)

    def _plan(self) -> list[tuple[str, str]]:
        """(site, keyword) pairs, a fresh random sample per site."""
        per_site = min(Settings.TRENDING_KEYWORDS_PER_SITE, len(self.keywords))
        return [
            (site, keyword)
            for site in self.sites
            for keyword in self.rng.sample(self.keywords, per_site)
        ]

    async def _search_pair(self, site: str, keyword: str) -> list[Product]:
        provider = self.provider_factory(site)
        products: list[Product] = await asyncio.to_thread(
            provider.search, keyword
        )
        return products

    async def discover(self, limit: int | None = None) -> list[Product]:
        """Up to *limit* diverse, shuffled trending products.

        ``price_number`` is parsed so callers can sort the result.
        """
        limit = limit or Settings.TRENDING_LIMIT
        plan = self._plan()
        batches = await asyncio.gather(
            *(self._search_pair(site, kw) for site, kw in plan),
            return_exceptions=True,
        )

        collected: list[Product] = []
        for (site, keyword), batch in zip(plan, batches):
            if isinstance(batch, BaseException):
                logger.warning(
                    "Trending search failed for %s '%s': %s",
                    site,
                    keyword,
                    batch,
                )
                continue
            collected.extend(batch)

        unique, removed = ProductDeduplicator.deduplicate(collected)
        similarity = build_similarity_matrix(
            [p.title or "" for p in unique]
        )
        diverse = [unique[i] for i in select_diverse(similarity, limit)]
        for product in diverse:
            product.price_number = parse_price(product.price)
        logger.info(
            "Trending: %d collected, %d duplicates, %d selected",
            len(collected),
            removed,
            len(diverse),
        )
        return shuffle_products(diverse, self.rng)
