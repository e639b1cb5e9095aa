# fashion_search/services/search_orchestrator.py

"""Orchestrates query derivation, multi-source search and post-processing."""

import asyncio
import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fashion_search.config.settings import Settings
from fashion_search.filters.deduplicator import ProductDeduplicator
from fashion_search.filters.price_parser import parse_price
from fashion_search.filters.product_filter import ProductFilter
from fashion_search.filters.product_validator import ProductValidator
from fashion_search.filters.query_fallback import clamp_query
from fashion_search.filters.ranker import rerank, sort_by_price
from fashion_search.models.comparison import ComparisonData
from fashion_search.models.product import Product
from fashion_search.models.search_request import SearchFilters, SearchRequest
from fashion_search.services.comparison_builder import build_comparison
from fashion_search.services.price_enhancer import PriceEnhancer
from fashion_search.services.query_builder import QueryBuilder, fetch_image
from fashion_search.services.trending import TrendingDiscoverer

logger = logging.getLogger("fashion_search.orchestrator")


@dataclass
class SearchResult:
    """Container for a completed search across multiple sources."""

    query: str
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    comparison: ComparisonData = field(default_factory=ComparisonData)
    filters: SearchFilters = field(default_factory=SearchFilters)
    platform: str = "google_shopping"
    excluded_count: int = 0
    deduplicated_count: int = 0
    invalid_count: int = 0
    total_before_filter: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON response shape."""
        return {
            "query": self.query,
            "products": [p.to_dict() for p in self.products],
            "comparison": self.comparison.to_dict(),
            "platform": self.platform,
            "filters": self.filters.filters_dict(),
            "sort": self.filters.sort_dict(),
        }


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_provider(source: dict[str, str]) -> Any:
    """Instantiate the provider registered for one source entry."""
    provider_cls = _load_provider_class(source["provider"])
    if "site" in source:
        return provider_cls(source["site"])
    return provider_cls()


class SearchOrchestrator:
    """Coordinates query building, provider fan-out and result shaping."""

    def __init__(
        self,
        query_builder: QueryBuilder | None = None,
        enhancer: PriceEnhancer | None = None,
        trending: TrendingDiscoverer | None = None,
        sources: list[dict[str, str]] | None = None,
        provider_factory: Callable[[dict[str, str]], Any] = build_provider,
    ) -> None:
        self.query_builder = query_builder or QueryBuilder.from_settings()
        self._enhancer = enhancer
        self._trending = trending
        self.sources = (
            sources if sources is not None else Settings.AVAILABLE_SOURCES
        )
        self.provider_factory = provider_factory

    @property
    def enhancer(self) -> PriceEnhancer:
        if self._enhancer is None:
            self._enhancer = PriceEnhancer()
        return self._enhancer

    @property
    def trending_discoverer(self) -> TrendingDiscoverer:
        if self._trending is None:
            self._trending = TrendingDiscoverer()
        return self._trending

    # ── Private helpers ──────────────────────────────────

    async def _run_providers(
        self,
        query: str,
    ) -> tuple[list[Product], list[str]]:
        """Dispatch every provider concurrently and collect results.

        Returns the raw product list and a list of error messages.
        """
        async def run_one(source: dict[str, str]) -> list[Product]:
            provider = self.provider_factory(source)
            products: list[Product] = await asyncio.to_thread(
                provider.search, query
            )
            return products

        batches = await asyncio.gather(
            *(run_one(src) for src in self.sources),
            return_exceptions=True,
        )

        products: list[Product] = []
        errors: list[str] = []
        for source, batch in zip(self.sources, batches):
            if isinstance(batch, list):
                products.extend(batch)
            elif isinstance(batch, BaseException):
                errors.append(f"{source['id']}: {batch}")
                logger.error(
                    "Provider %s failed for query '%s': %s",
                    source["id"],
                    query,
                    batch,
                    exc_info=batch,
                )

        return products, errors

    async def _aggregate(self, query: str, result: SearchResult) -> None:
        """Fan out, then validate and deduplicate into *result*."""
        raw, result.errors = await self._run_providers(query)
        valid, result.invalid_count = ProductValidator.validate(raw)
        result.products, result.deduplicated_count = (
            ProductDeduplicator.deduplicate(valid)
        )
        logger.info(
            "Aggregated %d products for '%s' (%d raw, %d errors)",
            len(result.products),
            query,
            len(raw),
            len(result.errors),
        )

    async def _query_from_image_url(
        self,
        image_url: str,
        caption: str | None,
    ) -> str:
        """Fetch a remote image and describe it; URL hints on failure."""
        try:
            image_bytes, mime = await asyncio.to_thread(
                fetch_image, image_url
            )
        except Exception as exc:
            logger.warning(
                "Image fetch failed for %s: %s", image_url, exc,
                exc_info=True,
            )
            return self.query_builder.fallback.from_image(
                0, caption=caption, image_url=image_url
            )

        if (
            mime not in Settings.ALLOWED_IMAGE_TYPES
            or len(image_bytes) > Settings.MAX_IMAGE_BYTES
        ):
            logger.warning(
                "Unusable remote image %s (%s, %d bytes)",
                image_url,
                mime,
                len(image_bytes),
            )
            return self.query_builder.fallback.from_image(
                len(image_bytes), caption=caption, image_url=image_url
            )

        return await self.query_builder.from_image(
            image_bytes, mime, caption=caption, image_url=image_url
        )

    # ── Public API ───────────────────────────────────────

    async def derive_query(self, request: SearchRequest) -> str:
        """Shopping query for a validated request.

        Text accompanying an image is passed along as its caption.
        """
        caption = request.clean_text or None
        if request.raw and caption:
            return clamp_query(caption)
        if request.image_bytes:
            return await self.query_builder.from_image(
                request.image_bytes,
                request.image_mime or "image/jpeg",
                caption=caption,
                image_url=request.image_url,
            )
        if request.image_url and request.image_url.strip():
            return await self._query_from_image_url(
                request.image_url.strip(), caption
            )
        return await self.query_builder.from_text(request.clean_text)

    async def search_products(
        self,
        query: str,
    ) -> tuple[list[Product], list[str]]:
        """Validated, deduplicated products from every provider."""
        result = SearchResult(query=query)
        await self._aggregate(query, result)
        return result.products, result.errors

    async def search(self, request: SearchRequest) -> SearchResult:
        """Run the full pipeline for one inbound request.

        Raises:
            SearchInputError: When the request is rejected up front.
        """
        request.validate()
        filters = request.filters

        query = await self.derive_query(request)
        result = SearchResult(
            query=query, filters=filters, platform=request.platform
        )
        await self._aggregate(query, result)

        for product in result.products:
            product.price_number = parse_price(product.price)
        result.total_before_filter = len(result.products)

        products, result.excluded_count = ProductFilter.apply_filters(
            result.products, filters
        )
        if filters.has_explicit_sort:
            products = sort_by_price(products, filters.sort_order)
        else:
            products = rerank(products, query)

        products = await self.enhancer.enhance(products)
        if filters.has_explicit_sort:
            # Live prices may have moved products out of order
            products = sort_by_price(products, filters.sort_order)

        result.products = products
        result.comparison = build_comparison(products)
        logger.info(
            "Search '%s': %d products (%d filtered, %d deduped)",
            query,
            len(products),
            result.excluded_count,
            result.deduplicated_count,
        )
        return result

    async def trending(self, limit: int | None = None) -> list[Product]:
        """Diverse sample of currently trending products."""
        return await self.trending_discoverer.discover(limit)

    async def refresh_prices(
        self,
        products: list[Product],
        caller_id: str | None = None,
    ) -> list[Product]:
        """Re-scrape live prices for every linked product.

        The caller identity is only recorded in the log.
        """
        logger.info(
            "Price refresh of %d products requested by %s",
            len(products),
            caller_id or "anonymous",
        )
        for product in products:
            product.price_number = parse_price(product.price)
        return await self.enhancer.enhance(products, head_limit=None)
