# fashion_search/services/comparison_builder.py

"""Group a result set by company and compute price statistics."""

from fashion_search.filters.price_parser import parse_price
from fashion_search.models.comparison import (
    BestDeal,
    CompanySummary,
    ComparisonData,
    PriceRange,
    PriceStats,
)
from fashion_search.models.product import Product

UNKNOWN_COMPANY = "Unknown"


def _price_of(product: Product) -> float | None:
    if product.price_number is not None:
        return product.price_number
    return parse_price(product.price)


def _group_by_company(products: list[Product]) -> dict[str, list[Product]]:
    groups: dict[str, list[Product]] = {}
    for product in products:
        groups.setdefault(product.source or UNKNOWN_COMPANY, []).append(
            product
        )
    return groups


def build_comparison(products: list[Product]) -> ComparisonData:
    """Company-wise comparison of *products*.

    An empty list yields the empty shape (no companies, no stats).
    """
    if not products:
        return ComparisonData()

    groups = _group_by_company(products)
    prices = [p for p in (_price_of(prod) for prod in products) if p is not None]

    stats: PriceStats | None = None
    price_range: PriceRange | None = None
    if prices:
        total = sum(prices)
        stats = PriceStats(
            min=min(prices),
            max=max(prices),
            avg=total / len(prices),
            total=total,
            count=len(prices),
        )
        price_range = PriceRange(
            lowest=stats.min,
            highest=stats.max,
            difference=stats.max - stats.min,
        )

    best_deals: list[BestDeal] = []
    for company, company_products in groups.items():
        priced = [
            (price, p)
            for p in company_products
            if (price := _price_of(p)) is not None
        ]
        if not priced:
            continue
        # min() keeps the first of equally cheap products
        price, cheapest = min(priced, key=lambda pair: pair[0])
        best_deals.append(
            BestDeal(company=company, product=cheapest, price=price)
        )
    best_deals.sort(key=lambda deal: deal.price)

    companies = sorted(groups, key=lambda c: len(groups[c]), reverse=True)

    return ComparisonData(
        companies=companies,
        company_groups=groups,
        price_stats=stats,
        best_deals=best_deals,
        total_products=len(products),
        price_range=price_range,
    )


def summarize_companies(products: list[Product]) -> list[CompanySummary]:
    """Per-company product count and average price, largest first."""
    summaries: list[CompanySummary] = []
    for company, company_products in _group_by_company(products).items():
        prices = [
            price
            for price in (_price_of(p) for p in company_products)
            if price is not None
        ]
        summaries.append(
            CompanySummary(
                company=company,
                count=len(company_products),
                priced_count=len(prices),
                avg_price=sum(prices) / len(prices) if prices else None,
            )
        )
    summaries.sort(key=lambda s: s.count, reverse=True)
    return summaries
