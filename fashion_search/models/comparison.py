# fashion_search/models/comparison.py

"""Company-wise price comparison models."""

from dataclasses import dataclass, field
from typing import Any

from fashion_search.models.product import Product


@dataclass
class PriceStats:
    """Aggregate statistics over the priced products of a result set."""

    min: float
    max: float
    avg: float
    total: float
    count: int

    def to_dict(self) -> dict[str, float | int]:
        return {
            "min": self.min,
            "max": self.max,
            "avg": self.avg,
            "total": self.total,
            "count": self.count,
        }


@dataclass
class PriceRange:
    """Spread between the cheapest and the dearest priced product."""

    lowest: float
    highest: float
    difference: float

    def to_dict(self) -> dict[str, float]:
        return {
            "lowest": self.lowest,
            "highest": self.highest,
            "difference": self.difference,
        }


@dataclass
class BestDeal:
    """The cheapest priced product offered by one company."""

    company: str
    product: Product
    price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company,
            "product": self.product.to_dict(),
            "price": self.price,
        }


@dataclass
class CompanySummary:
    """Per-company product count and average price."""

    company: str
    count: int
    priced_count: int
    avg_price: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company,
            "count": self.count,
            "pricedCount": self.priced_count,
            "avgPrice": self.avg_price,
        }


@dataclass
class ComparisonData:
    """Products grouped by company with price statistics.

    ``price_stats`` and ``price_range`` are ``None`` exactly when no
    product in the set carries a parseable price.
    """

    companies: list[str] = field(
        default_factory=lambda: list[str]()
    )
    company_groups: dict[str, list[Product]] = field(
        default_factory=lambda: dict[str, list[Product]]()
    )
    price_stats: PriceStats | None = None
    best_deals: list[BestDeal] = field(
        default_factory=lambda: list[BestDeal]()
    )
    total_products: int = 0
    price_range: PriceRange | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the camelCase wire keys."""
        return {
            "companies": list(self.companies),
            "companyGroups": {
                company: [p.to_dict() for p in products]
                for company, products in self.company_groups.items()
            },
            "priceStats": (
                self.price_stats.to_dict()
                if self.price_stats is not None
                else None
            ),
            "bestDeals": [deal.to_dict() for deal in self.best_deals],
            "totalProducts": self.total_products,
            "priceRange": (
                self.price_range.to_dict()
                if self.price_range is not None
                else None
            ),
        }
