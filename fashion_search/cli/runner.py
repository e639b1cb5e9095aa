# fashion_search/cli/runner.py

"""Headless CLI runner for search, trending and price refresh."""

import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from fashion_search.models.comparison import ComparisonData
from fashion_search.models.product import Product
from fashion_search.models.search_request import (
    SearchFilters,
    SearchInputError,
    SearchRequest,
)
from fashion_search.services.comparison_builder import summarize_companies
from fashion_search.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("fashion_search.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def load_image(path: str) -> tuple[bytes, str]:
    """Read an image file and guess its MIME type from the name."""
    image_path = Path(path)
    if not image_path.is_file():
        raise SearchInputError(f"Image file not found: {path}")
    mime, _ = mimetypes.guess_type(image_path.name)
    return image_path.read_bytes(), mime or "application/octet-stream"


def build_request(
    text: str | None,
    image_path: str | None = None,
    image_url: str | None = None,
    raw: bool = False,
    filters: SearchFilters | None = None,
) -> SearchRequest:
    """Assemble a SearchRequest from CLI arguments."""
    image_bytes: bytes | None = None
    image_mime: str | None = None
    if image_path:
        image_bytes, image_mime = load_image(image_path)
    return SearchRequest(
        text=text,
        image_bytes=image_bytes,
        image_mime=image_mime,
        image_url=image_url,
        raw=raw,
        filters=filters or SearchFilters(),
    )


def report_input_error(exc: SearchInputError) -> int:
    """Show a rejected-input message and return the matching exit code."""
    _err.print(f"[red]{exc}[/red]")
    return EXIT_BAD_INPUT


def _write_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_products(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Source", style="magenta")
    table.add_column("Link", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        price = p.price or "N/A"
        if p.price_updated:
            price = f"{price} *"
        table.add_row(
            str(idx),
            (p.title or "")[:60],
            price,
            p.source or "Unknown",
            p.link or "",
        )

    Console().print(table)


def _print_comparison(
    comparison: ComparisonData,
    products: list[Product],
) -> None:
    """Company summary and best deals, rendered below the results."""
    table = Table(title="By Company", title_style="bold cyan")
    table.add_column("Company", style="magenta")
    table.add_column("Products", justify="right")
    table.add_column("Priced", justify="right")
    table.add_column("Avg Price", justify="right", style="green")
    table.add_column("Best Deal", justify="right", style="bold green")

    best = {deal.company: deal.price for deal in comparison.best_deals}
    for summary in summarize_companies(products):
        avg = (
            f"{summary.avg_price:,.0f}"
            if summary.avg_price is not None
            else "—"
        )
        deal = best.get(summary.company)
        table.add_row(
            summary.company,
            str(summary.count),
            str(summary.priced_count),
            avg,
            f"{deal:,.0f}" if deal is not None else "—",
        )
    Console().print(table)

    if comparison.price_range is not None:
        rng = comparison.price_range
        _err.print(
            f"[dim]Price range: {rng.lowest:,.0f} – {rng.highest:,.0f}"
            f" (spread {rng.difference:,.0f})[/dim]"
        )


async def cli_search(
    request: SearchRequest,
    output_format: str = "json",
    orchestrator: SearchOrchestrator | None = None,
) -> int:
    """Run a headless search and return an exit code."""
    orchestrator = orchestrator or SearchOrchestrator()

    _err.print(
        f"[bold]Searching:[/bold] {request.clean_text or request.image_url or 'image'}"
    )
    try:
        result = await orchestrator.search(request)
    except SearchInputError as exc:
        return report_input_error(exc)

    for error_msg in result.errors:
        _err.print(f"[yellow]Source unavailable: {error_msg}[/yellow]")

    parts: list[str] = []
    if result.excluded_count:
        parts.append(f"{result.excluded_count} filtered")
    if result.deduplicated_count:
        parts.append(f"{result.deduplicated_count} deduped")
    if result.invalid_count:
        parts.append(f"{result.invalid_count} invalid")
    detail = f" ({', '.join(parts)})" if parts else ""
    _err.print(
        f"[green]✓ {len(result.products)} products for "
        f"'{result.query}'{detail}[/green]"
    )

    if output_format == "table":
        _print_products(result.products, f"Results: {result.query}")
        if result.products:
            _print_comparison(result.comparison, result.products)
    else:
        _write_json(result.to_dict())
    return EXIT_OK


async def cli_trending(
    limit: int | None,
    output_format: str = "json",
    orchestrator: SearchOrchestrator | None = None,
) -> int:
    """Print a diverse sample of trending products."""
    orchestrator = orchestrator or SearchOrchestrator()
    _err.print("[bold]Discovering trending products...[/bold]")
    products = await orchestrator.trending(limit)

    if not products:
        _err.print("[yellow]No trending products found.[/yellow]")

    if output_format == "table":
        _print_products(products, "Trending")
    else:
        _write_json({"items": [p.to_dict() for p in products]})
    return EXIT_OK


def load_products(path: str) -> list[Product]:
    """Read products from a JSON file (a list or a search response)."""
    try:
        data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SearchInputError(f"Cannot read products from {path}") from exc
    if isinstance(data, dict):
        data = data.get("products")
    if not isinstance(data, list):
        raise SearchInputError("products array is required")
    return [Product.from_dict(item) for item in data if isinstance(item, dict)]


async def cli_refresh(
    path: str,
    caller_id: str | None = None,
    output_format: str = "json",
    orchestrator: SearchOrchestrator | None = None,
) -> int:
    """Re-scrape live prices for products saved in a JSON file."""
    try:
        products = load_products(path)
    except SearchInputError as exc:
        return report_input_error(exc)

    orchestrator = orchestrator or SearchOrchestrator()
    _err.print(f"[bold]Refreshing {len(products)} prices...[/bold]")
    products = await orchestrator.refresh_prices(products, caller_id)
    updated = sum(1 for p in products if p.price_updated)
    _err.print(f"[green]✓ {updated} live prices updated[/green]")

    if output_format == "table":
        _print_products(products, "Refreshed Prices")
    else:
        _write_json({"products": [p.to_dict() for p in products]})
    return EXIT_OK
