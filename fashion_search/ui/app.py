# fashion_search/ui/app.py

"""Terminal UI for the fashion_search meta-search engine."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from fashion_search.cli.runner import load_image
from fashion_search.config.settings import Settings
from fashion_search.filters.ranker import sort_by_price
from fashion_search.models.comparison import ComparisonData
from fashion_search.models.product import Product
from fashion_search.models.search_request import (
    SearchInputError,
    SearchRequest,
)
from fashion_search.services.comparison_builder import (
    build_comparison,
    summarize_companies,
)
from fashion_search.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("fashion_search.ui")


class FashionSearchApp(App[object]):
    """Terminal UI for the fashion_search meta-search engine."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("t", "trending", "Trending"),
        Binding("r", "refresh_prices", "Refresh Prices"),
        Binding("o", "open_link", "Open Link"),
    ]

    def __init__(
        self,
        orchestrator: SearchOrchestrator | None = None,
    ) -> None:
        super().__init__()
        self.orchestrator = orchestrator
        self.products: list[Product] = []
        self.current_query: str = ""
        self.sort_order: str = "desc"

    def _get_orchestrator(self) -> SearchOrchestrator:
        if self.orchestrator is None:
            self.orchestrator = SearchOrchestrator()
        return self.orchestrator

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        source_names = ", ".join(
            s["label"] for s in Settings.AVAILABLE_SOURCES
        )

        yield Header()
        yield Container(
            Static(f"👗 Fashion Search ({source_names})", id="title"),

            # Search Bar
            Horizontal(
                Input(
                    placeholder="Describe what you want to wear...",
                    id="search_input",
                ),
                Input(
                    placeholder="Image path or URL (optional)",
                    id="image_input",
                ),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),

            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("", id="comparison"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table columns on startup."""
        table = self._table()
        table.add_columns("Title", "Price", "Source")

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter in either input."""
        if event.input.id in ("search_input", "image_input"):
            await self.perform_search()

    def _build_request(self) -> SearchRequest:
        text = self.query_one("#search_input", Input).value.strip()
        image = self.query_one("#image_input", Input).value.strip()
        request = SearchRequest(text=text or None)
        if image.startswith(("http://", "https://")):
            request.image_url = image
        elif image:
            request.image_bytes, request.image_mime = load_image(image)
        return request

    async def perform_search(self) -> None:
        """Run the search pipeline for the current inputs."""
        status = self.query_one("#status", Static)
        try:
            request = self._build_request()
            request.validate()
        except SearchInputError as exc:
            self.notify(str(exc), severity="warning")
            return

        status.update("🔍 Searching...")
        try:
            result = await self._get_orchestrator().search(request)
        except Exception as exc:
            logger.error("Search failed", exc_info=True)
            self.notify(f"Search failed: {exc}", severity="error")
            status.update("❌ Search failed")
            return

        for error_msg in result.errors:
            self.notify(f"Source unavailable: {error_msg}", severity="warning")

        self.current_query = result.query
        self.products = result.products
        self.populate_table()
        self.show_comparison(result.comparison)

        if not self.products:
            status.update(f"❌ No products found for '{result.query}'")
        else:
            status.update(
                f"✅ {len(self.products)} products for '{result.query}'"
            )

    def populate_table(self) -> None:
        """Fill the DataTable with the current products."""
        table = self._table()
        table.clear()
        if not self.products:
            return

        min_price = min(
            (
                p.price_number
                for p in self.products
                if p.price_number is not None
            ),
            default=None,
        )

        for p in self.products:
            is_cheapest = (
                min_price is not None and p.price_number == min_price
            )
            price_style = "bold green" if is_cheapest else ""
            price_label = p.price or "N/A"
            if p.price_updated:
                price_label = f"{price_label} ⟳"
            table.add_row(
                (p.title or "")[:60],
                Text(price_label, style=price_style),
                (p.source or "Unknown").upper(),
            )

    def show_comparison(self, comparison: ComparisonData) -> None:
        """Summarise the company breakdown under the table."""
        panel = self.query_one("#comparison", Static)
        if not comparison.total_products:
            panel.update("")
            return

        lines = [
            f"{s.company}: {s.count} items"
            + (
                f", avg {Settings.CURRENCY_SYMBOL}{s.avg_price:,.0f}"
                if s.avg_price is not None
                else ""
            )
            for s in summarize_companies(self.products)
        ]
        if comparison.best_deals:
            deal = comparison.best_deals[0]
            lines.append(
                f"Best deal: {deal.company} at "
                f"{Settings.CURRENCY_SYMBOL}{deal.price:,.0f}"
            )
        panel.update("\n".join(lines))

    def _selected_product(self) -> Product | None:
        row = self._table().cursor_row
        if 0 <= row < len(self.products):
            return self.products[row]
        return None

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected product's link in the default browser."""
        if 0 <= event.cursor_row < len(self.products):
            link = self.products[event.cursor_row].link
            if link:
                webbrowser.open(link)

    def action_open_link(self) -> None:
        product = self._selected_product()
        if product is None or not product.link:
            self.notify("No product selected", severity="warning")
            return
        webbrowser.open(product.link)

    def action_sort_price(self) -> None:
        """Sort by price, toggling between ascending and descending."""
        self.sort_order = "asc" if self.sort_order == "desc" else "desc"
        self.products = sort_by_price(self.products, self.sort_order)
        self.populate_table()

    async def action_trending(self) -> None:
        """Replace the results with trending products."""
        status = self.query_one("#status", Static)
        status.update("🔥 Discovering trending products...")
        try:
            self.products = await self._get_orchestrator().trending()
        except Exception as exc:
            logger.error("Trending discovery failed", exc_info=True)
            self.notify(f"Trending failed: {exc}", severity="error")
            return
        self.current_query = "trending"
        self.populate_table()
        self.show_comparison(build_comparison(self.products))
        status.update(f"🔥 {len(self.products)} trending products")

    async def action_refresh_prices(self) -> None:
        """Re-scrape live prices for every listed product."""
        if not self.products:
            self.notify("No results to refresh", severity="warning")
            return
        status = self.query_one("#status", Static)
        status.update("⟳ Refreshing live prices...")
        try:
            self.products = await self._get_orchestrator().refresh_prices(
                self.products
            )
        except Exception as exc:
            logger.error("Price refresh failed", exc_info=True)
            self.notify(f"Refresh failed: {exc}", severity="error")
            return
        updated = sum(1 for p in self.products if p.price_updated)
        self.populate_table()
        self.show_comparison(build_comparison(self.products))
        status.update(f"⟳ {updated} live prices updated")
