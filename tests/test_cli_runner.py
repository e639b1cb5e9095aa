# tests/test_cli_runner.py

"""Tests for the headless CLI runner."""

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from fashion_search.cli import runner
from fashion_search.models.comparison import ComparisonData
from fashion_search.models.product import Product
from fashion_search.models.search_request import (
    SearchFilters,
    SearchInputError,
    SearchRequest,
)
from fashion_search.services.search_orchestrator import SearchResult


def _orchestrator() -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.search = AsyncMock(
        return_value=SearchResult(
            query="red kurta",
            products=[
                Product(title="Kurta", price="₹799", link="https://a/1", source="Myntra")
            ],
            comparison=ComparisonData(total_products=1),
        )
    )
    orchestrator.trending = AsyncMock(return_value=[Product(title="Hoodie")])
    orchestrator.refresh_prices = AsyncMock(side_effect=lambda products, caller: products)
    return orchestrator


class TestBuildRequest(unittest.TestCase):
    """Verify CLI arguments map onto a SearchRequest."""

    def test_text_only(self) -> None:
        request = runner.build_request("kurta", raw=True)
        self.assertEqual(request.text, "kurta")
        self.assertTrue(request.raw)
        self.assertIsNone(request.image_bytes)

    def test_image_file_loaded_with_mime(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "look.png"
            path.write_bytes(b"\x89PNG data")
            request = runner.build_request(None, image_path=str(path))
        self.assertEqual(request.image_bytes, b"\x89PNG data")
        self.assertEqual(request.image_mime, "image/png")

    def test_missing_image_file(self) -> None:
        with self.assertRaises(SearchInputError):
            runner.build_request(None, image_path="/nonexistent/look.png")


class TestCliSearch(unittest.IsolatedAsyncioTestCase):
    """Verify output and exit codes."""

    async def test_json_output(self) -> None:
        stdout = io.StringIO()
        with patch("sys.stdout", stdout):
            code = await runner.cli_search(
                SearchRequest(text="red kurta"), "json", _orchestrator()
            )
        self.assertEqual(code, runner.EXIT_OK)
        payload = json.loads(stdout.getvalue())
        self.assertEqual(payload["query"], "red kurta")
        self.assertEqual(payload["products"][0]["price"], "₹799")

    async def test_table_output(self) -> None:
        code = await runner.cli_search(
            SearchRequest(text="red kurta"), "table", _orchestrator()
        )
        self.assertEqual(code, runner.EXIT_OK)

    async def test_input_error_exit_code(self) -> None:
        orchestrator = _orchestrator()
        orchestrator.search.side_effect = SearchInputError("File too large")
        code = await runner.cli_search(SearchRequest(), "json", orchestrator)
        self.assertEqual(code, runner.EXIT_BAD_INPUT)

    async def test_trending_json(self) -> None:
        stdout = io.StringIO()
        with patch("sys.stdout", stdout):
            code = await runner.cli_trending(3, "json", _orchestrator())
        self.assertEqual(code, runner.EXIT_OK)
        self.assertEqual(json.loads(stdout.getvalue())["items"][0]["title"], "Hoodie")


class TestCliRefresh(unittest.IsolatedAsyncioTestCase):
    """Verify the price refresh command."""

    async def test_refresh_from_search_response(self) -> None:
        orchestrator = _orchestrator()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "saved.json"
            path.write_text(
                json.dumps({"products": [{"title": "Tee", "link": "https://a/1", "price": "₹499"}]}),
                encoding="utf-8",
            )
            stdout = io.StringIO()
            with patch("sys.stdout", stdout):
                code = await runner.cli_refresh(str(path), "user-7", "json", orchestrator)
        self.assertEqual(code, runner.EXIT_OK)
        products, caller = orchestrator.refresh_prices.call_args[0]
        self.assertEqual(caller, "user-7")
        self.assertEqual(products[0].title, "Tee")

    async def test_refresh_requires_products_array(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json"
            path.write_text(json.dumps({"items": 3}), encoding="utf-8")
            code = await runner.cli_refresh(str(path), None, "json", _orchestrator())
        self.assertEqual(code, runner.EXIT_BAD_INPUT)


class TestFilterArguments(unittest.TestCase):
    def test_filters_from_cli_strings(self) -> None:
        filters = SearchFilters.from_raw(min_price="300", colors="red,blue")
        request = runner.build_request("kurta", filters=filters)
        self.assertEqual(request.filters.min_price, 300.0)
        self.assertEqual(request.filters.colors, ["red", "blue"])
