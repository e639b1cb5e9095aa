# main.py

"""Entry point for the fashion_search application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from fashion_search.config.logging_config import setup_logging
from fashion_search.config.settings import Settings

logger = logging.getLogger("fashion_search.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    source_labels = ", ".join(s["label"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="fashion_search",
        description="Fashion product meta-search with price comparison.",
        epilog=f"Searched sources: {source_labels}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search text. Omit (with no image) to launch the TUI.",
    )
    parser.add_argument(
        "--image",
        default=None,
        dest="image_path",
        help="Path to an image to search by.",
    )
    parser.add_argument(
        "--image-url",
        default=None,
        dest="image_url",
        help="URL of an image to search by.",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        default=False,
        help="Use the text verbatim, skipping AI query building.",
    )
    parser.add_argument("--min-price", default=None, dest="min_price")
    parser.add_argument("--max-price", default=None, dest="max_price")
    parser.add_argument(
        "--colors", default=None, help="Comma-separated colors."
    )
    parser.add_argument(
        "--sizes", default=None, help="Comma-separated sizes."
    )
    parser.add_argument(
        "--brands", default=None, help="Comma-separated brands."
    )
    parser.add_argument(
        "--sort-by",
        choices=["price"],
        default=None,
        dest="sort_by",
        help="Explicit sort (disables relevance re-ranking).",
    )
    parser.add_argument(
        "--sort-order",
        choices=["asc", "desc"],
        default="asc",
        dest="sort_order",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--trending",
        nargs="?",
        const=Settings.TRENDING_LIMIT,
        type=int,
        default=None,
        metavar="N",
        help="Show N diverse trending products.",
    )
    parser.add_argument(
        "--refresh",
        default=None,
        metavar="FILE",
        help="Refresh live prices for products in a JSON file.",
    )
    parser.add_argument(
        "--user",
        default=None,
        dest="caller_id",
        help="Caller identity recorded with a price refresh.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from fashion_search.ui.app import FashionSearchApp

    try:
        app = FashionSearchApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("fashion_search TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Run the selected headless command and return its exit code."""
    from fashion_search.cli import runner
    from fashion_search.models.search_request import (
        SearchFilters,
        SearchInputError,
    )

    if args.trending is not None:
        return asyncio.run(
            runner.cli_trending(args.trending, args.output_format)
        )
    if args.refresh is not None:
        return asyncio.run(
            runner.cli_refresh(
                args.refresh, args.caller_id, args.output_format
            )
        )

    try:
        filters = SearchFilters.from_raw(
            min_price=args.min_price,
            max_price=args.max_price,
            colors=args.colors,
            sizes=args.sizes,
            brands=args.brands,
            sort_by=args.sort_by,
            sort_order=args.sort_order,
        )
        request = runner.build_request(
            args.query,
            image_path=args.image_path,
            image_url=args.image_url,
            raw=args.raw,
            filters=filters,
        )
    except SearchInputError as exc:
        return runner.report_input_error(exc)

    return asyncio.run(runner.cli_search(request, args.output_format))


def _wants_tui(args: argparse.Namespace) -> bool:
    return (
        args.query is None
        and args.image_path is None
        and args.image_url is None
        and args.trending is None
        and args.refresh is None
    )


def main() -> None:
    """Route to TUI (no args) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()
    tui = _wants_tui(args)

    log_file = setup_logging(
        console_level=logging.CRITICAL if tui else logging.WARNING
    )
    logger.info("fashion_search starting, log file: %s", log_file)

    if tui:
        _run_tui()
        return

    try:
        exit_code = _run_cli(args)
    except Exception:
        logger.critical("Unhandled error in CLI run", exc_info=True)
        print("Something went wrong", file=sys.stderr)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
