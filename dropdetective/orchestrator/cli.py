"""
Drop Detective CLI
==================

Command-line interface for the sheet analysis pipeline.

Commands:
    analyze     - Analyze every product of a Google Sheet
    results     - Show stored results of a sheet
    criteria    - List the scoring criteria
    init-db     - Create the results table

Usage:
    python -m dropdetective.orchestrator.cli analyze "https://docs.google.com/spreadsheets/d/<id>/edit"
    python -m dropdetective.orchestrator.cli analyze <url> --sort lowest --export results.csv
    python -m dropdetective.orchestrator.cli results <sheet_id> --search lamp
    python -m dropdetective.orchestrator.cli criteria
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List

from .logging_config import setup_logging
from .pipeline import SheetAnalysisPipeline
from ..config import get_settings
from ..data.data_models import AnalyzedProduct
from ..data.sheet_parser import EmptyResultError, InvalidSourceError
from ..data.sheets_client import SheetFetchError
from ..presentation.results_view import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    SORT_OPTIONS,
    ResultsView,
)
from ..scoring.criteria import CRITERIA
from ..storage.results_store import PersistenceError, PostgresResultsStore


def _print_page(products: List[AnalyzedProduct], args) -> ResultsView:
    view = ResultsView(products).search(args.search).sort(args.sort)
    page = view.paginate(page=args.page, page_size=args.page_size)

    if args.json:
        print(json.dumps({
            "page": page.page,
            "total_pages": page.total_pages,
            "total_items": page.total_items,
            "products": [p.to_dict() for p in page.items],
        }, indent=2))
        return view

    print(f"Page {page.page}/{page.total_pages} ({page.total_items} products)")
    print()
    for product in page.items:
        marker = " (estimated)" if product.is_fallback else ""
        print(f"{product.total_score:>3}/100  {product.product_name}{marker}")
        print(f"         {product.insights}")
    return view


def _export(view: ResultsView, path: str):
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(view.export_csv())
    print(f"\nExported {len(view)} products to {path}")


def cmd_analyze(args):
    """Analyze a sheet."""
    print("=" * 60)
    print("DROP DETECTIVE SHEET ANALYSIS")
    print("=" * 60)

    def progress(done: int, total: int):
        print(f"  analyzed {done}/{total}")

    try:
        with SheetAnalysisPipeline() as pipeline:
            result = asyncio.run(pipeline.run(args.sheet_url, progress_callback=progress))
    except InvalidSourceError as e:
        print(f"ERROR: {e}. Expected https://docs.google.com/spreadsheets/d/<id>/...")
        return 2
    except EmptyResultError as e:
        print(f"No products to analyze: {e}")
        return 1
    except SheetFetchError as e:
        print(f"ERROR: {e}")
        return 1

    print()
    print(f"Sheet: {result.sheet_id}")
    print(f"Rows: {result.rows_received} received, {result.rows_dropped} dropped")
    print(f"Estimated scores: {result.fallback_count}")
    print(f"Saved: {'yes' if result.persisted else 'no'}")
    print()

    view = _print_page(result.products, args)
    if args.export:
        _export(view, args.export)
    return 0


def cmd_results(args):
    """Show stored results of a sheet."""
    try:
        with SheetAnalysisPipeline() as pipeline:
            products = pipeline.get_results(args.sheet_id)
    except Exception as e:
        print(f"ERROR: Failed to load results: {e}")
        logging.exception("Loading results failed")
        return 1

    if not products:
        print(f"No results stored for sheet {args.sheet_id}")
        return 0

    view = _print_page(products, args)
    if args.export:
        _export(view, args.export)
    return 0


def cmd_init_db(args):
    """Create the results table."""
    database = get_settings().database
    if not database.enabled:
        print("DATABASE_PASSWORD not set - nothing to initialize (results are kept in memory)")
        return 1

    store = PostgresResultsStore(database_config=database)
    try:
        store.ensure_schema()
    except PersistenceError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        store.close()

    print(f"Schema ready on {database.host}:{database.port}/{database.name}")
    return 0


def cmd_criteria(args):
    """List scoring criteria."""
    for criterion in CRITERIA:
        print(f"{criterion.name:<16} {criterion.description}")
    return 0


def _add_view_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--search", default=None, help="Filter by product name")
    parser.add_argument("--sort", choices=SORT_OPTIONS, default=DEFAULT_SORT)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE)
    parser.add_argument("--export", metavar="FILE", help="Write the filtered, sorted results as CSV")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dropdetective",
        description="Score dropshipping products listed in a Google Sheet",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a Google Sheet")
    analyze.add_argument("sheet_url")
    _add_view_arguments(analyze)
    analyze.set_defaults(func=cmd_analyze)

    results = subparsers.add_parser("results", help="Show stored results")
    results.add_argument("sheet_id")
    _add_view_arguments(results)
    results.set_defaults(func=cmd_results)

    init_db = subparsers.add_parser("init-db", help="Create the results table in PostgreSQL")
    init_db.set_defaults(func=cmd_init_db)

    criteria = subparsers.add_parser("criteria", help="List scoring criteria")
    criteria.set_defaults(func=cmd_criteria)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_config = get_settings().logging
    setup_logging(
        level="DEBUG" if args.verbose else log_config.level,
        json_output=log_config.json_logs,
        log_file=log_config.log_file,
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
