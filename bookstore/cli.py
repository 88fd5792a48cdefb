"""
Bookstore command line.

Usage:
    bookstore seed                     # drop and reload the books collection
    bookstore queries                  # run the query catalog against MongoDB
    bookstore queries --offline        # run it over the local JSON copy instead

Environment:
    MONGODB_URI / BOOKSTORE_MONGODB_URI   store endpoint (default mongodb://localhost:27017)
    NO_DB=1 / BOOKSTORE_OFFLINE=true      offline mode
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError

from .config import Settings, get_settings
from .dataset import DatasetError, load_books
from .db import StoreUnavailableError, store_session
from .memory_store import InMemoryBookQueries
from .mongo_store import MongoBookQueries
from .otel import configure_otel, shutdown_otel
from .runner import run_catalog
from .seeder import format_listing, seed_books

logger = logging.getLogger("bookstore.cli")

OFFLINE_HINT = "Tip: If you cannot use MongoDB on this machine, re-run with NO_DB=1 to use offline mode."


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _print_result(label: str, value: Any) -> None:
    if isinstance(value, (int, str)):
        print(f"{label} -> {value}")
        return
    print(f"{label} ->")
    print(json.dumps(_plain(value), indent=2, default=str))


def cmd_seed(args, settings: Settings) -> int:
    books = load_books(args.books_file or settings.books_file)
    with store_session(settings) as collection:
        report = seed_books(collection, books)
    print(f"{report.inserted_count} books were successfully inserted into the database")
    print("\nInserted books:")
    for line in format_listing(report.books):
        print(line)
    return 0


def cmd_queries(args, settings: Settings) -> int:
    if args.offline:
        settings.offline = True
    page_size = args.page_size if args.page_size is not None else settings.page_size

    if settings.offline:
        print("Offline dry-run mode: simulating queries without a database")
        queries = InMemoryBookQueries(load_books(settings.books_file))
        for label, result in run_catalog(queries, page_size=page_size):
            _print_result(label, result)
        return 0

    print("Online mode: running queries against MongoDB")
    with store_session(settings) as collection:
        for label, result in run_catalog(MongoBookQueries(collection), page_size=page_size):
            _print_result(label, result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookstore",
        description="Seed and query the sample bookstore collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("seed", help="Drop the books collection and insert the sample books")
    p.add_argument("--books-file", type=Path, help="JSON array of books (default: bundled sample)")
    p.set_defaults(func=cmd_seed)

    p = subparsers.add_parser("queries", help="Run the query catalog")
    p.add_argument("--offline", action="store_true", help="Simulate the queries over the local JSON copy")
    p.add_argument("--page-size", type=_positive_int, help="Page size for the pagination examples")
    p.set_defaults(func=cmd_queries)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except (ValidationError, httpx.HTTPError, RuntimeError) as exc:
        logger.error("cli.settings_error", extra={"error": str(exc)})
        print(f"Error loading settings: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    providers = None
    if settings.otel_enabled:
        providers = configure_otel()

    try:
        return args.func(args, settings)
    except DatasetError as exc:
        logger.error("cli.dataset_error", extra={"error": str(exc)})
        print(f"Error loading books: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        # a stored document no longer matches the book record
        logger.error("cli.document_error", extra={"error": str(exc)})
        print(f"Error reading stored books: {exc}", file=sys.stderr)
        return 1
    except (StoreUnavailableError, PyMongoError) as exc:
        logger.error("cli.store_error", extra={"error": str(exc)})
        print(f"Error running {args.command}: {exc}", file=sys.stderr)
        if not settings.offline:
            print(OFFLINE_HINT, file=sys.stderr)
        return 1
    finally:
        if providers is not None:
            shutdown_otel(providers)


if __name__ == "__main__":
    sys.exit(main())
