import logging
from collections.abc import Callable, Iterator
from typing import Any

from opentelemetry import metrics, trace

from .service import BookQueries

logger = logging.getLogger("bookstore.runner")
tracer = trace.get_tracer("bookstore.runner")
meter = metrics.get_meter("bookstore.runner")
operations_counter = meter.create_counter(
    "bookstore.operations",
    unit="1",
    description="Catalog operations executed, labelled by mode",
)


def _run(queries: BookQueries, name: str, call: Callable[[], Any]) -> Any:
    with tracer.start_as_current_span(f"bookstore.{name}") as span:
        span.set_attribute("bookstore.mode", queries.mode)
        result = call()
    operations_counter.add(1, {"operation": name, "mode": queries.mode})
    logger.debug("runner.operation", extra={"operation": name, "mode": queries.mode})
    return result


def run_catalog(queries: BookQueries, page_size: int = 5) -> Iterator[tuple[str, Any]]:
    q = queries

    yield "Find genre=Fiction (docs)", len(_run(q, "find_by_genre", lambda: q.find_by_genre("Fiction")))
    yield "Find after year=1950 (docs)", len(_run(q, "find_after_year", lambda: q.find_after_year(1950)))
    yield "Find author=George Orwell (docs)", len(
        _run(q, "find_by_author", lambda: q.find_by_author("George Orwell"))
    )
    yield "Update price of 1984", _run(q, "update_price", lambda: q.update_price("1984", 12.49))
    yield "Delete by title (no-op if not found)", _run(
        q, "delete_by_title", lambda: q.delete_by_title("Non-Existing Title")
    )

    yield "In stock after 2010", _run(q, "in_stock_after_2010", q.in_stock_after_2010)
    yield "Projection (title, author, price)", _run(q, "projection", q.projection)
    yield "Sort price asc (first 3)", _run(q, "sort_by_price", lambda: q.sort_by_price(ascending=True))[:3]
    yield "Sort price desc (first 3)", _run(q, "sort_by_price", lambda: q.sort_by_price(ascending=False))[:3]
    yield "Pagination page=1", _run(q, "paginate", lambda: q.paginate(1, page_size))
    yield "Pagination page=2", _run(q, "paginate", lambda: q.paginate(2, page_size))

    yield "Average price by genre", _run(q, "average_price_by_genre", q.average_price_by_genre)
    yield "Author with most books", _run(q, "author_with_most_books", q.author_with_most_books)
    yield "Group by decade", _run(q, "group_by_decade", q.group_by_decade)

    yield "Create index title", _run(q, "create_title_index", q.create_title_index)
    yield "Create compound index author+published_year", _run(
        q, "create_author_year_index", q.create_author_year_index
    )
    yield "Explain plan for title search (1984)", _run(
        q, "explain_title_query", lambda: q.explain_title_query("1984")
    )
