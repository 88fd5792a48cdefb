import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from typing import Any, Callable

from .models import (
    AuthorBookCount,
    Book,
    BookSummary,
    DecadeCount,
    DeleteOutcome,
    GenrePriceStats,
    UpdateOutcome,
    decade_label,
)
from .service import AUTHOR_YEAR_INDEX, SUMMARY_FIELDS, TITLE_INDEX, BookQueries

logger = logging.getLogger("bookstore.queries")


class InMemoryBookQueries(BookQueries):
    """Linear-scan stand-in for the store, used when no database is reachable."""

    mode = "offline"

    def __init__(self, books: Iterable[Book]):
        # own copies so callers never observe mutations through their objects
        self._books: list[Book] = [book.model_copy() for book in books]

    def __len__(self) -> int:
        return len(self._books)

    def _filter(self, predicate: Callable[[Book], bool]) -> list[Book]:
        return [book.model_copy() for book in self._books if predicate(book)]

    def _by_price(self, ascending: bool) -> list[Book]:
        return sorted(
            (book.model_copy() for book in self._books),
            key=lambda book: (book.price, book.title),
            reverse=not ascending,
        )

    def find_by_genre(self, genre: str) -> list[Book]:
        return self._filter(lambda book: book.genre == genre)

    def find_after_year(self, year: int) -> list[Book]:
        return self._filter(lambda book: book.published_year > year)

    def find_by_author(self, author: str) -> list[Book]:
        return self._filter(lambda book: book.author == author)

    def update_price(self, title: str, new_price: float) -> UpdateOutcome:
        new_price = self.checked_price(new_price)
        for index, book in enumerate(self._books):
            if book.title == title:
                modified = int(book.price != new_price)
                self._books[index] = book.model_copy(update={"price": new_price})
                logger.info("queries.update_price", extra={"mode": self.mode, "title": title, "matched": 1})
                return UpdateOutcome(matched_count=1, modified_count=modified)
        logger.info("queries.update_price", extra={"mode": self.mode, "title": title, "matched": 0})
        return UpdateOutcome(matched_count=0, modified_count=0)

    def delete_by_title(self, title: str) -> DeleteOutcome:
        before = len(self._books)
        self._books = [book for book in self._books if book.title != title]
        deleted = before - len(self._books)
        logger.info("queries.delete_by_title", extra={"mode": self.mode, "title": title, "deleted": deleted})
        return DeleteOutcome(deleted_count=deleted)

    def in_stock_after_2010(self) -> list[Book]:
        return self._filter(lambda book: book.in_stock and book.published_year > 2010)

    def projection(self) -> list[BookSummary]:
        return [BookSummary(**book.model_dump(include=set(SUMMARY_FIELDS))) for book in self._books]

    def sort_by_price(self, ascending: bool = True) -> list[Book]:
        return self._by_price(ascending)

    def paginate(self, page: int = 1, page_size: int = 5) -> list[Book]:
        skip, limit = self.page_bounds(page, page_size)
        return self._by_price(ascending=True)[skip : skip + limit]

    def average_price_by_genre(self) -> list[GenrePriceStats]:
        prices: dict[str, list[float]] = defaultdict(list)
        for book in self._books:
            prices[book.genre].append(book.price)
        stats = [
            GenrePriceStats(genre=genre, average_price=sum(values) / len(values), count=len(values))
            for genre, values in prices.items()
        ]
        return sorted(stats, key=lambda row: (-row.average_price, row.genre))

    def author_with_most_books(self) -> AuthorBookCount | None:
        counts = Counter(book.author for book in self._books)
        if not counts:
            return None
        author, total = counts.most_common(1)[0]
        return AuthorBookCount(author=author, total_books=total)

    def group_by_decade(self) -> list[DecadeCount]:
        counts = Counter(decade_label(book.published_year) for book in self._books)
        return [DecadeCount(decade=label, count=counts[label]) for label in sorted(counts)]

    def create_title_index(self) -> str:
        return f"{TITLE_INDEX} (simulated)"

    def create_author_year_index(self) -> str:
        return f"{AUTHOR_YEAR_INDEX} (simulated)"

    def explain_title_query(self, title: str = "1984") -> dict[str, Any]:
        return {
            "ok": 1,
            "query": {"title": title},
            "note": "Simulated explain plan; a live store reports executionStats here.",
        }
