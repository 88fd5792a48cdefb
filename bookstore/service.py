import math
from abc import ABC, abstractmethod
from typing import Any

from .models import (
    AuthorBookCount,
    Book,
    BookSummary,
    DecadeCount,
    DeleteOutcome,
    GenrePriceStats,
    UpdateOutcome,
)

TITLE_INDEX = "idx_title_asc"
AUTHOR_YEAR_INDEX = "idx_author_year"
SUMMARY_FIELDS = ("title", "author", "price")


class BookQueries(ABC):
    """The fixed catalog of book operations.

    Implementations must return the same results for the same record set,
    apart from the index and explain diagnostics. Listings ordered by price
    break ties by title so that pages are stable across implementations.
    """

    mode: str

    @abstractmethod
    def find_by_genre(self, genre: str) -> list[Book]: ...

    @abstractmethod
    def find_after_year(self, year: int) -> list[Book]: ...

    @abstractmethod
    def find_by_author(self, author: str) -> list[Book]: ...

    @abstractmethod
    def update_price(self, title: str, new_price: float) -> UpdateOutcome: ...

    @abstractmethod
    def delete_by_title(self, title: str) -> DeleteOutcome: ...

    @abstractmethod
    def in_stock_after_2010(self) -> list[Book]: ...

    @abstractmethod
    def projection(self) -> list[BookSummary]: ...

    @abstractmethod
    def sort_by_price(self, ascending: bool = True) -> list[Book]: ...

    @abstractmethod
    def paginate(self, page: int = 1, page_size: int = 5) -> list[Book]: ...

    @abstractmethod
    def average_price_by_genre(self) -> list[GenrePriceStats]: ...

    @abstractmethod
    def author_with_most_books(self) -> AuthorBookCount | None: ...

    @abstractmethod
    def group_by_decade(self) -> list[DecadeCount]: ...

    @abstractmethod
    def create_title_index(self) -> str: ...

    @abstractmethod
    def create_author_year_index(self) -> str: ...

    @abstractmethod
    def explain_title_query(self, title: str = "1984") -> dict[str, Any]: ...

    @staticmethod
    def checked_price(new_price: float) -> float:
        if not math.isfinite(new_price) or new_price < 0:
            raise ValueError(f"price must be a non-negative number, got {new_price!r}")
        return new_price

    @staticmethod
    def page_bounds(page: int, page_size: int) -> tuple[int, int]:
        if page < 1:
            raise ValueError("page must be >= 1")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        return (page - 1) * page_size, page_size
