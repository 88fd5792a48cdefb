import logging
from typing import Any

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

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


class MongoBookQueries(BookQueries):
    mode = "online"

    def __init__(self, collection: Collection):
        self.collection = collection

    def _find(self, query: dict[str, Any], sort: list[tuple[str, int]] | None = None) -> list[Book]:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        return [Book.model_validate(doc) for doc in cursor]

    def find_by_genre(self, genre: str) -> list[Book]:
        return self._find({"genre": genre})

    def find_after_year(self, year: int) -> list[Book]:
        return self._find({"published_year": {"$gt": year}})

    def find_by_author(self, author: str) -> list[Book]:
        return self._find({"author": author})

    def update_price(self, title: str, new_price: float) -> UpdateOutcome:
        new_price = self.checked_price(new_price)
        result = self.collection.update_one({"title": title}, {"$set": {"price": new_price}})
        logger.info(
            "queries.update_price",
            extra={"mode": self.mode, "title": title, "matched": result.matched_count},
        )
        return UpdateOutcome(matched_count=result.matched_count, modified_count=result.modified_count)

    def delete_by_title(self, title: str) -> DeleteOutcome:
        result = self.collection.delete_many({"title": title})
        logger.info(
            "queries.delete_by_title",
            extra={"mode": self.mode, "title": title, "deleted": result.deleted_count},
        )
        return DeleteOutcome(deleted_count=result.deleted_count)

    def in_stock_after_2010(self) -> list[Book]:
        return self._find({"in_stock": True, "published_year": {"$gt": 2010}})

    def projection(self) -> list[BookSummary]:
        fields: dict[str, int] = {name: 1 for name in SUMMARY_FIELDS}
        fields["_id"] = 0
        return [BookSummary.model_validate(doc) for doc in self.collection.find({}, fields)]

    def sort_by_price(self, ascending: bool = True) -> list[Book]:
        direction = ASCENDING if ascending else DESCENDING
        return self._find({}, sort=[("price", direction), ("title", direction)])

    def paginate(self, page: int = 1, page_size: int = 5) -> list[Book]:
        skip, limit = self.page_bounds(page, page_size)
        cursor = self.collection.find({}).sort([("price", ASCENDING), ("title", ASCENDING)]).skip(skip).limit(limit)
        return [Book.model_validate(doc) for doc in cursor]

    def average_price_by_genre(self) -> list[GenrePriceStats]:
        pipeline = [
            {"$group": {"_id": "$genre", "averagePrice": {"$avg": "$price"}, "count": {"$sum": 1}}},
            {"$sort": {"averagePrice": -1, "_id": 1}},
        ]
        return [
            GenrePriceStats(genre=row["_id"], average_price=row["averagePrice"], count=row["count"])
            for row in self.collection.aggregate(pipeline)
        ]

    def author_with_most_books(self) -> AuthorBookCount | None:
        pipeline = [
            {"$group": {"_id": "$author", "totalBooks": {"$sum": 1}}},
            {"$sort": {"totalBooks": -1}},
            {"$limit": 1},
        ]
        rows = list(self.collection.aggregate(pipeline))
        if not rows:
            return None
        return AuthorBookCount(author=rows[0]["_id"], total_books=rows[0]["totalBooks"])

    def group_by_decade(self) -> list[DecadeCount]:
        pipeline = [
            {
                "$group": {
                    "_id": {"$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]},
                    "count": {"$sum": 1},
                }
            },
        ]
        # the server hands back the decade as a double, so the label is formatted here
        rows = [
            DecadeCount(decade=decade_label(int(row["_id"])), count=row["count"])
            for row in self.collection.aggregate(pipeline)
        ]
        return sorted(rows, key=lambda row: row.decade)

    def create_title_index(self) -> str:
        return self.collection.create_index([("title", ASCENDING)], name=TITLE_INDEX)

    def create_author_year_index(self) -> str:
        return self.collection.create_index(
            [("author", ASCENDING), ("published_year", DESCENDING)], name=AUTHOR_YEAR_INDEX
        )

    def explain_title_query(self, title: str = "1984") -> dict[str, Any]:
        return self.collection.database.command(
            "explain",
            {"find": self.collection.name, "filter": {"title": title}},
            verbosity="executionStats",
        )
