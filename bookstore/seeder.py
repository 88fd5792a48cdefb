import logging
from collections.abc import Sequence

from pymongo.collection import Collection

from .models import Book, SeedReport

logger = logging.getLogger("bookstore.seeder")


def seed_books(collection: Collection, books: Sequence[Book]) -> SeedReport:
    existing = collection.count_documents({})
    if existing > 0:
        logger.info(
            "seeder.drop",
            extra={"collection": collection.name, "count": existing},
        )
        collection.drop()

    inserted_count = 0
    if books:
        result = collection.insert_many([book.model_dump() for book in books])
        inserted_count = len(result.inserted_ids)
    logger.info("seeder.inserted", extra={"collection": collection.name, "count": inserted_count})

    stored = [Book.model_validate(doc) for doc in collection.find({})]
    return SeedReport(inserted_count=inserted_count, books=stored)


def format_listing(books: Sequence[Book]) -> list[str]:
    return [f'{index}. "{book.title}" by {book.author} ({book.published_year})' for index, book in enumerate(books, 1)]
