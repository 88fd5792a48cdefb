import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .models import Book

logger = logging.getLogger("bookstore.dataset")


class DatasetError(ValueError):
    pass


def load_books(path: Path | str) -> list[Book]:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetError(f"Cannot read book file {path}: {exc}") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Book file {path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise DatasetError(f"Book file {path} must contain a JSON array of books")

    books: list[Book] = []
    for index, item in enumerate(payload):
        try:
            books.append(Book.model_validate(item))
        except ValidationError as exc:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in exc.errors())
            raise DatasetError(f"Book #{index} in {path} is invalid ({fields})") from exc

    logger.info("dataset.loaded", extra={"path": str(path), "count": len(books)})
    return books
