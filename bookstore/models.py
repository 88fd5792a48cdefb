from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    # stored documents carry a driver-assigned _id that is not part of the record
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    published_year: int
    price: float = Field(ge=0)
    in_stock: bool


class BookSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    author: str
    price: float


class GenrePriceStats(BaseModel):
    genre: str
    average_price: float
    count: int


class AuthorBookCount(BaseModel):
    author: str
    total_books: int


class DecadeCount(BaseModel):
    decade: str
    count: int


class UpdateOutcome(BaseModel):
    matched_count: int
    modified_count: int


class DeleteOutcome(BaseModel):
    deleted_count: int


class SeedReport(BaseModel):
    inserted_count: int
    books: list[Book]


def decade_label(published_year: int) -> str:
    return f"{published_year // 10 * 10}s"
