import mongomock
import pytest

from bookstore.memory_store import InMemoryBookQueries
from bookstore.models import Book
from bookstore.mongo_store import MongoBookQueries
from bookstore.seeder import seed_books

SAMPLE_BOOKS = [
    {"title": "1984", "author": "George Orwell", "genre": "Dystopian", "published_year": 1949, "price": 10.99, "in_stock": True},
    {"title": "Animal Farm", "author": "George Orwell", "genre": "Political Satire", "published_year": 1945, "price": 8.5, "in_stock": False},
    {"title": "Homage to Catalonia", "author": "George Orwell", "genre": "Memoir", "published_year": 1938, "price": 11.25, "in_stock": True},
    {"title": "The Hobbit", "author": "J.R.R. Tolkien", "genre": "Fantasy", "published_year": 1937, "price": 14.99, "in_stock": True},
    {"title": "The Lord of the Rings", "author": "J.R.R. Tolkien", "genre": "Fantasy", "published_year": 1954, "price": 19.99, "in_stock": True},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "genre": "Fiction", "published_year": 1960, "price": 12.99, "in_stock": True},
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "genre": "Fiction", "published_year": 1925, "price": 9.99, "in_stock": True},
    {"title": "The Midnight Library", "author": "Matt Haig", "genre": "Fiction", "published_year": 2020, "price": 13.99, "in_stock": True},
    {"title": "Klara and the Sun", "author": "Kazuo Ishiguro", "genre": "Fiction", "published_year": 2021, "price": 15.49, "in_stock": False},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "genre": "Romance", "published_year": 1813, "price": 7.99, "in_stock": True},
    {"title": "Project Hail Mary", "author": "Andy Weir", "genre": "Science Fiction", "published_year": 2021, "price": 16.75, "in_stock": True},
]


@pytest.fixture()
def books() -> list[Book]:
    return [Book.model_validate(item) for item in SAMPLE_BOOKS]


@pytest.fixture()
def mongo_collection():
    client = mongomock.MongoClient()
    yield client["plp_bookstore"]["books"]
    client.close()


@pytest.fixture()
def online(mongo_collection, books) -> MongoBookQueries:
    seed_books(mongo_collection, books)
    return MongoBookQueries(mongo_collection)


@pytest.fixture()
def offline(books) -> InMemoryBookQueries:
    return InMemoryBookQueries(books)


@pytest.fixture(params=["online", "offline"])
def queries(request):
    return request.getfixturevalue(request.param)
