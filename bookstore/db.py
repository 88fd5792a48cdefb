import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .config import Settings, get_settings

logger = logging.getLogger("bookstore.db")

_client: Optional[MongoClient] = None


class StoreUnavailableError(RuntimeError):
    pass


def get_client(settings: Optional[Settings] = None) -> MongoClient:
    global _client
    if _client is None:
        settings = settings or get_settings()
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )
        try:
            _client.admin.command("ping")
        except PyMongoError as exc:
            _client.close()
            _client = None
            raise StoreUnavailableError(f"Cannot reach MongoDB at {settings.mongodb_uri}") from exc
        logger.info("store.connected", extra={"database": settings.database_name})
    return _client


def get_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.database_name][settings.collection_name]


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("store.closed")


@contextmanager
def store_session(settings: Optional[Settings] = None) -> Generator[Collection, None, None]:
    settings = settings or get_settings()
    client = get_client(settings)
    try:
        yield get_collection(client, settings)
    finally:
        close_client()
