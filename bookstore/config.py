import os
from pathlib import Path

import httpx
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(".env")

DEFAULT_BOOKS_FILE = Path(__file__).parent / "data" / "books.json"


def _as_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes", "on")


def _default_mongodb_uri() -> str:
    return os.getenv("MONGODB_URI") or "mongodb://localhost:27017"


def _default_offline() -> bool:
    # NO_DB=1 is the legacy way to request offline mode
    return _as_bool(os.getenv("NO_DB"))


class Settings(BaseSettings):
    mongodb_uri: str = Field(default_factory=_default_mongodb_uri)
    offline: bool = Field(default_factory=_default_offline)
    database_name: str = "plp_bookstore"
    collection_name: str = "books"
    books_file: Path = DEFAULT_BOOKS_FILE
    server_selection_timeout_ms: int = 5000
    page_size: int = Field(default=5, ge=1)
    log_level: str = "INFO"
    otel_enabled: bool = False
    strict_security: bool = False
    vault_addr: str | None = None
    vault_token: str | None = None
    vault_kv_mount: str = "kv"
    vault_secret_path: str = "bookstore/config"

    model_config = SettingsConfigDict(
        env_prefix="BOOKSTORE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def fetch_store_secret(*, addr: str, token: str, mount: str, path: str) -> dict[str, str]:
    url = f"{addr.rstrip('/')}/v1/{mount}/data/{path.lstrip('/')}"
    with httpx.Client(timeout=5.0) as client:
        resp = client.get(url, headers={"X-Vault-Token": token})
        resp.raise_for_status()
        body = resp.json()
    # KV v2 nests the payload one level deeper than v1
    return body.get("data", {}).get("data", {}) or {}


def get_settings() -> Settings:
    settings = Settings()
    if settings.vault_addr and settings.vault_token:
        secret = fetch_store_secret(
            addr=settings.vault_addr,
            token=settings.vault_token,
            mount=settings.vault_kv_mount,
            path=settings.vault_secret_path,
        )
        if secret.get("mongodb_uri"):
            settings.mongodb_uri = secret["mongodb_uri"]
    if settings.strict_security:
        insecure_markers = ("admin:admin@", "root:root@", "changeme", "change-me", "password@")
        if any(marker in settings.mongodb_uri for marker in insecure_markers):
            raise RuntimeError("Insecure MongoDB credentials detected")
        if settings.vault_token and settings.vault_token.lower() == "root":
            raise RuntimeError("Insecure Vault token detected")
    return settings
