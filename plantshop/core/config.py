# plantshop/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a default so the service starts against a local
    json-server (`json-server --watch db.json --port 3000`).

    Resource store:
      - RESOURCE_STORE_URL      base URL of the REST store
      - RESOURCE_STORE_TIMEOUT  seconds; unset means no timeout
      - PRODUCTS_PATH / CART_PATH / ORDERS_PATH  collection paths

    Handoff channel:
      - HANDOFF_DATABASE_URL (SQLAlchemy URL, SQLite by default)
      - HANDOFF_TTL_HOURS    age after which unread entries are purged
    """

    PROJECT_NAME: str = "Plant Shop Storefront API"
    API_V1_STR: str = "/api/v1"

    # Resource store (json-server)
    RESOURCE_STORE_URL: str = "http://localhost:3000"
    RESOURCE_STORE_TIMEOUT: float | None = None
    PRODUCTS_PATH: str = "/plants"
    CART_PATH: str = "/carrello"
    ORDERS_PATH: str = "/ordini"

    # Italian VAT (22%)
    TAX_RATE: float = 0.22

    # Parallel DELETEs when emptying the cart
    CLEAR_CART_WORKERS: int = 8

    HANDOFF_DATABASE_URL: str = "sqlite:///./handoff.db"
    # Unread handoff entries older than this are purged on startup
    HANDOFF_TTL_HOURS: int = 24

    CORS_ORIGINS: list[str] = [
        "http://localhost:5500",
        "http://127.0.0.1:5500",
        "http://localhost:3001",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
