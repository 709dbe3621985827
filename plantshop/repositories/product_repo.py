# plantshop/repositories/product_repo.py
import logging
from typing import Any

from pydantic import ValidationError

from plantshop.core.config import get_settings
from plantshop.core.resource_client import ResourceClient, ResourceNotFoundError
from plantshop.models.product import Product

settings = get_settings()
logger = logging.getLogger(__name__)


def product_from_row(row: dict[str, Any]) -> Product:
    return Product(
        id=str(row["id"]),
        name=row.get("name") or "",
        price=row["price"],
        image=row.get("image"),
        description=row.get("description"),
    )


class ProductRepository:
    """
    Data access layer for the plant catalog.

    - Pure store operations (GET only, the catalog is read-only here).
    - No FastAPI, no business logic.
    - Malformed catalog rows are logged and left out.
    """

    def __init__(self, path: str = settings.PRODUCTS_PATH):
        self.path = path

    def list(self, client: ResourceClient) -> list[Product]:
        rows = client.get(self.path) or []
        products: list[Product] = []
        for row in rows:
            try:
                products.append(product_from_row(row))
            except (KeyError, ValidationError) as exc:
                logger.warning("Skipping malformed catalog row %r: %s", row.get("id"), exc)
        return products

    def get_by_id(self, client: ResourceClient, product_id: str) -> Product | None:
        try:
            row = client.get(f"{self.path}/{product_id}")
        except ResourceNotFoundError:
            return None
        try:
            return product_from_row(row)
        except (KeyError, ValidationError) as exc:
            logger.warning("Catalog row %s is malformed: %s", product_id, exc)
            return None
