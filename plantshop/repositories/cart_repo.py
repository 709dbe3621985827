# plantshop/repositories/cart_repo.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import ValidationError

from plantshop.core.config import get_settings
from plantshop.core.resource_client import ResourceClient, ResourceStoreError
from plantshop.models.cart import CartLine

settings = get_settings()
logger = logging.getLogger(__name__)


def cart_line_from_row(row: dict[str, Any]) -> CartLine:
    return CartLine(
        id=str(row["id"]),
        product_id=str(row["prodottoId"]),
        name=row.get("nome"),
        price=row.get("prezzo"),
        quantity=row["quantita"],
    )


class CartRepository:
    """
    Data access layer for the shared cart collection.

    Wire format: {id, prodottoId, nome, prezzo, quantita}

    Rows that do not map to a CartLine (zero quantity, missing product id)
    are logged and left out of list_all(); list_ids() still sees them.
    """

    def __init__(self, path: str = settings.CART_PATH):
        self.path = path

    def list_all(self, client: ResourceClient) -> list[CartLine]:
        rows = client.get(self.path) or []
        lines: list[CartLine] = []
        for row in rows:
            try:
                lines.append(cart_line_from_row(row))
            except (KeyError, ValidationError) as exc:
                logger.warning("Skipping malformed cart row %r: %s", row.get("id"), exc)
        return lines

    def list_ids(self, client: ResourceClient) -> list[str]:
        rows = client.get(self.path) or []
        return [str(row["id"]) for row in rows if "id" in row]

    def get_item(self, client: ResourceClient, product_id: str) -> CartLine | None:
        for line in self.list_all(client):
            if line.product_id == product_id:
                return line
        return None

    # CRUD
    def create(
        self,
        client: ResourceClient,
        *,
        product_id: str,
        name: str,
        price: float,
        quantity: int = 1,
    ) -> CartLine:
        row = client.post(
            self.path,
            {
                "prodottoId": product_id,
                "nome": name,
                "prezzo": price,
                "quantita": quantity,
            },
        )
        return cart_line_from_row(row)

    def update_quantity(
        self, client: ResourceClient, line_id: str, quantity: int
    ) -> CartLine:
        row = client.patch(f"{self.path}/{line_id}", {"quantita": quantity})
        return cart_line_from_row(row)

    def delete(self, client: ResourceClient, line_id: str) -> None:
        client.delete(f"{self.path}/{line_id}")

    def delete_many(
        self,
        client: ResourceClient,
        line_ids: list[str],
        max_workers: int = settings.CLEAR_CART_WORKERS,
    ) -> list[str]:
        """
        Issue one DELETE per line in parallel and wait for all of them.

        Every delete is attempted; there is no ordering and no rollback.

        Returns:
            Ids whose DELETE failed (empty on full success).
        """
        if not line_ids:
            return []

        failed: list[str] = []
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
            futures = {
                line_id: pool.submit(self.delete, client, line_id)
                for line_id in line_ids
            }
            for line_id, future in futures.items():
                try:
                    future.result()
                except ResourceStoreError as exc:
                    logger.warning("Could not delete cart line %s: %s", line_id, exc)
                    failed.append(line_id)
        return failed
