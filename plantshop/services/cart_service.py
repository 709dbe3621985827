# plantshop/services/cart_service.py
import logging

from fastapi import HTTPException, status

from plantshop.core.resource_client import ResourceClient, ResourceStoreError
from plantshop.models.cart import CartLine
from plantshop.models.product import Product
from plantshop.repositories.cart_repo import CartRepository
from plantshop.repositories.product_repo import ProductRepository
from plantshop.schemas.cart import CartLineRead, CartSummary
from plantshop.services.pricing import (
    compute_subtotal,
    compute_tax,
    compute_total,
    round_money,
)

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - keep one cart line per product id
      - quantities below 1 remove the line
      - price every line with the current catalog price
      - re-read the store after each mutation (no local cache)
      - empty the cart with parallel deletes

    Store failures are logged and surfaced with a generic message; nothing
    is retried and a failed mutation is not reconciled.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    @staticmethod
    def _mutation_failed(action: str) -> HTTPException:
        logger.exception("Cart %s failed", action)
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not {action} the cart. Please try again.",
        )

    def _build_summary(
        self,
        lines: list[CartLine],
        catalog: dict[str, Product],
    ) -> CartSummary:
        """
        Join cart lines with the catalog and compute totals.

        Lines whose product has disappeared are dropped.
        """
        reads: list[CartLineRead] = []
        for line in lines:
            product = catalog.get(line.product_id)
            if product is None:
                logger.warning(
                    "Cart line %s references missing product %s, skipped",
                    line.id,
                    line.product_id,
                )
                continue
            reads.append(
                CartLineRead(
                    id=line.id,
                    product_id=line.product_id,
                    name=product.name,
                    image=product.image,
                    price=product.price,
                    quantity=line.quantity,
                    line_total=round_money(product.price * line.quantity),
                )
            )

        subtotal = compute_subtotal(reads)

        return CartSummary(
            lines=reads,
            total_quantity=sum(r.quantity for r in reads),
            subtotal=round_money(subtotal),
            tax_amount=round_money(compute_tax(subtotal)),
            total=round_money(compute_total(subtotal)),
            can_checkout=bool(reads),
        )

    # ---- public operations ----

    def list_cart(self, client: ResourceClient) -> list[CartLine]:
        """
        Raw cart lines as stored.
        """
        try:
            return self.cart_repo.list_all(client)
        except ResourceStoreError:
            logger.exception("Cart listing failed")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Cart unavailable",
            )

    def get_cart_summary(self, client: ResourceClient) -> CartSummary:
        """
        Return full cart summary:
          - lines priced from the current catalog
          - total_quantity, subtotal, tax_amount, total
          - can_checkout (False for an empty cart)
        """
        lines = self.list_cart(client)
        if not lines:
            return self._build_summary([], {})

        try:
            catalog = {p.id: p for p in self.product_repo.list(client)}
        except ResourceStoreError:
            logger.exception("Catalog lookup for cart failed")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Cart unavailable",
            )

        return self._build_summary(lines, catalog)

    def add_to_cart(
        self,
        client: ResourceClient,
        product_id: str,
        price: float,
        name: str,
    ) -> CartSummary:
        """
        Add one unit of a product.

        Rules:
          - existing line for product_id => quantity + 1
          - otherwise a new line with quantity 1
        """
        try:
            existing = self.cart_repo.get_item(client, product_id)
            if existing:
                self.cart_repo.update_quantity(
                    client, existing.id, existing.quantity + 1
                )
            else:
                self.cart_repo.create(
                    client,
                    product_id=product_id,
                    name=name,
                    price=price,
                    quantity=1,
                )
        except ResourceStoreError:
            raise self._mutation_failed("update")

        return self.get_cart_summary(client)

    def update_quantity(
        self,
        client: ResourceClient,
        cart_line_id: str,
        new_quantity: int,
    ) -> CartSummary:
        """
        Set the quantity of a cart line; anything below 1 removes it.
        """
        if new_quantity < 1:
            return self.remove(client, cart_line_id)

        try:
            self.cart_repo.update_quantity(client, cart_line_id, new_quantity)
        except ResourceStoreError as exc:
            if exc.status_code == 404:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Item not in cart",
                )
            raise self._mutation_failed("update")

        return self.get_cart_summary(client)

    def remove(self, client: ResourceClient, cart_line_id: str) -> CartSummary:
        """
        Remove a line from the cart and return updated summary.
        """
        try:
            self.cart_repo.delete(client, cart_line_id)
        except ResourceStoreError as exc:
            if exc.status_code == 404:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Item not found in cart",
                )
            raise self._mutation_failed("update")

        return self.get_cart_summary(client)

    def clear_cart(self, client: ResourceClient) -> None:
        """
        Delete every cart line in parallel.

        All deletes are attempted. If any of them failed the cart is left
        partially emptied and ResourceStoreError is raised.
        """
        failed = self.cart_repo.delete_many(client, self.cart_repo.list_ids(client))
        if failed:
            raise ResourceStoreError(
                "DELETE", f"{self.cart_repo.path} ({len(failed)} lines)"
            )
