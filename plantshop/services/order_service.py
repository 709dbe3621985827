# plantshop/services/order_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from plantshop.core.resource_client import ResourceClient, ResourceStoreError
from plantshop.models.cart import CartLine
from plantshop.models.order import CustomerInfo, Order, OrderLine, OrderStatus
from plantshop.repositories.handoff_repo import HandoffRepository
from plantshop.repositories.order_repo import OrderRepository
from plantshop.repositories.product_repo import ProductRepository
from plantshop.schemas.checkout import CheckoutForm
from plantshop.schemas.order import OrderLineRead, OrderRead
from plantshop.services.cart_service import CartService
from plantshop.services.checkout_validator import mask_card_number
from plantshop.services.pricing import (
    compute_subtotal,
    compute_tax,
    compute_total,
    round_money,
)

logger = logging.getLogger(__name__)

# Handoff keys read by the confirmation view
CUSTOMER_KEY = "datiCliente"
ORDER_KEY = "ultimoOrdine"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed"},
    "confirmed": set(),
}


def customer_from_form(form: CheckoutForm) -> CustomerInfo:
    """
    Keep only what the chosen delivery/payment mode needs; never the full
    card number.
    """
    customer = CustomerInfo(
        name=form.name,
        surname=form.surname,
        email=form.email,
        phone=form.phone,
        delivery_mode=form.delivery_mode,
        payment_method=form.payment_method,
    )
    if form.delivery_mode == "shipping":
        customer.street = form.street
        customer.street_number = form.street_number
        customer.postal_code = form.postal_code
        customer.city = form.city
        customer.province = form.province
    if form.payment_method == "credit_card" and form.card_number:
        customer.card_number_masked = mask_card_number(form.card_number)
    return customer


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Turn the cart + checkout form into an order record
      - Resolve every line against the current catalog price
      - Confirm non-card orders immediately, park card orders as pending
      - Empty the cart once the order is confirmed
      - Leave the one-shot handoff for the confirmation view

    There is no compensation: a failure after the POST leaves the order
    stored and the cart possibly half emptied.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        cart_service: CartService,
        handoff_repo: HandoffRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.cart_service = cart_service
        self.handoff_repo = handoff_repo

    # -------- Checkout --------

    def _resolve_lines(
        self,
        client: ResourceClient,
        cart_lines: list[CartLine],
    ) -> list[OrderLine]:
        """
        Price every cart line from the catalog as it is now.

        Lines whose product no longer exists are skipped.
        """
        catalog = {p.id: p for p in self.product_repo.list(client)}

        lines: list[OrderLine] = []
        for cl in cart_lines:
            product = catalog.get(cl.product_id)
            if product is None:
                logger.warning(
                    "Product %s vanished from catalog, line %s dropped from order",
                    cl.product_id,
                    cl.id,
                )
                continue
            lines.append(
                OrderLine(
                    product_id=cl.product_id,
                    name=product.name,
                    image=product.image,
                    price=round_money(product.price),
                    quantity=cl.quantity,
                )
            )
        return lines

    def place_order(
        self,
        client: ResourceClient,
        form: CheckoutForm,
        cart_lines: list[CartLine],
    ) -> Order:
        """
        Resolve the cart against the catalog and POST the order.

        Non-card orders are stored as confirmed, card orders as pending.
        """
        try:
            lines = self._resolve_lines(client, cart_lines)
            if not lines:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cart is empty",
                )

            order = Order(
                customer=customer_from_form(form),
                lines=lines,
                status="pending" if form.payment_method == "credit_card" else "confirmed",
                placed_at=datetime.now(timezone.utc).isoformat(),
            )
            order = self.order_repo.create_order(client, order)
        except ResourceStoreError:
            logger.exception("Checkout failed while creating the order")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Checkout failed. Please try again.",
            )

        logger.info("Order %s created (%s)", order.id, order.status)
        return order

    def finalize_order(
        self,
        client: ResourceClient,
        session: Session,
        order: Order,
    ) -> None:
        """
        Empty the cart and leave the handoff for a confirmed order.
        """
        try:
            self.cart_service.clear_cart(client)
        except ResourceStoreError:
            logger.exception("Checkout failed while emptying the cart")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Checkout failed. Please try again.",
            )
        self.write_handoff(session, order, order.customer)

    def process_order(
        self,
        client: ResourceClient,
        session: Session,
        form: CheckoutForm,
        cart_lines: list[CartLine],
    ) -> Order | None:
        """
        Convert the cart into an order.

        Steps:
          1. Re-fetch the catalog and resolve each line.
          2. Build and POST the order (confirmed, or pending for cards).
          3. Card payment: return None, complete_card_payment finishes later.
          4. Empty the cart with parallel deletes.
          5. Write the handoff for the confirmation view.

        The checkout endpoint calls place_order and finalize_order itself,
        because a pending card order still needs its id for the payment URL.
        """
        order = self.place_order(client, form, cart_lines)
        if order.status == "pending":
            return None

        self.finalize_order(client, session, order)
        return order

    # -------- Card payment step --------

    def complete_card_payment(
        self,
        client: ResourceClient,
        session: Session,
        order_id: str,
    ) -> Order:
        """
        Finish a card order after the (simulated) payment:
          pending -> confirmed, empty the cart, write the handoff.

        Confirming an already confirmed order is a no-op. That includes
        card orders stored as "confermato" by the old front-end, which wrote
        that status both before and after payment: the record cannot tell
        which, so the cart is left alone and no handoff is written.
        """
        try:
            order = self.order_repo.get_by_id(client, order_id)
        except ResourceStoreError:
            logger.exception("Could not load order %s", order_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment processing failed",
            )
        if order is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if order.status == "confirmed":
            return order

        self._check_transition(order.status, "confirmed")

        try:
            updated = self.order_repo.update_status(client, order_id, "confirmed")
        except ResourceStoreError:
            logger.exception("Payment completion failed for order %s", order_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment processing failed",
            )

        logger.info("Order %s confirmed after payment", order_id)
        self.finalize_order(client, session, updated)
        return updated

    @staticmethod
    def _check_transition(current: str, new: OrderStatus) -> None:
        if current not in ALLOWED_TRANSITIONS or new not in ALLOWED_TRANSITIONS[current]:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Invalid status transition: {current} -> {new}",
            )

    # -------- Handoff --------

    def write_handoff(
        self,
        session: Session,
        order: Order,
        customer: CustomerInfo,
    ) -> None:
        """
        Leave customer data and an order snapshot for the confirmation view.
        Totals are not written; the reader recomputes them.
        """
        self.handoff_repo.put(
            session, order.id, CUSTOMER_KEY, customer.model_dump()
        )
        self.handoff_repo.put(
            session,
            order.id,
            ORDER_KEY,
            {
                "order_id": order.id,
                "placed_at": order.placed_at,
                "lines": [line.model_dump() for line in order.lines],
            },
        )

    # -------- Helper DTO builder --------

    @staticmethod
    def build_order_read(order: Order) -> OrderRead:
        """
        Compose OrderRead from the stored order, including subtotal + tax.
        """
        subtotal = compute_subtotal(order.lines)
        return OrderRead(
            id=order.id,
            status=order.status,
            placed_at=order.placed_at,
            customer=order.customer,
            lines=[
                OrderLineRead(
                    product_id=line.product_id,
                    name=line.name,
                    image=line.image,
                    price=line.price,
                    quantity=line.quantity,
                    line_total=round_money(line.price * line.quantity),
                )
                for line in order.lines
            ],
            subtotal=round_money(subtotal),
            tax_amount=round_money(compute_tax(subtotal)),
            total=round_money(compute_total(subtotal)),
        )
