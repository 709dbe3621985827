# plantshop/schemas/order.py
from sqlmodel import SQLModel

from plantshop.models.order import CustomerInfo, OrderStatus


class OrderLineRead(SQLModel):
    """
    Representation of a single order line item.
    """

    product_id: str
    name: str
    image: str | None = None
    price: float
    quantity: int
    line_total: float


class OrderRead(SQLModel):
    """
    Full order view including items and derived totals.
    """

    id: str
    status: OrderStatus
    placed_at: str | None = None
    customer: CustomerInfo
    lines: list[OrderLineRead]
    subtotal: float
    tax_amount: float
    total: float


class CheckoutResult(SQLModel):
    """
    Outcome of a checkout submission.

    - completed: order confirmed, cart emptied, confirmation_url is one-shot.
    - payment_required: card order stored as pending, continue at payment_url.
    """

    outcome: str
    order_id: str
    status: OrderStatus
    order: OrderRead | None = None
    confirmation_url: str | None = None
    payment_url: str | None = None
