# plantshop/models/order.py
from typing import Literal

from sqlmodel import SQLModel, Field

DeliveryMode = Literal["pickup", "shipping"]
PaymentMethod = Literal["credit_card", "paypal", "other_pay"]
OrderStatus = Literal["pending", "confirmed"]


class CustomerInfo(SQLModel):
    """
    Customer data captured at checkout.

    Transient: only travels through the handoff channel between checkout
    and confirmation. Shipping fields are set only for delivery_mode="shipping",
    card_number_masked only for payment_method="credit_card".
    """

    name: str
    surname: str
    email: str
    phone: str

    delivery_mode: DeliveryMode
    street: str | None = None
    street_number: str | None = None
    postal_code: str | None = None
    city: str | None = None
    province: str | None = None

    payment_method: PaymentMethod
    card_number_masked: str | None = None


class OrderLine(SQLModel):
    """
    Line item inside an order, resolved from the catalog at order time.
    """

    product_id: str
    name: str
    image: str | None = None

    # Catalog price at order time (pre-tax)
    price: float

    quantity: int = Field(ge=1)


class Order(SQLModel):
    """
    Order record in the resource store (/ordini).

    Customer fields are flattened into the record; totals are never stored.

    pending   -> confirmed   (card payment completed)
    confirmed -> (terminal)
    """

    id: str | None = None

    customer: CustomerInfo

    lines: list[OrderLine]

    status: OrderStatus = "pending"

    # ISO-8601 timestamp (UTC)
    placed_at: str | None = None
