# plantshop/schemas/confirmation.py
from sqlmodel import SQLModel


class ConfirmationLineRead(SQLModel):
    name: str
    image: str | None = None
    price: float
    quantity: int
    line_total: float
    price_display: str
    line_total_display: str


class ConfirmationRead(SQLModel):
    """
    Human-readable order confirmation.

    Totals are recomputed from the lines; nothing here is stored.
    """

    order_id: str
    placed_at: str | None = None

    customer_name: str
    customer_surname: str
    email: str
    phone: str

    delivery_label: str
    delivery_address: list[str]
    payment_label: str

    lines: list[ConfirmationLineRead]
    subtotal: float
    tax_amount: float
    total: float
    subtotal_display: str
    tax_display: str
    total_display: str

    email_notice: str
