# plantshop/schemas/cart.py
from pydantic import field_validator
from sqlmodel import SQLModel


class CartLineCreate(SQLModel):
    """
    Payload for adding a product to the cart (one unit per call).
    """

    product_id: str

    @field_validator("product_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("product_id cannot be empty")
        return v


class CartLineUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    Values below 1 remove the line.
    """

    quantity: int


class CartLineRead(SQLModel):
    """
    Cart line joined with the current catalog entry, including line_total.
    """

    id: str
    product_id: str
    name: str
    image: str | None = None
    price: float
    quantity: int
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart view with totals (rounded for display only).
    """

    lines: list[CartLineRead]
    total_quantity: int
    subtotal: float
    tax_amount: float
    total: float
    can_checkout: bool
