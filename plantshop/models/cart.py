# plantshop/models/cart.py
from sqlmodel import SQLModel, Field


class CartLine(SQLModel):
    """
    One row of the shared cart collection (/carrello).
    One row per product id; the store does not enforce it, CartService does.
    """

    id: str = Field(description="Store-assigned id")

    product_id: str = Field(description="Catalog id (prodottoId)")

    name: str | None = Field(
        default=None,
        description="Name written when the line was created",
    )

    # Written on creation only; the catalog price is what gets charged.
    price: float | None = Field(
        default=None,
        description="Price written when the line was created",
    )

    quantity: int = Field(
        ge=1,
        description="Must be >= 1",
    )
