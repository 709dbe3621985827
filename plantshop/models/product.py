# plantshop/models/product.py
from sqlmodel import SQLModel, Field


class Product(SQLModel):
    """
    Catalog entry owned by the resource store (/plants).

    Read-only for this service.
    """

    id: str = Field(description="Store-assigned id (normalised to str)")

    name: str = Field(description="Display name of the plant")

    price: float = Field(
        gt=0,
        description="Current unit price (EUR)",
    )

    image: str | None = Field(
        default=None,
        description="Relative image path",
    )

    description: str | None = None
