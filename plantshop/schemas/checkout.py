# plantshop/schemas/checkout.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from plantshop.models.order import DeliveryMode, PaymentMethod


class CheckoutForm(SQLModel):
    """
    Raw checkout form as submitted by the UI.

    Text fields are never rejected here: field-level problems are reported
    by the checkout validator as flags, not as request errors. Only the two
    selectors are constrained to their option values.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    surname: str = ""
    email: str = ""
    phone: str = ""

    delivery_mode: DeliveryMode
    street: str = ""
    street_number: str = ""
    postal_code: str = ""
    city: str = ""
    province: str = ""

    payment_method: PaymentMethod
    card_number: str = ""
    card_expiry: str = ""
    card_cvv: str = ""

    @field_validator(
        "name",
        "surname",
        "email",
        "phone",
        "street",
        "street_number",
        "postal_code",
        "city",
        "province",
        "card_number",
        "card_expiry",
        "card_cvv",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        if v is None:
            return ""
        return str(v).strip()


class FieldStateRead(SQLModel):
    """
    Validation state of one form field.

    valid is None while the field has not been checked (or was cleared).
    """

    required: bool
    valid: bool | None = None
    message: str | None = None


class CheckoutValidationRead(SQLModel):
    valid: bool
    fields: dict[str, FieldStateRead]
