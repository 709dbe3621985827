# plantshop/services/checkout_validator.py
"""
Checkout form view-model.

The UI renders the field flags kept here; nothing in this module raises for
bad user input. Which fields are required depends on the two selectors:

  delivery_mode = shipping     -> address fields required
  payment_method = credit_card -> card fields required

Switching a selector away clears the dependent fields' previous marks.
"""
import re
from dataclasses import dataclass

from plantshop.models.order import DeliveryMode, PaymentMethod
from plantshop.schemas.checkout import (
    CheckoutForm,
    CheckoutValidationRead,
    FieldStateRead,
)

BASE_FIELDS = ("name", "surname", "email", "phone")
ADDRESS_FIELDS = ("street", "street_number", "postal_code", "city", "province")
CARD_FIELDS = ("card_number", "card_expiry", "card_cvv")

REQUIRED_MESSAGE = "This field is required"

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/[0-9]{2}$")
CVV_RE = re.compile(r"^[0-9]{3,4}$")
CARD_DIGITS_RE = re.compile(r"[0-9]+")


def _digits_only(number: str) -> str:
    return re.sub(r"[\s-]", "", number)


def verify_luhn(number: str) -> bool:
    """
    Luhn checksum: from the right, double every second digit (minus 9 when
    above 9) and sum everything; valid iff the sum is a multiple of 10.

    Spaces and hyphens are ignored; an empty string or any character other
    than the ASCII digits 0-9 makes the number invalid.
    """
    digits = _digits_only(number)
    if not CARD_DIGITS_RE.fullmatch(digits):
        return False

    total = 0
    for i, ch in enumerate(reversed(digits)):
        digit = int(ch)
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def format_card_expiry(raw: str) -> str:
    """
    Normalise typed expiry input to MM/YY ("1225" -> "12/25").
    """
    digits = re.sub(r"[^0-9]", "", raw)
    if len(digits) >= 2:
        return digits[:2] + "/" + digits[2:4]
    return digits


def mask_card_number(number: str) -> str:
    return "****-****-****-" + _digits_only(number)[-4:]


@dataclass
class FieldState:
    required: bool = False
    valid: bool | None = None
    message: str | None = None

    def mark(self, valid: bool, message: str | None = None) -> bool:
        self.valid = valid
        self.message = None if valid else message
        return valid

    def clear(self) -> None:
        self.valid = None
        self.message = None


class CheckoutFormState:
    """
    Required/valid flags for every checkout field.
    """

    def __init__(self) -> None:
        self.fields: dict[str, FieldState] = {
            name: FieldState(required=True) for name in BASE_FIELDS
        }
        for name in ADDRESS_FIELDS + CARD_FIELDS:
            self.fields[name] = FieldState()
        self.delivery_mode: DeliveryMode = "pickup"
        self.payment_method: PaymentMethod | None = None

    # ---- selectors ----

    def _set_required(self, names: tuple[str, ...], required: bool) -> None:
        for name in names:
            state = self.fields[name]
            state.required = required
            if not required:
                state.clear()

    def set_delivery_mode(self, mode: DeliveryMode) -> None:
        self.delivery_mode = mode
        self._set_required(ADDRESS_FIELDS, mode == "shipping")

    def set_payment_method(self, method: PaymentMethod) -> None:
        self.payment_method = method
        self._set_required(CARD_FIELDS, method == "credit_card")

    # ---- validation ----

    def _check(self, name: str, value: str) -> tuple[bool, str | None]:
        if not value:
            if self.fields[name].required:
                return False, REQUIRED_MESSAGE
            return True, None

        if name == "email" and not EMAIL_RE.match(value):
            return False, "Invalid email address"
        if name == "card_number" and not verify_luhn(value):
            return False, "Invalid card number"
        if name == "card_expiry" and not EXPIRY_RE.match(value):
            return False, "Expiry must be MM/YY"
        if name == "card_cvv" and not CVV_RE.match(value):
            return False, "CVV must be 3 or 4 digits"
        return True, None

    def validate_field(self, name: str, value: str) -> bool:
        valid, message = self._check(name, value)
        return self.fields[name].mark(valid, message)

    def validate_form(self, form: CheckoutForm) -> bool:
        """
        Check every required field; no short-circuit so every error is marked.
        """
        all_valid = True
        for name, state in self.fields.items():
            if not state.required:
                continue
            if not self.validate_field(name, getattr(form, name)):
                all_valid = False
        return all_valid

    def to_read(self, valid: bool) -> CheckoutValidationRead:
        return CheckoutValidationRead(
            valid=valid,
            fields={
                name: FieldStateRead(
                    required=state.required,
                    valid=state.valid,
                    message=state.message,
                )
                for name, state in self.fields.items()
            },
        )


def validate_checkout(form: CheckoutForm) -> tuple[bool, CheckoutFormState]:
    """
    Build the form state from the submitted selectors and validate it.
    """
    state = CheckoutFormState()
    state.set_delivery_mode(form.delivery_mode)
    state.set_payment_method(form.payment_method)
    if form.card_expiry:
        form.card_expiry = format_card_expiry(form.card_expiry)
    return state.validate_form(form), state
