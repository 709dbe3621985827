# plantshop/services/confirmation_service.py
from sqlmodel import Session

from plantshop.models.order import CustomerInfo, OrderLine
from plantshop.repositories.handoff_repo import HandoffRepository
from plantshop.schemas.confirmation import ConfirmationLineRead, ConfirmationRead
from plantshop.services.order_service import CUSTOMER_KEY, ORDER_KEY
from plantshop.services.pricing import (
    compute_subtotal,
    compute_tax,
    compute_total,
    format_price,
    round_money,
)

PAYMENT_LABELS = {
    "credit_card": "Credit card",
    "paypal": "PayPal",
    "other_pay": "StaysPay",
}


def payment_label(customer: CustomerInfo) -> str:
    label = PAYMENT_LABELS[customer.payment_method]
    if customer.payment_method == "credit_card" and customer.card_number_masked:
        return f"{label} ({customer.card_number_masked})"
    return label


def delivery_details(customer: CustomerInfo) -> tuple[str, list[str]]:
    if customer.delivery_mode == "shipping":
        return "Shipping address", [
            f"{customer.street} {customer.street_number}",
            f"{customer.postal_code} {customer.city} ({customer.province})",
        ]
    return "Store pickup", []


class ConfirmationService:
    """
    Renders the order confirmation from the one-shot handoff.

    Both handoff entries are consumed on the first call; a second call for
    the same order finds nothing.
    """

    def __init__(self, handoff_repo: HandoffRepository):
        self.handoff_repo = handoff_repo

    def build_confirmation(
        self,
        session: Session,
        order_id: str,
    ) -> ConfirmationRead | None:
        """
        Returns None when either entry is missing, never a partial summary.
        """
        customer_data = self.handoff_repo.take(session, order_id, CUSTOMER_KEY)
        order_data = self.handoff_repo.take(session, order_id, ORDER_KEY)
        if customer_data is None or order_data is None:
            return None

        customer = CustomerInfo.model_validate(customer_data)
        lines = [OrderLine.model_validate(item) for item in order_data["lines"]]

        subtotal = compute_subtotal(lines)
        tax = compute_tax(subtotal)
        total = compute_total(subtotal)
        delivery_label, delivery_address = delivery_details(customer)

        return ConfirmationRead(
            order_id=order_data["order_id"],
            placed_at=order_data.get("placed_at"),
            customer_name=customer.name,
            customer_surname=customer.surname,
            email=customer.email,
            phone=customer.phone,
            delivery_label=delivery_label,
            delivery_address=delivery_address,
            payment_label=payment_label(customer),
            lines=[
                ConfirmationLineRead(
                    name=line.name,
                    image=line.image,
                    price=line.price,
                    quantity=line.quantity,
                    line_total=round_money(line.price * line.quantity),
                    price_display=format_price(line.price),
                    line_total_display=format_price(line.price * line.quantity),
                )
                for line in lines
            ],
            subtotal=round_money(subtotal),
            tax_amount=round_money(tax),
            total=round_money(total),
            subtotal_display=format_price(subtotal),
            tax_display=format_price(tax),
            total_display=format_price(total),
            email_notice=(
                f"A confirmation email will be sent to {customer.email}"
            ),
        )
