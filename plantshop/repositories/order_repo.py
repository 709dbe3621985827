# plantshop/repositories/order_repo.py
import logging
from typing import Any

from pydantic import ValidationError

from plantshop.core.config import get_settings
from plantshop.core.resource_client import (
    ResourceClient,
    ResourceNotFoundError,
    ResourceStoreError,
)
from plantshop.models.order import CustomerInfo, Order, OrderLine, OrderStatus

settings = get_settings()
logger = logging.getLogger(__name__)

# Codes stored by the shop front-end
DELIVERY_TO_WIRE = {"pickup": "ritiro", "shipping": "spedizione"}
PAYMENT_TO_WIRE = {"credit_card": "CC", "paypal": "PP", "other_pay": "SP"}

DELIVERY_FROM_WIRE = {v: k for k, v in DELIVERY_TO_WIRE.items()}
PAYMENT_FROM_WIRE = {v: k for k, v in PAYMENT_TO_WIRE.items()}

# Older records written by the front-end use the Italian status
STATUS_FROM_WIRE = {"confermato": "confirmed"}

SHIPPING_FIELDS = {
    "street": "via",
    "street_number": "civico",
    "postal_code": "cap",
    "city": "citta",
    "province": "provincia",
}


def order_to_row(order: Order) -> dict[str, Any]:
    """
    Flatten an Order into the store document (no id: the store assigns it).
    """
    customer = order.customer
    row: dict[str, Any] = {
        "nome": customer.name,
        "cognome": customer.surname,
        "email": customer.email,
        "telefono": customer.phone,
        "modalitaConsegna": DELIVERY_TO_WIRE[customer.delivery_mode],
    }

    if customer.delivery_mode == "shipping":
        for attr, wire in SHIPPING_FIELDS.items():
            row[wire] = getattr(customer, attr)

    row["metodoPagamento"] = PAYMENT_TO_WIRE[customer.payment_method]
    if customer.payment_method == "credit_card" and customer.card_number_masked:
        row["numeroCarta"] = customer.card_number_masked

    row["stato"] = order.status
    row["dataOrdine"] = order.placed_at
    row["prodotti"] = [
        {
            "prodottoId": line.product_id,
            "nome": line.name,
            "image": line.image,
            "prezzo": line.price,
            "quantita": line.quantity,
        }
        for line in order.lines
    ]
    return row


def order_from_row(row: dict[str, Any]) -> Order:
    delivery_mode = DELIVERY_FROM_WIRE.get(row.get("modalitaConsegna"), "pickup")
    payment_method = PAYMENT_FROM_WIRE.get(row.get("metodoPagamento"), "other_pay")

    customer = CustomerInfo(
        name=row.get("nome") or "",
        surname=row.get("cognome") or "",
        email=row.get("email") or "",
        phone=row.get("telefono") or "",
        delivery_mode=delivery_mode,
        payment_method=payment_method,
        card_number_masked=row.get("numeroCarta"),
    )
    if delivery_mode == "shipping":
        for attr, wire in SHIPPING_FIELDS.items():
            setattr(customer, attr, row.get(wire))

    lines = [
        OrderLine(
            product_id=str(item["prodottoId"]),
            name=item.get("nome") or "",
            image=item.get("image"),
            price=item.get("prezzo") or 0.0,
            quantity=item["quantita"],
        )
        for item in row.get("prodotti") or []
    ]

    return Order(
        id=str(row["id"]),
        customer=customer,
        lines=lines,
        status=STATUS_FROM_WIRE.get(row.get("stato"), row.get("stato") or "pending"),
        placed_at=row.get("dataOrdine"),
    )


class OrderRepository:
    """
    Data access layer for orders (/ordini).

    A stored order that does not map to an Order (unknown status, line
    without quantity) is reported as a store failure, not a missing record.
    """

    def __init__(self, path: str = settings.ORDERS_PATH):
        self.path = path

    def _to_order(self, method: str, path: str, row: dict[str, Any]) -> Order:
        try:
            return order_from_row(row)
        except (KeyError, ValidationError) as exc:
            logger.warning("Malformed order record at %s: %s", path, exc)
            raise ResourceStoreError(method, path) from exc

    def get_by_id(self, client: ResourceClient, order_id: str) -> Order | None:
        path = f"{self.path}/{order_id}"
        try:
            row = client.get(path)
        except ResourceNotFoundError:
            return None
        return self._to_order("GET", path, row)

    def create_order(self, client: ResourceClient, order: Order) -> Order:
        row = client.post(self.path, order_to_row(order))
        return self._to_order("POST", self.path, row)

    def update_status(
        self, client: ResourceClient, order_id: str, status: OrderStatus
    ) -> Order:
        path = f"{self.path}/{order_id}"
        row = client.patch(path, {"stato": status})
        return self._to_order("PATCH", path, row)
