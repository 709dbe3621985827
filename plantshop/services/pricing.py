# plantshop/services/pricing.py
"""
Money helpers shared by the cart, checkout and confirmation views.

Amounts are accumulated unrounded; round_money() / format_price() are only
applied when a value is handed to a client.
"""
from typing import Iterable, Protocol

from plantshop.core.config import get_settings

TAX_RATE = get_settings().TAX_RATE


class Priced(Protocol):
    price: float
    quantity: int


def compute_subtotal(lines: Iterable[Priced]) -> float:
    """Sum of price * quantity over all lines, not rounded."""
    subtotal = 0.0
    for line in lines:
        subtotal += line.price * line.quantity
    return subtotal


def compute_tax(subtotal: float, rate: float = TAX_RATE) -> float:
    return subtotal * rate


def compute_total(subtotal: float, rate: float = TAX_RATE) -> float:
    return subtotal + compute_tax(subtotal, rate)


def round_money(value: float) -> float:
    return round(value, 2)


def format_price(value: float) -> str:
    """
    >>> format_price(25.5 * 0.22)
    '€ 5.61'
    """
    return f"€ {value:.2f}"
