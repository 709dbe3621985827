"""Tests for money helpers."""

import pytest

from plantshop.models.order import OrderLine
from plantshop.services.pricing import (
    compute_subtotal,
    compute_tax,
    compute_total,
    format_price,
    round_money,
)


def line(price: float, quantity: int) -> OrderLine:
    return OrderLine(product_id="x", name="x", price=price, quantity=quantity)


class TestTotals:
    def test_reference_cart(self):
        lines = [line(10.00, 2), line(5.50, 1)]
        subtotal = compute_subtotal(lines)

        assert round_money(subtotal) == 25.50
        assert round_money(compute_tax(subtotal)) == 5.61
        assert round_money(compute_total(subtotal)) == 31.11

    def test_empty_cart(self):
        assert compute_subtotal([]) == 0.0
        assert compute_total(0.0) == 0.0

    def test_rounds_once_at_the_end(self):
        lines = [line(0.333, 1), line(0.333, 1), line(0.333, 1)]

        summed_then_rounded = round_money(compute_subtotal(lines))
        rounded_then_summed = sum(round_money(l.price * l.quantity) for l in lines)

        assert summed_then_rounded == 1.00
        assert rounded_then_summed == pytest.approx(0.99)

    def test_custom_rate(self):
        assert compute_tax(100.0, rate=0.10) == pytest.approx(10.0)
        assert compute_total(100.0, rate=0.10) == pytest.approx(110.0)


class TestFormatPrice:
    def test_two_decimals(self):
        assert format_price(5) == "€ 5.00"
        assert format_price(25.5 * 0.22) == "€ 5.61"
