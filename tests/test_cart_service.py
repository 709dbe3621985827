"""Tests for CartService against the fake resource store."""

import pytest
from fastapi import HTTPException

from plantshop.core.resource_client import ResourceStoreError
from plantshop.repositories.cart_repo import CartRepository
from plantshop.repositories.product_repo import ProductRepository
from plantshop.services.cart_service import CartService


@pytest.fixture
def service():
    return CartService(CartRepository(), ProductRepository())


class TestAddToCart:
    def test_first_add_creates_line(self, service, client, store):
        summary = service.add_to_cart(client, "1", 10.0, "Monstera")

        assert len(summary.lines) == 1
        assert summary.lines[0].quantity == 1
        row = store.rows("carrello")[0]
        assert row["prodottoId"] == "1"
        assert row["nome"] == "Monstera"
        assert row["prezzo"] == 10.0

    def test_same_product_twice_is_one_line(self, service, client, store):
        service.add_to_cart(client, "1", 10.0, "Monstera")
        summary = service.add_to_cart(client, "1", 10.0, "Monstera")

        assert len(store.rows("carrello")) == 1
        assert summary.lines[0].quantity == 2
        assert ("PATCH", f"/carrello/{summary.lines[0].id}") in store.requests

    def test_store_failure(self, service, client, store):
        store.failing.add(("POST", "/carrello"))

        with pytest.raises(HTTPException) as exc:
            service.add_to_cart(client, "1", 10.0, "Monstera")
        assert exc.value.status_code == 502


class TestUpdateAndRemove:
    def test_update_quantity(self, service, client, store):
        store.seed_cart("a", "1", 1)

        summary = service.update_quantity(client, "a", 4)

        assert summary.lines[0].quantity == 4
        assert store.collections["carrello"]["a"]["quantita"] == 4

    def test_zero_quantity_removes_line(self, service, client, store):
        store.seed_cart("a", "1", 3)

        summary = service.update_quantity(client, "a", 0)

        assert summary.lines == []
        assert service.list_cart(client) == []
        assert ("DELETE", "/carrello/a") in store.requests

    def test_negative_quantity_removes_line(self, service, client, store):
        store.seed_cart("a", "1", 3)
        service.update_quantity(client, "a", -2)
        assert store.rows("carrello") == []

    def test_remove(self, service, client, store):
        store.seed_cart("a", "1", 1)
        store.seed_cart("b", "2", 1)

        summary = service.remove(client, "a")

        assert [l.id for l in summary.lines] == ["b"]

    def test_remove_unknown_line(self, service, client):
        with pytest.raises(HTTPException) as exc:
            service.remove(client, "nope")
        assert exc.value.status_code == 404


class TestSummary:
    def test_reference_totals(self, service, client, store):
        store.seed_cart("a", "1", 2)
        store.seed_cart("b", "2", 1)

        summary = service.get_cart_summary(client)

        assert summary.subtotal == 25.50
        assert summary.tax_amount == 5.61
        assert summary.total == 31.11
        assert summary.total_quantity == 3
        assert summary.can_checkout is True

    def test_catalog_price_wins_over_stored_price(self, service, client, store):
        store.seed_cart("a", "1", 1, price=99.0)

        summary = service.get_cart_summary(client)

        assert summary.lines[0].price == 10.0
        assert summary.subtotal == 10.0

    def test_line_for_missing_product_is_dropped(self, service, client, store):
        store.seed_cart("a", "1", 1)
        store.seed_cart("ghost", "404", 5)

        summary = service.get_cart_summary(client)

        assert [l.id for l in summary.lines] == ["a"]
        assert summary.total_quantity == 1

    def test_malformed_catalog_row_is_ignored(self, service, client, store):
        store.seed("plants", {"id": "3", "name": "Broken", "price": 0})
        store.seed_cart("a", "1", 1)

        summary = service.get_cart_summary(client)

        assert [l.id for l in summary.lines] == ["a"]

    def test_malformed_cart_row_is_ignored(self, service, client, store):
        store.seed_cart("a", "1", 1)
        store.seed_cart("bad", "2", 0)

        summary = service.get_cart_summary(client)

        assert [l.id for l in summary.lines] == ["a"]
        assert summary.subtotal == 10.0

    def test_empty_cart(self, service, client):
        summary = service.get_cart_summary(client)

        assert summary.lines == []
        assert summary.total == 0.0
        assert summary.can_checkout is False

    def test_store_down_means_cart_unavailable(self, service, client, store):
        store.down = True

        with pytest.raises(HTTPException) as exc:
            service.get_cart_summary(client)
        assert exc.value.status_code == 503
        assert exc.value.detail == "Cart unavailable"


class TestClearCart:
    def test_deletes_every_line(self, service, client, store):
        for i in range(5):
            store.seed_cart(f"l{i}", "1", 1)

        service.clear_cart(client)

        assert store.rows("carrello") == []
        deletes = [r for r in store.requests if r[0] == "DELETE"]
        assert len(deletes) == 5

    def test_partial_failure_still_attempts_all(self, service, client, store):
        store.seed_cart("a", "1", 1)
        store.seed_cart("b", "2", 1)
        store.seed_cart("c", "1", 1)
        store.failing.add(("DELETE", "/carrello/b"))

        with pytest.raises(ResourceStoreError):
            service.clear_cart(client)

        assert [r["id"] for r in store.rows("carrello")] == ["b"]

    def test_empty_cart_is_a_noop(self, service, client, store):
        service.clear_cart(client)
        assert not [r for r in store.requests if r[0] == "DELETE"]

    def test_malformed_rows_are_deleted_too(self, service, client, store):
        store.seed_cart("a", "1", 1)
        store.seed_cart("bad", "2", 0)

        service.clear_cart(client)

        assert store.rows("carrello") == []
