"""Application tests for InventoryLedger."""

import threading

from protean import current_domain

from pickup.domain import pickup
from pickup.inventory.ledger import InventoryLedger
from pickup.inventory.product import Product


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


class TestDecrement:
    def test_decrements_stock(self, make_product):
        make_product("p1", stock=5)
        assert InventoryLedger().decrement("p1", "store-a", 2) == 3
        assert _stock("p1") == 3

    def test_floors_at_zero(self, make_product):
        make_product("p1", stock=1)
        assert InventoryLedger().decrement("p1", "store-a", 4) == 0
        assert _stock("p1") == 0

    def test_unknown_product_skipped(self):
        assert InventoryLedger().decrement("nope", "store-a", 1) is None

    def test_other_store_skipped(self, make_product):
        make_product("p1", store_id="store-b", stock=5)
        assert InventoryLedger().decrement("p1", "store-a", 1) is None
        assert _stock("p1") == 5


class TestApply:
    def test_products_are_independent(self, make_product, make_order):
        make_product("p1", stock=1)
        order = make_order(
            items=[
                {"product_id": "p1", "quantity": 3, "unit_price": 100},
                {"product_id": "ghost", "quantity": 1, "unit_price": 100},
            ]
        )

        results = InventoryLedger().apply(order)

        assert results == {"p1": 0, "ghost": None}


class TestConcurrentDecrements:
    def test_threads_never_leave_negative_stock(self, make_product):
        make_product("p1", stock=3)
        ledger = InventoryLedger()

        def _fulfil():
            with pickup.domain_context():
                ledger.decrement("p1", "store-a", 2)

        threads = [threading.Thread(target=_fulfil) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert _stock("p1") >= 0
