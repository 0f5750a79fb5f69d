"""Domain tests for Product stock decrements."""

from pickup.inventory.product import Product


def _product(stock):
    return Product(store_id="store-a", name="Onigiri set", stock=stock)


class TestDecrementStock:
    def test_decrements(self):
        product = _product(5)
        assert product.decrement_stock(2) == 2
        assert product.stock == 3

    def test_floors_at_zero(self):
        product = _product(1)
        assert product.decrement_stock(2) == 1
        assert product.stock == 0

    def test_from_zero(self):
        product = _product(0)
        assert product.decrement_stock(3) == 0
        assert product.stock == 0

    def test_never_negative_over_any_sequence(self):
        product = _product(7)
        for quantity in [3, 1, 5, 2, 8, 1]:
            product.decrement_stock(quantity)
            assert product.stock >= 0
        assert product.stock == 0

    def test_negative_quantity_removes_nothing(self):
        product = _product(4)
        assert product.decrement_stock(-2) == 0
        assert product.stock == 4
