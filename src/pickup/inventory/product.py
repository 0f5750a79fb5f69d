"""Product aggregate: a vendor's item and its remaining stock."""

from protean.fields import Identifier, Integer, String

from pickup.domain import pickup


@pickup.aggregate
class Product:
    store_id = Identifier(required=True)
    name = String(max_length=255)
    price = Integer(default=0, min_value=0)
    stock = Integer(default=0, min_value=0)

    def decrement_stock(self, quantity: int) -> int:
        """Subtract ``quantity``, flooring at zero. Returns the amount actually removed."""
        removed = min(self.stock or 0, max(quantity, 0))
        self.stock = (self.stock or 0) - removed
        return removed
