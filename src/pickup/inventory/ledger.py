"""InventoryLedger: best-effort stock decrements after fulfillment.

Each product is read, decremented and written back on its own; there is
no atomicity across products and no guard against two fulfillments
decrementing the same product at once. Stock never goes below zero, so
under that race the total removed can be lower than what was ordered.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from pickup.inventory.product import Product
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    def decrement(self, product_id: str, store_id: str, quantity: int) -> int | None:
        """Decrement one product's stock. Returns the new stock, or None if skipped."""
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            logger.warning("inventory_product_missing", product_id=product_id, store_id=store_id)
            return None

        if str(product.store_id) != str(store_id):
            logger.warning(
                "inventory_store_mismatch",
                product_id=product_id,
                store_id=store_id,
                product_store_id=str(product.store_id),
            )
            return None

        removed = product.decrement_stock(quantity)
        repo.add(product)

        if removed < quantity:
            logger.warning(
                "inventory_stock_exhausted",
                product_id=product_id,
                requested=quantity,
                removed=removed,
            )
        return product.stock

    def apply(self, order) -> dict[str, int | None]:
        """Decrement stock for every product on the order, one product at a time."""
        results: dict[str, int | None] = {}
        for product_id, quantity in order.quantities_by_product().items():
            try:
                results[product_id] = self.decrement(product_id, str(order.store_id), quantity)
            except Exception:
                logger.exception("inventory_decrement_failed", order_id=str(order.id), product_id=product_id)
                results[product_id] = None
        logger.info("inventory_applied", order_id=str(order.id), products=len(results))
        return results
