"""FulfillmentCoordinator: the synchronous checkout return.

The consumer's browser lands here after paying, possibly more than once.
Every step is safe to repeat: placing an existing order only records
``placed_at`` the first time, legacy orders are found again by checkout
session, and stock is decremented only by the call that claims
``inventory_applied_at``.
"""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from pickup.gateway.port import PaymentGateway
from pickup.inventory.ledger import InventoryLedger
from pickup.order.legacy_checkout import LegacyCheckoutAdapter
from pickup.order.order import Order, as_utc, utcnow
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


def order_summary(order: Order) -> dict:
    """Order as the consumer app stores it in its local history."""
    created_at = as_utc(order.created_at)
    return {
        "id": str(order.id),
        "shopId": str(order.store_id),
        "userEmail": order.customer_email,
        "amount": order.total,
        "status": "paid",
        "code6": order.code,
        "createdAt": int(created_at.timestamp() * 1000) if created_at else None,
        "lines": [
            {
                "shopId": str(order.store_id),
                "item": {
                    "id": str(item.product_id),
                    "name": item.name,
                    "price": item.unit_price,
                },
                "qty": item.quantity,
            }
            for item in order.items
        ],
    }


class FulfillmentCoordinator:
    def __init__(
        self,
        gateway: PaymentGateway,
        inventory: InventoryLedger | None = None,
        legacy: LegacyCheckoutAdapter | None = None,
    ) -> None:
        self.gateway = gateway
        self.inventory = inventory or InventoryLedger()
        self.legacy = legacy or LegacyCheckoutAdapter()

    def fulfill(self, session_id: str | None) -> dict:
        if not session_id:
            raise ValidationError({"session_id": ["MISSING_SESSION"]})

        session = self.gateway.retrieve_checkout_session(session_id)
        if not session.is_paid:
            logger.info("fulfill_not_paid", session_id=session_id, payment_status=session.payment_status)
            raise ValidationError({"payment_status": ["NOT_PAID"]})

        order_id = (session.metadata or {}).get("order_id")
        if order_id:
            order = self._place_existing(order_id)
        else:
            order = self.legacy.resolve(session)

        self._apply_inventory(order)
        return order_summary(order)

    def _place_existing(self, order_id: str) -> Order:
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        if order.mark_placed():
            repo.add(order)
            logger.info("order_placed", order_id=order_id)
        return order

    def _apply_inventory(self, order: Order) -> None:
        repo = current_domain.repository_for(Order)
        if not repo.set_if_unset(order.id, "inventory_applied_at", utcnow()):
            logger.debug("inventory_already_applied", order_id=str(order.id))
            return
        self.inventory.apply(order)
