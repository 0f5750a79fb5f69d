"""RedemptionHandshake: vendor asks, consumer confirms.

    PENDING(paid) ──request──▶ REDEEM_REQUESTED ──confirm──▶ FULFILLED

The vendor's request only stamps ``redeem_request_at``; nothing is pushed
to the consumer. The consumer app polls ``latest`` on an interval and when
it regains focus, and confirms with a deliberate gesture. Confirming is
idempotent: a repeat, or losing a race to a concurrent confirmation,
answers without error and leaves the first ``redeemed_at`` in place. A
conflict that outlasts the retry while the order is still unredeemed
raises ``ExpectedVersionError``.
"""

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from pickup.auth.port import Principal
from pickup.order.access import load_for_consumer, load_for_vendor
from pickup.order.order import Order
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

# A conflicting save reloads the order and tries again this many times in total
CONFIRM_ATTEMPTS = 2


class RedemptionHandshake:
    def request(self, order_id, vendor: Principal | None) -> Order:
        order = load_for_vendor(order_id, vendor)
        order.request_redemption()
        current_domain.repository_for(Order).add(order)

        logger.info("redemption_requested", order_id=str(order.id), store_id=vendor.store_id)
        return order

    def latest(self, consumer: Principal | None) -> dict | None:
        """The caller's newest open request as ``{id, code}``, or None."""
        if consumer is None:
            return None

        order = current_domain.repository_for(Order).latest_redemption_request(consumer.principal_id)
        if order is None:
            return None
        return {"id": str(order.id), "code": order.code}

    def confirm(self, order_id, consumer: Principal | None) -> bool:
        """Record the pickup. True if this call set ``redeemed_at``."""
        order = load_for_consumer(order_id, consumer)
        repo = current_domain.repository_for(Order)

        for attempt in range(1, CONFIRM_ATTEMPTS + 1):
            if not order.confirm_redemption():
                logger.info("redemption_already_confirmed", order_id=str(order.id))
                return False
            try:
                repo.add(order)
            except ExpectedVersionError:
                logger.info("redemption_confirm_conflict", order_id=str(order.id), attempt=attempt)
                order = repo.get(order.id)
                if attempt < CONFIRM_ATTEMPTS:
                    continue
                if order.redeemed_at is not None:
                    return False
                raise

            logger.info("order_redeemed", order_id=str(order.id), consumer_id=consumer.principal_id)
            return True
