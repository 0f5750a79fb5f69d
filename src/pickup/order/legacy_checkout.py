"""Order creation for checkout sessions that predate order pre-creation.

Older checkout sessions carry the cart in their metadata (``store_id``,
``items_json``, ``email``) instead of a reference to an existing order.
This adapter builds the order from that metadata on the checkout return.
It is keyed on the checkout session id, so reloading the return page
finds the order created on the first visit instead of creating another.
"""

import json

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from pickup.gateway.port import CheckoutSession
from pickup.order.order import Order
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

GUEST_EMAIL = "guest@example.com"


def parse_items(items_json: str) -> list[dict]:
    """Metadata items are ``[{"id", "name", "qty", "price"}, ...]``."""
    try:
        raw_items = json.loads(items_json)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"items_json": ["MISSING_METADATA"]}) from exc

    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError({"items_json": ["MISSING_METADATA"]})

    return [
        {
            "product_id": str(item["id"]),
            "name": item.get("name"),
            "quantity": int(item.get("qty") or 0),
            "unit_price": int(item.get("price") or 0),
        }
        for item in raw_items
    ]


class LegacyCheckoutAdapter:
    def resolve(self, session: CheckoutSession) -> Order:
        repo = current_domain.repository_for(Order)

        existing = repo.find_by_checkout_session(session.id)
        if existing is not None:
            logger.info("legacy_order_reused", session_id=session.id, order_id=str(existing.id))
            return existing

        metadata = session.metadata or {}
        store_id = metadata.get("store_id")
        items_json = metadata.get("items_json")
        if not store_id or not items_json:
            raise ValidationError({"metadata": ["MISSING_METADATA"]})

        order = Order.create(
            store_id=store_id,
            items=parse_items(items_json),
            consumer_id=metadata.get("line_user_id") or None,
            customer_email=metadata.get("email") or session.customer_email or GUEST_EMAIL,
            checkout_session_id=session.id,
            store_name=metadata.get("store_name"),
            pickup_time_from=metadata.get("pickup_time_from"),
            pickup_time_to=metadata.get("pickup_time_to"),
        )
        order.mark_placed()
        order.record_payment(payment_reference=session.payment_intent_id)
        repo.add(order)

        logger.info("legacy_order_created", session_id=session.id, order_id=str(order.id), store_id=store_id)
        return order
