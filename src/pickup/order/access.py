"""Order lookups scoped to the calling principal."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from pickup.auth.port import Principal
from pickup.exceptions import AuthenticationError, AuthorizationError
from pickup.order.order import Order


def _require_order_id(order_id) -> str:
    if not order_id:
        raise ValidationError({"orderId": ["ORDER_ID_REQUIRED"]})
    return str(order_id)


def load_for_vendor(order_id, vendor: Principal | None) -> Order:
    """Load an order owned by the vendor's selected store."""
    if vendor is None:
        raise AuthenticationError()
    if not vendor.store_id:
        raise ValidationError({"store_id": ["store_not_selected"]})

    order = current_domain.repository_for(Order).get(_require_order_id(order_id))
    if not order.belongs_to_store(vendor.store_id):
        raise AuthorizationError("FORBIDDEN_STORE_MISMATCH")
    return order


def load_for_consumer(order_id, consumer: Principal | None) -> Order:
    """Load an order placed by the consumer."""
    if consumer is None:
        raise AuthenticationError()

    order = current_domain.repository_for(Order).get(_require_order_id(order_id))
    if not order.consumer_id or order.consumer_id != consumer.principal_id:
        raise AuthorizationError("FORBIDDEN_NOT_OWNER")
    return order
