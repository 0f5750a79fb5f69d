"""Pickup bounded context: reserve-and-pickup order lifecycle.

Keeps an order consistent across the payment gateway (webhooks and the
checkout return), the vendor/consumer redemption handshake and the
completion notification pipeline.
"""

from protean.domain import Domain

from pickup.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

pickup = Domain(name="pickup")
