"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from pickup.domain import pickup


@pickup.event(part_of="Order")
class OrderPlaced:
    """The consumer returned from checkout and the order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    store_id = Identifier(required=True)
    total = Integer(required=True)
    placed_at = DateTime(required=True)


@pickup.event(part_of="Order")
class OrderPaid:
    """The payment gateway reported the checkout as paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String(max_length=255)
    paid_at = DateTime(required=True)


@pickup.event(part_of="Order")
class RedemptionRequested:
    """The vendor asked the consumer to confirm pickup."""

    __version__ = 1

    order_id = Identifier(required=True)
    store_id = Identifier(required=True)
    requested_at = DateTime(required=True)


@pickup.event(part_of="Order")
class OrderRedeemed:
    """The consumer confirmed physically receiving the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    consumer_id = String(max_length=255)
    redeemed_at = DateTime(required=True)


@pickup.event(part_of="Order")
class OrderCompleted:
    """The vendor marked the order complete."""

    __version__ = 1

    order_id = Identifier(required=True)
    store_id = Identifier(required=True)
    completed_at = DateTime(required=True)
