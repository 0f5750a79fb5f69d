"""Repository for the Order aggregate.

Besides the standard CRUD operations this provides the queries the
lifecycle services need and ``set_if_unset``, the null-guarded write the
notification paths rely on: it only touches rows where the field is still
empty and reports whether this caller was the one that set it.
"""

from protean.exceptions import ValidationError

from pickup.domain import pickup
from pickup.order.order import COMPLETED_EQUIVALENT, Order, OrderStatus

# Facts written through set_if_unset
NULL_GUARDED_FIELDS = frozenset({"completed_notified_at", "reminded_at", "inventory_applied_at"})


@pickup.repository(part_of=Order)
class OrderRepository:
    def find_by_checkout_session(self, checkout_session_id: str) -> Order | None:
        """The order created for a checkout session, if any."""
        if not checkout_session_id:
            return None
        results = self._dao.query.filter(checkout_session_id=checkout_session_id).limit(1).all().items
        return results[0] if results else None

    def latest_redemption_request(self, consumer_id: str) -> Order | None:
        """The consumer's most recently requested order still waiting at the counter.

        Only PENDING orders qualify: once an order is redeemed or completed
        there is nothing left for the consumer to confirm.
        """
        results = (
            self._dao.query.filter(
                consumer_id=consumer_id,
                status=OrderStatus.PENDING.value,
                redeem_request_at__isnull=False,
            )
            .order_by("-redeem_request_at")
            .limit(1)
            .all()
            .items
        )
        return results[0] if results else None

    def awaiting_thank_you(self, limit: int) -> list[Order]:
        """Completed-equivalent orders whose thank-you push has not gone out, newest first."""
        return (
            self._dao.query.filter(
                status__in=[status.value for status in COMPLETED_EQUIVALENT],
                completed_notified_at__isnull=True,
            )
            .order_by("-updated_at")
            .limit(limit)
            .all()
            .items
        )

    def awaiting_reminder(self, window_start, window_end, limit: int) -> list[Order]:
        """PENDING orders starting pickup inside the window and not yet reminded."""
        return (
            self._dao.query.filter(
                status=OrderStatus.PENDING.value,
                reminded_at__isnull=True,
                consumer_id__isnull=False,
                pickup_start__gte=window_start,
                pickup_start__lte=window_end,
            )
            .order_by("pickup_start")
            .limit(limit)
            .all()
            .items
        )

    def set_if_unset(self, order_id, field: str, value, **scope) -> bool:
        """Write ``field`` only where it is still null. True if this call wrote it."""
        if field not in NULL_GUARDED_FIELDS:
            raise ValidationError({field: ["Field cannot be written with a null guard"]})

        criteria = {"id": str(order_id), f"{field}__isnull": True, **scope}
        updated = self._dao.query.filter(**criteria).update(**{field: value})
        return bool(updated)
