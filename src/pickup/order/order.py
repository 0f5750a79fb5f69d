"""Order aggregate: a reserve-and-pickup order and its lifecycle facts.

Lifecycle timestamps (``placed_at``, ``paid_at``, ``redeem_request_at``,
``redeemed_at``, ``completed_at``, ``completed_notified_at``, ...) are facts:
once written they are never cleared. ``redeemed_at`` and ``completed_at``
are independent, so a vendor can complete an order whose consumer never
confirmed the pickup. ``status`` is derived from the facts:

    completed_at set          → COMPLETED
    redeemed_at set           → FULFILLED
    otherwise                 → PENDING

``payment_status`` moves UNPAID → PAID exactly once.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from pickup.domain import pickup
from pickup.order.events import (
    OrderCompleted,
    OrderPaid,
    OrderPlaced,
    OrderRedeemed,
    RedemptionRequested,
)


class OrderStatus(Enum):
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"
    COMPLETED = "COMPLETED"


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


# Statuses the thank-you sweep treats as "done at the counter"
COMPLETED_EQUIVALENT = (OrderStatus.FULFILLED, OrderStatus.COMPLETED)

CODE_LENGTH = 6


def generate_code() -> str:
    """Six-digit, zero-padded redemption code shown to vendor and consumer."""
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from the store."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@pickup.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@pickup.aggregate
class Order:
    store_id = Identifier(required=True)
    store_name = String(max_length=255)
    consumer_id = String(max_length=255)  # Push destination; absent on some legacy orders
    account_id = Identifier()  # Auth account, used to look the consumer up when consumer_id is absent
    customer_email = String(max_length=255)
    checkout_session_id = String(max_length=255)
    items = HasMany(OrderItem)
    total = Integer(default=0, min_value=0)
    code = String(max_length=CODE_LENGTH)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_reference = String(max_length=255)
    receipt_url = String(max_length=1024)

    pickup_time_from = String(max_length=16)
    pickup_time_to = String(max_length=16)
    pickup_start = DateTime()

    placed_at = DateTime()
    paid_at = DateTime()
    redeem_request_at = DateTime()
    redeemed_at = DateTime()
    completed_at = DateTime()
    completed_notified_at = DateTime()
    reminded_at = DateTime()
    inventory_applied_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def status_must_follow_lifecycle_facts(self):
        if self.status != self._derived_status().value:
            raise ValidationError({"status": [f"Status {self.status} does not match the order's lifecycle facts"]})

    @invariant.post
    def paid_orders_must_record_payment_time(self):
        if self.payment_status == PaymentStatus.PAID.value and self.paid_at is None:
            raise ValidationError({"paid_at": ["A paid order must record when it was paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, store_id, items, consumer_id=None, code=None, **attributes):
        """Create a PENDING, unpaid order from item dicts.

        Each item is ``{"product_id", "quantity", "unit_price"}`` with an
        optional ``"name"``.
        """
        if not items:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = utcnow()
        order = cls(
            store_id=store_id,
            consumer_id=consumer_id,
            code=code or generate_code(),
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            created_at=now,
            updated_at=now,
            **attributes,
        )
        for item in items:
            order.add_items(
                OrderItem(
                    product_id=item["product_id"],
                    name=item.get("name"),
                    quantity=int(item["quantity"]),
                    unit_price=int(item["unit_price"]),
                )
            )
        order.total = sum(item.line_total for item in order.items)
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_at is not None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def awaiting_redemption(self) -> bool:
        return self.redeem_request_at is not None and self.redeemed_at is None

    def belongs_to_store(self, store_id) -> bool:
        return store_id is not None and str(self.store_id) == str(store_id)

    def quantities_by_product(self) -> dict[str, int]:
        """Total ordered quantity per product across all lines."""
        totals: dict[str, int] = {}
        for item in self.items:
            key = str(item.product_id)
            totals[key] = totals.get(key, 0) + item.quantity
        return totals

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_placed(self, at: datetime | None = None) -> bool:
        """Record the checkout return. Returns False when already placed."""
        if self.placed_at is not None:
            return False

        now = at or utcnow()
        self.placed_at = now
        self.updated_at = now
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                store_id=str(self.store_id),
                total=self.total or 0,
                placed_at=now,
            )
        )
        return True

    def record_payment(self, payment_reference=None, receipt_url=None, at: datetime | None = None) -> bool:
        """Mark the order PAID. Returns False when it already was."""
        if self.is_paid:
            return False

        now = at or utcnow()
        with atomic_change(self):
            self.payment_status = PaymentStatus.PAID.value
            self.paid_at = self.paid_at or now
            if self.placed_at is None:
                self.placed_at = now
            if payment_reference:
                self.payment_reference = payment_reference
            if receipt_url:
                self.receipt_url = receipt_url
            self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_reference=payment_reference,
                paid_at=self.paid_at,
            )
        )
        return True

    def request_redemption(self, at: datetime | None = None) -> None:
        """Vendor asks the consumer to confirm pickup. Repeats overwrite the time."""
        now = at or utcnow()
        self.redeem_request_at = now
        self.updated_at = now
        self.raise_(
            RedemptionRequested(
                order_id=str(self.id),
                store_id=str(self.store_id),
                requested_at=now,
            )
        )

    def confirm_redemption(self, at: datetime | None = None) -> bool:
        """Consumer confirms pickup. Returns False when already redeemed."""
        if self.is_redeemed:
            return False

        now = at or utcnow()
        with atomic_change(self):
            self.redeemed_at = now
            self.updated_at = now
            self._refresh_status()
        self.raise_(
            OrderRedeemed(
                order_id=str(self.id),
                consumer_id=self.consumer_id,
                redeemed_at=now,
            )
        )
        return True

    def mark_completed(self, at: datetime | None = None) -> bool:
        """Vendor marks the order complete. Returns False when already completed."""
        if self.is_completed:
            return False

        now = at or utcnow()
        with atomic_change(self):
            self.completed_at = now
            self.updated_at = now
            self._refresh_status()
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                store_id=str(self.store_id),
                completed_at=now,
            )
        )
        return True

    def _derived_status(self) -> OrderStatus:
        if self.completed_at is not None:
            return OrderStatus.COMPLETED
        if self.redeemed_at is not None:
            return OrderStatus.FULFILLED
        return OrderStatus.PENDING

    def _refresh_status(self) -> None:
        self.status = self._derived_status().value
