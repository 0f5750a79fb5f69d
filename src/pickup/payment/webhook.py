"""PaymentWebhookProcessor: payment gateway webhook handling.

The gateway delivers events at least once. The processed-event ledger is
checked before anything else and every event id that gets past signature
verification is recorded, relevant or not, so a redelivery never repeats
a side effect.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from pickup.channel.push_port import PushPort
from pickup.config import Settings
from pickup.exceptions import UpstreamError
from pickup.gateway.port import PaymentGateway
from pickup.order.order import Order
from pickup.order.recipients import resolve_recipient
from pickup.payment.processed_event import ProcessedEvent
from pickup.templates import render_messages
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


@dataclass(frozen=True)
class WebhookOutcome:
    event_id: str
    event_type: str | None = None
    duplicate: bool = False
    order_id: str | None = None
    order_updated: bool = False
    notified: bool = False


def _object_id(value) -> str | None:
    if isinstance(value, dict):
        return value.get("id")
    return value or None


def resolve_order_id(checkout_session: dict) -> str | None:
    """Session metadata first, then the metadata of the expanded payment intent."""
    order_id = (checkout_session.get("metadata") or {}).get("order_id")
    if order_id:
        return order_id

    payment_intent = checkout_session.get("payment_intent")
    if isinstance(payment_intent, dict):
        return (payment_intent.get("metadata") or {}).get("order_id") or None
    return None


class PaymentWebhookProcessor:
    def __init__(self, gateway: PaymentGateway, push: PushPort, settings: Settings | None = None) -> None:
        self.gateway = gateway
        self.push = push
        self.settings = settings or Settings()

    def process(self, payload: bytes, signature: str) -> WebhookOutcome:
        event = self.gateway.construct_event(payload, signature)

        event_id = event.get("id")
        if not event_id:
            raise ValidationError({"id": ["Webhook event has no id"]})
        event_type = event.get("type")

        ledger = current_domain.repository_for(ProcessedEvent)
        if ledger.is_processed(event_id):
            logger.info("webhook_duplicate", event_id=event_id, event_type=event_type)
            return WebhookOutcome(event_id=event_id, event_type=event_type, duplicate=True)

        outcome = WebhookOutcome(event_id=event_id, event_type=event_type)
        if event_type == CHECKOUT_SESSION_COMPLETED:
            checkout_session = (event.get("data") or {}).get("object") or {}
            outcome = self._checkout_completed(event_id, event_type, checkout_session)
        else:
            logger.debug("webhook_ignored", event_id=event_id, event_type=event_type)

        ledger.record(event_id, event_type, outcome.order_id)
        return outcome

    def _checkout_completed(self, event_id: str, event_type: str, checkout_session: dict) -> WebhookOutcome:
        order_id = resolve_order_id(checkout_session)
        if not order_id:
            logger.warning("webhook_order_unresolved", event_id=event_id)
            return WebhookOutcome(event_id=event_id, event_type=event_type)

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning("webhook_order_missing", event_id=event_id, order_id=order_id)
            return WebhookOutcome(event_id=event_id, event_type=event_type, order_id=order_id)

        payment_reference = _object_id(checkout_session.get("payment_intent"))
        if not order.record_payment(
            payment_reference=payment_reference,
            receipt_url=self._receipt_url(payment_reference),
        ):
            logger.info("webhook_order_already_paid", event_id=event_id, order_id=order_id)
            return WebhookOutcome(event_id=event_id, event_type=event_type, order_id=order_id)

        repo.add(order)
        logger.info("order_paid", event_id=event_id, order_id=order_id, payment_reference=payment_reference)

        return WebhookOutcome(
            event_id=event_id,
            event_type=event_type,
            order_id=order_id,
            order_updated=True,
            notified=self._notify_order_received(order),
        )

    def _receipt_url(self, payment_reference: str | None) -> str | None:
        if not payment_reference:
            return None
        try:
            return self.gateway.retrieve_receipt_url(payment_reference)
        except UpstreamError as exc:
            logger.warning("receipt_lookup_failed", payment_reference=payment_reference, error=exc.message)
            return None

    def _notify_order_received(self, order: Order) -> bool:
        recipient = resolve_recipient(order)
        if recipient is None:
            logger.info("order_received_no_destination", order_id=str(order.id))
            return False

        ticket_url = f"{self.settings.user_liff_url}?tab=order" if self.settings.user_liff_url else None
        messages = render_messages(
            "order_received",
            {
                "store_name": order.store_name,
                "code": order.code,
                "total": order.total,
                "pickup_time_from": order.pickup_time_from,
                "pickup_time_to": order.pickup_time_to,
                "ticket_url": ticket_url,
            },
        )
        try:
            result = self.push.send(recipient, messages)
        except Exception:
            logger.exception("order_received_push_error", order_id=str(order.id))
            return False

        if result.get("status") != "sent":
            logger.warning("order_received_push_failed", order_id=str(order.id), error=result.get("error"))
            return False
        return True
