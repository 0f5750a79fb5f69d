"""Stripe payment gateway adapter.

Uses the stripe-python SDK: webhook signatures are checked with the
endpoint's signing secret, checkout sessions and payment intents are read
with the account's secret key. SDK objects are converted to plain dicts
before they leave this module.
"""

import json

import stripe

from pickup.exceptions import AuthenticationError, UpstreamError
from pickup.gateway.port import CheckoutSession, PaymentGateway
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


def _as_dict(stripe_object) -> dict:
    return json.loads(str(stripe_object))


def _object_id(value) -> str | None:
    """Expandable fields arrive either as an id or as the expanded object."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return value.get("id")


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def construct_event(self, payload: bytes, signature: str) -> dict:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            logger.warning("stripe_signature_invalid", error=str(exc))
            raise AuthenticationError("INVALID_SIGNATURE", "Webhook signature verification failed") from exc
        except ValueError as exc:
            raise AuthenticationError("INVALID_PAYLOAD", "Webhook payload is not valid JSON") from exc
        return json.loads(payload)

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(
                session_id,
                expand=["payment_intent"],
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("stripe_session_retrieve_failed", session_id=session_id, error=str(exc))
            raise UpstreamError("FULFILL_FAILED", str(exc)) from exc

        data = _as_dict(session)
        customer_details = data.get("customer_details") or {}
        return CheckoutSession(
            id=data["id"],
            payment_status=data.get("payment_status") or "",
            metadata=data.get("metadata") or {},
            customer_email=data.get("customer_email") or customer_details.get("email"),
            payment_intent_id=_object_id(data.get("payment_intent")),
        )

    def retrieve_receipt_url(self, payment_intent_id: str) -> str | None:
        try:
            intent = stripe.PaymentIntent.retrieve(
                payment_intent_id,
                expand=["latest_charge"],
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            raise UpstreamError(message=str(exc)) from exc

        charge = _as_dict(intent).get("latest_charge")
        if isinstance(charge, dict):
            return charge.get("receipt_url")
        return None
