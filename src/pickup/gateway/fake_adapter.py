"""Configurable fake payment gateway for development and testing.

Simulates the gateway without external calls. Webhook payloads are
accepted when signed with ``test-signature``; checkout sessions are served
from whatever tests register with ``add_session``.
"""

import json
from uuid import uuid4

from pickup.exceptions import AuthenticationError, UpstreamError
from pickup.gateway.port import CheckoutSession, PaymentGateway

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.sessions: dict[str, CheckoutSession] = {}
        self.receipts: dict[str, str] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_session(
        self,
        session_id: str | None = None,
        payment_status: str = "paid",
        metadata: dict | None = None,
        customer_email: str | None = None,
        payment_intent_id: str | None = None,
    ) -> CheckoutSession:
        session = CheckoutSession(
            id=session_id or f"cs_test_{uuid4().hex[:12]}",
            payment_status=payment_status,
            metadata=metadata or {},
            customer_email=customer_email,
            payment_intent_id=payment_intent_id,
        )
        self.sessions[session.id] = session
        return session

    def construct_event(self, payload: bytes, signature: str) -> dict:
        self.calls.append({"method": "construct_event", "signature": signature})
        if signature != TEST_SIGNATURE:
            raise AuthenticationError("INVALID_SIGNATURE", "Webhook signature verification failed")
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise AuthenticationError("INVALID_PAYLOAD", "Webhook payload is not valid JSON") from exc

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        self.calls.append({"method": "retrieve_checkout_session", "session_id": session_id})
        if not self.should_succeed:
            raise UpstreamError("FULFILL_FAILED", self.failure_reason)
        session = self.sessions.get(session_id)
        if session is None:
            raise UpstreamError("FULFILL_FAILED", f"No such checkout session: {session_id}")
        return session

    def retrieve_receipt_url(self, payment_intent_id: str) -> str | None:
        self.calls.append({"method": "retrieve_receipt_url", "payment_intent_id": payment_intent_id})
        if not self.should_succeed:
            raise UpstreamError(message=self.failure_reason)
        return self.receipts.get(payment_intent_id)

    def reset(self) -> None:
        self.should_succeed = True
        self.failure_reason = "Gateway unavailable"
        self.sessions.clear()
        self.receipts.clear()
        self.calls.clear()
