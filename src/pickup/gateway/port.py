"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CheckoutSession:
    """The parts of a completed checkout session the service reads."""

    id: str
    payment_status: str
    metadata: dict = field(default_factory=dict)
    customer_email: str | None = None
    payment_intent_id: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> dict:
        """Verify a webhook signature and return the event as a dict.

        Raises ``AuthenticationError`` when the signature or payload is invalid.
        """
        ...

    @abstractmethod
    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Fetch a checkout session. Raises ``UpstreamError`` on gateway failure."""
        ...

    @abstractmethod
    def retrieve_receipt_url(self, payment_intent_id: str) -> str | None:
        """Receipt URL of the payment intent's latest charge, if any."""
        ...
