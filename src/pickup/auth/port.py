"""Session authority port: turns request credentials into principals.

Session issuance lives elsewhere; this service only verifies what the
consumer and vendor apps send.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class PrincipalKind(Enum):
    CONSUMER = "consumer"
    VENDOR = "vendor"


@dataclass(frozen=True)
class Principal:
    """An authenticated consumer or vendor operator."""

    principal_id: str
    kind: PrincipalKind
    store_id: str | None = None  # Vendor scope: the store currently selected


class SessionAuthority(ABC):
    @abstractmethod
    def consumer_from_id_token(self, id_token: str) -> Principal | None:
        """Verify a consumer ID token issued by the identity provider."""
        ...

    @abstractmethod
    def consumer_from_session(self, cookie_value: str) -> Principal | None:
        """Verify the consumer app's session cookie."""
        ...

    @abstractmethod
    def vendor_from_session(self, cookie_value: str) -> Principal | None:
        """Verify the vendor app's session cookie, including the selected store."""
        ...
