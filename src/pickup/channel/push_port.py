"""Push channel port: abstract interface for consumer push messages."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """Abstract interface for push dispatch adapters."""

    @abstractmethod
    def send(self, to: str, messages: list[dict]) -> dict:
        """Push ``messages`` to the consumer identified by ``to``.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
