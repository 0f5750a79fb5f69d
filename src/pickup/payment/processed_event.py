"""Idempotency ledger for payment gateway events.

The gateway delivers webhooks at least once. Every event id that reaches
the processor is recorded here, whether or not it changed an order, and a
recorded id short-circuits any later delivery of the same event.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String
from sqlalchemy.exc import IntegrityError

from pickup.domain import pickup
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


@pickup.aggregate
class ProcessedEvent:
    event_id = String(identifier=True, required=True, max_length=255)
    type = String(max_length=100)
    order_id = Identifier()
    processed_at = DateTime()


@pickup.repository(part_of=ProcessedEvent)
class ProcessedEventRepository:
    def is_processed(self, event_id: str) -> bool:
        return bool(self._dao.query.filter(event_id=event_id).all().items)

    def record(self, event_id: str, event_type: str | None = None, order_id: str | None = None) -> bool:
        """Insert the event id once. Returns False if it was already there."""
        if self.is_processed(event_id):
            logger.info("processed_event_already_recorded", event_id=event_id)
            return False

        try:
            self.add(
                ProcessedEvent(
                    event_id=event_id,
                    type=event_type,
                    order_id=order_id,
                    processed_at=datetime.now(UTC),
                )
            )
        except IntegrityError:
            # A concurrent delivery inserted the same id first
            if not self.is_processed(event_id):
                raise
            logger.info("processed_event_recorded_concurrently", event_id=event_id)
            return False
        return True
