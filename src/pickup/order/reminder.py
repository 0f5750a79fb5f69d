"""PickupReminder: nudges consumers shortly before their pickup window."""

from datetime import datetime, timedelta

from protean.utils.globals import current_domain

from pickup.channel.push_port import PushPort
from pickup.config import Settings
from pickup.locks.port import AdvisoryLocks
from pickup.order.order import Order, utcnow
from pickup.templates import render_messages
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

REMINDER_LOCK = "remind-pickup"
REMIND_BEFORE = timedelta(minutes=10)
WINDOW_SLACK = timedelta(seconds=150)
REMINDER_BATCH_SIZE = 100


class PickupReminder:
    def __init__(self, push: PushPort, locks: AdvisoryLocks, settings: Settings | None = None) -> None:
        self.push = push
        self.locks = locks
        self.settings = settings or Settings()

    def sweep(self, now: datetime | None = None) -> dict:
        if not self.settings.pickup_reminder_enabled:
            return {"skipped": True, "reason": "disabled"}

        with self.locks.hold(REMINDER_LOCK) as acquired:
            if not acquired:
                return {"skipped": True, "reason": "already-running"}
            return self._remind(now or utcnow())

    def _remind(self, now: datetime) -> dict:
        target = now + REMIND_BEFORE
        repo = current_domain.repository_for(Order)
        orders = repo.awaiting_reminder(target - WINDOW_SLACK, target + WINDOW_SLACK, REMINDER_BATCH_SIZE)

        sent = 0
        failures: list[dict] = []
        for order in orders:
            order_id = str(order.id)
            try:
                result = self.push.send(order.consumer_id, render_messages("pickup_reminder", {"code": order.code}))
            except Exception:
                logger.exception("pickup_reminder_push_error", order_id=order_id)
                failures.append({"id": order_id, "reason": "push-exception"})
                continue

            if result.get("status") != "sent":
                failures.append({"id": order_id, "reason": "push-failed"})
                continue

            if repo.set_if_unset(order.id, "reminded_at", now):
                sent += 1

        logger.info("pickup_reminders_sent", checked=len(orders), sent=sent, failures=len(failures))
        return {"checked": len(orders), "sent": sent, "failures": failures}
