"""CompletionNotifier: the thank-you push after pickup.

Two entry points share one guard. The vendor's "complete" action sends
the push straight away; a scheduled sweep picks up anything the
synchronous path missed. Either path sends only while
``completed_notified_at`` is empty and sets it, only after a successful
send, with a write predicated on it still being empty.
"""

from protean.utils.globals import current_domain

from pickup.auth.port import Principal
from pickup.channel.push_port import PushPort
from pickup.config import Settings
from pickup.exceptions import UpstreamError
from pickup.locks.port import AdvisoryLocks
from pickup.order.access import load_for_vendor
from pickup.order.order import Order, utcnow
from pickup.order.recipients import resolve_recipient
from pickup.templates import render_messages
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

THANK_YOU_LOCK = "thank-completed"
SWEEP_BATCH_SIZE = 50

NO_DESTINATION = "no-destination"
PUSH_FAILED = "push-failed"
PUSH_EXCEPTION = "push-exception"
ALREADY_NOTIFIED = "already-notified"


class CompletionNotifier:
    def __init__(self, push: PushPort, locks: AdvisoryLocks, settings: Settings | None = None) -> None:
        self.push = push
        self.locks = locks
        self.settings = settings or Settings()

    def _messages(self) -> list[dict]:
        return render_messages("thank_you", {"app_url": self.settings.user_liff_url})

    # -------------------------------------------------------------------
    # Vendor action
    # -------------------------------------------------------------------
    def complete(self, order_id, vendor: Principal | None) -> dict:
        order = load_for_vendor(order_id, vendor)
        repo = current_domain.repository_for(Order)

        if order.mark_completed():
            repo.add(order)
            logger.info("order_completed", order_id=str(order.id), store_id=vendor.store_id)

        result = {"orderId": str(order.id), "pushed": 0, "updated": 0, "skipped": 0}

        if order.completed_notified_at is not None:
            return {**result, "skipped": 1, "reason": ALREADY_NOTIFIED}

        recipient = resolve_recipient(order)
        if recipient is None:
            logger.info("thank_you_no_destination", order_id=str(order.id))
            return {**result, "skipped": 1, "reason": NO_DESTINATION}

        try:
            sent = self.push.send(recipient, self._messages())
        except Exception as exc:
            logger.exception("thank_you_push_error", order_id=str(order.id))
            raise UpstreamError("PUSH_FAILED", str(exc)) from exc

        if sent.get("status") != "sent":
            logger.warning("thank_you_push_failed", order_id=str(order.id), error=sent.get("error"))
            raise UpstreamError("PUSH_FAILED", sent.get("error"))

        updated = repo.set_if_unset(order.id, "completed_notified_at", utcnow())
        return {**result, "pushed": 1, "updated": int(updated)}

    # -------------------------------------------------------------------
    # Backstop sweep
    # -------------------------------------------------------------------
    def sweep(self, limit: int = SWEEP_BATCH_SIZE) -> dict:
        if not self.settings.thank_you_completed_enabled:
            return {"skipped": True, "reason": "disabled"}

        with self.locks.hold(THANK_YOU_LOCK) as acquired:
            if not acquired:
                logger.info("thank_you_sweep_already_running")
                return {"skipped": True, "reason": "already-running"}
            return self._sweep_batch(limit)

    def _sweep_batch(self, limit: int) -> dict:
        repo = current_domain.repository_for(Order)
        orders = repo.awaiting_thank_you(limit)

        pushed = updated = skipped = 0
        failures: list[dict] = []
        messages = self._messages()

        for order in orders:
            order_id = str(order.id)
            recipient = resolve_recipient(order)
            if recipient is None:
                skipped += 1
                failures.append({"id": order_id, "reason": NO_DESTINATION})
                continue

            try:
                sent = self.push.send(recipient, messages)
            except Exception:
                logger.exception("thank_you_sweep_push_error", order_id=order_id)
                failures.append({"id": order_id, "reason": PUSH_EXCEPTION})
                continue

            if sent.get("status") != "sent":
                failures.append({"id": order_id, "reason": PUSH_FAILED})
                continue
            pushed += 1

            if repo.set_if_unset(order.id, "completed_notified_at", utcnow()):
                updated += 1

        logger.info(
            "thank_you_sweep_finished",
            picked=len(orders),
            pushed=pushed,
            updated=updated,
            failures=len(failures),
        )
        return {
            "picked": len(orders),
            "pushed": pushed,
            "updated": updated,
            "skipped": skipped,
            "failures": failures,
        }
