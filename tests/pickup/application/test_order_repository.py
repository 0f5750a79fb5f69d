"""Queries and null-guarded writes on OrderRepository."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from pickup.order.order import Order


@pytest.fixture()
def repo():
    return current_domain.repository_for(Order)


class TestSetIfUnset:
    def test_first_writer_wins(self, repo, make_order, fresh):
        order = make_order()
        first = datetime(2026, 5, 1, 9, 0, tzinfo=UTC)

        assert repo.set_if_unset(order.id, "completed_notified_at", first) is True
        assert repo.set_if_unset(order.id, "completed_notified_at", first + timedelta(hours=1)) is False

        assert fresh(order).completed_notified_at == first

    def test_fields_are_independent(self, repo, make_order):
        order = make_order()
        now = datetime.now(UTC)

        assert repo.set_if_unset(order.id, "reminded_at", now) is True
        assert repo.set_if_unset(order.id, "inventory_applied_at", now) is True

    def test_extra_scope_must_match(self, repo, make_order, fresh):
        order = make_order(store_id="store-a")

        assert repo.set_if_unset(order.id, "reminded_at", datetime.now(UTC), store_id="store-b") is False
        assert fresh(order).reminded_at is None

    def test_unknown_order_is_not_written(self, repo):
        assert repo.set_if_unset("missing", "reminded_at", datetime.now(UTC)) is False

    def test_rejects_fields_outside_allowlist(self, repo, make_order):
        order = make_order()
        with pytest.raises(ValidationError):
            repo.set_if_unset(order.id, "code", "000000")


class TestQueries:
    def test_find_by_checkout_session(self, repo, make_order):
        order = make_order(checkout_session_id="cs_123")
        make_order(checkout_session_id="cs_456")

        assert repo.find_by_checkout_session("cs_123").id == order.id
        assert repo.find_by_checkout_session("cs_missing") is None
        assert repo.find_by_checkout_session(None) is None

    def test_awaiting_thank_you_excludes_notified(self, repo, make_order):
        notified = make_order()
        waiting = make_order()
        for order in (notified, waiting):
            order = repo.get(order.id)
            order.mark_completed()
            repo.add(order)
        repo.set_if_unset(notified.id, "completed_notified_at", datetime.now(UTC))

        assert [order.id for order in repo.awaiting_thank_you(10)] == [waiting.id]

    def test_awaiting_thank_you_excludes_pending(self, repo, make_order):
        make_order()
        assert repo.awaiting_thank_you(10) == []


class TestLatestRedemptionRequest:
    def _requested(self, repo, make_order, at, **overrides):
        order = repo.get(make_order(**overrides).id)
        order.request_redemption(at=at)
        repo.add(order)
        return order

    def test_newest_request_wins(self, repo, make_order):
        now = datetime.now(UTC)
        self._requested(repo, make_order, now - timedelta(minutes=3))
        newest = self._requested(repo, make_order, now)

        assert repo.latest_redemption_request("U-consumer-1").id == newest.id

    def test_orders_without_request_are_ignored(self, repo, make_order):
        make_order()
        assert repo.latest_redemption_request("U-consumer-1") is None

    def test_completed_order_is_ignored(self, repo, make_order):
        order = self._requested(repo, make_order, datetime.now(UTC))
        order = repo.get(order.id)
        order.mark_completed()
        repo.add(order)

        assert repo.latest_redemption_request("U-consumer-1") is None


class TestAwaitingReminder:
    START = datetime(2026, 5, 1, 9, 0, tzinfo=UTC)

    def test_due_orders_found_among_many_pending(self, repo, make_order):
        for hours in range(1, 6):
            make_order(pickup_start=self.START + timedelta(hours=hours))
        later = make_order(pickup_start=self.START + timedelta(minutes=2))
        earlier = make_order(pickup_start=self.START + timedelta(minutes=1))

        due = repo.awaiting_reminder(self.START, self.START + timedelta(minutes=5), limit=10)

        assert [order.id for order in due] == [earlier.id, later.id]

    def test_limit_takes_earliest_first(self, repo, make_order):
        make_order(pickup_start=self.START + timedelta(minutes=4))
        first = make_order(pickup_start=self.START + timedelta(minutes=1))

        due = repo.awaiting_reminder(self.START, self.START + timedelta(minutes=5), limit=1)

        assert [order.id for order in due] == [first.id]

    def test_reminded_and_anonymous_orders_excluded(self, repo, make_order):
        reminded = make_order(pickup_start=self.START)
        repo.set_if_unset(reminded.id, "reminded_at", self.START)
        make_order(pickup_start=self.START, consumer_id=None)

        assert repo.awaiting_reminder(self.START, self.START, limit=10) == []
