"""Integration tests for the scheduled job endpoints."""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from protean import current_domain

from pickup.api.app import create_app
from pickup.order.order import Order
from pickup.services import Services


def _redeemed(make_order, **kwargs):
    repo = current_domain.repository_for(Order)
    order = repo.get(make_order(**kwargs).id)
    order.confirm_redemption()
    repo.add(order)
    return order


@pytest.fixture()
def secured_client(settings, gateway, push, authority, locks):
    services = Services(
        settings=replace(settings, cron_secret="s3cret"),
        gateway=gateway,
        push=push,
        authority=authority,
        locks=locks,
    )
    return TestClient(create_app(services))


class TestThankCompletedAPI:
    def test_sweep_result(self, client, push, make_order):
        order = _redeemed(make_order)

        response = client.post("/cron/thank-completed")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "picked": 1, "pushed": 1, "updated": 1, "skipped": 0, "failures": []}
        assert push.pushes_to(order.consumer_id)

    def test_reports_failures(self, client, make_order):
        order = _redeemed(make_order, consumer_id=None)
        body = client.post("/cron/thank-completed").json()
        assert body["failures"] == [{"id": str(order.id), "reason": "no-destination"}]

    def test_already_running(self, client, locks):
        with locks.hold("thank-completed"):
            response = client.post("/cron/thank-completed")
        assert response.json() == {"ok": True, "skipped": True, "reason": "already-running"}

    def test_disabled(self, settings, gateway, push, authority, locks):
        services = Services(
            settings=replace(settings, thank_you_completed_enabled=False),
            gateway=gateway,
            push=push,
            authority=authority,
            locks=locks,
        )
        response = TestClient(create_app(services)).post("/cron/thank-completed")
        assert response.json() == {"ok": True, "skipped": True, "reason": "disabled"}


class TestCronSecret:
    def test_missing_secret_is_401(self, secured_client):
        response = secured_client.post("/cron/thank-completed")
        assert response.status_code == 401

    def test_wrong_secret_is_401(self, secured_client):
        response = secured_client.post("/cron/remind-pickup", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_correct_secret(self, secured_client):
        response = secured_client.post("/cron/remind-pickup", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200
        assert response.json()["checked"] == 0


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "domain": "pickup"}
