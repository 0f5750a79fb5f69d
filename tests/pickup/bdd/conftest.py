"""Shared BDD fixtures and step definitions for the redemption handshake."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from pickup.auth.port import Principal, PrincipalKind
from pickup.exceptions import AuthorizationError
from pickup.order.order import Order


@pytest.fixture()
def as_vendor():
    def _vendor(store_id):
        return Principal(principal_id=f"vendor-{store_id}", kind=PrincipalKind.VENDOR, store_id=store_id)

    return _vendor


@pytest.fixture()
def as_consumer():
    def _consumer(consumer_id):
        return Principal(principal_id=consumer_id, kind=PrincipalKind.CONSUMER)

    return _consumer


@pytest.fixture()
def outcome():
    """Mutable holder for what the last When step returned or raised."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.parse('a paid order for store "{store_id}" placed by "{consumer_id}"'),
    target_fixture="order",
)
def _(make_order, store_id, consumer_id):
    repo = current_domain.repository_for(Order)
    order = repo.get(make_order(store_id=store_id, consumer_id=consumer_id).id)
    order.mark_placed()
    order.record_payment(payment_reference="pi_bdd")
    repo.add(order)
    return order


@given(parsers.parse('the vendor of "{store_id}" requested redemption'))
def _(services, order, as_vendor, store_id):
    services.redemption.request(str(order.id), as_vendor(store_id))


@given(parsers.parse('the consumer "{consumer_id}" confirmed the redemption'))
def _(services, order, outcome, as_consumer, consumer_id):
    services.redemption.confirm(str(order.id), as_consumer(consumer_id))
    outcome["redeemed_at"] = current_domain.repository_for(Order).get(order.id).redeemed_at


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then("the request is refused as forbidden")
def _(outcome):
    assert isinstance(outcome.get("error"), AuthorizationError)


@then("no redemption has been requested")
def _(order):
    assert current_domain.repository_for(Order).get(order.id).redeem_request_at is None
