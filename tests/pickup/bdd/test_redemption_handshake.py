"""BDD tests for the redemption handshake and completion."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from pickup.exceptions import AuthorizationError
from pickup.order.order import Order

scenarios("features/redemption_handshake.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.parse('the vendor of "{store_id}" requests redemption'))
def _(services, order, outcome, as_vendor, store_id):
    try:
        services.redemption.request(str(order.id), as_vendor(store_id))
    except AuthorizationError as exc:
        outcome["error"] = exc


@when(parsers.parse('the consumer "{consumer_id}" confirms the redemption'))
def _(services, order, outcome, as_consumer, consumer_id):
    try:
        outcome["redeemed"] = services.redemption.confirm(str(order.id), as_consumer(consumer_id))
    except AuthorizationError as exc:
        outcome["error"] = exc


@when(parsers.parse('the vendor of "{store_id}" completes the order'))
def _(services, order, as_vendor, store_id):
    services.completion.complete(str(order.id), as_vendor(store_id))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the consumer "{consumer_id}" sees the order awaiting confirmation'))
def _(services, order, as_consumer, consumer_id):
    assert services.redemption.latest(as_consumer(consumer_id)) == {"id": str(order.id), "code": order.code}


@then(parsers.parse('the consumer "{consumer_id}" sees no order awaiting confirmation'))
def _(services, as_consumer, consumer_id):
    assert services.redemption.latest(as_consumer(consumer_id)) is None


@then("the confirmation reports nothing new")
def _(outcome):
    assert outcome["redeemed"] is False


@then("the redemption time is unchanged")
def _(order, outcome):
    assert current_domain.repository_for(Order).get(order.id).redeemed_at == outcome["redeemed_at"]


@then(parsers.parse('the consumer "{consumer_id}" received {count:d} thank-you push'))
def _(push, consumer_id, count):
    assert len(push.pushes_to(consumer_id)) == count
