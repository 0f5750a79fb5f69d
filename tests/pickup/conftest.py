import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from pickup.auth.fake_adapter import FakeSessionAuthority
from pickup.channel.fake_push import FakePushAdapter
from pickup.config import Settings
from pickup.gateway.fake_adapter import FakeGateway
from pickup.inventory.product import Product
from pickup.locks.memory import InMemoryLocks
from pickup.order.order import Order
from pickup.services import Services


@pytest.fixture(scope="session")
def pickup_bed():
    from pickup.domain import pickup

    bed = DomainFixture(pickup)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pickup_bed):
    with pickup_bed.domain_context():
        yield
        for _, provider in current_domain.providers.items():
            provider._data_reset()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    return Settings(
        environment="test",
        user_liff_url="https://liff.line.me/test-liff",
        thank_you_completed_enabled=True,
        pickup_reminder_enabled=True,
    )


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def push():
    return FakePushAdapter()


@pytest.fixture()
def authority():
    return FakeSessionAuthority()


@pytest.fixture()
def locks():
    return InMemoryLocks()


@pytest.fixture()
def services(settings, gateway, push, authority, locks):
    return Services(settings=settings, gateway=gateway, push=push, authority=authority, locks=locks)


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_order():
    """Persist an order; keyword overrides go straight to ``Order.create``."""

    def _make(store_id="store-a", consumer_id="U-consumer-1", items=None, **overrides):
        defaults = {"store_name": "Corner Deli", "pickup_time_from": "18:00", "pickup_time_to": "18:30"}
        defaults.update(overrides)
        order = Order.create(
            store_id=store_id,
            consumer_id=consumer_id,
            items=items or [{"product_id": "p1", "name": "Onigiri set", "quantity": 2, "unit_price": 450}],
            **defaults,
        )
        current_domain.repository_for(Order).add(order)
        return order

    return _make


@pytest.fixture()
def make_product():
    def _make(product_id="p1", store_id="store-a", stock=10, name="Onigiri set"):
        product = Product(id=product_id, store_id=store_id, name=name, stock=stock, price=450)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


def reload(order):
    return current_domain.repository_for(Order).get(order.id)


@pytest.fixture()
def fresh():
    """Re-read an order from the repository."""
    return reload
