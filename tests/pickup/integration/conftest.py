import pytest
from fastapi.testclient import TestClient

from pickup.api.app import create_app


@pytest.fixture()
def client(services):
    return TestClient(create_app(services))


@pytest.fixture()
def vendor_client(client, authority):
    """Client carrying a vendor session scoped to store-a."""
    authority.add_vendor_session("vendor-cookie", "U-vendor", "store-a")
    client.cookies.set("store_session", "vendor-cookie")
    return client


@pytest.fixture()
def consumer_headers(authority):
    authority.add_id_token("consumer-token", "U-consumer-1")
    return {"Authorization": "Bearer consumer-token"}
