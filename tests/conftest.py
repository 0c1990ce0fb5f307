import os
# Keep the app in development mode and away from any real relay
os.environ["ENVIRONMENT"] = "test"
os.environ["MAIL_PROVIDER"] = "smtp"

import pytest
from fastapi.testclient import TestClient

from leadership_index.delivery import DeliveryGateway
from leadership_index.dimensions import DIMENSIONS
from leadership_index.main import app, get_gateway

ADMIN_EMAIL = "admin@example.com"
FROM_EMAIL = "Augment Leadership Survey <survey@example.com>"


class FakeTransport:
    """Records messages instead of sending them; fails for chosen recipients."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.attempted = []
        self.fail_for = set(fail_for)

    async def send(self, message):
        self.attempted.append(message)
        if message.to in self.fail_for:
            raise ConnectionError(f"550 relay rejected {message.to} (internal-host-7)")
        self.sent.append(message)
        return f"msg-{len(self.sent)}"


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def gateway(transport):
    return DeliveryGateway(transport=transport, from_email=FROM_EMAIL, admin_email=ADMIN_EMAIL)


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def valid_payload():
    return {
        "org": "Acme Corp",
        "email": "leader@acme.example",
        "ratings": {key: 4 for dimension in DIMENSIONS for key in dimension.rating_keys()},
        "qualitative": {
            "strategy-0": "We set a clear annual plan.",
            "protect": "Our candour in leadership meetings.",
            "accelerate": "",
        },
    }
