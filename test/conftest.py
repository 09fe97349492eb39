import pytest
from typing import Optional

from app.core.config import Settings
from app.core.context import AppContext, create_sender_name_resolver
from app.core.errors import UserNotFound


class FakeUserStore:
    """In-memory stand-in for the Firestore user collection."""
    token_field = "fcmToken"
    token_updated_field = "lastTokenUpdate"
    display_name_field = "username"

    def __init__(self, users: Optional[dict] = None):
        self.users = users if users is not None else {}
        self.reads = []
        self.writes = []

    async def get_user(self, user_id):
        self.reads.append(user_id)
        record = self.users.get(user_id)
        return dict(record) if record is not None else None

    async def write_token(self, user_id, token, mode="update"):
        if mode == "require_existing" and user_id not in self.users:
            raise UserNotFound()
        if mode == "update" and user_id not in self.users:
            # Same failure Firestore gives for update() on a missing document.
            raise LookupError(f"No document to update: users/{user_id}")
        self.writes.append((user_id, token, mode))
        record = self.users.setdefault(user_id, {})
        record[self.token_field] = token
        record[self.token_updated_field] = "SERVER_TIMESTAMP"


class FakePushGateway:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent = []

    async def send(self, payload):
        if self.error is not None:
            raise self.error
        self.sent.append(payload)
        return f"projects/test-project/messages/{len(self.sent)}"


TEST_SERVICE_ACCOUNT = {"type": "service_account", "project_id": "test-project"}


def make_context(store, gateway, **overrides) -> AppContext:
    settings = Settings(service_account_info=TEST_SERVICE_ACCOUNT, **overrides)
    return AppContext(
        settings=settings,
        store=store,
        gateway=gateway,
        names=create_sender_name_resolver(settings, store),
    )


@pytest.fixture
def store():
    return FakeUserStore({
        "u1": {"username": "Ali", "fcmToken": "tok-u1"},
        "u2": {"username": "Ayse", "fcmToken": "tok123"},
        "u3": {"username": "Mehmet"},
        "u4": {"username": "Zeynep", "fcmToken": ""},
    })


@pytest.fixture
def gateway():
    return FakePushGateway()
