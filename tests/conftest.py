"""Shared fixtures; settings are read at import time so the environment is set first."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"notifyhub-tests-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from datetime import datetime

import anyio
import pytest

from notifyhub.domain.entities import (
    DeliveryResult,
    Notification,
    NotificationChannel,
    NotificationPreference,
    NotificationStatus,
    NotificationTemplate,
    NotificationType,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeNotificationStore:
    """In-memory notification store recording its writes."""

    def __init__(self, notifications=()):
        self.items: dict[str, Notification] = {n.id: n for n in notifications}
        self.created: list[Notification] = []
        self.updated: list[Notification] = []
        self.deleted: list[str] = []

    def find_by_id(self, notification_id):
        return self.items.get(notification_id)

    def find_by_user_id(self, user_id, *, status=None, type=None, limit=None, offset=None):
        found = [n for n in self.items.values() if n.user_id == user_id]
        if status is not None:
            found = [n for n in found if n.status is NotificationStatus(status)]
        if type is not None:
            found = [n for n in found if n.type is NotificationType(type)]
        found.sort(key=lambda n: n.created_at, reverse=True)
        start = offset or 0
        return found[start : start + limit if limit is not None else None]

    def create(self, notification):
        self.created.append(notification)
        self.items[notification.id] = notification
        return notification

    def update(self, notification):
        self.updated.append(notification)
        self.items[notification.id] = notification
        return notification

    def delete(self, notification_id):
        self.deleted.append(notification_id)
        return self.items.pop(notification_id, None) is not None

    def count_by_status(self, user_id):
        counts = {status.value: 0 for status in NotificationStatus}
        for notification in self.items.values():
            if notification.user_id == user_id:
                counts[notification.status.value] += 1
        return counts

    def get_unread_count(self, user_id):
        return sum(
            1
            for n in self.items.values()
            if n.user_id == user_id and n.read_at is None and not n.is_cancelled()
        )

    def mark_as_read(self, notification_ids, *, user_id):
        return 0

    def mark_all_as_read(self, user_id):
        unread = [
            n
            for n in self.items.values()
            if n.user_id == user_id and n.read_at is None and not n.is_cancelled()
        ]
        for notification in unread:
            self.items[notification.id] = notification.mark_as_read()
        return len(unread)

    def delete_expired(self):
        expired = [n.id for n in self.items.values() if n.is_expired()]
        for notification_id in expired:
            del self.items[notification_id]
        return len(expired)

    def delete_older_than(self, date: datetime):
        old = [n.id for n in self.items.values() if n.created_at < date]
        for notification_id in old:
            del self.items[notification_id]
        return len(old)


class FakeTemplateStore:
    def __init__(self, templates=()):
        self.items: dict[str, NotificationTemplate] = {t.id: t for t in templates}

    def find_by_id(self, template_id):
        return self.items.get(template_id)

    def find_by_slug(self, slug):
        return next((t for t in self.items.values() if t.slug == slug), None)

    def list(self, *, active_only=False):
        return [t for t in self.items.values() if t.is_active or not active_only]

    def create(self, template):
        self.items[template.id] = template
        return template


class FakePreferenceStore:
    def __init__(self, preferences=()):
        self.items: list[NotificationPreference] = list(preferences)

    def find_by_user_id(self, user_id):
        return [p for p in self.items if p.user_id == user_id]

    def find_by_user_id_and_type(self, user_id, type):
        wanted = {NotificationType(type), NotificationType.GENERAL}
        return [p for p in self.items if p.user_id == user_id and p.type in wanted]

    def find_one(self, user_id, type):
        return next(
            (p for p in self.items if p.user_id == user_id and p.type is NotificationType(type)),
            None,
        )

    def save(self, preference):
        self.items = [p for p in self.items if p.id != preference.id] + [preference]
        return preference


class StubProvider:
    """Provider returning a fixed result, raising, or sleeping before answering."""

    def __init__(
        self,
        channel,
        *,
        result: DeliveryResult | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        journal: list | None = None,
        name: str | None = None,
        available: bool = True,
    ):
        self.channel = NotificationChannel(channel)
        self.name = name or f"stub_{self.channel.value}"
        self._result = result or DeliveryResult.ok(f"{self.channel.value}-1")
        self._error = error
        self._delay = delay
        self._available = available
        self.journal = journal if journal is not None else []
        self.calls: list[tuple[str, str]] = []

    def is_available(self):
        return self._available

    async def send(self, notification, recipient):
        self.calls.append((notification.id, recipient))
        self.journal.append(("start", self.channel.value))
        if self._delay:
            await anyio.sleep(self._delay)
        self.journal.append(("end", self.channel.value))
        if self._error is not None:
            raise self._error
        return self._result


@pytest.fixture
def notification_store():
    return FakeNotificationStore()


@pytest.fixture
def template_store():
    return FakeTemplateStore()


@pytest.fixture
def preference_store():
    return FakePreferenceStore()


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def make_notification():
    def _make(user_id="user-1", **overrides):
        values = {
            "user_id": user_id,
            "type": "info",
            "title": "Hello",
            "message": "Body",
            "channels": ["in_app"],
        }
        values.update(overrides)
        return Notification.create(**values)

    return _make


@pytest.fixture
def database():
    """Give the test a freshly created schema."""

    from notifyhub.infrastructure.database import Base, engine, initialize_database

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(database):
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def create_account(*, email: str, password: str = "s3cret-pass", admin: bool = False, name="Test User"):
    """Insert an active user with either the admin or the member role."""

    from notifyhub.application.use_cases.users import create_role, create_user, ensure_admin_role
    from notifyhub.infrastructure.database import SessionLocal
    from notifyhub.infrastructure.repositories import RoleRepository

    with SessionLocal() as session:
        if admin:
            role_name = ensure_admin_role(session).name
        else:
            role_name = "member"
            if RoleRepository(session).get_by_name(role_name) is None:
                create_role(session, name=role_name, display_name="Member", permissions=["read:profiles"])
        result = create_user(session, name=name, email=email, password=password, role_name=role_name)
    return result.value


def auth_headers(client, email: str, password: str = "s3cret-pass") -> dict[str, str]:
    response = client.post("/auth/token", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def member(client):
    user = create_account(email="member@example.com", name="Ada Lovelace")
    return user, auth_headers(client, "member@example.com")


@pytest.fixture
def admin(client):
    user = create_account(email="admin@example.com", admin=True, name="Grace Hopper")
    return user, auth_headers(client, "admin@example.com")
