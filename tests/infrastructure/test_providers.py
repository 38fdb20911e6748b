"""Tests for the channel providers and their registry."""

from __future__ import annotations

import logging
import time

import pytest
from conftest import StubProvider

from notifyhub.application.use_cases.notifications import ChannelDispatcher
from notifyhub.config import Settings
from notifyhub.domain.entities import NotificationChannel
from notifyhub.infrastructure import email as email_module
from notifyhub.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)
from notifyhub.infrastructure.providers import (
    InAppProvider,
    LoggingProvider,
    ProviderRegistry,
    SendGridEmailProvider,
)
from notifyhub.infrastructure.providers import email as email_provider_module

pytestmark = pytest.mark.anyio


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite://",
        "secret_key": "secret",
        "sendgrid_api_key": "SG.test",
        "sendgrid_sender": "noreply@example.com",
    }
    values.update(overrides)
    return Settings(**values)


class _FakeResponse:
    def __init__(self, status_code, headers=None, body=None):
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body


class _FakeSendGridClient:
    sent: list = []
    response = _FakeResponse(202, {"X-Message-Id": "sg-123"})

    def __init__(self, api_key):
        self.api_key = api_key

    def send(self, message):
        type(self).sent.append(message)
        return type(self).response


@pytest.fixture
def sendgrid_client(monkeypatch):
    monkeypatch.setattr(_FakeSendGridClient, "sent", [])
    monkeypatch.setattr(email_module, "SendGridAPIClient", _FakeSendGridClient)
    return _FakeSendGridClient


class _FakeWebSocket:
    def __init__(self):
        self.messages: list = []

    async def accept(self):
        return None

    async def send_json(self, message):
        self.messages.append(message)


async def test_logging_provider_logs_at_info(make_notification, caplog):
    provider = LoggingProvider("sms")

    with caplog.at_level(logging.INFO, logger="notifyhub.infrastructure.providers.logging_provider"):
        result = await provider.send(make_notification(title="Code 1234"), "user-1")

    assert result.success
    assert result.message_id.startswith("sms_")
    assert provider.name == "log_sms"
    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert "[sms][normal] Code 1234 -> user-1" in record.getMessage()


async def test_logging_provider_logs_urgent_at_warning(make_notification, caplog):
    provider = LoggingProvider("push")

    with caplog.at_level(logging.INFO):
        await provider.send(make_notification(priority="urgent"), "user-1")

    assert caplog.records[-1].levelno == logging.WARNING


async def test_in_app_provider_pushes_to_open_connections(make_notification):
    manager = NotificationConnectionManager()
    socket = _FakeWebSocket()
    await manager.connect("user-1", socket)
    provider = InAppProvider(NotificationPublisher(manager))
    notification = make_notification()

    result = await provider.send(notification, "user-1")

    assert result.success
    assert result.message_id.startswith("inapp_")
    assert result.metadata == {"live_connections": 1}
    assert socket.messages[0]["type"] == "notification"
    assert socket.messages[0]["data"]["id"] == notification.id
    assert "status" not in socket.messages[0]["data"]


async def test_in_app_provider_succeeds_without_connections(make_notification):
    provider = InAppProvider(NotificationPublisher(NotificationConnectionManager()))

    result = await provider.send(make_notification(), "user-1")

    assert result.success
    assert result.metadata == {"live_connections": 0}


async def test_email_provider_sends_to_resolved_address(make_notification, sendgrid_client):
    provider = SendGridEmailProvider(_settings(), lambda user_id: "ada@example.com")

    result = await provider.send(make_notification(title="Invoice"), "user-1")

    assert result.success
    assert result.message_id == "sg-123"
    assert len(sendgrid_client.sent) == 1


async def test_email_provider_fails_without_address(make_notification, sendgrid_client):
    provider = SendGridEmailProvider(_settings(), lambda user_id: None)

    result = await provider.send(make_notification(), "user-1")

    assert not result.success
    assert result.error == "No email address found for recipient: user-1"
    assert sendgrid_client.sent == []


async def test_email_provider_reports_rejected_requests(
    make_notification, sendgrid_client, monkeypatch
):
    monkeypatch.setattr(sendgrid_client, "response", _FakeResponse(400, body=b""))
    provider = SendGridEmailProvider(_settings(), lambda user_id: "ada@example.com")

    result = await provider.send(make_notification(), "ada@example.com")

    assert not result.success
    assert result.error == "SendGrid responded with status 400"
    assert result.metadata == {"status_code": 400}


async def test_blocking_email_send_is_cut_off_by_dispatch_timeout(make_notification, monkeypatch):
    def _hanging_send_email(*args, **kwargs):
        time.sleep(0.5)
        raise RuntimeError("SendGrid unreachable")

    monkeypatch.setattr(email_provider_module, "send_email", _hanging_send_email)
    provider = SendGridEmailProvider(_settings(), lambda user_id: "ada@example.com")
    dispatcher = ChannelDispatcher(ProviderRegistry([provider]), timeout=0.05)

    started = time.monotonic()
    (delivery,) = await dispatcher.dispatch(
        make_notification(channels=["email"]), [NotificationChannel.EMAIL], "user-1"
    )

    assert time.monotonic() - started < 0.4
    assert not delivery.success
    assert delivery.error == "Provider timed out for channel: email"


def test_email_provider_unavailable_without_credentials():
    provider = SendGridEmailProvider(
        _settings(sendgrid_api_key=None, sendgrid_sender=None), lambda user_id: None
    )

    assert not provider.is_available()


def test_registry_returns_first_available_provider():
    offline = StubProvider("email", name="offline", available=False)
    online = StubProvider("email", name="online")
    registry = ProviderRegistry([offline, online, StubProvider("push")])

    assert registry.get("email") is online
    assert registry.get_by_name("offline") is offline
    assert "push" in registry
    assert "sms" not in registry
    assert "fax" not in registry
    assert registry.channels() == [
        registry.get("email").channel,
        registry.get("push").channel,
    ]

    assert registry.unregister("online")
    assert registry.get("email") is None


def test_provider_registry_serves_configured_channels():
    from notifyhub.services import build_dispatcher, build_provider_registry

    settings = _settings(
        sendgrid_api_key=None,
        sendgrid_sender=None,
        notification_log_only_channels=["sms", "push"],
        notification_dispatch_mode="sequential",
    )

    registry = build_provider_registry(settings, NotificationConnectionManager())
    dispatcher = build_dispatcher(settings, registry)

    assert [channel.value for channel in registry.channels()] == ["sms", "push", "in_app"]
    assert registry.get("email") is None
    assert registry.get_by_name("sendgrid") is not None
    assert dispatcher.mode.value == "sequential"
    assert dispatcher.timeout == settings.notification_provider_timeout_seconds
