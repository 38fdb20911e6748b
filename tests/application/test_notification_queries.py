"""Tests for listing, reading and managing notifications, preferences and templates."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest
from conftest import FakeNotificationStore, FakePreferenceStore, FakeTemplateStore, StubProvider

from notifyhub.application.use_cases.notifications import (
    CancelNotificationUseCase,
    ChannelDispatcher,
    CleanupNotificationsUseCase,
    CreateNotificationTemplateUseCase,
    CreateTemplateRequest,
    DeleteNotificationUseCase,
    GetNotificationPreferencesUseCase,
    GetNotificationStatsUseCase,
    GetNotificationsRequest,
    GetNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadRequest,
    MarkNotificationReadUseCase,
    SendNotificationRequest,
    SendNotificationUseCase,
    UpdateNotificationPreferenceUseCase,
    UpdatePreferenceRequest,
)
from notifyhub.domain.entities import NotificationPreference, NotificationStatus
from notifyhub.domain.errors import ErrorKind
from notifyhub.domain.result import Err, Ok
from notifyhub.infrastructure.providers import ProviderRegistry
from notifyhub.utils import now_in_app_timezone


def test_empty_listing_reports_first_page(notification_store):
    response = GetNotificationsUseCase(notification_store).execute(
        GetNotificationsRequest(recipient_id="user-1")
    )

    assert response.success
    assert response.notifications == []
    assert response.total == 0
    assert response.page == 1
    assert response.limit == 10
    assert response.has_more is False


def test_full_page_reports_more_results_and_first_page(make_notification):
    store = FakeNotificationStore([make_notification() for _ in range(4)])

    response = GetNotificationsUseCase(store).execute(
        GetNotificationsRequest(recipient_id="user-1", limit=2, offset=2)
    )

    assert response.success
    assert response.total == 2
    assert response.page == 1
    assert response.has_more is True


def test_listing_filters_by_status(make_notification):
    sent = make_notification().mark_as_sent()
    store = FakeNotificationStore([sent, make_notification(), make_notification("user-2")])

    response = GetNotificationsUseCase(store).execute(
        GetNotificationsRequest(recipient_id="user-1", status="sent")
    )

    assert [n.id for n in response.notifications] == [sent.id]


def test_listing_rejects_invalid_paging(notification_store):
    response = GetNotificationsUseCase(notification_store).execute(
        GetNotificationsRequest(recipient_id="user-1", limit=500, status="bogus")
    )

    assert not response.success
    assert response.error_kind is ErrorKind.VALIDATION
    assert "limit: Limit must be between 1 and 100" in response.error
    assert "status: Unknown status bogus" in response.error


def test_mark_read_updates_owned_notification(make_notification):
    notification = make_notification()
    store = FakeNotificationStore([notification])

    result = MarkNotificationReadUseCase(store).execute(
        MarkNotificationReadRequest(notification_id=notification.id, recipient_id="user-1")
    )

    assert result.success
    assert result.message == "Notification marked as read"
    assert result.notification.status == "read"
    assert result.notification.read_at is not None


def test_mark_read_by_other_user_is_unauthorized(make_notification):
    notification = make_notification()
    store = FakeNotificationStore([notification])

    result = MarkNotificationReadUseCase(store).execute(
        MarkNotificationReadRequest(notification_id=notification.id, recipient_id="user-2")
    )

    assert not result.success
    assert result.error == "Unauthorized"
    assert result.error_kind is ErrorKind.UNAUTHORIZED
    assert store.updated == []


def test_mark_read_of_unknown_notification(notification_store):
    result = MarkNotificationReadUseCase(notification_store).execute(
        MarkNotificationReadRequest(notification_id="missing", recipient_id="user-1")
    )

    assert result.error == "Notification not found"
    assert result.error_kind is ErrorKind.NOT_FOUND


def test_mark_read_of_cancelled_notification_is_rejected(make_notification):
    cancelled = make_notification().mark_as_cancelled()
    store = FakeNotificationStore([cancelled])

    result = MarkNotificationReadUseCase(store).execute(
        MarkNotificationReadRequest(notification_id=cancelled.id, recipient_id="user-1")
    )

    assert result.error_kind is ErrorKind.BUSINESS_RULE
    assert store.updated == []


@pytest.mark.anyio
async def test_partially_delivered_notification_can_be_marked_read():
    store = FakeNotificationStore()
    dispatcher = ChannelDispatcher(ProviderRegistry([StubProvider("in_app")]))
    send = SendNotificationUseCase(store, FakeTemplateStore(), FakePreferenceStore(), dispatcher)
    sent = await send.execute(
        SendNotificationRequest(
            recipient_id="user-1",
            type="info",
            title="Invoice",
            content="Your invoice is ready.",
            channels=["in_app", "email"],
        )
    )
    assert sent.notification.status == "failed"
    assert store.get_unread_count("user-1") == 1

    result = MarkNotificationReadUseCase(store).execute(
        MarkNotificationReadRequest(notification_id=sent.notification.id, recipient_id="user-1")
    )

    assert result.success
    assert result.notification.status == "read"
    assert result.notification.last_error == "No provider found for channel: email"
    assert store.get_unread_count("user-1") == 0


def test_mark_all_read(make_notification):
    store = FakeNotificationStore([make_notification(), make_notification()])

    assert MarkAllNotificationsReadUseCase(store).execute("user-1") == Ok(2)
    assert store.get_unread_count("user-1") == 0


def test_cancel_only_pending_notifications(make_notification):
    pending, sent = make_notification(), make_notification().mark_as_sent()
    store = FakeNotificationStore([pending, sent])
    use_case = CancelNotificationUseCase(store)

    cancelled = use_case.execute(pending.id, "user-1")
    rejected = use_case.execute(sent.id, "user-1")

    assert isinstance(cancelled, Ok)
    assert cancelled.value.status == "cancelled"
    assert isinstance(rejected, Err)
    assert rejected.error.kind is ErrorKind.BUSINESS_RULE


def test_delete_checks_ownership(make_notification):
    notification = make_notification()
    store = FakeNotificationStore([notification])
    use_case = DeleteNotificationUseCase(store)

    denied = use_case.execute(notification.id, "user-2")
    deleted = use_case.execute(notification.id, "user-1")

    assert isinstance(denied, Err)
    assert denied.error.kind is ErrorKind.UNAUTHORIZED
    assert deleted == Ok(True)
    assert store.deleted == [notification.id]


def test_stats_count_statuses_and_unread(make_notification):
    store = FakeNotificationStore(
        [
            make_notification(),
            make_notification().mark_as_sent(),
            make_notification().mark_as_failed("boom"),
            make_notification().mark_as_read(),
        ]
    )

    result = GetNotificationStatsUseCase(store).execute("user-1")

    assert isinstance(result, Ok)
    stats = result.value
    assert stats.total == 4
    assert stats.unread == 3
    assert stats.by_status[NotificationStatus.FAILED.value] == 1


def test_cleanup_removes_expired_and_outdated(make_notification):
    now = now_in_app_timezone()
    expired = make_notification(expires_at=now - timedelta(minutes=1))
    outdated = replace(make_notification(), created_at=now - timedelta(days=120))
    fresh = make_notification()
    store = FakeNotificationStore([expired, outdated, fresh])

    result = CleanupNotificationsUseCase(store, retention_days=90).execute()

    assert isinstance(result, Ok)
    assert (result.value.expired, result.value.outdated, result.value.total) == (1, 1, 2)
    assert list(store.items) == [fresh.id]


def test_preferences_default_to_unsaved_general_preference(preference_store):
    result = GetNotificationPreferencesUseCase(preference_store).execute("user-1")

    assert isinstance(result, Ok)
    (preference,) = result.value
    assert preference.type.value == "general"
    assert preference_store.items == []


def test_update_preference_creates_then_updates(preference_store):
    use_case = UpdateNotificationPreferenceUseCase(preference_store)

    first = use_case.execute(
        UpdatePreferenceRequest(user_id="user-1", channel="email", enabled=False)
    )
    second = use_case.execute(
        UpdatePreferenceRequest(user_id="user-1", frequency="daily")
    )

    assert isinstance(first, Ok) and isinstance(second, Ok)
    assert second.value.id == first.value.id
    assert second.value.email_enabled is False
    assert second.value.frequency.value == "daily"
    assert len(preference_store.items) == 1


def test_update_preference_requires_channel_and_enabled_together():
    store = FakePreferenceStore([NotificationPreference.create(user_id="user-1")])

    result = UpdateNotificationPreferenceUseCase(store).execute(
        UpdatePreferenceRequest(user_id="user-1", channel="email")
    )

    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.VALIDATION


def test_create_template_rejects_duplicate_slug():
    store = FakeTemplateStore()
    use_case = CreateNotificationTemplateUseCase(store)
    request = CreateTemplateRequest(
        name="Welcome", slug="welcome", type="info", channel="email", template="Hi {{name}}"
    )

    created = use_case.execute(request)
    duplicate = use_case.execute(request)

    assert isinstance(created, Ok)
    assert created.value.variables == ("name",)
    assert isinstance(duplicate, Err)
    assert duplicate.error.kind is ErrorKind.CONFLICT
    assert duplicate.error.message == "Notification template with slug 'welcome' already exists"
