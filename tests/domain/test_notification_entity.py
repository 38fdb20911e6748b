"""Tests for the notification entity lifecycle and validation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notifyhub.application.use_cases.notifications import NotificationMapper
from notifyhub.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
    validate_notification_fields,
)
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import now_in_app_timezone


def _valid_fields(**overrides):
    fields = {
        "user_id": "user-1",
        "type": "info",
        "title": "Hello",
        "message": "Body",
        "channels": ["email"],
    }
    fields.update(overrides)
    return fields


def test_valid_fields_report_no_errors():
    assert validate_notification_fields(**_valid_fields()) == []


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"user_id": ""}, "userId: Recipient is required"),
        ({"user_id": "bad id!"}, "userId: Invalid identifier format"),
        ({"user_id": "user-1\n"}, "userId: Invalid identifier format"),
        ({"title": "   "}, "title: Title is required"),
        ({"title": "x" * 256}, "title: Title must be at most 255 characters"),
        ({"message": ""}, "message: Message is required"),
        ({"message": "x" * 2001}, "message: Message must be at most 2000 characters"),
        ({"channels": []}, "channels: At least one channel is required"),
        ({"metadata": ["not", "a", "dict"]}, "metadata: Expected an object"),
    ],
)
def test_invalid_fields_are_reported(overrides, expected):
    assert expected in validate_notification_fields(**_valid_fields(**overrides))


def test_invalid_channel_reports_its_index():
    errors = validate_notification_fields(**_valid_fields(channels=["email", "fax"]))

    assert len(errors) == 1
    assert errors[0].startswith("channels.1: Invalid channel")


def test_create_raises_validation_error_with_every_problem():
    with pytest.raises(DomainError) as exc_info:
        Notification.create(**_valid_fields(title="", message=""))

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert exc_info.value.message.startswith("Validation failed: ")
    assert "title: Title is required" in exc_info.value.message
    assert "message: Message is required" in exc_info.value.message


def test_create_builds_pending_notification_with_unique_channels():
    notification = Notification.create(
        **_valid_fields(channels=["email", "push", "email"], priority="high")
    )

    assert notification.status is NotificationStatus.PENDING
    assert notification.priority is NotificationPriority.HIGH
    assert notification.channels == (NotificationChannel.EMAIL, NotificationChannel.PUSH)
    assert notification.retry_count == 0
    assert notification.created_at == notification.updated_at


def test_transitions_return_new_instances_with_later_updated_at():
    notification = Notification.create(**_valid_fields())

    processing = notification.mark_as_processing()
    sent = processing.mark_as_sent()
    read = sent.mark_as_read()

    assert notification.status is NotificationStatus.PENDING
    assert processing.updated_at > notification.updated_at
    assert sent.updated_at > processing.updated_at
    assert read.updated_at > sent.updated_at
    assert sent.sent_at is not None
    assert read.read_at is not None
    assert read.delivered_at is not None


def test_mark_as_failed_records_error_and_allows_retry():
    failed = Notification.create(**_valid_fields()).mark_as_failed("SMTP down")

    assert failed.status is NotificationStatus.FAILED
    assert failed.last_error == "SMTP down"
    assert failed.can_retry()

    exhausted = failed
    for _ in range(failed.max_retries):
        exhausted = exhausted.increment_retry()
    assert not exhausted.can_retry()


def test_failed_notification_can_still_be_delivered_and_read():
    failed = Notification.create(**_valid_fields()).mark_as_failed("SMTP down")

    delivered = failed.mark_as_delivered()
    read = failed.mark_as_read()

    assert delivered.status is NotificationStatus.DELIVERED
    assert read.status is NotificationStatus.READ
    assert read.read_at is not None
    assert read.last_error == "SMTP down"


def test_cancelled_notification_cannot_be_sent_failed_or_read():
    cancelled = Notification.create(**_valid_fields()).mark_as_cancelled()

    with pytest.raises(DomainError) as exc_info:
        cancelled.mark_as_sent()
    assert exc_info.value.kind is ErrorKind.BUSINESS_RULE

    with pytest.raises(DomainError):
        cancelled.mark_as_failed("late")
    with pytest.raises(DomainError):
        cancelled.mark_as_read()


def test_sent_notification_cannot_be_cancelled_or_processed():
    sent = Notification.create(**_valid_fields()).mark_as_sent()

    with pytest.raises(DomainError):
        sent.mark_as_cancelled()
    with pytest.raises(DomainError):
        sent.mark_as_processing()


def test_expiry_and_schedule_checks():
    now = now_in_app_timezone()
    notification = Notification.create(
        **_valid_fields(
            scheduled_for=now + timedelta(hours=1), expires_at=now + timedelta(hours=2)
        )
    )

    assert notification.is_scheduled(now)
    assert not notification.is_expired(now)
    assert notification.is_expired(now + timedelta(hours=3))


def test_with_delivery_data_merges_entries():
    notification = Notification.create(**_valid_fields())

    first = notification.with_delivery_data({"email": {"success": True}})
    second = first.with_delivery_data({"push": {"success": False}})

    assert set(second.delivery_data) == {"email", "push"}
    assert notification.delivery_data == {}


def test_mapper_round_trip_preserves_fields():
    notification = (
        Notification.create(**_valid_fields(metadata={"source": "billing"}))
        .with_delivery_data({"email": {"success": True, "messageId": "m-1"}})
        .mark_as_sent()
    )

    response = NotificationMapper.to_response(notification)
    assert response.status == "sent"
    assert response.channels == ["email"]

    assert NotificationMapper.from_response(response) == notification
