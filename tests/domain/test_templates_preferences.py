"""Tests for template rendering and preference channel rules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from notifyhub.domain.entities import (
    NotificationChannel,
    NotificationPreference,
    NotificationTemplate,
)
from notifyhub.domain.errors import DomainError, ErrorKind


def _template(**overrides):
    values = {
        "name": "Welcome",
        "slug": "Welcome-Email",
        "type": "info",
        "channel": "email",
        "template": "Hi {{ name }}, welcome to {{product}}. {{ missing }}",
        "subject": "Welcome {{name}}",
        "default_values": {"product": "NotifyHub"},
    }
    values.update(overrides)
    return NotificationTemplate.create(**values)


def test_template_create_normalizes_slug_and_collects_variables():
    template = _template(variables=["name"])

    assert template.slug == "welcome-email"
    assert template.variables == ("name", "product", "missing")
    assert template.is_active


def test_template_rejects_invalid_slug():
    with pytest.raises(DomainError) as exc_info:
        _template(slug="not a slug")

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert "slug:" in exc_info.value.message


def test_render_uses_defaults_and_keeps_unknown_placeholders():
    template = _template()

    rendered = template.render({"name": "Ada"})

    assert rendered == "Hi Ada, welcome to NotifyHub. {{ missing }}"
    assert template.missing_variables({"name": "Ada"}) == ["missing"]


def test_variables_override_default_values():
    assert _template().render({"name": "Ada", "product": "Other"}).startswith(
        "Hi Ada, welcome to Other."
    )


def test_render_subject():
    assert _template().render_subject({"name": "Ada"}) == "Welcome Ada"
    assert _template(subject=None).render_subject({"name": "Ada"}) is None


def test_deactivate_and_activate_template():
    template = _template()

    inactive = template.deactivate()

    assert not inactive.is_active
    assert inactive.updated_at > template.updated_at
    assert inactive.activate().is_active


def test_preference_defaults():
    preference = NotificationPreference.create(user_id="user-1")

    assert preference.is_channel_enabled("email")
    assert preference.is_channel_enabled(NotificationChannel.IN_APP)
    assert not preference.is_channel_enabled("sms")


def test_webhook_channel_is_always_enabled():
    preference = NotificationPreference.create(
        user_id="user-1",
        email_enabled=False,
        sms_enabled=False,
        push_enabled=False,
        in_app_enabled=False,
    )

    assert preference.is_channel_enabled("webhook")


def test_with_channel_switches_the_matching_flag():
    preference = NotificationPreference.create(user_id="user-1").with_channel("email", False)

    assert not preference.email_enabled
    assert not preference.is_channel_enabled("email")

    with pytest.raises(DomainError):
        preference.with_channel("webhook", False)


def test_quiet_hours_wrap_past_midnight():
    preference = NotificationPreference.create(
        user_id="user-1",
        quiet_hours_enabled=True,
        quiet_hours_start="22:00",
        quiet_hours_end="07:00",
        timezone="UTC",
    )

    assert preference.is_in_quiet_hours(datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc))
    assert preference.is_in_quiet_hours(datetime(2024, 1, 2, 6, 59, tzinfo=timezone.utc))
    assert not preference.is_in_quiet_hours(datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc))


def test_quiet_hours_within_a_day():
    preference = NotificationPreference.create(
        user_id="user-1",
        quiet_hours_enabled=True,
        quiet_hours_start="12:00",
        quiet_hours_end="13:00",
    )

    assert preference.is_in_quiet_hours(datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc))
    assert not preference.is_in_quiet_hours(datetime(2024, 1, 1, 14, 0, tzinfo=timezone.utc))


def test_quiet_hours_require_valid_times():
    with pytest.raises(DomainError):
        NotificationPreference.create(user_id="user-1", quiet_hours_enabled=True)

    with pytest.raises(DomainError):
        NotificationPreference.create(
            user_id="user-1",
            quiet_hours_enabled=True,
            quiet_hours_start="25:00",
            quiet_hours_end="07:00",
        )
