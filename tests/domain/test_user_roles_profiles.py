"""Tests for roles, role assignments and user profiles."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from notifyhub.domain.entities import UserProfile, UserRole, UserRoleAssignment
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import now_in_app_timezone


def _role(**overrides):
    values = {"name": " Editor ", "display_name": "Editor", "level": 10}
    values.update(overrides)
    return UserRole.create(**values)


def test_role_normalizes_name_and_permissions():
    role = _role(permissions=[" Read:Users ", "read:users", "WRITE:profiles"])

    assert role.name == "editor"
    assert role.permissions == ("read:users", "write:profiles")
    assert role.has_permission("READ:USERS")
    assert role.has_read_permissions()
    assert role.has_write_permissions()
    assert not role.has_admin_permissions()


def test_role_permission_helpers():
    role = _role().add_permission("admin:users")

    assert role.has_admin_permissions()
    assert role.has_all_permissions(["admin:users"])
    assert not role.remove_permission("admin:users").has_admin_permissions()


def test_role_level_comparisons():
    low, high = _role(level=1), _role(name="manager", level=50)

    assert high.is_higher_level(low)
    assert low.is_lower_level(high)
    assert low.is_same_level(_role(level=1))


def test_system_roles_cannot_be_modified_or_deactivated():
    system = _role(is_system=True)

    assert not system.can_be_deleted()
    with pytest.raises(DomainError) as exc_info:
        system.deactivate()
    assert exc_info.value.kind is ErrorKind.BUSINESS_RULE
    with pytest.raises(DomainError):
        system.update_info(display_name="Other")


def test_role_rejects_negative_level():
    with pytest.raises(DomainError):
        _role(level=-1)


def test_assignment_validity_follows_expiration_and_activity():
    now = now_in_app_timezone()
    assignment = UserRoleAssignment.create(
        user_id="user-1", role_id="role-1", expires_at=now + timedelta(days=1)
    )

    assert assignment.is_valid(now)
    assert not assignment.is_valid(now + timedelta(days=2))
    assert not assignment.deactivate().is_valid(now)


def test_assignment_rejects_past_expiration():
    with pytest.raises(DomainError):
        UserRoleAssignment.create(
            user_id="user-1",
            role_id="role-1",
            expires_at=now_in_app_timezone() - timedelta(minutes=1),
        )


def test_profile_display_name_fallbacks():
    assert UserProfile.create(user_id="user-1").get_display_name() == "Unknown User"

    named = UserProfile.create(user_id="user-1", first_name="Ada", last_name="Lovelace")
    assert named.display_name == "Ada Lovelace"


def test_changing_phone_number_resets_verification():
    profile = UserProfile.create(user_id="user-1", phone_number="+100").verify_phone_number()
    assert profile.is_phone_verified

    assert profile.update_contact_info(phone_number="+100").is_phone_verified
    assert not profile.update_contact_info(phone_number="+200").is_phone_verified


def test_profile_validation():
    with pytest.raises(DomainError):
        UserProfile.create(user_id="user-1", website="not-a-url")
    with pytest.raises(DomainError):
        UserProfile.create(user_id="user-1", gender="unknown")


def test_changed_fields_rejects_non_editable_attributes():
    profile = UserProfile.create(user_id="user-1", bio="old")

    assert profile.changed_fields({"bio": "new"}) == {"bio": ("old", "new")}
    assert profile.changed_fields({"bio": "old"}) == {}
    with pytest.raises(DomainError):
        profile.changed_fields({"is_email_verified": True})


def test_is_adult():
    profile = UserProfile.create(user_id="user-1", date_of_birth=date(2000, 6, 15))

    assert profile.is_adult(today=date(2018, 6, 15))
    assert not profile.is_adult(today=date(2018, 6, 14))
