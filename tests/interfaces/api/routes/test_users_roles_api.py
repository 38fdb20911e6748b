"""Integration tests for the user profile and role endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from conftest import auth_headers, create_account


def test_read_current_user(client, member):
    user, headers = member

    response = client.get("/users/me", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user.id
    assert body["email"] == "member@example.com"
    assert body["role"]["name"] == "member"
    assert body["last_login"] is not None


def test_update_profile_and_detect_no_changes(client, member):
    user, headers = member

    updated = client.put("/users/me/profile", json={"bio": "Mathematician"}, headers=headers)
    unchanged = client.put("/users/me/profile", json={"bio": "Mathematician"}, headers=headers)

    assert updated.status_code == 200
    assert updated.json()["message"] == "Profile updated successfully"
    assert updated.json()["profile"]["bio"] == "Mathematician"
    assert unchanged.status_code == 400
    assert unchanged.json() == {
        "success": False,
        "message": "No changes detected in profile",
        "error": "VALIDATION_ERROR",
    }

    activity = client.get(f"/users/{user.id}/activity", headers=headers).json()
    assert [entry["type"] for entry in activity] == ["profile_update"]
    assert activity[0]["metadata"]["updatedFields"] == ["bio"]


def test_profile_update_rejects_unknown_fields(client, member):
    _, headers = member

    response = client.put("/users/me/profile", json={"is_email_verified": True}, headers=headers)

    assert response.status_code == 422


def test_viewing_another_profile_is_recorded_for_the_owner(client, member, admin):
    user, member_headers = member
    _, admin_headers = admin

    profile = client.get(f"/users/{user.id}/profile", headers=admin_headers)

    assert profile.status_code == 200
    assert profile.json()["display_name"] == "Ada Lovelace"
    activity = client.get(
        f"/users/{user.id}/activity", params={"type": "profile_view"}, headers=member_headers
    ).json()
    assert len(activity) == 1


def test_activity_of_other_users_is_private(client, member):
    _, headers = member
    other = create_account(email="other@example.com")

    response = client.get(f"/users/{other.id}/activity", headers=headers)

    assert response.status_code == 403


def test_unknown_profile_returns_404(client, member):
    _, headers = member

    response = client.get("/users/does-not-exist/profile", headers=headers)

    assert response.status_code == 404
    assert response.json()["message"] == "User profile with ID does-not-exist not found"


def test_roles_require_admin(client, member):
    _, headers = member

    response = client.get("/roles/", headers=headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Administrator privileges required"


def test_role_lifecycle(client, admin):
    _, headers = admin

    created = client.post(
        "/roles/",
        json={"name": "Editor", "display_name": "Editor", "level": 10, "permissions": ["WRITE:Profiles"]},
        headers=headers,
    )
    assert created.status_code == 201
    role = created.json()
    assert role["name"] == "editor"
    assert role["permissions"] == ["write:profiles"]

    duplicate = client.post(
        "/roles/", json={"name": "editor", "display_name": "Editor"}, headers=headers
    )
    assert duplicate.status_code == 409

    updated = client.put(f"/roles/{role['id']}", json={"level": 20}, headers=headers)
    assert updated.json()["level"] == 20

    deactivated = client.post(f"/roles/{role['id']}/deactivate", headers=headers)
    assert deactivated.json()["is_active"] is False
    activated = client.post(f"/roles/{role['id']}/activate", headers=headers)
    assert activated.json()["is_active"] is True

    assert client.delete(f"/roles/{role['id']}", headers=headers).status_code == 204
    assert client.get(f"/roles/{role['id']}", headers=headers).status_code == 404


def test_system_role_cannot_be_deleted_or_deactivated(client, admin):
    user, headers = admin

    deleted = client.delete(f"/roles/{user.role.id}", headers=headers)
    deactivated = client.post(f"/roles/{user.role.id}/deactivate", headers=headers)

    assert deleted.status_code == 422
    assert deleted.json()["message"] == "Cannot delete system roles"
    assert deactivated.status_code == 422


def test_primary_role_cannot_be_deleted(client, member, admin):
    user, _ = member
    _, headers = admin

    response = client.delete(f"/roles/{user.role.id}", headers=headers)

    assert response.status_code == 409


def test_assign_and_revoke_role(client, member, admin):
    user, member_headers = member
    _, headers = admin
    role = client.post(
        "/roles/", json={"name": "reviewer", "display_name": "Reviewer"}, headers=headers
    ).json()

    assigned = client.post(
        f"/roles/{role['id']}/assignments", json={"user_id": user.id}, headers=headers
    )
    again = client.post(
        f"/roles/{role['id']}/assignments", json={"user_id": user.id}, headers=headers
    )

    assert assigned.status_code == 201
    assert again.status_code == 409
    roles = client.get(f"/users/{user.id}/roles", headers=member_headers).json()
    assert [r["name"] for r in roles] == ["reviewer"]

    revoked = client.delete(f"/roles/assignments/{assigned.json()['id']}", headers=headers)
    assert revoked.status_code == 200
    assert revoked.json()["is_active"] is False
    assert client.get(f"/users/{user.id}/roles", headers=member_headers).json() == []

    activity = client.get(f"/users/{user.id}/activity", headers=member_headers).json()
    assert [entry["type"] for entry in activity][:2] == ["role_revoke", "role_assign"]


def test_assign_unknown_user(client, admin):
    _, headers = admin
    role = client.post(
        "/roles/", json={"name": "reviewer", "display_name": "Reviewer"}, headers=headers
    ).json()

    response = client.post(
        f"/roles/{role['id']}/assignments", json={"user_id": "ghost"}, headers=headers
    )

    assert response.status_code == 404


def test_login_rejected_for_other_accounts_password(client, member):
    create_account(email="second@example.com", password="another-pass")

    assert auth_headers(client, "second@example.com", "another-pass")
    response = client.post(
        "/auth/token", data={"username": "second@example.com", "password": "s3cret-pass"}
    )
    assert response.status_code == 401
