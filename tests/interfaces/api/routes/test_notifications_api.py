"""Integration tests for the notification endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from conftest import auth_headers, create_account


def _send(client, headers, **payload):
    body = {"type": "info", "title": "Welcome", "content": "Hello there"}
    body.update(payload)
    return client.post("/notifications/send", json=body, headers=headers)


def test_missing_token_returns_structured_401(client):
    response = client.get("/notifications/")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Authentication required",
        "error": "AUTHENTICATION_REQUIRED",
    }
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_rejected(client):
    response = client.get(
        "/notifications/", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_with_wrong_password(client, member):
    response = client.post(
        "/auth/token", data={"username": "member@example.com", "password": "wrong-pass"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect email or password"


def test_send_in_app_notification_to_self(client, member):
    user, headers = member

    response = _send(client, headers, channels=["in_app"], metadata={"origin": "test"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Notification sent successfully"
    notification = body["notification"]
    assert notification["user_id"] == user.id
    assert notification["status"] == "sent"
    assert notification["metadata"]["origin"] == "test"
    assert notification["metadata"]["senderId"] == user.id
    assert {"requestId", "timestamp"} <= set(notification["metadata"])
    assert body["deliveries"][0]["message_id"].startswith("inapp_")


def test_send_uses_default_channel(client, member):
    _, headers = member

    response = _send(client, headers)

    assert response.status_code == 201
    assert response.json()["notification"]["channels"] == ["in_app"]


def test_send_through_unconfigured_channel_fails_and_stays_readable(client, member):
    _, headers = member

    response = _send(client, headers, channels=["in_app", "email"])

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Some notifications failed"
    assert body["notification"]["status"] == "failed"
    assert body["notification"]["last_error"] == "No provider found for channel: email"

    read = client.put(f"/notifications/{body['notification']['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["notification"]["status"] == "read"


def test_send_validation_error(client, member):
    _, headers = member

    response = _send(client, headers, title="", channels=["pigeon"])

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Validation failed: ")


def test_send_with_unknown_template(client, member):
    _, headers = member

    response = _send(client, headers, title="", content="", template_id="no-such-template")

    assert response.status_code == 404
    assert response.json()["error"] == "Notification template not found"


def test_list_read_and_stats(client, member):
    _, headers = member
    first = _send(client, headers).json()["notification"]
    _send(client, headers)

    listing = client.get("/notifications/", params={"limit": 1}, headers=headers)
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert listing.json()["has_more"] is True

    read = client.put(f"/notifications/{first['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["message"] == "Notification marked as read"
    assert read.json()["notification"]["read_at"] is not None

    stats = client.get("/notifications/stats", headers=headers).json()
    assert stats["total"] == 2
    assert stats["unread"] == 1
    assert stats["by_status"]["read"] == 1

    read_all = client.put("/notifications/read-all", headers=headers)
    assert read_all.json() == {"success": True, "count": 1}


def test_list_rejects_out_of_range_limit(client, member):
    _, headers = member

    response = client.get("/notifications/", params={"limit": 1000}, headers=headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_other_users_cannot_touch_a_notification(client, member):
    _, headers = member
    notification = _send(client, headers).json()["notification"]
    create_account(email="other@example.com")
    other_headers = auth_headers(client, "other@example.com")

    read = client.put(f"/notifications/{notification['id']}/read", headers=other_headers)
    deleted = client.delete(f"/notifications/{notification['id']}", headers=other_headers)

    assert read.status_code == 403
    assert read.json() == {"success": False, "message": "Unauthorized", "error": "UNAUTHORIZED"}
    assert deleted.status_code == 403


def test_delete_and_missing_notification(client, member):
    _, headers = member
    notification = _send(client, headers).json()["notification"]

    deleted = client.delete(f"/notifications/{notification['id']}", headers=headers)
    missing = client.put(f"/notifications/{notification['id']}/read", headers=headers)

    assert deleted.json() == {"success": True, "message": "Notification deleted", "notification": None}
    assert missing.status_code == 404


def test_cancel_rejects_sent_notification(client, member):
    _, headers = member
    notification = _send(client, headers).json()["notification"]

    response = client.post(f"/notifications/{notification['id']}/cancel", headers=headers)

    assert response.status_code == 422
    assert response.json()["error"] == "BUSINESS_RULE_VIOLATION"


def test_preferences_disable_channel(client, member):
    _, headers = member

    defaults = client.get("/notifications/preferences", headers=headers)
    assert defaults.status_code == 200
    assert defaults.json()[0]["type"] == "general"

    updated = client.put(
        "/notifications/preferences",
        json={"channel": "in_app", "enabled": False},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["in_app_enabled"] is False

    response = _send(client, headers, channels=["in_app"])
    assert response.status_code == 422
    assert response.json()["error"] == "No enabled notification channels for this user"


def test_cleanup_requires_admin(client, member, admin):
    _, member_headers = member
    _, admin_headers = admin

    denied = client.post("/notifications/cleanup", headers=member_headers)
    allowed = client.post("/notifications/cleanup", headers=admin_headers)

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json() == {"expired": 0, "outdated": 0, "total": 0}


def test_templates_are_managed_by_admins(client, member, admin):
    _, member_headers = member
    _, admin_headers = admin
    payload = {
        "name": "Welcome",
        "slug": "welcome",
        "type": "info",
        "channel": "in_app",
        "subject": "Hi {{name}}",
        "template": "Welcome aboard, {{ name }}!",
    }

    assert client.post("/notification-templates/", json=payload, headers=member_headers).status_code == 403
    created = client.post("/notification-templates/", json=payload, headers=admin_headers)
    duplicate = client.post("/notification-templates/", json=payload, headers=admin_headers)

    assert created.status_code == 201
    assert created.json()["variables"] == ["name"]
    assert duplicate.status_code == 409

    sent = _send(
        client,
        member_headers,
        title="",
        content="",
        channels=["in_app"],
        template_id=created.json()["id"],
        template_variables={"name": "Ada"},
    )
    assert sent.status_code == 201
    assert sent.json()["notification"]["title"] == "Hi Ada"
    assert sent.json()["notification"]["message"] == "Welcome aboard, Ada!"


def test_websocket_sends_unread_notifications_and_answers_ping(client, member):
    _, headers = member
    notification = _send(client, headers).json()["notification"]
    token = headers["Authorization"].split(" ", 1)[1]

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [notification["id"]]
        assert init["data"][0]["status"] == "sent"

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}
