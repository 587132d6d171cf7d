"""Tests for staff messaging and participant management."""

from __future__ import annotations

import pytest

from models import db
from models.message import Message


@pytest.fixture()
def people(make_user):
    return {
        "admin": make_user("admin@example.com", role="admin"),
        "manager": make_user("manager@example.com", role="manager"),
        "participant": make_user("participant@example.com", role="participant"),
        "client": make_user("client@example.com", role="client"),
    }


def _send(client, headers, recipient_id, **overrides):
    payload = {
        "recipientId": recipient_id,
        "subject": "Hello",
        "content": "Welcome aboard",
    }
    payload.update(overrides)
    return client.post("/api/messages/send", json=payload, headers=headers)


def test_manager_sends_message_to_participant(client, people, auth_headers):
    response = _send(
        client,
        auth_headers(people["manager"]),
        people["participant"],
        messageType="campaign_invite",
        priority="high",
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["recipientId"] == people["participant"]
    assert body["messageType"] == "campaign_invite"
    assert body["priority"] == "high"
    assert body["isRead"] is False

    inbox = client.get("/api/messages", headers=auth_headers(people["participant"]))
    assert [m["subject"] for m in inbox.get_json()] == ["Hello"]


def test_non_staff_cannot_send(client, people, auth_headers):
    response = _send(client, auth_headers(people["client"]), people["participant"])

    assert response.status_code == 403


@pytest.mark.parametrize(
    "overrides, status",
    [
        ({"recipientId": 999}, 404),
        ({"recipientId": "abc"}, 400),
        ({"messageType": "spam"}, 400),
        ({"priority": "critical"}, 400),
        ({"subject": ""}, 400),
    ],
)
def test_send_validation(client, people, auth_headers, overrides, status):
    response = _send(
        client, auth_headers(people["admin"]), people["participant"], **overrides
    )

    assert response.status_code == status


def test_inbox_is_newest_first_and_filterable(client, people, auth_headers):
    staff = auth_headers(people["admin"])
    _send(client, staff, people["participant"], subject="First")
    _send(client, staff, people["participant"], subject="Second", messageType="warning")

    participant = auth_headers(people["participant"])
    inbox = client.get("/api/messages", headers=participant).get_json()
    warnings = client.get("/api/messages?type=warning", headers=participant).get_json()

    assert [m["subject"] for m in inbox] == ["Second", "First"]
    assert [m["subject"] for m in warnings] == ["Second"]
    assert client.get("/api/messages?type=bogus", headers=participant).status_code == 400


def test_only_recipient_marks_read(app, client, people, auth_headers):
    message_id = _send(
        client, auth_headers(people["admin"]), people["participant"]
    ).get_json()["id"]

    other = client.post(
        f"/api/messages/{message_id}/read", headers=auth_headers(people["client"])
    )
    missing = client.post(
        "/api/messages/999/read", headers=auth_headers(people["participant"])
    )
    ok = client.post(
        f"/api/messages/{message_id}/read", headers=auth_headers(people["participant"])
    )

    assert other.status_code == 403
    assert missing.status_code == 404
    assert ok.status_code == 200
    with app.app_context():
        message = db.session.get(Message, message_id)
        assert message.is_read is True
        assert message.read_at is not None


def test_conversation_includes_both_directions(app, client, people, auth_headers):
    _send(client, auth_headers(people["manager"]), people["participant"], subject="Out")
    with app.app_context():
        db.session.add(
            Message(
                sender_id=people["participant"],
                recipient_id=people["manager"],
                subject="Reply",
                content="Thanks",
            )
        )
        db.session.commit()

    response = client.get(
        f"/api/messages/conversation/{people['participant']}",
        headers=auth_headers(people["manager"]),
    )

    assert response.status_code == 200
    assert [m["subject"] for m in response.get_json()] == ["Out", "Reply"]


def test_participants_listing_is_staff_only(client, people, auth_headers):
    staff = client.get("/api/manager/participants", headers=auth_headers(people["manager"]))
    denied = client.get("/api/manager/participants", headers=auth_headers(people["client"]))

    assert staff.status_code == 200
    assert [p["email"] for p in staff.get_json()] == ["participant@example.com"]
    assert denied.status_code == 403


def test_banned_participant_loses_access_until_unbanned(client, people, auth_headers):
    manager = auth_headers(people["manager"])
    participant = auth_headers(people["participant"])

    banned = client.post(
        f"/api/manager/participants/{people['participant']}/ban",
        json={"reason": "Fraudulent answers"},
        headers=manager,
    )
    assert banned.status_code == 200
    assert banned.get_json()["isBanned"] is True
    assert client.get("/api/auth/me", headers=participant).status_code == 401

    unbanned = client.post(
        f"/api/manager/participants/{people['participant']}/unban", headers=manager
    )
    assert unbanned.status_code == 200
    assert client.get("/api/auth/me", headers=participant).status_code == 200


def test_ban_only_applies_to_participants(client, people, auth_headers):
    response = client.post(
        f"/api/manager/participants/{people['client']}/ban",
        headers=auth_headers(people["manager"]),
    )

    assert response.status_code == 404
