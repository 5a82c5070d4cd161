"""Tests for internal communications, recipients and read receipts."""
import uuid

import pytest
from httpx import AsyncClient

from mindforge.db.models import Communication, ReadReceipt
from mindforge.services.communication_service import sanitize_html


def _message_body(*recipients, **overrides) -> dict:
    body = {
        "type": "MESSAGE",
        "recipientIds": [str(r.user.id) for r in recipients],
        "subject": "Field trip",
        "content": "<p>Bring a <strong>packed lunch</strong>.</p>",
    }
    body.update(overrides)
    return body


async def _send(client: AsyncClient, sender, *recipients, **overrides) -> dict:
    response = await client.post(
        "/api/communications", json=_message_body(*recipients, **overrides), headers=sender.headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["communication"]


def test_sanitize_html_strips_scripts():
    cleaned = sanitize_html('<p onclick="x()">Hi<script>alert(1)</script></p>')
    assert "<script>" not in cleaned
    assert "onclick" not in cleaned
    assert cleaned.startswith("<p>")


# =============================================================================
# Create
# =============================================================================

@pytest.mark.asyncio
async def test_default_status_is_draft(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent)

    assert communication["status"] == "DRAFT"
    assert communication["sentAt"] is None
    assert communication["sender"]["id"] == str(facilitator.user.id)
    assert [r["recipientId"] for r in communication["recipients"]] == [str(parent.user.id)]


@pytest.mark.asyncio
async def test_explicit_sent_stamps_sent_at(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent, status="SENT")

    assert communication["status"] == "SENT"
    assert communication["sentAt"] is not None


@pytest.mark.asyncio
async def test_scheduled_for_wins_over_status(client: AsyncClient, facilitator, parent):
    communication = await _send(
        client, facilitator, parent, status="SENT", scheduledFor="2026-12-01T08:00:00"
    )

    assert communication["status"] == "SCHEDULED"
    assert communication["sentAt"] is None


@pytest.mark.asyncio
async def test_explicit_scheduled_is_kept_without_date(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent, status="SCHEDULED")

    assert communication["status"] == "SCHEDULED"
    assert communication["scheduledFor"] is None
    assert communication["sentAt"] is None


@pytest.mark.asyncio
async def test_duplicate_recipients_are_collapsed(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent, parent)
    assert len(communication["recipients"]) == 1


@pytest.mark.asyncio
async def test_unknown_recipient_is_404(client: AsyncClient, facilitator):
    response = await client.post(
        "/api/communications",
        json=_message_body(recipientIds=[str(uuid.uuid4())]),
        headers=facilitator.headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_recipients_are_required(client: AsyncClient, facilitator):
    response = await client.post("/api/communications", json=_message_body(), headers=facilitator.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input data"


@pytest.mark.asyncio
async def test_content_is_sanitized(client: AsyncClient, facilitator, parent):
    communication = await _send(
        client, facilitator, parent, content="<p>Hello</p><script>steal()</script>"
    )
    assert "<script>" not in communication["content"]


@pytest.mark.asyncio
async def test_create_requires_auth(client: AsyncClient, parent):
    response = await client.post("/api/communications", json=_message_body(parent))
    assert response.status_code == 401


# =============================================================================
# Read / list
# =============================================================================

@pytest.mark.asyncio
async def test_list_includes_sent_and_received(client: AsyncClient, facilitator, parent, student):
    await _send(client, facilitator, parent, subject="To parent")
    await _send(client, parent, facilitator, subject="From parent")
    await _send(client, facilitator, student, subject="To student")

    response = await client.get("/api/communications", headers=parent.headers)

    body = response.json()
    assert body["pagination"]["total"] == 2
    assert {c["subject"] for c in body["data"]["communications"]} == {"To parent", "From parent"}


@pytest.mark.asyncio
async def test_list_filters_by_status_and_type(client: AsyncClient, facilitator, parent):
    await _send(client, facilitator, parent, status="SENT", type="ANNOUNCEMENT")
    await _send(client, facilitator, parent)

    sent = await client.get("/api/communications", params={"status": "SENT"}, headers=parent.headers)
    assert sent.json()["results"] == 1

    announcements = await client.get(
        "/api/communications", params={"type": "ANNOUNCEMENT"}, headers=parent.headers
    )
    assert announcements.json()["data"]["communications"][0]["type"] == "ANNOUNCEMENT"


@pytest.mark.asyncio
async def test_outsider_cannot_read(client: AsyncClient, facilitator, parent, student):
    communication = await _send(client, facilitator, parent)

    outsider = await client.get(f"/api/communications/{communication['id']}", headers=student.headers)
    recipient = await client.get(f"/api/communications/{communication['id']}", headers=parent.headers)

    assert outsider.status_code == 403
    assert recipient.status_code == 200


@pytest.mark.asyncio
async def test_missing_communication_is_404(client: AsyncClient, parent):
    response = await client.get(f"/api/communications/{uuid.uuid4()}", headers=parent.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Communication not found"


# =============================================================================
# Update / delete
# =============================================================================

@pytest.mark.asyncio
async def test_sender_sends_draft(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent)

    response = await client.put(
        f"/api/communications/{communication['id']}",
        json={"subject": "Updated", "status": "SENT"},
        headers=facilitator.headers,
    )

    assert response.status_code == 200
    updated = response.json()["data"]["communication"]
    assert updated["subject"] == "Updated"
    assert updated["status"] == "SENT"
    assert updated["sentAt"] is not None


@pytest.mark.asyncio
async def test_sent_communication_is_frozen(client: AsyncClient, db, facilitator, parent):
    communication = await _send(client, facilitator, parent, status="SENT")
    original_sent_at = communication["sentAt"]

    response = await client.put(
        f"/api/communications/{communication['id']}",
        json={"subject": "Too late"},
        headers=facilitator.headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot update a communication that has already been sent"
    db.expire_all()
    stored = db.get(Communication, uuid.UUID(communication["id"]))
    assert stored.subject == "Field trip"
    assert stored.sent_at.isoformat().startswith(original_sent_at[:19])


@pytest.mark.asyncio
async def test_update_replaces_recipients(client: AsyncClient, facilitator, parent, student):
    communication = await _send(client, facilitator, parent)

    response = await client.put(
        f"/api/communications/{communication['id']}",
        json={"recipientIds": [str(student.user.id), str(parent.user.id)]},
        headers=facilitator.headers,
    )

    assert response.status_code == 200
    recipients = {r["recipientId"] for r in response.json()["data"]["communication"]["recipients"]}
    assert recipients == {str(student.user.id), str(parent.user.id)}


@pytest.mark.asyncio
async def test_scheduling_a_draft(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent)

    response = await client.put(
        f"/api/communications/{communication['id']}",
        json={"scheduledFor": "2026-12-24T18:00:00"},
        headers=facilitator.headers,
    )

    assert response.json()["data"]["communication"]["status"] == "SCHEDULED"


@pytest.mark.asyncio
async def test_only_sender_updates_or_deletes(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent)
    url = f"/api/communications/{communication['id']}"

    update = await client.put(url, json={"subject": "Mine now"}, headers=parent.headers)
    delete = await client.delete(url, headers=parent.headers)

    assert update.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_sender_deletes(client: AsyncClient, db, facilitator, parent):
    communication = await _send(client, facilitator, parent)

    response = await client.delete(
        f"/api/communications/{communication['id']}", headers=facilitator.headers
    )

    assert response.status_code == 204
    db.expire_all()
    assert db.query(Communication).count() == 0


# =============================================================================
# Read receipts
# =============================================================================

@pytest.mark.asyncio
async def test_mark_as_read_is_idempotent(client: AsyncClient, db, facilitator, parent):
    communication = await _send(client, facilitator, parent, status="SENT")
    url = f"/api/communications/{communication['id']}/read"

    first = await client.post(url, headers=parent.headers)
    second = await client.post(url, headers=parent.headers)

    assert first.status_code == 200
    assert "message" not in first.json()
    assert second.status_code == 200
    assert second.json()["message"] == "Communication already marked as read"
    assert first.json()["data"]["readReceipt"]["id"] == second.json()["data"]["readReceipt"]["id"]
    assert db.query(ReadReceipt).count() == 1


@pytest.mark.asyncio
async def test_only_recipients_mark_as_read(client: AsyncClient, facilitator, parent):
    communication = await _send(client, facilitator, parent, status="SENT")

    response = await client.post(
        f"/api/communications/{communication['id']}/read", headers=facilitator.headers
    )

    assert response.status_code == 403
    assert response.json()["message"] == "You are not a recipient of this communication"


@pytest.mark.asyncio
async def test_unread_count(client: AsyncClient, facilitator, parent):
    first = await _send(client, facilitator, parent, status="SENT")
    await _send(client, facilitator, parent, status="SENT", type="NOTIFICATION")
    await _send(client, facilitator, parent)  # drafts are never unread

    before = await client.get("/api/communications/unread", headers=parent.headers)
    assert before.json()["data"]["unreadCount"] == 2

    await client.post(f"/api/communications/{first['id']}/read", headers=parent.headers)

    after = await client.get("/api/communications/unread", headers=parent.headers)
    assert after.json()["data"]["unreadCount"] == 1

    notifications = await client.get(
        "/api/communications/unread", params={"type": "NOTIFICATION"}, headers=parent.headers
    )
    assert notifications.json()["data"]["unreadCount"] == 1

    sender_view = await client.get("/api/communications/unread", headers=facilitator.headers)
    assert sender_view.json()["data"]["unreadCount"] == 0
