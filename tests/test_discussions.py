"""Tests for bootcamp discussion topics."""
import uuid

import pytest
from httpx import AsyncClient


def _discussion_body(day: int = 1, **overrides) -> dict:
    body = {
        "day": day,
        "title": "What makes a good robot?",
        "prompt": "Describe a robot you would build.",
        "guidance": "Encourage quieter students to share first.",
        "expectedOutcomes": ["Articulate a design goal"],
        "tags": ["design", " design ", "robots"],
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_owner_creates_discussion(client: AsyncClient, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)

    response = await client.post(
        f"/api/bootcamps/{bootcamp.id}/discussions", json=_discussion_body(), headers=facilitator.headers
    )

    assert response.status_code == 201
    topic = response.json()["data"]["discussion"]
    assert topic["bootcampId"] == str(bootcamp.id)
    assert topic["tags"] == ["design", "robots"]


@pytest.mark.asyncio
async def test_duplicate_day_is_rejected(client: AsyncClient, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    url = f"/api/bootcamps/{bootcamp.id}/discussions"
    await client.post(url, json=_discussion_body(1), headers=facilitator.headers)

    response = await client.post(url, json=_discussion_body(1), headers=facilitator.headers)

    assert response.status_code == 400
    assert response.json()["message"] == "A discussion topic for this day already exists"


@pytest.mark.asyncio
async def test_non_owner_cannot_create(client: AsyncClient, facilitator, other_facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)

    response = await client.post(
        f"/api/bootcamps/{bootcamp.id}/discussions",
        json=_discussion_body(),
        headers=other_facilitator.headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_non_owner_cannot_update_or_delete(
    client: AsyncClient, facilitator, other_facilitator, student, make_bootcamp
):
    bootcamp = make_bootcamp(facilitator)
    created = await client.post(
        f"/api/bootcamps/{bootcamp.id}/discussions", json=_discussion_body(), headers=facilitator.headers
    )
    topic_id = created.json()["data"]["discussion"]["id"]
    url = f"/api/discussions/{topic_id}"

    update = await client.put(url, json={"title": "Hijacked"}, headers=other_facilitator.headers)
    delete = await client.delete(url, headers=other_facilitator.headers)

    assert update.status_code == 403
    assert update.json()["message"] == "You can only manage your own bootcamps"
    assert delete.status_code == 403
    assert delete.json()["message"] == "You can only manage your own bootcamps"

    detail = await client.get(url, headers=student.headers)
    assert detail.json()["data"]["discussion"]["title"] == "What makes a good robot?"


@pytest.mark.asyncio
async def test_admin_creates_and_updates_for_any_bootcamp(client: AsyncClient, admin, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)

    created = await client.post(
        f"/api/bootcamps/{bootcamp.id}/discussions", json=_discussion_body(), headers=admin.headers
    )
    assert created.status_code == 201
    topic = created.json()["data"]["discussion"]
    assert topic["bootcampId"] == str(bootcamp.id)

    updated = await client.put(
        f"/api/discussions/{topic['id']}", json={"title": "Admin edit"}, headers=admin.headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["discussion"]["title"] == "Admin edit"


@pytest.mark.asyncio
async def test_admin_creating_for_missing_bootcamp_is_404(client: AsyncClient, admin):
    response = await client.post(
        f"/api/bootcamps/{uuid.uuid4()}/discussions", json=_discussion_body(), headers=admin.headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_requires_auth(client: AsyncClient, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    response = await client.get(f"/api/bootcamps/{bootcamp.id}/discussions")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_ordered_by_day_with_day_filter(client: AsyncClient, facilitator, student, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    url = f"/api/bootcamps/{bootcamp.id}/discussions"
    for day in (2, 1):
        await client.post(url, json=_discussion_body(day), headers=facilitator.headers)

    all_topics = await client.get(url, headers=student.headers)
    assert [t["day"] for t in all_topics.json()["data"]["discussions"]] == [1, 2]

    day_two = await client.get(url, params={"day": 2}, headers=student.headers)
    assert [t["day"] for t in day_two.json()["data"]["discussions"]] == [2]


@pytest.mark.asyncio
async def test_get_update_delete(client: AsyncClient, facilitator, student, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    created = await client.post(
        f"/api/bootcamps/{bootcamp.id}/discussions", json=_discussion_body(), headers=facilitator.headers
    )
    topic_id = created.json()["data"]["discussion"]["id"]

    detail = await client.get(f"/api/discussions/{topic_id}", headers=student.headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["discussion"]["bootcamp"]["title"] == "Robotics Bootcamp"

    updated = await client.put(
        f"/api/discussions/{topic_id}", json={"title": "Robots and us"}, headers=facilitator.headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["discussion"]["title"] == "Robots and us"

    forbidden = await client.delete(f"/api/discussions/{topic_id}", headers=student.headers)
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/discussions/{topic_id}", headers=facilitator.headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/discussions/{topic_id}", headers=student.headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Discussion topic not found"
