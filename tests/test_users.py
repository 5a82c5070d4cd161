"""Tests for the current-user profile and the admin user listing."""
import pytest
from httpx import AsyncClient

from mindforge.db.models import Enrollment


@pytest.mark.asyncio
async def test_student_me_includes_enrollments(client: AsyncClient, db, facilitator, student, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    db.add(Enrollment(student_id=student.profile.id, bootcamp_id=bootcamp.id, status="ACTIVE"))
    db.commit()

    response = await client.get("/api/users/me", headers=student.headers)

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["role"] == "STUDENT"
    enrollments = user["student"]["enrollments"]
    assert len(enrollments) == 1
    assert enrollments[0]["bootcamp"]["title"] == "Robotics Bootcamp"
    assert user["student"]["knowledgeStreams"] == []


@pytest.mark.asyncio
async def test_facilitator_me_includes_bootcamps_led(client: AsyncClient, facilitator, make_bootcamp):
    make_bootcamp(facilitator)

    response = await client.get("/api/users/me", headers=facilitator.headers)

    user = response.json()["data"]["user"]
    assert len(user["facilitator"]["bootcampsLed"]) == 1
    assert user["student"] is None


@pytest.mark.asyncio
async def test_parent_me_includes_children(client: AsyncClient, db, parent, student):
    student.profile.parent_id = parent.profile.id
    db.commit()

    response = await client.get("/api/users/me", headers=parent.headers)

    children = response.json()["data"]["user"]["parent"]["children"]
    assert [c["user"]["name"] for c in children] == ["Sam Student"]


@pytest.mark.asyncio
async def test_update_me_changes_name_only(client: AsyncClient, student):
    response = await client.patch(
        "/api/users/me",
        json={"name": "  Samuel   Student ", "role": "ADMIN", "email": "x@test.com"},
        headers=student.headers,
    )

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["name"] == "Samuel Student"
    assert user["role"] == "STUDENT"
    assert user["email"] == student.user.email


@pytest.mark.asyncio
async def test_me_requires_auth(client: AsyncClient):
    response = await client.get("/api/users/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_lists_users_with_filters(client: AsyncClient, db, admin, student, other_student, facilitator):
    other_student.user.is_active = False
    db.commit()

    everyone = await client.get("/api/users", headers=admin.headers)
    assert everyone.status_code == 200
    assert everyone.json()["results"] == 4

    students = await client.get("/api/users", params={"role": "student"}, headers=admin.headers)
    assert {u["id"] for u in students.json()["data"]["users"]} == {
        str(student.user.id),
        str(other_student.user.id),
    }

    active_students = await client.get(
        "/api/users", params={"role": "STUDENT", "isActive": "true"}, headers=admin.headers
    )
    assert [u["id"] for u in active_students.json()["data"]["users"]] == [str(student.user.id)]


@pytest.mark.asyncio
async def test_non_admin_cannot_list_users(client: AsyncClient, facilitator):
    response = await client.get("/api/users", headers=facilitator.headers)
    assert response.status_code == 403
