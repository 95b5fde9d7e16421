from __future__ import annotations

import pytest
from fastapi import status

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def _create_task(client, owner, **fields):
    body = {"title": "Write report", "listId": owner.default_list_id, **fields}
    return await client.post(f"{API}/tasks", json=body, headers=owner.headers)


async def test_task_inherits_owner_from_list(client, register_user) -> None:
    owner = await register_user()

    response = await _create_task(client, owner, description="Quarterly", dueDate="2024-05-01T09:00:00Z")
    assert response.status_code == status.HTTP_200_OK, response.text
    task = response.json()
    assert task["listId"] == owner.default_list_id
    assert task["userId"] == owner.id
    assert task["status"] == "unassigned"
    assert task["description"] == "Quarterly"


async def test_user_id_in_payload_is_ignored(client, register_user) -> None:
    owner = await register_user()
    other = await register_user()

    response = await _create_task(client, owner, userId=other.id)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["userId"] == owner.id


async def test_create_in_foreign_list_is_forbidden(client, register_user) -> None:
    owner = await register_user()
    intruder = await register_user()

    response = await client.post(
        f"{API}/tasks",
        json={"title": "Sneaky", "listId": owner.default_list_id},
        headers=intruder.headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_create_in_missing_list_is_not_found(client, register_user) -> None:
    owner = await register_user()
    response = await client.post(
        f"{API}/tasks",
        json={"title": "Lost", "listId": 9999},
        headers=owner.headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_task_field_rules(client, register_user) -> None:
    owner = await register_user()
    long_title = await _create_task(client, owner, title="x" * 31)
    long_description = await _create_task(client, owner, description="x" * 201)
    bad_status = await _create_task(client, owner, status="paused")

    assert long_title.status_code == status.HTTP_400_BAD_REQUEST
    assert long_description.status_code == status.HTTP_400_BAD_REQUEST
    assert bad_status.status_code == status.HTTP_400_BAD_REQUEST


async def test_update_and_delete_own_task(client, register_user) -> None:
    owner = await register_user()
    task_id = (await _create_task(client, owner)).json()["id"]

    updated = await client.put(
        f"{API}/tasks/{task_id}",
        json={"status": "ongoing", "title": "Write summary"},
        headers=owner.headers,
    )
    assert updated.status_code == status.HTTP_200_OK, updated.text
    assert updated.json()["status"] == "ongoing"
    assert updated.json()["title"] == "Write summary"

    empty = await client.put(f"{API}/tasks/{task_id}", json={}, headers=owner.headers)
    assert empty.status_code == status.HTTP_400_BAD_REQUEST

    deleted = await client.delete(f"{API}/tasks/{task_id}", headers=owner.headers)
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json() == {"message": "Task deleted successfully."}

    again = await client.delete(f"{API}/tasks/{task_id}", headers=owner.headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND


async def test_foreign_task_is_forbidden(client, register_user) -> None:
    owner = await register_user()
    intruder = await register_user()
    task_id = (await _create_task(client, owner)).json()["id"]

    update = await client.put(
        f"{API}/tasks/{task_id}",
        json={"title": "Hijacked"},
        headers=intruder.headers,
    )
    delete = await client.delete(f"{API}/tasks/{task_id}", headers=intruder.headers)

    assert update.status_code == status.HTTP_403_FORBIDDEN
    assert delete.status_code == status.HTTP_403_FORBIDDEN

    tasks = await client.get(f"{API}/lists/get-tasks/{owner.default_list_id}", headers=owner.headers)
    assert [task["title"] for task in tasks.json()] == ["Write report"]


async def test_move_task_between_own_lists(client, register_user) -> None:
    owner = await register_user()
    intruder = await register_user()
    task_id = (await _create_task(client, owner)).json()["id"]
    target = (await client.post(f"{API}/lists", json={"title": "Later"}, headers=owner.headers)).json()

    into_foreign = await client.put(
        f"{API}/tasks/{task_id}",
        json={"listId": intruder.default_list_id},
        headers=owner.headers,
    )
    assert into_foreign.status_code == status.HTTP_403_FORBIDDEN

    moved = await client.put(
        f"{API}/tasks/{task_id}",
        json={"listId": target["id"]},
        headers=owner.headers,
    )
    assert moved.status_code == status.HTTP_200_OK
    assert moved.json()["listId"] == target["id"]
    assert moved.json()["userId"] == owner.id
