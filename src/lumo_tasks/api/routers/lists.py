"""Routes for the caller's lists."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import CurrentActorDependency, ListServiceDependency
from ...schemas import ListCreate, ListRead, ListUpdate, MessageResponse, TaskRead

router = APIRouter(prefix="/lists", tags=["lists"])


@router.get("/get-user-lists", response_model=list[ListRead], summary="Lists owned by the caller")
async def get_user_lists(
    actor: CurrentActorDependency,
    service: ListServiceDependency,
) -> list[ListRead]:
    lists = await service.get_user_lists(actor.id)
    return [ListRead.model_validate(task_list) for task_list in lists]


@router.get(
    "/get-tasks/{list_id}",
    response_model=list[TaskRead],
    summary="Tasks of a list, ongoing first and soonest due first",
)
async def get_list_tasks(
    list_id: int,
    actor: CurrentActorDependency,
    service: ListServiceDependency,
) -> list[TaskRead]:
    tasks = await service.get_list_tasks(actor.id, list_id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.post("", response_model=ListRead, summary="Create a list")
async def create_list(
    payload: ListCreate,
    actor: CurrentActorDependency,
    service: ListServiceDependency,
) -> ListRead:
    task_list = await service.create_list(actor.id, payload)
    return ListRead.model_validate(task_list)


@router.put("/{list_id}", response_model=ListRead, summary="Rename a list")
async def rename_list(
    list_id: int,
    payload: ListUpdate,
    actor: CurrentActorDependency,
    service: ListServiceDependency,
) -> ListRead:
    task_list = await service.rename_list(actor.id, list_id, payload)
    return ListRead.model_validate(task_list)


@router.delete("/{list_id}", response_model=MessageResponse, summary="Delete a list and its tasks")
async def delete_list(
    list_id: int,
    actor: CurrentActorDependency,
    service: ListServiceDependency,
) -> MessageResponse:
    await service.delete_list(actor.id, list_id)
    return MessageResponse(message="List deleted successfully.")
