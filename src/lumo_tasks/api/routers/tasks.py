"""Routes for tasks inside the caller's lists."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import CurrentActorDependency, TaskServiceDependency
from ...schemas import MessageResponse, TaskCreate, TaskRead, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskRead, summary="Create a task in one of the caller's lists")
async def create_task(
    payload: TaskCreate,
    actor: CurrentActorDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.create_task(actor.id, payload)
    return TaskRead.model_validate(task)


@router.put("/{task_id}", response_model=TaskRead, summary="Update a task")
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    actor: CurrentActorDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.update_task(actor.id, task_id, payload)
    return TaskRead.model_validate(task)


@router.delete("/{task_id}", response_model=MessageResponse, summary="Delete a task")
async def delete_task(
    task_id: int,
    actor: CurrentActorDependency,
    service: TaskServiceDependency,
) -> MessageResponse:
    await service.delete_task(actor.id, task_id)
    return MessageResponse(message="Task deleted successfully.")
