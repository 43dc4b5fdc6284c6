"""
API router for task endpoints.
"""
from typing import Annotated, List

from fastapi import APIRouter, Path, Response, status

from farmarea.api.dependencies import CurrentUserDep, FarmServiceDep
from farmarea.api.models.responses import ERROR_RESPONSES
from farmarea.domain.models import Task, TaskCreate, TaskTransition, TaskUpdate


router = APIRouter(tags=["tasks"])

AreaId = Annotated[str, Path(description="Area the tasks belong to")]
TaskId = Annotated[str, Path(description="Unique identifier for the task")]


@router.get(
    "/areas/{area_id}/tasks",
    response_model=List[Task],
    summary="List an area's tasks",
)
def list_tasks(area_id: AreaId, user_id: CurrentUserDep, service: FarmServiceDep) -> List[Task]:
    return service.list_tasks(user_id, area_id)


@router.post(
    "/areas/{area_id}/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Add a task to an area",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def create_task(
    area_id: AreaId,
    payload: TaskCreate,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Task:
    return service.create_task(user_id, area_id, payload)


@router.patch(
    "/tasks/{task_id}",
    response_model=Task,
    summary="Update some fields of a task",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def update_task(
    task_id: TaskId,
    payload: TaskUpdate,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Task:
    return service.update_task(user_id, task_id, payload)


@router.post(
    "/tasks/{task_id}/transition",
    response_model=Task,
    summary="Move a task to another status",
    description="""
    Change a task's status along an allowed transition:

    - pending -> in-progress, completed
    - in-progress -> pending, completed
    - completed -> pending
    """,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def transition_task(
    task_id: TaskId,
    payload: TaskTransition,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Task:
    return service.transition_task(user_id, task_id, payload.status)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
)
def delete_task(task_id: TaskId, user_id: CurrentUserDep, service: FarmServiceDep) -> Response:
    service.delete_task(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
