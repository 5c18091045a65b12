from fastapi import APIRouter, Depends

from taskboard import task_handlers
from taskboard.api.models import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskCreatedResponse,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskboard.auth import Identity
from taskboard.db_models import TaskboardDB
from taskboard.dependencies import get_current_identity, get_db

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "No access token supplied"},
        403: {"model": ErrorResponse, "description": "Invalid or expired access token"},
    },
)


@router.get("", response_model=TaskListResponse)
def list_user_tasks(
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    sort: str | None = None,
    identity: Identity = Depends(get_current_identity),
    db: TaskboardDB = Depends(get_db),
):
    """
    List the tasks of the current user, newest first unless `sort=field:asc|desc` is given.
    """
    params = {"page": page, "limit": limit, "status": status, "sort": sort}
    result = task_handlers.list_tasks(db, identity, params)
    return TaskListResponse.model_validate(result)


@router.post(
    "",
    response_model=TaskCreatedResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def create_user_task(
    task: TaskCreate | None = None,
    identity: Identity = Depends(get_current_identity),
    db: TaskboardDB = Depends(get_db),
):
    task = task or TaskCreate()
    created = task_handlers.create_task(db, identity, task.title, task.description, task.status)
    return TaskCreatedResponse.model_validate(created)


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_user_task(
    task_id: str,
    task: TaskUpdate | None = None,
    identity: Identity = Depends(get_current_identity),
    db: TaskboardDB = Depends(get_db),
):
    changes = task.model_dump(include=task.model_fields_set) if task else {}
    updated = task_handlers.update_task(db, identity, task_id, changes)
    return TaskResponse.model_validate(updated)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
def delete_user_task(
    task_id: str,
    identity: Identity = Depends(get_current_identity),
    db: TaskboardDB = Depends(get_db),
):
    task_handlers.delete_task(db, identity, task_id)
    return MessageResponse(message="Task deleted successfully")
