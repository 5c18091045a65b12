"""
Task operations for the Taskboard API.

Each operation receives the verified identity of the requester and an open
database, validates its input, and either returns a result or raises one of
the errors from `taskboard.errors`. Tasks of other users are reported exactly
like tasks that do not exist.
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from taskboard.auth import Identity
from taskboard.db_models import DEFAULT_STATUS, TASK_STATUSES, Task, TaskboardDB, now_timestamp
from taskboard.errors import InternalError, NotFound, ValidationError
from taskboard.task_queries import parse_list_query, parse_task_id


logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found or you do not have permission"


@dataclass
class TaskPage:
    page: int
    limit: int
    total: int
    tasks: List[Task]


@dataclass
class CreatedTask:
    """The fields of a newly inserted task, as sent by the client."""
    task_id: int
    title: str
    description: Optional[str]
    status: str


def list_tasks(db: TaskboardDB, identity: Identity, params: Mapping[str, Optional[str]]) -> TaskPage:
    """
    List one page of the requester's tasks.

    Args:
        db: The database of the current request
        identity: The verified requester
        params: Raw `page`, `limit`, `status` and `sort` query parameters

    Returns:
        The requested page together with the total number of matching tasks

    Raises:
        InternalError: If the database fails
    """
    query = parse_list_query(params)
    try:
        total = db.count_tasks(identity.user_id, query.status)
        tasks = db.list_tasks(
            identity.user_id,
            status=query.status,
            sort_field=query.ordering.field,
            descending=query.ordering.descending,
            limit=query.limit,
            offset=query.offset,
        )
    except sqlite3.Error:
        logger.exception("Error fetching tasks for user %s", identity.user_id)
        raise InternalError("Failed to fetch tasks")

    return TaskPage(page=query.page, limit=query.limit, total=total, tasks=tasks)


def create_task(
    db: TaskboardDB,
    identity: Identity,
    title: Optional[str],
    description: Optional[str] = None,
    status: Optional[str] = None,
) -> CreatedTask:
    """
    Create a task owned by the requester.

    The result is built from the inserted values; the row is not read back.

    Raises:
        ValidationError: If the title is missing or empty, or the status is unknown
        InternalError: If the database fails
    """
    if not title:
        raise ValidationError("Title is required and must be at least 1 character long")
    if status and status not in TASK_STATUSES:
        raise ValidationError("Status must be pending, in_progress, or completed")

    description = description or None
    status = status or DEFAULT_STATUS
    try:
        task_id = db.insert_task(identity.user_id, title, description, status, now_timestamp())
    except sqlite3.Error:
        logger.exception("Error creating task for user %s", identity.user_id)
        raise InternalError("An unexpected error occurred")

    logger.info("Created task %s for user %s", task_id, identity.user_id)
    return CreatedTask(task_id=task_id, title=title, description=description, status=status)


def update_task(db: TaskboardDB, identity: Identity, task_id: str | int, changes: Mapping[str, Any]) -> Task:
    """
    Apply a partial update to one of the requester's tasks.

    Only the keys present in `changes` are written; `updated_at` is always
    refreshed.

    Args:
        db: The database of the current request
        identity: The verified requester
        task_id: The raw task ID from the request path
        changes: The fields sent by the client

    Returns:
        The task as stored after the update

    Raises:
        NotFound: If the task does not exist or belongs to another user
        ValidationError: If a field is invalid or no field was given
        InternalError: If the database fails
    """
    parsed_id = parse_task_id(task_id)
    if parsed_id is None:
        raise NotFound(TASK_NOT_FOUND)

    try:
        task = db.get_owned_task(parsed_id, identity.user_id)
    except sqlite3.Error:
        logger.exception("Error loading task %s", parsed_id)
        raise InternalError("Failed to update task")
    if task is None:
        raise NotFound(TASK_NOT_FOUND)

    updates = {}
    if "title" in changes:
        if not changes["title"]:
            raise ValidationError("Title must be at least 1 character long")
        updates["title"] = changes["title"]
    if "description" in changes:
        updates["description"] = changes["description"]
    if "status" in changes:
        if changes["status"] not in TASK_STATUSES:
            raise ValidationError("Invalid status")
        updates["status"] = changes["status"]

    if not updates:
        raise ValidationError("No fields to update provided")

    try:
        db.update_task(parsed_id, identity.user_id, updated_at=now_timestamp(), **updates)
        updated = db.get_owned_task(parsed_id, identity.user_id)
    except sqlite3.Error:
        logger.exception("Error updating task %s", parsed_id)
        raise InternalError("Failed to update task")

    # Deleted by a concurrent request between the two statements.
    if updated is None:
        raise NotFound(TASK_NOT_FOUND)
    return updated


def delete_task(db: TaskboardDB, identity: Identity, task_id: str | int) -> None:
    """
    Permanently delete one of the requester's tasks.

    Raises:
        NotFound: If the task does not exist or belongs to another user
        InternalError: If the database fails
    """
    parsed_id = parse_task_id(task_id)
    if parsed_id is None:
        raise NotFound(TASK_NOT_FOUND)

    try:
        deleted = db.delete_task(parsed_id, identity.user_id)
    except sqlite3.Error:
        logger.exception("Error deleting task %s", parsed_id)
        raise InternalError("Failed to delete task")

    if not deleted:
        raise NotFound(TASK_NOT_FOUND)
    logger.info("Deleted task %s of user %s", parsed_id, identity.user_id)
