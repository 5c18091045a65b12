"""
Database models and utilities for the Taskboard application.

This module provides the dataclass representing a task and a database access
layer for the SQLite `tasks` table. Every query that carries a value uses
bound parameters; the only text spliced into SQL comes from the closed
mappings defined here.
"""

import sqlite3
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Literal, Optional, List


type TaskStatus = Literal["pending", "in_progress", "completed"]

TASK_STATUSES: tuple[str, ...] = ("pending", "in_progress", "completed")
DEFAULT_STATUS: TaskStatus = "pending"

# Stored timestamps sort lexicographically in this format.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SORT_COLUMNS: dict[str, str] = {
    "title": "title",
    "status": "status",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

SORT_DIRECTIONS: dict[bool, str] = {
    False: "ASC",
    True: "DESC",
}

UPDATABLE_COLUMNS: frozenset[str] = frozenset({"title", "description", "status", "updated_at"})


def now_timestamp() -> str:
    """Return the current UTC wall-clock time as `YYYY-MM-DD HH:MM:SS`."""
    return datetime.now(UTC).strftime(TIMESTAMP_FORMAT)


# --- Dataclasses ---

@dataclass
class Task:
    """
    Represents a task in the system.

    Attributes:
        id: The unique identifier for the task
        title: The title of the task
        description: Optional description of the task
        status: The status of the task (pending, in_progress, completed)
        user_id: The ID of the user who owns the task
        created_at: The timestamp when the task was created
        updated_at: The timestamp when the task was last changed
    """
    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    user_id: int
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Task":
        return cls(
            id=int(row["id"]),
            title=row["title"],
            description=row["description"],
            status=row["status"],
            user_id=int(row["user_id"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


# --- Database Layer ---

def init_db(db_path: str) -> None:
    """Create the database tables if they don't exist."""
    db = TaskboardDB.connect(db_path)
    try:
        db.create_tables()
    finally:
        db.close()


class TaskboardDB:
    """
    Database access layer for the Taskboard application.

    Wraps a single connection; callers own its lifetime and must call
    `close()` on every exit path.
    """
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @classmethod
    def connect(cls, db_path: str) -> "TaskboardDB":
        """
        Open a new connection to the database.

        The connection may be handed between threads of the server's thread
        pool but is only ever used by one request.
        """
        return cls(sqlite3.connect(db_path, check_same_thread=False))

    def close(self):
        self.conn.close()

    def create_tables(self):
        c = self.conn.cursor()
        c.execute('''
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                description TEXT,
                status TEXT NOT NULL DEFAULT 'pending'
                    CHECK (status IN ('pending', 'in_progress', 'completed')),
                user_id INTEGER NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        ''')
        c.execute('CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks (user_id)')
        self.conn.commit()

    def ping(self):
        """Run a trivial query to check that the database answers."""
        self.conn.execute('SELECT 1').fetchone()

    # --- Task Methods ---

    def count_tasks(self, user_id: int, status: Optional[str] = None) -> int:
        """
        Count the tasks owned by a user, optionally only those with a status.

        Raises:
            sqlite3.DataError: If the count query does not return a single integer
        """
        sql = 'SELECT COUNT(*) AS total FROM tasks WHERE user_id = ?'
        params: list = [user_id]
        if status is not None:
            sql += ' AND status = ?'
            params.append(status)

        row = self.conn.execute(sql, params).fetchone()
        if row is None or not isinstance(row["total"], int):
            raise sqlite3.DataError("Unexpected result shape for task count")
        return row["total"]

    def list_tasks(
        self,
        user_id: int,
        *,
        status: Optional[str] = None,
        sort_field: str = "created_at",
        descending: bool = True,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Task]:
        """
        Get one page of the tasks owned by a user.

        Args:
            user_id: The ID of the owner
            status: Only return tasks with this status, if given
            sort_field: One of the keys of SORT_COLUMNS
            descending: Sort direction
            limit: Maximum number of tasks to return
            offset: Number of tasks to skip

        Returns:
            A list of Task objects

        Raises:
            ValueError: If sort_field is not a sortable column
        """
        if sort_field not in SORT_COLUMNS:
            raise ValueError(f"Cannot sort tasks by {sort_field!r}")

        column = SORT_COLUMNS[sort_field]
        direction = SORT_DIRECTIONS[descending]

        sql = 'SELECT * FROM tasks WHERE user_id = ?'
        params: list = [user_id]
        if status is not None:
            sql += ' AND status = ?'
            params.append(status)
        # id breaks ties between rows created within the same second.
        sql += f' ORDER BY {column} {direction}, id {direction} LIMIT ? OFFSET ?'
        params.extend([limit, offset])

        return [Task.from_row(row) for row in self.conn.execute(sql, params).fetchall()]

    def insert_task(
        self,
        user_id: int,
        title: str,
        description: Optional[str],
        status: str,
        now: str,
    ) -> int:
        """
        Insert a new task into the database.

        Args:
            user_id: The ID of the user who owns the task
            title: The title of the task
            description: Optional description of the task
            status: The initial status of the task
            now: Timestamp used for both created_at and updated_at

        Returns:
            The ID of the newly created task
        """
        c = self.conn.cursor()
        c.execute('''
            INSERT INTO tasks (title, description, status, user_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (title, description, status, user_id, now, now))
        self.conn.commit()
        return int(c.lastrowid)

    def get_owned_task(self, task_id: int, user_id: int) -> Optional[Task]:
        """
        Get a task by its ID if it belongs to the user.

        Returns:
            The Task object, or None if it does not exist or has another owner
        """
        row = self.conn.execute(
            'SELECT * FROM tasks WHERE id = ? AND user_id = ?', (task_id, user_id)
        ).fetchone()
        if row:
            return Task.from_row(row)
        return None

    def update_task(self, task_id: int, user_id: int, **updates) -> bool:
        """
        Update the given columns of a task owned by the user.

        Args:
            task_id: The ID of the task to update
            user_id: The ID of the owner
            **updates: Column names from UPDATABLE_COLUMNS and their new values

        Returns:
            True if a row was updated
        """
        unknown = set(updates) - UPDATABLE_COLUMNS
        if unknown or not updates:
            raise ValueError(f"Cannot update task columns: {sorted(unknown) or 'none given'}")

        fields = []
        values = []
        for k, v in updates.items():
            fields.append(f"{k} = ?")
            values.append(v)
        values.extend([task_id, user_id])
        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ? AND user_id = ?"
        c = self.conn.cursor()
        c.execute(sql, values)
        self.conn.commit()
        return c.rowcount > 0

    def delete_task(self, task_id: int, user_id: int) -> bool:
        """
        Delete a task owned by the user.

        Returns:
            True if a row was deleted
        """
        c = self.conn.cursor()
        c.execute('DELETE FROM tasks WHERE id = ? AND user_id = ?', (task_id, user_id))
        self.conn.commit()
        return c.rowcount > 0
