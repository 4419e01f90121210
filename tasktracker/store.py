"""SQLite task storage.

The store owns a single ``tasks`` table. Each public method opens its own
short-lived connection, so one store instance can be shared by every request.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from pathlib import Path

from tasktracker.errors import NotFoundError, StorageError, ValidationError
from tasktracker.models import DEFAULT_PRIORITY, DEFAULT_STATUS, Task, blank_to_none

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    priority TEXT NOT NULL DEFAULT 'medium',
    status TEXT NOT NULL DEFAULT 'active',
    due_date TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def _now() -> str:
    # Fixed width so that ORDER BY on the text column is chronological.
    return datetime.now(UTC).isoformat(timespec="microseconds")


def _clean_title(title: str | None) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("Title is required")
    return str(title).strip()


# SQLite stores ids as signed 64-bit integers.
MAX_TASK_ID = 2**63 - 1


def _check_id(task_id: int) -> None:
    if not -MAX_TASK_ID - 1 <= task_id <= MAX_TASK_ID:
        raise NotFoundError("Task not found")


def _due_date_to_db(due_date: date | str | None) -> str | None:
    due_date = blank_to_none(due_date)
    if isinstance(due_date, date):
        return due_date.isoformat()
    return due_date


class TaskStore:
    """Persist tasks in a SQLite database file."""

    def __init__(self, db_path: str | Path = "tasks.db") -> None:
        """Remember the database location; call ``initialize()`` before use."""
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self, action: str) -> Iterator[sqlite3.Connection]:
        """Yield a connection, committing on success and mapping driver errors."""
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as exc:
            logger.exception("Could not open database %s", self._db_path)
            raise StorageError(f"Failed to {action}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Database error while trying to %s", action)
            raise StorageError(f"Failed to {action}") from exc
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task.model_validate(dict(row))

    @staticmethod
    def _fetch(conn: sqlite3.Connection, task_id: int) -> Task:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise NotFoundError("Task not found")
        return TaskStore._row_to_task(row)

    def initialize(self) -> None:
        """Create the tasks table if it does not exist. Safe to call repeatedly."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("Failed to create database directory") from exc
        with self._connect("create tasks table") as conn:
            conn.execute(SCHEMA)
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count())

    def count(self) -> int:
        """Return the number of stored tasks."""
        with self._connect("count tasks") as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(total)

    def list_all(self) -> list[Task]:
        """Return all tasks, newest first."""
        with self._connect("list tasks") as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY created_at DESC, id DESC").fetchall()
        return [self._row_to_task(row) for row in rows]

    def get(self, task_id: int) -> Task:
        """Return the task with ``task_id`` or raise ``NotFoundError``."""
        _check_id(task_id)
        with self._connect("retrieve task") as conn:
            return self._fetch(conn, task_id)

    def create(
        self,
        title: str | None,
        description: str | None = None,
        priority: str | None = None,
        due_date: date | str | None = None,
    ) -> Task:
        """Insert a new active task and return it as stored."""
        clean_title = _clean_title(title)
        now = _now()
        params = (
            clean_title,
            description or "",
            priority or DEFAULT_PRIORITY,
            _due_date_to_db(due_date),
            DEFAULT_STATUS,
            now,
            now,
        )
        with self._connect("create task") as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks (title, description, priority, due_date, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                params,
            )
            task = self._fetch(conn, int(cur.lastrowid))
        logger.info("Created task id=%s title=%r", task.id, task.title)
        return task

    def update(
        self,
        task_id: int,
        title: str | None,
        description: str | None = None,
        priority: str | None = None,
        due_date: date | str | None = None,
        status: str | None = None,
    ) -> Task:
        """Replace every mutable field of a task and return the stored result."""
        clean_title = _clean_title(title)
        _check_id(task_id)
        params = (
            clean_title,
            description or "",
            priority or DEFAULT_PRIORITY,
            _due_date_to_db(due_date),
            status or DEFAULT_STATUS,
            _now(),
            task_id,
        )
        with self._connect("update task") as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, priority = ?, due_date = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                params,
            )
            if cur.rowcount == 0:
                raise NotFoundError("Task not found")
            task = self._fetch(conn, task_id)
        logger.info("Updated task id=%s status=%s", task.id, task.status)
        return task

    def delete(self, task_id: int) -> int:
        """Delete a task permanently and return its id."""
        _check_id(task_id)
        with self._connect("delete task") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            if cur.rowcount == 0:
                raise NotFoundError("Task not found")
        logger.info("Deleted task id=%s", task_id)
        return task_id

    def clear(self) -> None:
        """Delete all tasks. Useful for testing."""
        with self._connect("clear tasks") as conn:
            conn.execute("DELETE FROM tasks")
