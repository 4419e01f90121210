"""Client-side board state.

``BoardState`` keeps the task list, the active filters and the task being
edited. Every action talks to the API first and only touches local state once
the call has succeeded; a failed action is logged, reported through ``alert``
and leaves the state as it was.
"""

import logging
from collections.abc import Callable
from typing import Any

from tasktracker.client import ApiError, TaskApiClient
from tasktracker.models import DEFAULT_PRIORITY, DEFAULT_STATUS, Task
from tasktracker.view import TaskFilters, filter_tasks, render_tasks

logger = logging.getLogger(__name__)

Alert = Callable[[str], None]
Confirm = Callable[[str], bool]

MUTABLE_FIELDS = ("title", "description", "priority", "due_date", "status")


def _log_alert(message: str) -> None:
    logger.warning("ALERT: %s", message)


def task_payload(task: Task, **overrides: Any) -> dict[str, Any]:
    """Build a full-replace update body from a task."""
    data = task.model_dump(mode="json", include=set(MUTABLE_FIELDS))
    data.update(overrides)
    return data


class BoardState:
    """Tasks, filters and edit session for one board, kept in step with the API.

    ``alert`` receives user-facing failure messages; by default they are logged.
    """

    def __init__(self, client: TaskApiClient, alert: Alert | None = None) -> None:
        self.client = client
        self.tasks: list[Task] = []
        self.filters = TaskFilters()
        self.editing_task_id: int | None = None
        self._alert = alert or _log_alert

    def _fail(self, action: str, user_message: str, exc: ApiError) -> bool:
        """Log a failed action, alert the user and report failure."""
        logger.error("Error %s: %s", action, exc.message)
        self._alert(user_message)
        return False

    def _find(self, task_id: int) -> Task | None:
        """Return the local copy of a task, if loaded."""
        return next((task for task in self.tasks if task.id == task_id), None)

    def _replace(self, updated: Task) -> None:
        """Swap in the server's version of a task, matched by id."""
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]

    # ---- actions ----

    def load(self) -> bool:
        """Fetch the full task list from the API."""
        try:
            tasks = self.client.list_tasks()
        except ApiError as exc:
            return self._fail("loading tasks", "Failed to load tasks. Please refresh the page.", exc)
        self.tasks = tasks
        return True

    def submit(self, form: dict[str, Any]) -> bool:
        """Create a task, or update the one being edited, from form values."""
        data = {
            "title": form.get("title", ""),
            "description": form.get("description", ""),
            "priority": form.get("priority") or DEFAULT_PRIORITY,
            "due_date": form.get("due_date") or None,
            "status": DEFAULT_STATUS,
        }
        try:
            if self.editing_task_id is not None:
                editing = self._find(self.editing_task_id)
                if editing is not None:
                    data["status"] = editing.status
                updated = self.client.update_task(self.editing_task_id, data)
                self._replace(updated)
                self.cancel_edit()
            else:
                created = self.client.create_task(data)
                self.tasks.insert(0, created)
        except ApiError as exc:
            return self._fail("saving task", "Failed to save task. Please try again.", exc)
        return True

    def toggle_complete(self, task_id: int) -> bool:
        """Flip a task between active and completed."""
        task = self._find(task_id)
        if task is None:
            return False
        new_status = "active" if task.status == "completed" else "completed"
        try:
            updated = self.client.update_task(task_id, task_payload(task, status=new_status))
        except ApiError as exc:
            return self._fail("updating task", "Failed to update task. Please try again.", exc)
        self._replace(updated)
        return True

    def delete(self, task_id: int, confirm: Confirm | None = None) -> bool:
        """Delete a task, asking ``confirm`` first when given."""
        if confirm is not None and not confirm("Are you sure you want to delete this task?"):
            return False
        try:
            self.client.delete_task(task_id)
        except ApiError as exc:
            return self._fail("deleting task", "Failed to delete task. Please try again.", exc)
        self.tasks = [task for task in self.tasks if task.id != task_id]
        if self.editing_task_id == task_id:
            self.cancel_edit()
        return True

    def start_edit(self, task_id: int) -> dict[str, Any] | None:
        """Enter edit mode for a task and return the values to prefill the form."""
        task = self._find(task_id)
        if task is None:
            return None
        self.editing_task_id = task_id
        return {
            "title": task.title,
            "description": task.description or "",
            "priority": task.priority,
            "due_date": task.due_date.isoformat() if task.due_date else "",
        }

    def cancel_edit(self) -> None:
        """Leave edit mode without saving."""
        self.editing_task_id = None

    # ---- filters ----

    def set_status_filter(self, value: str) -> None:
        """Show only tasks with this status, or ``"all"``."""
        self.filters.status = value

    def set_priority_filter(self, value: str) -> None:
        """Show only tasks with this priority, or ``"all"``."""
        self.filters.priority = value

    def set_search(self, value: str) -> None:
        """Match titles and descriptions against ``value``, ignoring case."""
        self.filters.search = value.lower()

    # ---- view ----

    def visible_tasks(self) -> list[Task]:
        """Return the tasks that pass the current filters."""
        return filter_tasks(self.tasks, self.filters)

    def render(self) -> str:
        """Render the filtered task list as HTML."""
        return render_tasks(self.tasks, self.filters)
