"""Task list filtering and HTML rendering.

Rendering is a pure function of the task list and the active filters. All
text coming from tasks is escaped by Jinja2 autoescaping.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from jinja2 import Environment, PackageLoader, select_autoescape

from tasktracker.models import PRIORITIES, STATUSES, Task

ALL = "all"

_env = Environment(
    loader=PackageLoader("tasktracker", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass
class TaskFilters:
    """The three filters applied to the displayed list."""

    status: str = ALL
    priority: str = ALL
    search: str = ""

    def matches(self, task: Task) -> bool:
        if self.status != ALL and task.status != self.status:
            return False
        if self.priority != ALL and task.priority != self.priority:
            return False
        query = self.search.lower()
        if not query:
            return True
        return query in task.title.lower() or query in (task.description or "").lower()


def filter_tasks(tasks: Iterable[Task], filters: TaskFilters | None = None) -> list[Task]:
    """Return the tasks that pass every filter, keeping their order."""
    filters = filters or TaskFilters()
    return [task for task in tasks if filters.matches(task)]


def format_date(value: date | str | None) -> str:
    """Format a due date like ``Oct 19, 2026``."""
    if not value:
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return f"{value:%b} {value.day}, {value.year}"


_env.filters["format_date"] = format_date


def render_tasks(tasks: Iterable[Task], filters: TaskFilters | None = None) -> str:
    """Render the filtered task cards, or the empty state when nothing matches."""
    template = _env.get_template("tasks.html")
    return template.render(tasks=filter_tasks(tasks, filters))


def render_board(
    tasks: Iterable[Task],
    filters: TaskFilters | None = None,
    editing: Task | None = None,
    title: str = "Task Tracker",
) -> str:
    """Render the full page: task form, filter controls and task list."""
    filters = filters or TaskFilters()
    template = _env.get_template("board.html")
    return template.render(
        title=title,
        tasks=filter_tasks(tasks, filters),
        filters=filters,
        editing=editing,
        priorities=PRIORITIES,
        statuses=STATUSES,
    )
