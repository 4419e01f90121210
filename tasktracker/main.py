"""FastAPI application factory and routes."""

import logging

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from tasktracker import __version__
from tasktracker.config import Settings, get_settings
from tasktracker.errors import (
    TaskTrackerError,
    request_validation_handler,
    task_error_handler,
    unhandled_error_handler,
)
from tasktracker.models import DeleteResponse, HealthResponse, Task, TaskCreate, TaskUpdate
from tasktracker.store import TaskStore
from tasktracker.view import ALL, TaskFilters, render_board

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> TaskStore:
    """Return the store attached to the running application."""
    return request.app.state.store


@router.get("/api/health", response_model=HealthResponse, tags=["System"])
def health_check(store: TaskStore = Depends(get_store)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(version=__version__, tasks=store.count())


@router.get("/api/tasks", response_model=list[Task], tags=["Tasks"])
def list_tasks(store: TaskStore = Depends(get_store)) -> list[Task]:
    """List all tasks, newest first."""
    return store.list_all()


@router.post(
    "/api/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    tags=["Tasks"],
)
def create_task(data: TaskCreate, store: TaskStore = Depends(get_store)) -> Task:
    """Create a new task."""
    return store.create(
        title=data.title,
        description=data.description,
        priority=data.priority,
        due_date=data.due_date,
    )


@router.get("/api/tasks/{task_id}", response_model=Task, tags=["Tasks"])
def get_task(task_id: int, store: TaskStore = Depends(get_store)) -> Task:
    """Get a specific task by ID."""
    return store.get(task_id)


@router.put("/api/tasks/{task_id}", response_model=Task, tags=["Tasks"])
def update_task(task_id: int, data: TaskUpdate, store: TaskStore = Depends(get_store)) -> Task:
    """Replace an existing task."""
    return store.update(
        task_id,
        title=data.title,
        description=data.description,
        priority=data.priority,
        due_date=data.due_date,
        status=data.status,
    )


@router.delete("/api/tasks/{task_id}", response_model=DeleteResponse, tags=["Tasks"])
def delete_task(task_id: int, store: TaskStore = Depends(get_store)) -> DeleteResponse:
    """Delete a task."""
    return DeleteResponse(id=store.delete(task_id))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def board(
    request: Request,
    status: str = ALL,
    priority: str = ALL,
    search: str = "",
    edit: int | None = None,
    store: TaskStore = Depends(get_store),
) -> HTMLResponse:
    """Render the task board with the requested filters.

    ``edit`` names a task whose values prefill the form in edit mode.
    """
    filters = TaskFilters(status=status, priority=priority, search=search)
    tasks = store.list_all()
    editing = next((task for task in tasks if task.id == edit), None)
    html = render_board(tasks, filters, editing=editing, title=request.app.title)
    return HTMLResponse(html)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and make sure the task table exists."""
    settings = settings or get_settings()

    store = TaskStore(settings.database_path)
    store.initialize()

    app = FastAPI(
        title=settings.app_name,
        description="A personal task tracker backed by SQLite.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.store = store

    # Configure CORS for browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskTrackerError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)

    logger.info("%s ready (database=%s)", settings.app_name, settings.database_path)
    return app
