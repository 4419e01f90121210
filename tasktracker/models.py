"""Pydantic models for the Task Tracker API."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

PRIORITIES = ("low", "medium", "high")
STATUSES = ("active", "completed")

DEFAULT_PRIORITY = "medium"
DEFAULT_STATUS = "active"


def blank_to_none(value: Any) -> Any:
    """Treat an empty string as absent (HTML forms submit "" for an unset date)."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class TaskCreate(BaseModel):
    """Request body for creating a new task.

    ``title`` is optional here so that a missing title reaches the store's
    validation and is reported as a 400 like a blank one.
    """

    title: str | None = Field(default=None, description="The task title (required, non-blank)")
    description: str | None = Field(default=None, description="Free-form details")
    priority: str | None = Field(default=None, description="low, medium or high")
    due_date: date | None = Field(default=None, description="Optional ISO due date")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value: Any) -> Any:
        return blank_to_none(value)


class TaskUpdate(TaskCreate):
    """Request body for replacing every mutable field of a task."""

    status: str | None = Field(default=None, description="active or completed")


class Task(BaseModel):
    """A stored task."""

    id: int = Field(..., description="Unique identifier assigned by the store")
    title: str = Field(..., description="The task title")
    description: str = Field(default="", description="Free-form details")
    priority: str = Field(default=DEFAULT_PRIORITY, description="low, medium or high")
    status: str = Field(default=DEFAULT_STATUS, description="active or completed")
    due_date: date | None = Field(default=None, description="Optional due date")
    created_at: datetime = Field(..., description="When the task was created")
    updated_at: datetime = Field(..., description="When the task was last updated")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value: Any) -> Any:
        return blank_to_none(value)


class DeleteResponse(BaseModel):
    """Confirmation returned after a task is deleted."""

    message: str = "Task deleted successfully"
    id: int


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str
    tasks: int
