"""Tests for the task CRUD endpoints."""

from datetime import datetime
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tasktracker.store import TaskStore


def test_list_tasks_empty(client: TestClient) -> None:
    """Test listing tasks when none exist."""
    response = client.get("/api/tasks")
    assert response.status_code == 200
    assert response.json() == []


def test_create_task(client: TestClient) -> None:
    """Test creating a new task with defaults."""
    response = client.post("/api/tasks", json={"title": "Test task"})
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Test task"
    assert data["description"] == ""
    assert data["priority"] == "medium"
    assert data["status"] == "active"
    assert data["due_date"] is None
    assert isinstance(data["id"], int)
    assert "created_at" in data
    assert "updated_at" in data


def test_create_task_with_all_fields(client: TestClient) -> None:
    response = client.post(
        "/api/tasks",
        json={
            "title": "  Ship release  ",
            "description": "Tag and publish",
            "priority": "high",
            "due_date": "2026-11-01",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Ship release"
    assert data["description"] == "Tag and publish"
    assert data["priority"] == "high"
    assert data["due_date"] == "2026-11-01"


def test_create_task_blank_due_date_is_absent(client: TestClient) -> None:
    response = client.post("/api/tasks", json={"title": "No deadline", "due_date": ""})
    assert response.status_code == 201
    assert response.json()["due_date"] is None


def test_create_task_invalid_due_date(client: TestClient) -> None:
    response = client.post("/api/tasks", json={"title": "Bad date", "due_date": "not-a-date"})
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize("body", [{"title": ""}, {"title": "   "}, {}, {"title": None}])
def test_create_task_without_title(client: TestClient, body: dict) -> None:
    """Test that a missing or blank title is rejected and nothing is stored."""
    response = client.post("/api/tasks", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
    assert client.get("/api/tasks").json() == []


def test_create_assigns_new_ids(client: TestClient) -> None:
    first = client.post("/api/tasks", json={"title": "First"}).json()
    client.delete(f"/api/tasks/{first['id']}")
    second = client.post("/api/tasks", json={"title": "Second"}).json()

    assert second["id"] > first["id"]


def test_get_task(client: TestClient) -> None:
    """Test retrieving a specific task."""
    created = client.post("/api/tasks", json={"title": "Find me", "priority": "low"}).json()

    response = client.get(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_task_not_found(client: TestClient) -> None:
    """Test retrieving a non-existent task."""
    response = client.get("/api/tasks/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_get_task_non_integer_id(client: TestClient) -> None:
    response = client.get("/api/tasks/abc")
    assert response.status_code == 400
    assert "error" in response.json()


def test_update_task(client: TestClient) -> None:
    """Test replacing every mutable field of a task."""
    created = client.post(
        "/api/tasks",
        json={"title": "Original", "description": "old", "priority": "high", "due_date": "2026-01-01"},
    ).json()

    response = client.put(f"/api/tasks/{created['id']}", json={"title": " Updated "})
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["title"] == "Updated"
    # Full replace: omitted fields fall back to their defaults.
    assert data["description"] == ""
    assert data["priority"] == "medium"
    assert data["due_date"] is None
    assert data["status"] == "active"
    assert data["created_at"] == created["created_at"]
    assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(created["updated_at"])
    assert client.get(f"/api/tasks/{created['id']}").json() == data


def test_update_task_completed(client: TestClient) -> None:
    """Test marking a task as completed."""
    created = client.post("/api/tasks", json={"title": "Complete me"}).json()
    assert created["status"] == "active"

    response = client.put(f"/api/tasks/{created['id']}", json={"title": "Complete me", "status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_update_task_blank_title(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Keep me"}).json()

    response = client.put(f"/api/tasks/{created['id']}", json={"title": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
    assert client.get(f"/api/tasks/{created['id']}").json()["title"] == "Keep me"


def test_update_task_not_found(client: TestClient) -> None:
    """Test updating a non-existent task mutates nothing."""
    client.post("/api/tasks", json={"title": "Bystander"})
    before = client.get("/api/tasks").json()

    response = client.put("/api/tasks/999", json={"title": "Nope"})
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}
    assert client.get("/api/tasks").json() == before


def test_delete_task(client: TestClient) -> None:
    """Test deleting a task."""
    created = client.post("/api/tasks", json={"title": "Delete me"}).json()

    response = client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully", "id": created["id"]}

    # Verify it's gone
    get_response = client.get(f"/api/tasks/{created['id']}")
    assert get_response.status_code == 404


def test_delete_task_not_found(client: TestClient) -> None:
    """Test deleting a non-existent task."""
    response = client.delete("/api/tasks/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_list_tasks_after_creating(client: TestClient) -> None:
    """Test that created tasks appear in the list, newest first."""
    client.post("/api/tasks", json={"title": "Task 1"})
    client.post("/api/tasks", json={"title": "Task 2"})
    client.post("/api/tasks", json={"title": "Task 3"})

    response = client.get("/api/tasks")
    assert response.status_code == 200
    titles = [t["title"] for t in response.json()]
    assert titles == ["Task 3", "Task 2", "Task 1"]


def test_create_puts_new_task_first(client: TestClient) -> None:
    client.post("/api/tasks", json={"title": "Older"})
    before = client.get("/api/tasks").json()

    created = client.post("/api/tasks", json={"title": "Newest"}).json()
    after = client.get("/api/tasks").json()

    assert len(after) == len(before) + 1
    assert after[0] == created


def test_storage_failure_returns_500(app: FastAPI, client: TestClient, tmp_path: Path) -> None:
    # A directory cannot be opened as a database file.
    app.state.store = TaskStore(tmp_path)

    response = client.get("/api/tasks")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to list tasks"}


def test_board_page_renders_filtered_tasks(client: TestClient) -> None:
    client.post("/api/tasks", json={"title": "Buy milk", "priority": "low"})
    client.post("/api/tasks", json={"title": "<b>Ship</b> release", "priority": "high"})

    response = client.get("/", params={"priority": "high"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "&lt;b&gt;Ship&lt;/b&gt; release" in response.text
    assert "Buy milk" not in response.text


@pytest.mark.parametrize("task_id", [2**63, 2**70, -(2**63) - 1])
def test_out_of_range_id_is_not_found(client: TestClient, task_id: int) -> None:
    """Ids beyond SQLite's integer range cannot exist."""
    for response in (
        client.get(f"/api/tasks/{task_id}"),
        client.put(f"/api/tasks/{task_id}", json={"title": "Nope"}),
        client.delete(f"/api/tasks/{task_id}"),
    ):
        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}


def test_unexpected_error_keeps_json_shape(app: FastAPI) -> None:
    class ExplodingStore:
        def list_all(self) -> list:
            raise RuntimeError("boom")

    app.state.store = ExplodingStore()
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/tasks")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_board_page_edit_mode(client: TestClient) -> None:
    created = client.post("/api/tasks", json={"title": "Call plumber", "priority": "high"}).json()

    response = client.get("/", params={"edit": created["id"]})
    assert response.status_code == 200
    assert "Edit Task" in response.text
    assert 'value="Call plumber"' in response.text
    assert f'data-task-id="{created["id"]}"' in response.text


def test_board_page_unknown_edit_id_shows_add_form(client: TestClient) -> None:
    response = client.get("/", params={"edit": 999})
    assert response.status_code == 200
    assert "Add New Task" in response.text
