"""Pytest fixtures for the Task Tracker tests."""

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tasktracker.config import Settings
from tasktracker.main import create_app
from tasktracker.store import TaskStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database."""
    return Settings(database_path=tmp_path / "tasks.db")


@pytest.fixture
def store(settings: Settings) -> TaskStore:
    """An initialized store on a fresh database."""
    task_store = TaskStore(settings.database_path)
    task_store.initialize()
    return task_store


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)
