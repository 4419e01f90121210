"""HTTP client for the task API."""

import logging
from typing import Any

import httpx
import pydantic

from tasktracker.models import Task

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


class ApiError(Exception):
    """A request to the task API failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TaskApiClient:
    """Thin wrapper over ``httpx.Client`` that returns ``Task`` models.

    Pass ``http`` to reuse an existing client (for example FastAPI's
    ``TestClient``); otherwise one is created for ``base_url``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"{method} {path} returned invalid JSON", status_code=response.status_code) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = payload.get("error") if isinstance(payload, dict) else None
        raise ApiError(message or response.reason_phrase, status_code=response.status_code)

    @staticmethod
    def _to_task(payload: Any) -> Task:
        try:
            return Task.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise ApiError(f"Unexpected task payload: {exc.error_count()} invalid field(s)") from exc

    def list_tasks(self) -> list[Task]:
        payload = self._request("GET", TASKS_PATH)
        if not isinstance(payload, list):
            raise ApiError("Unexpected task list payload")
        return [self._to_task(item) for item in payload]

    def get_task(self, task_id: int) -> Task:
        return self._to_task(self._request("GET", f"{TASKS_PATH}/{task_id}"))

    def create_task(self, data: dict[str, Any]) -> Task:
        return self._to_task(self._request("POST", TASKS_PATH, json=data))

    def update_task(self, task_id: int, data: dict[str, Any]) -> Task:
        return self._to_task(self._request("PUT", f"{TASKS_PATH}/{task_id}", json=data))

    def delete_task(self, task_id: int) -> int:
        payload = self._request("DELETE", f"{TASKS_PATH}/{task_id}")
        try:
            return int(payload["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError("Unexpected delete payload") from exc
