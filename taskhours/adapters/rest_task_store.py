"""
Task store backed by the hosted database's REST interface.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import TaskNotFoundError, TaskStoreError
from ..domain.models import Employee, Task, Valuation
from .rows import (
    changes_to_row,
    employee_from_row,
    parse_rows,
    task_from_row,
    task_to_row,
    valuation_from_row,
)

logger = logging.getLogger(__name__)


class RestTaskStore:
    """
    Client for a PostgREST-style hosted database.

    Tables ``users``, ``tasks`` and ``valuations`` are reached under
    ``<url>/rest/v1/<table>``; filters use the ``column=eq.value`` syntax.
    """

    REST_PATH = "/rest/v1"

    def __init__(self, url: str, api_key: str, timeout: float = 30):
        """
        Initialize the store client.

        Args:
            url: Project base URL, e.g. https://<project>.example.co
            api_key: API key sent as ``apikey`` and bearer token
            timeout: Request timeout in seconds
        """
        self.base_url = url.rstrip("/") + self.REST_PATH
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        url = f"{self.base_url}/{table}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise TaskStoreError(f"Request to '{table}' failed: {e}") from e

        return response

    def _rows(self, response: requests.Response) -> List[Dict[str, Any]]:
        try:
            data = response.json()
        except ValueError as e:
            raise TaskStoreError(f"Invalid JSON in response: {e}") from e

        if not isinstance(data, list):
            raise TaskStoreError("Expected a list of rows in response")
        return data

    def list_users(self) -> List[Employee]:
        response = self._request("GET", "users", params={"select": "*"})
        return parse_rows(self._rows(response), employee_from_row, "users")

    def list_valuations(self) -> List[Valuation]:
        response = self._request("GET", "valuations", params={"select": "*"})
        return parse_rows(self._rows(response), valuation_from_row, "valuations")

    def list_tasks(self) -> List[Task]:
        response = self._request(
            "GET",
            "tasks",
            params={"select": "*", "order": "created_at.desc"},
        )
        return parse_rows(self._rows(response), task_from_row, "tasks")

    def get_task_by_code(self, task_code: str) -> Task:
        response = self._request(
            "GET",
            "tasks",
            params={"select": "*", "task_code": f"eq.{task_code}"},
        )
        tasks = parse_rows(self._rows(response), task_from_row, "tasks")

        if not tasks:
            raise TaskNotFoundError(f"Task not found: {task_code}")
        return tasks[0]

    def count_tasks(self) -> int:
        """
        Count tasks using the exact-count header.

        The ``Content-Range`` header looks like ``0-24/25`` or ``*/0``.
        """
        response = self._request(
            "HEAD",
            "tasks",
            params={"select": "*"},
            prefer="count=exact",
        )
        content_range = response.headers.get("Content-Range", "")
        total = content_range.rpartition("/")[2]

        if not total.isdigit():
            raise TaskStoreError(f"Missing task count in Content-Range: '{content_range}'")
        return int(total)

    def insert_task(self, task: Task) -> Task:
        response = self._request(
            "POST",
            "tasks",
            json=[task_to_row(task)],
            prefer="return=representation",
        )
        rows = self._rows(response)

        if not rows:
            raise TaskStoreError(f"Insert of task {task.task_code} returned no rows")
        return task_from_row(rows[0])

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Task:
        response = self._request(
            "PATCH",
            "tasks",
            params={"id": f"eq.{task_id}"},
            json=changes_to_row(changes),
            prefer="return=representation",
        )
        rows = self._rows(response)

        if not rows:
            raise TaskNotFoundError(f"Task not found: {task_id}")
        return task_from_row(rows[0])
