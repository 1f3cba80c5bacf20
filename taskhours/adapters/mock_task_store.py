"""
In-memory task store for running without the hosted database.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import TaskNotFoundError
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

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_task_data.json"


class MockTaskStore:
    """
    Store that keeps rows in memory.

    Rows are loaded from a JSON file with ``users``, ``tasks`` and
    ``valuations`` lists, in the same shape the hosted database returns.
    Writes only change the in-memory copy.
    """

    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None, data_file: Optional[Path] = None):
        """
        Initialize the mock store.

        Args:
            data: Rows to use directly; takes precedence over ``data_file``
            data_file: JSON file to load; defaults to the bundled sample data
        """
        if data is None:
            data = self._load_data(data_file or DEFAULT_DATA_FILE)

        self._rows: Dict[str, List[Dict[str, Any]]] = {
            table: copy.deepcopy(data.get(table, []))
            for table in ("users", "tasks", "valuations")
        }

    @staticmethod
    def _load_data(data_file: Path) -> Dict[str, List[Dict[str, Any]]]:
        if not data_file.exists():
            logger.warning("Mock data file %s not found, starting empty", data_file)
            return {}

        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_users(self) -> List[Employee]:
        return parse_rows(self._rows["users"], employee_from_row, "users")

    def list_valuations(self) -> List[Valuation]:
        return parse_rows(self._rows["valuations"], valuation_from_row, "valuations")

    def list_tasks(self) -> List[Task]:
        return parse_rows(self._rows["tasks"], task_from_row, "tasks")

    def get_task_by_code(self, task_code: str) -> Task:
        for row in self._rows["tasks"]:
            if row.get("task_code") == task_code:
                return task_from_row(row)
        raise TaskNotFoundError(f"Task not found: {task_code}")

    def count_tasks(self) -> int:
        return len(self._rows["tasks"])

    def insert_task(self, task: Task) -> Task:
        row = task_to_row(task)
        self._rows["tasks"].append(row)
        return task_from_row(row)

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Task:
        for row in self._rows["tasks"]:
            if str(row.get("id")) == task_id:
                row.update(changes_to_row(changes))
                return task_from_row(row)
        raise TaskNotFoundError(f"Task not found: {task_id}")
