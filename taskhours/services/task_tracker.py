"""
Application services for tracking task lifecycle and contribution.

The service coordinates reading and writing tasks through a task store
adapter and delegates elapsed-time accounting to the domain-level
``ElapsedHoursCalculator``. The store dependency is a simple protocol so the
hosted database adapter and the mock store are interchangeable.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

import pendulum
from pendulum import DateTime

from ..domain.contribution import filter_tasks, financial_summary, task_stats, visible_tasks
from ..domain.elapsed_hours import ElapsedHoursCalculator
from ..domain.exceptions import InvalidTransitionError, TaskNotFoundError
from ..domain.models import Employee, FinancialSummary, Task, TaskStats, TaskStatus, Valuation

logger = logging.getLogger(__name__)

TASK_CODE_PREFIX = "B"


class TaskStoreProtocol(Protocol):
    """Protocol describing the persistence behaviour needed by the service."""

    def list_users(self) -> List[Employee]:
        """Return all users."""

    def list_tasks(self) -> List[Task]:
        """Return all tasks."""

    def list_valuations(self) -> List[Valuation]:
        """Return all valuations."""

    def get_task_by_code(self, task_code: str) -> Task:
        """Return a single task, raising TaskNotFoundError if missing."""

    def count_tasks(self) -> int:
        """Return the number of stored tasks."""

    def insert_task(self, task: Task) -> Task:
        """Persist a new task and return the stored version."""

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Task:
        """Apply field changes to a task and return the stored version."""


@dataclass
class EmployeeReport:
    """Dashboard figures for one employee."""
    employee: Employee
    stats: TaskStats
    financials: FinancialSummary


def parse_status(value: Union[str, TaskStatus]) -> TaskStatus:
    """Turn a user supplied status name into a TaskStatus."""
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value.strip().upper().replace("-", "_"))
    except ValueError as exc:
        allowed = ", ".join(status.value for status in TaskStatus)
        raise InvalidTransitionError(f"Unknown status '{value}'. Use one of: {allowed}") from exc


class TaskTrackerService:
    """
    Orchestrates task status changes, elapsed-hours stamping and reporting.
    """

    def __init__(
        self,
        store: TaskStoreProtocol,
        calculator: ElapsedHoursCalculator,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._store = store
        self._calculator = calculator
        self._clock = clock or (lambda: pendulum.now(calculator.calendar.timezone))

    def next_task_code(self) -> str:
        """Next sequential task code, e.g. B0001."""
        return f"{TASK_CODE_PREFIX}{self._store.count_tasks() + 1:04d}"

    def create_task(
        self,
        *,
        title: str,
        assigned_by: str,
        assigned_to: str,
        valuation_id: Optional[str] = None,
        deliverable_count: int = 1,
        brief: str = "",
        deadline: Optional[str] = None,
    ) -> Task:
        """Create a PENDING task whose clock starts now."""
        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            task_code=self.next_task_code(),
            title=title,
            assigned_by=assigned_by,
            assigned_to=assigned_to,
            task_start_time=now,
            status=TaskStatus.PENDING,
            valuation_id=valuation_id,
            deliverable_count=deliverable_count or 1,
            brief=brief,
            deadline=deadline,
            created_at=now,
            updated_at=now,
        )

        stored = self._store.insert_task(task)
        logger.info("Created task %s for %s", stored.task_code, stored.assigned_to)
        return stored

    def change_status(self, task_code: str, status: Union[str, TaskStatus]) -> Task:
        """
        Move a task to ``status``.

        Completing a task stamps the end time and the elapsed working hours.
        Any other change, including reopening a completed task, keeps the
        existing end time and recomputes the hours from it when present.

        Raises:
            TaskNotFoundError: If the task code is unknown
            InvalidTransitionError: If the status is unknown
        """
        new_status = parse_status(status)
        task = self._store.get_task_by_code(task_code)

        now = self._clock()
        end_time = now if new_status == TaskStatus.COMPLETED else task.task_end_time

        if end_time is not None:
            elapsed = self._calculator.elapsed_hours(task.task_start_time, end_time)
        else:
            elapsed = task.elapsed_hours

        changes: Dict[str, Any] = {
            "status": new_status,
            "task_end_time": end_time,
            "elapsed_hours": elapsed,
            "updated_at": now,
        }

        updated = self._store.update_task(task.id, changes)
        logger.info(
            "Task %s: %s -> %s (%.2f h)",
            task.task_code,
            task.status.value,
            new_status.value,
            elapsed,
        )
        return updated

    def complete_task(self, task_code: str) -> Task:
        """Mark a task as completed now."""
        return self.change_status(task_code, TaskStatus.COMPLETED)

    def find_employee(self, identifier: str) -> Employee:
        """
        Find an employee by internal id or employee id (case-insensitive).

        Raises:
            TaskNotFoundError: If no user matches
        """
        for user in self._store.list_users():
            if user.id == identifier or user.employee_id.lower() == identifier.lower():
                return user
        raise TaskNotFoundError(f"Unknown employee: '{identifier}'")

    def list_tasks(
        self,
        viewer: Employee,
        *,
        status: Optional[Union[str, TaskStatus]] = None,
        assignee_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """Tasks visible to ``viewer``, filtered and newest first."""
        tasks = visible_tasks(self._store.list_tasks(), viewer)

        # Only managers may narrow down by assignee
        if not viewer.is_manager:
            assignee_id = None

        return filter_tasks(
            tasks,
            status=parse_status(status) if status is not None else None,
            assignee_id=assignee_id,
            search=search,
        )

    def employee_report(self, identifier: str) -> EmployeeReport:
        """Task statistics and financial contribution for one employee."""
        employee = self.find_employee(identifier)
        tasks = visible_tasks(self._store.list_tasks(), employee)

        return EmployeeReport(
            employee=employee,
            stats=task_stats(tasks),
            financials=financial_summary(tasks, self._store.list_valuations(), employee.salary),
        )
