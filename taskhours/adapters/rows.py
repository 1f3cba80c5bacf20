"""
Conversion between database rows (JSON mappings) and domain models.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

import pendulum
from pendulum import DateTime

from ..domain.models import Employee, Task, TaskStatus, UserRole, Valuation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_datetime(value: Optional[str]) -> Optional[DateTime]:
    if not value:
        return None

    dt = pendulum.parse(value)
    if isinstance(dt, DateTime):
        return dt

    raise ValueError(f"Could not parse datetime: {value}")


def employee_from_row(row: Mapping[str, Any]) -> Employee:
    return Employee(
        id=str(row["id"]),
        employee_id=str(row.get("employee_id") or ""),
        name=row.get("name") or "",
        role=UserRole(row.get("role") or UserRole.ASSIGNEE.value),
        salary=float(row.get("salary") or 0),
        is_active=bool(row.get("is_active", True)),
    )


def valuation_from_row(row: Mapping[str, Any]) -> Valuation:
    return Valuation(
        id=str(row["id"]),
        title=row.get("title") or "",
        charge_amount=float(row.get("charge_amount") or 0),
        assignee_id=str(row.get("assignee_id") or ""),
        unit_type=row.get("unit_type") or "",
        created_by=str(row.get("created_by") or ""),
        is_active=bool(row.get("is_active", True)),
    )


def task_from_row(row: Mapping[str, Any]) -> Task:
    """
    Build a Task from a ``tasks`` row.

    Raises:
        KeyError: If a required column is missing
        ValueError: If a status or timestamp is invalid
    """
    start = _parse_datetime(row["task_start_time"])
    if start is None:
        raise ValueError("task_start_time is empty")

    return Task(
        id=str(row["id"]),
        task_code=row["task_code"],
        title=row.get("title") or "",
        assigned_by=str(row.get("assigned_by") or ""),
        assigned_to=str(row.get("assigned_to") or ""),
        task_start_time=start,
        status=TaskStatus(row.get("status") or TaskStatus.PENDING.value),
        task_end_time=_parse_datetime(row.get("task_end_time")),
        elapsed_hours=float(row.get("elapsed_hours") or 0),
        valuation_id=row.get("valuation_id") or None,
        deliverable_count=int(row.get("deliverable_count") or 1),
        brief=row.get("brief") or "",
        output=row.get("output") or "",
        deadline=row.get("deadline") or None,
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def to_column(value: Any) -> Any:
    """Serialize a domain value for a JSON column."""
    if isinstance(value, DateTime):
        return value.to_iso8601_string()
    if isinstance(value, Enum):
        return value.value
    return value


def task_to_row(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "task_code": task.task_code,
        "title": task.title,
        "brief": task.brief,
        "assigned_by": task.assigned_by,
        "assigned_to": task.assigned_to,
        "status": to_column(task.status),
        "deadline": task.deadline,
        "task_start_time": to_column(task.task_start_time),
        "task_end_time": to_column(task.task_end_time),
        "elapsed_hours": task.elapsed_hours,
        "output": task.output,
        "valuation_id": task.valuation_id,
        "deliverable_count": task.deliverable_count,
        "created_at": to_column(task.created_at),
        "updated_at": to_column(task.updated_at),
    }


def changes_to_row(changes: Mapping[str, Any]) -> Dict[str, Any]:
    return {column: to_column(value) for column, value in changes.items()}


def parse_rows(
    rows: Iterable[Dict[str, Any]],
    parse: Callable[[Dict[str, Any]], T],
    table: str,
) -> List[T]:
    """Parse rows with ``parse``, skipping malformed ones with a warning."""
    items: List[T] = []
    for row in rows:
        try:
            items.append(parse(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping malformed %s row %s: %s", table, row.get("id"), e)
    return items
