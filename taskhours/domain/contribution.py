"""
Task statistics and financial contribution relative to salary.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from .models import Employee, FinancialSummary, Task, TaskStats, TaskStatus, Valuation


def visible_tasks(tasks: Iterable[Task], viewer: Employee) -> List[Task]:
    """Managers see every task, assignees only the ones assigned to them."""
    if viewer.is_manager:
        return list(tasks)
    return [task for task in tasks if task.assigned_to == viewer.id]


def filter_tasks(
    tasks: Iterable[Task],
    status: Optional[TaskStatus] = None,
    assignee_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Task]:
    """
    Filter tasks by status, assignee and a case-insensitive search over
    title and task code. Newest tasks come first.
    """
    result = list(tasks)

    if assignee_id:
        result = [task for task in result if task.assigned_to == assignee_id]
    if status is not None:
        result = [task for task in result if task.status == status]
    if search:
        needle = search.lower()
        result = [
            task for task in result
            if needle in task.title.lower() or needle in task.task_code.lower()
        ]

    # Tasks without created_at sort last
    dated = [task for task in result if task.created_at is not None]
    undated = [task for task in result if task.created_at is None]
    dated.sort(key=lambda task: task.created_at, reverse=True)

    return dated + undated


def task_stats(tasks: Sequence[Task]) -> TaskStats:
    """Count tasks per lifecycle status."""
    return TaskStats(
        total=len(tasks),
        pending=sum(1 for task in tasks if task.status == TaskStatus.PENDING),
        in_progress=sum(1 for task in tasks if task.status == TaskStatus.IN_PROGRESS),
        completed=sum(1 for task in tasks if task.status == TaskStatus.COMPLETED),
    )


def financial_summary(
    tasks: Iterable[Task],
    valuations: Iterable[Valuation],
    salary: float,
) -> FinancialSummary:
    """
    Value of completed deliverables and its share of ``salary`` in percent.

    A completed task whose valuation is unknown still counts towards
    deliverables but adds no value.
    """
    rates: Dict[str, Valuation] = {valuation.id: valuation for valuation in valuations}
    completed = [task for task in tasks if task.is_completed]

    total_value = 0.0
    for task in completed:
        valuation = rates.get(task.valuation_id) if task.valuation_id else None
        if valuation is not None:
            total_value += task.deliverable_count * valuation.charge_amount

    return FinancialSummary(
        total_deliverables=sum(task.deliverable_count for task in completed),
        total_value=total_value,
        salary=salary,
        contribution_percentage=(total_value / salary) * 100 if salary > 0 else 0.0,
    )
