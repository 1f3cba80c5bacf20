"""
Domain layer - Pure business logic without external dependencies.
"""

from .contribution import filter_tasks, financial_summary, task_stats, visible_tasks
from .elapsed_hours import ElapsedHoursCalculator, compute_elapsed_hours, to_local
from .models import (
    DEFAULT_CALENDAR,
    Employee,
    FinancialSummary,
    Task,
    TaskStats,
    TaskStatus,
    TimeRange,
    UserRole,
    Valuation,
    WorkingCalendar,
    WorkingSegment,
)

__all__ = [
    "DEFAULT_CALENDAR",
    "ElapsedHoursCalculator",
    "Employee",
    "FinancialSummary",
    "Task",
    "TaskStats",
    "TaskStatus",
    "TimeRange",
    "UserRole",
    "Valuation",
    "WorkingCalendar",
    "WorkingSegment",
    "compute_elapsed_hours",
    "filter_tasks",
    "financial_summary",
    "task_stats",
    "to_local",
    "visible_tasks",
]
