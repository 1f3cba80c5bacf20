"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .task_tracker import EmployeeReport, TaskStoreProtocol, TaskTrackerService

__all__ = ["EmployeeReport", "TaskStoreProtocol", "TaskTrackerService"]
