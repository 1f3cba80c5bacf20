"""
Domain-specific exception hierarchy for the task hours application.
"""


class TaskHoursError(Exception):
    """Base class for all application-level errors."""


class TaskStoreError(TaskHoursError):
    """Raised when task data cannot be fetched, stored or parsed."""


class TaskNotFoundError(TaskStoreError):
    """Raised when a task code or id does not exist in the store."""


class InvalidTimestampError(TaskHoursError, ValueError):
    """Raised when a timestamp string cannot be parsed."""


class InvalidTransitionError(TaskHoursError):
    """Raised when a task status change is not allowed."""
