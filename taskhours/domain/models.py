"""
Domain models for the working calendar, time ranges and tracked tasks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from pendulum import DateTime

# Weekday numbering used throughout the domain: 0=Sunday .. 6=Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

WEEKDAY_NAMES = {
    SUNDAY: "Sunday",
    MONDAY: "Monday",
    TUESDAY: "Tuesday",
    WEDNESDAY: "Wednesday",
    THURSDAY: "Thursday",
    FRIDAY: "Friday",
    SATURDAY: "Saturday",
}


def weekday_of(dt: DateTime) -> int:
    """Return the Sunday-first weekday number (0=Sunday) of a datetime."""
    return dt.isoweekday() % 7


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_seconds(self) -> float:
        """Return the duration in seconds."""
        return (self.end - self.start).total_seconds()

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class WorkingCalendar:
    """
    Working-day and office-hours policy.

    ``working_weekdays`` is an explicit set of Sunday-first weekday numbers
    (0=Sunday .. 6=Saturday). The office window of a day is
    ``[office_start_hour:00, office_end_hour:00)`` in ``timezone``.
    """
    working_weekdays: FrozenSet[int]
    office_start_hour: int
    office_end_hour: int
    timezone: str = "Asia/Dhaka"

    def __post_init__(self):
        object.__setattr__(self, "working_weekdays", frozenset(self.working_weekdays))

        if not self.working_weekdays:
            raise ValueError("working_weekdays must contain at least one weekday")
        invalid = sorted(day for day in self.working_weekdays if day not in range(7))
        if invalid:
            raise ValueError(f"working_weekdays must be between 0 and 6, got {invalid}")
        for hour in (self.office_start_hour, self.office_end_hour):
            if not 0 <= hour <= 23:
                raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        if self.office_start_hour >= self.office_end_hour:
            raise ValueError(
                f"office_start_hour ({self.office_start_hour}) must be before "
                f"office_end_hour ({self.office_end_hour})"
            )

    def is_working_day(self, weekday: int) -> bool:
        """Check if a Sunday-first weekday number is a working day."""
        return weekday in self.working_weekdays

    def is_working_date(self, dt: DateTime) -> bool:
        """Check if a given datetime falls on a working day."""
        return self.is_working_day(weekday_of(dt))

    def office_window_for(self, date: DateTime) -> TimeRange:
        """Get the office window on the calendar date of ``date``."""
        start = date.set(hour=self.office_start_hour, minute=0, second=0, microsecond=0)
        end = date.set(hour=self.office_end_hour, minute=0, second=0, microsecond=0)

        return TimeRange(start=start, end=end)

    def with_weekdays(self, weekdays: Iterable[int]) -> "WorkingCalendar":
        """Return a copy of this calendar with a different working week."""
        return WorkingCalendar(
            working_weekdays=frozenset(weekdays),
            office_start_hour=self.office_start_hour,
            office_end_hour=self.office_end_hour,
            timezone=self.timezone,
        )

    def describe_weekdays(self) -> str:
        """Human readable list of working days, Sunday first."""
        return ", ".join(WEEKDAY_NAMES[day] for day in sorted(self.working_weekdays))


# Saturday through Thursday, Friday off, 09:00-18:00
DEFAULT_CALENDAR = WorkingCalendar(
    working_weekdays=frozenset({SATURDAY, SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY}),
    office_start_hour=9,
    office_end_hour=18,
)


@dataclass
class WorkingSegment:
    """
    The part of a span that falls inside one day's office window.
    """
    time_range: TimeRange

    def hours(self) -> float:
        return self.time_range.duration_seconds() / 3600

    def format_display(self) -> str:
        """
        Format the segment for display.
        Format: Weekday, DD.MM.YYYY | HH:MM - HH:MM (H.HH h)
        """
        start = self.time_range.start
        end = self.time_range.end

        weekday = WEEKDAY_NAMES[weekday_of(start)]
        date_str = start.format("DD.MM.YYYY")
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')}"

        return f"{weekday}, {date_str} | {time_str} ({self.hours():.2f} h)"


class UserRole(str, Enum):
    MANAGER = "MANAGER"
    ASSIGNEE = "ASSIGNEE"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass
class Employee:
    """A user of the dashboard, either a manager or an assignee."""
    id: str
    employee_id: str
    name: str
    role: UserRole = UserRole.ASSIGNEE
    salary: float = 0.0
    is_active: bool = True

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER


@dataclass
class Valuation:
    """Rate card entry: what one deliverable of a unit type is worth for an assignee."""
    id: str
    title: str
    charge_amount: float
    assignee_id: str
    unit_type: str = ""
    created_by: str = ""
    is_active: bool = True


@dataclass
class Task:
    """A unit of work assigned by a manager to an employee."""
    id: str
    task_code: str
    title: str
    assigned_by: str
    assigned_to: str
    task_start_time: DateTime
    status: TaskStatus = TaskStatus.PENDING
    task_end_time: Optional[DateTime] = None
    elapsed_hours: float = 0.0
    valuation_id: Optional[str] = None
    deliverable_count: int = 1
    brief: str = ""
    output: str = ""
    deadline: Optional[str] = None
    created_at: Optional[DateTime] = None
    updated_at: Optional[DateTime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass
class TaskStats:
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0


@dataclass
class FinancialSummary:
    """Value of completed deliverables compared to an employee's salary."""
    total_deliverables: int = 0
    total_value: float = 0.0
    salary: float = 0.0
    contribution_percentage: float = 0.0
