"""
Tests for task statistics and financial contribution.
"""

import pendulum

from taskhours.domain.contribution import filter_tasks, financial_summary, task_stats, visible_tasks
from taskhours.domain.models import Employee, Task, TaskStatus, UserRole, Valuation


def _task(code, assigned_to, status=TaskStatus.PENDING, valuation_id="v-1", count=1, created="2024-11-25 10:00", title=None):
    created_at = pendulum.parse(created, tz="Asia/Dhaka")
    return Task(
        id=f"id-{code}",
        task_code=code,
        title=title or f"Task {code}",
        assigned_by="u-1",
        assigned_to=assigned_to,
        task_start_time=created_at,
        status=status,
        valuation_id=valuation_id,
        deliverable_count=count,
        created_at=created_at,
    )


MANAGER = Employee(id="u-1", employee_id="admin", name="Admin", role=UserRole.MANAGER)
RAHIM = Employee(id="u-2", employee_id="EMP001", name="Rahim", salary=30000)

VALUATIONS = [
    Valuation(id="v-1", title="Photo retouch", charge_amount=150, assignee_id="u-2"),
    Valuation(id="v-2", title="Article", charge_amount=1200, assignee_id="u-3"),
]


class TestFinancialSummary:

    def test_only_completed_tasks_count(self):
        """Pending and in-progress deliverables are not valued."""
        tasks = [
            _task("B0001", "u-2", TaskStatus.COMPLETED, "v-1", 40),
            _task("B0002", "u-2", TaskStatus.IN_PROGRESS, "v-1", 20),
            _task("B0003", "u-2", TaskStatus.PENDING, "v-1", 5),
        ]

        summary = financial_summary(tasks, VALUATIONS, salary=30000)

        assert summary.total_deliverables == 40
        assert summary.total_value == 6000
        assert summary.salary == 30000
        assert summary.contribution_percentage == 20.0

    def test_unknown_valuation_adds_deliverables_but_no_value(self):
        tasks = [
            _task("B0001", "u-2", TaskStatus.COMPLETED, "v-1", 2),
            _task("B0002", "u-2", TaskStatus.COMPLETED, "missing", 3),
            _task("B0003", "u-2", TaskStatus.COMPLETED, None, 1),
        ]

        summary = financial_summary(tasks, VALUATIONS, salary=1000)

        assert summary.total_deliverables == 6
        assert summary.total_value == 300
        assert summary.contribution_percentage == 30.0

    def test_zero_salary_gives_zero_percentage(self):
        tasks = [_task("B0001", "u-2", TaskStatus.COMPLETED, "v-2", 1)]

        summary = financial_summary(tasks, VALUATIONS, salary=0)

        assert summary.total_value == 1200
        assert summary.contribution_percentage == 0.0

    def test_contribution_can_exceed_hundred_percent(self):
        tasks = [_task("B0001", "u-2", TaskStatus.COMPLETED, "v-2", 3)]

        summary = financial_summary(tasks, VALUATIONS, salary=2400)

        assert summary.contribution_percentage == 150.0


class TestTaskViews:

    def setup_method(self):
        self.tasks = [
            _task("B0001", "u-2", TaskStatus.COMPLETED, created="2024-11-25 10:00", title="Retouch catalogue"),
            _task("B0002", "u-3", TaskStatus.PENDING, created="2024-11-26 10:00", title="Write article"),
            _task("B0003", "u-2", TaskStatus.IN_PROGRESS, created="2024-11-27 10:00", title="Retouch lookbook"),
        ]

    def test_manager_sees_everything(self):
        assert len(visible_tasks(self.tasks, MANAGER)) == 3

    def test_assignee_sees_own_tasks(self):
        codes = [task.task_code for task in visible_tasks(self.tasks, RAHIM)]

        assert codes == ["B0001", "B0003"]

    def test_filter_sorts_newest_first(self):
        codes = [task.task_code for task in filter_tasks(self.tasks)]

        assert codes == ["B0003", "B0002", "B0001"]

    def test_filter_by_status_and_assignee(self):
        result = filter_tasks(self.tasks, status=TaskStatus.COMPLETED, assignee_id="u-2")

        assert [task.task_code for task in result] == ["B0001"]

    def test_search_matches_title_or_code_case_insensitively(self):
        by_title = filter_tasks(self.tasks, search="RETOUCH")
        by_code = filter_tasks(self.tasks, search="b0002")

        assert [task.task_code for task in by_title] == ["B0003", "B0001"]
        assert [task.task_code for task in by_code] == ["B0002"]

    def test_task_stats(self):
        stats = task_stats(self.tasks)

        assert stats.total == 3
        assert stats.pending == 1
        assert stats.in_progress == 1
        assert stats.completed == 1
