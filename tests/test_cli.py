"""
Tests for the command line interface.
"""

import pytest
from typer.testing import CliRunner

from taskhours.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "calendar:\n"
        "  working_weekdays: [6, 0, 1, 2, 3, 4]\n"
        "  office_start_hour: 9\n"
        "  office_end_hour: 18\n"
        "  timezone: Asia/Dhaka\n",
        encoding="utf-8",
    )
    return path


def test_hours_command(config_file):
    result = runner.invoke(app, ["hours", "2024-11-25T10:00", "2024-11-25T14:00", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "4.00" in result.output


def test_hours_over_day_off(config_file):
    result = runner.invoke(app, ["hours", "2024-11-28T17:00", "2024-11-30T10:00", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "2.00" in result.output


def test_hours_rejects_bad_timestamp(config_file):
    result = runner.invoke(app, ["hours", "soon", "2024-11-25T14:00", "-c", str(config_file)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_explicit_missing_config_fails(tmp_path):
    result = runner.invoke(app, ["hours", "2024-11-25T10:00", "2024-11-25T14:00", "-c", str(tmp_path / "none.yaml")])

    assert result.exit_code == 1


def test_breakdown_lists_days(config_file):
    result = runner.invoke(app, ["breakdown", "2024-11-28T17:00", "2024-11-30T10:00", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "Thursday, 28.11.2024" in result.output
    assert "Saturday, 30.11.2024" in result.output
    assert "Total: 2.00 h" in result.output


def test_calendar_command(config_file):
    result = runner.invoke(app, ["calendar", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "09:00 - 18:00" in result.output


def test_summary_with_mock_data():
    result = runner.invoke(app, ["summary", "EMP001", "--mock"])

    assert result.exit_code == 0
    assert "Rahim Uddin" in result.output
    assert "20.0%" in result.output


def test_tasks_with_mock_data():
    result = runner.invoke(app, ["tasks", "--mock", "--status", "COMPLETED"])

    assert result.exit_code == 0
    assert "B0001" in result.output
    assert "B0002" not in result.output


def test_complete_with_mock_data():
    result = runner.invoke(app, ["complete", "B0002", "--mock"])

    assert result.exit_code == 0
    assert "B0002 completed" in result.output


def test_complete_unknown_task_fails():
    result = runner.invoke(app, ["complete", "B9999", "--mock"])

    assert result.exit_code == 1
    assert "Task not found" in result.output


def test_reopen_completed_task():
    result = runner.invoke(app, ["status", "B0001", "PENDING", "--mock"])

    assert result.exit_code == 0
    assert "B0001 is now PENDING" in result.output
    assert "4.00 h" in result.output
