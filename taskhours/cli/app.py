"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.mock_task_store import MockTaskStore
from ..adapters.rest_task_store import RestTaskStore
from ..config import AppConfig, get_default_config_path
from ..domain.elapsed_hours import ElapsedHoursCalculator
from ..domain.exceptions import TaskHoursError
from ..services.task_tracker import TaskStoreProtocol, TaskTrackerService

app = typer.Typer(
    name="taskhours",
    help="Track employee tasks and their elapsed working hours",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use the bundled sample data instead of the hosted database.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], *, required: bool, verbose: bool = False) -> AppConfig:
    """
    Load the config file, or the defaults when it is optional and missing.
    """
    config_path = config_file or get_default_config_path()

    if config_path.exists() or required or config_file is not None:
        config = AppConfig.load_from_yaml(config_path)
    else:
        config = AppConfig()

    _setup_logging("DEBUG" if verbose else config.log_level)
    logger.debug("Loaded configuration from %s", config_path if config_path.exists() else "defaults")
    return config


def _build_store(config: AppConfig, mock: bool) -> TaskStoreProtocol:
    if mock:
        return MockTaskStore(data_file=config.store.mock_data_file)

    if not config.store.is_configured():
        raise ValueError(
            "Database url and api_key are not configured. "
            "Set store.url and store.api_key in config.yaml or use --mock."
        )

    return RestTaskStore(
        url=config.store.url,
        api_key=config.store.api_key,
        timeout=config.store.timeout_seconds,
    )


def _build_service(config: AppConfig, mock: bool) -> TaskTrackerService:
    calculator = ElapsedHoursCalculator(config.calendar.to_working_calendar())
    return TaskTrackerService(store=_build_store(config, mock), calculator=calculator)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def hours(
    start: Annotated[str, typer.Argument(help="Start timestamp (ISO 8601, e.g. 2024-11-25T10:00)")],
    end: Annotated[str, typer.Argument(help="End timestamp (ISO 8601)")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Print the working hours elapsed between two timestamps.

    Examples:

        taskhours hours 2024-11-25T10:00 2024-11-25T14:00

        taskhours hours "2024-11-28 17:00" "2024-11-30 10:00"
    """
    try:
        config = _load_config(config_file, required=False, verbose=verbose)
        calculator = ElapsedHoursCalculator(config.calendar.to_working_calendar())
        console.print(f"{calculator.elapsed_hours(start, end):.2f}")

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def breakdown(
    start: Annotated[str, typer.Argument(help="Start timestamp (ISO 8601)")],
    end: Annotated[str, typer.Argument(help="End timestamp (ISO 8601)")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show which part of each day was counted.
    """
    try:
        config = _load_config(config_file, required=False, verbose=verbose)
        calculator = ElapsedHoursCalculator(config.calendar.to_working_calendar())
        segments = calculator.working_segments(start, end)

        if not segments:
            console.print("[yellow]⚠ No working time in this span.[/yellow]")
            return

        console.print()
        for segment in segments:
            console.print(f"  {segment.format_display()}")

        total = calculator.elapsed_hours(start, end)
        console.print(f"\n[bold green]Total: {total:.2f} h[/bold green]\n")

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def calendar(
    config_file: ConfigOption = None,
):
    """
    Show the configured working calendar.
    """
    try:
        config = _load_config(config_file, required=False)
        working_calendar = config.calendar.to_working_calendar()

        console.print(Panel.fit(
            f"[bold]Working days:[/bold] {working_calendar.describe_weekdays()}\n"
            f"[bold]Office hours:[/bold] {working_calendar.office_start_hour:02d}:00 - "
            f"{working_calendar.office_end_hour:02d}:00\n"
            f"[bold]Timezone:[/bold] {working_calendar.timezone}",
            title="Working calendar"
        ))

    except (FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def status(
    task_code: Annotated[str, typer.Argument(help="Task code, e.g. B0002")],
    new_status: Annotated[str, typer.Argument(help="PENDING, IN_PROGRESS or COMPLETED")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Change the status of a task.
    """
    try:
        config = _load_config(config_file, required=not mock, verbose=verbose)
        service = _build_service(config, mock)
        task = service.change_status(task_code, new_status)

        console.print(
            f"[green]✓ {task.task_code} is now {task.status.value}[/green] "
            f"({task.elapsed_hours:.2f} h)"
        )

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def complete(
    task_code: Annotated[str, typer.Argument(help="Task code, e.g. B0002")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Mark a task as completed now and record its elapsed working hours.
    """
    try:
        config = _load_config(config_file, required=not mock, verbose=verbose)
        service = _build_service(config, mock)
        task = service.complete_task(task_code)

        console.print(
            f"[green]✓ {task.task_code} completed[/green] - "
            f"[bold]{task.elapsed_hours:.2f} h[/bold] working time"
        )

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def tasks(
    viewer: Annotated[str, typer.Option("--as", help="Employee id of the viewer")] = "admin",
    status_filter: Annotated[Optional[str], typer.Option("--status", help="Only tasks with this status")] = None,
    assignee: Annotated[Optional[str], typer.Option("--assignee", help="Only tasks of this employee (managers only)")] = None,
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Search title or task code")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List the tasks visible to an employee.
    """
    try:
        config = _load_config(config_file, required=not mock, verbose=verbose)
        service = _build_service(config, mock)

        viewer_employee = service.find_employee(viewer)
        assignee_id = service.find_employee(assignee).id if assignee else None
        found = service.list_tasks(
            viewer_employee,
            status=status_filter,
            assignee_id=assignee_id,
            search=search,
        )

        if not found:
            console.print("[yellow]No tasks found.[/yellow]")
            return

        table = Table(
            title=f"Tasks visible to {viewer_employee.name}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Code", style="bold yellow")
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Hours", justify="right")
        table.add_column("Deliverables", justify="right", style="dim")

        for task in found:
            table.add_row(
                task.task_code,
                task.title,
                task.status.value,
                f"{task.elapsed_hours:.2f}",
                str(task.deliverable_count),
            )

        console.print()
        console.print(table)
        console.print()

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def summary(
    employee: Annotated[str, typer.Argument(help="Employee id, e.g. EMP001")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show task statistics and financial contribution for an employee.
    """
    try:
        config = _load_config(config_file, required=not mock, verbose=verbose)
        service = _build_service(config, mock)
        report = service.employee_report(employee)

        stats = report.stats
        financials = report.financials
        colour = "green" if financials.contribution_percentage >= 100 else "cyan"

        console.print(Panel.fit(
            f"[bold]Tasks:[/bold] {stats.total} total, {stats.pending} pending, "
            f"{stats.in_progress} in progress, {stats.completed} completed\n\n"
            f"[bold]Deliverables:[/bold] {financials.total_deliverables}\n"
            f"[bold]Value:[/bold] {financials.total_value:,.2f}\n"
            f"[bold]Salary:[/bold] {financials.salary:,.2f}\n"
            f"[bold]Contribution:[/bold] [{colour}]{financials.contribution_percentage:.1f}%[/{colour}]",
            title=f"{report.employee.name} ({report.employee.employee_id})"
        ))

    except (TaskHoursError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]taskhours[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
