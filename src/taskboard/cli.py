"""Command-line interface for taskboard."""

import json
import logging
import sys
from datetime import datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Config, ConfigError, ConfigModel, default_clock, get_config, load_config
from .recurring import describe_schedule, schedule_label, validate_schedule
from .services.analytics import ReportPeriod, build_report, build_trends
from .services.dashboard import (
    STATUS_FILTERS,
    annotate,
    filter_by_status,
    overdue_tasks,
    status_counts,
    tasks_due_within,
    tasks_for_today,
)
from .services.status import sort_tasks_by_due_date
from .snapshot import Snapshot, SnapshotError, load_snapshot
from .task import Task
from .utils.datetime import Clock, FixedClock, resolve_timezone

console = Console()

STATUS_STYLES = {
    "overdue": "red",
    "due-today": "dark_orange",
    "due-soon": "yellow",
    "future": "green",
    "completed": "dim",
}

PRIORITY_STYLES = {
    "URGENT": "bold red",
    "HIGH": "dark_orange",
    "MEDIUM": "yellow",
    "LOW": "green",
}


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def get_clock(today: Optional[datetime], config: ConfigModel) -> Clock:
    """Pinned clock for ``--today``, otherwise the configured system clock.

    ``--today`` pins the last moment of that day in the configured timezone,
    so everything created during the day falls inside the report windows.
    """
    if today is not None:
        tz = resolve_timezone(config.timezone)
        return FixedClock(datetime.combine(today.date(), time.max, tzinfo=tz))
    return default_clock(config)


def read_snapshot(path: str) -> Snapshot:
    try:
        return load_snapshot(path)
    except SnapshotError as e:
        fail(str(e))


def format_due(task: Task, config: ConfigModel) -> str:
    if task.due_date is None:
        return "-"
    return task.due_date.strftime(config.date_format)


today_option = click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Evaluate as of this date (YYYY-MM-DD)",
)


@click.group()
@click.option("--config", type=click.Path(), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, verbose):
    """taskboard - due dates, streaks and reports for your tasks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load configuration
    try:
        if config:
            Config.reset()
            load_config(Path(config), strict=True)
        else:
            get_config()
    except ConfigError as e:
        fail(f"Configuration error: {e}")


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--period", "-p",
              type=click.Choice([p.value for p in ReportPeriod]),
              default="all", help="Reporting period")
@click.option("--category", "-c", help="Only tasks in this category id")
@today_option
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def report(snapshot, period, category, today, as_json):
    """Show the completion report for a snapshot."""
    config = get_config()
    data = read_snapshot(snapshot)

    payload = build_report(
        data.tasks,
        data.categories,
        period=period,
        category_id=category,
        clock=get_clock(today, config),
        routines=data.routines,
        config=config,
    ).to_dict()

    if as_json:
        click.echo(json.dumps(payload, indent=2))
        return

    _display_report(payload, data, category)


def _display_report(payload: Dict[str, Any], data: Snapshot, category: Optional[str]):
    """Render a report payload as rich tables"""
    heading = f"Report: {payload['period']}"
    if category and category != "all":
        try:
            heading += f" / {data.category(category).name}"
        except KeyError:
            heading += f" / {category}"
    console.print(f"[bold]{escape(heading)}[/bold]")
    console.print(f"[dim]{payload['dateRange']['start']} to {payload['dateRange']['end']}[/dim]")

    overview = payload["overview"]
    table = Table(title="Overview")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total tasks", str(overview["totalTasks"]))
    table.add_row("Completed", str(overview["completedTasks"]))
    table.add_row("Pending", str(overview["pendingTasks"]))
    table.add_row("Completion rate", f"{overview['completionRate']:.2f}%")
    table.add_row("Overdue", str(overview["overdueTasks"]))
    table.add_row("Productive days", str(overview["productiveDays"]))
    table.add_row("Current streak", str(overview["currentStreak"]))
    table.add_row("Routines", f"{overview['activeRoutines']} active / {overview['totalRoutines']}")
    console.print(table)

    table = Table(title="Priorities")
    table.add_column("Priority")
    table.add_column("Tasks", justify="right")
    for name, count in payload["priorityDistribution"].items():
        style = PRIORITY_STYLES.get(name, "")
        table.add_row(f"[{style}]{name}[/{style}]", str(count))
    console.print(table)

    if payload["topCategories"]:
        table = Table(title="Top categories")
        table.add_column("Category")
        table.add_column("Tasks", justify="right")
        table.add_column("Done", justify="right")
        for entry in payload["topCategories"]:
            table.add_row(escape(entry["name"]), str(entry["total"]), str(entry["completed"]))
        console.print(table)

    table = Table(title="Summary")
    table.add_column("Window")
    table.add_column("Tasks", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Rate", justify="right")
    for name, entry in payload["summary"].items():
        table.add_row(name, str(entry["total"]), str(entry["completed"]), f"{entry['completionRate']:.1f}%")
    console.print(table)


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--days", "-d", type=click.IntRange(min=0), help="Number of days to look back")
@today_option
@click.option("--json", "as_json", is_flag=True, help="Print the trend as JSON")
def trends(snapshot, days, today, as_json):
    """Show tasks created and completed per day."""
    config = get_config()
    data = read_snapshot(snapshot)

    points = build_trends(data.tasks, days=days, clock=get_clock(today, config), config=config)

    if as_json:
        click.echo(json.dumps(points, indent=2))
        return

    table = Table(title="Daily activity")
    table.add_column("Date")
    table.add_column("Created", justify="right")
    table.add_column("Completed", justify="right")
    table.add_column("")
    for point in points:
        marker = "[green]*[/green]" if point["productivity"] else ""
        table.add_row(point["date"], str(point["tasksCreated"]), str(point["tasksCompleted"]), marker)
    console.print(table)


def _task_table(title: str, tasks: List[Task], today, config: ConfigModel) -> Table:
    table = Table(title=title)
    table.add_column("Task")
    table.add_column("Due")
    table.add_column("Status")
    table.add_column("Priority")
    for task in tasks:
        row = annotate(task, today, config.due_soon_days)
        style = STATUS_STYLES.get(row["status"], "")
        status = f"[{style}]{row['statusText']}[/{style}]" if style else row["statusText"]
        priority_style = PRIORITY_STYLES.get(task.priority.value, "")
        table.add_row(
            escape(task.title),
            format_due(task, config),
            status,
            f"[{priority_style}]{task.priority.value}[/{priority_style}]",
        )
    return table


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--status", "-s", "status_filter",
              type=click.Choice(STATUS_FILTERS), default="all", help="Only tasks with this status")
@click.option("--descending", is_flag=True, help="Latest due date first")
@today_option
@click.option("--json", "as_json", is_flag=True, help="Print the tasks as JSON")
def status(snapshot, status_filter, descending, today, as_json):
    """List tasks by due date with their status."""
    config = get_config()
    data = read_snapshot(snapshot)
    day = get_clock(today, config).today()

    tasks = filter_by_status(data.tasks, status_filter, day, config.due_soon_days)
    tasks = sort_tasks_by_due_date(tasks, ascending=not descending)

    if as_json:
        rows = []
        for task in tasks:
            row = annotate(task, day, config.due_soon_days)
            row["dueDate"] = task.due_date.isoformat() if task.due_date else None
            rows.append(row)
        click.echo(json.dumps({"counts": status_counts(data.tasks, day), "tasks": rows}, indent=2))
        return

    counts = status_counts(data.tasks, day)
    console.print("  ".join(f"{name}: {count}" for name, count in counts.items()))
    if not tasks:
        console.print("[dim]No tasks match.[/dim]")
        return
    console.print(_task_table(f"Tasks ({status_filter})", tasks, day, config))


@main.command(name="today")
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--days", "-d", type=click.IntRange(min=1), default=7, show_default=True,
              help="How far ahead to look for upcoming tasks")
@today_option
def today_view(snapshot, days, today):
    """Show today's tasks, upcoming tasks and overdue tasks."""
    config = get_config()
    data = read_snapshot(snapshot)
    day = get_clock(today, config).today()

    sections = [
        ("Today", sort_tasks_by_due_date(tasks_for_today(data.tasks, day))),
        (f"Next {days} days", sort_tasks_by_due_date(tasks_due_within(data.tasks, days, day))),
        ("Overdue", sort_tasks_by_due_date(overdue_tasks(data.tasks, day))),
    ]
    for title, tasks in sections:
        if tasks:
            console.print(_task_table(title, tasks, day, config))
        else:
            console.print(f"[bold]{title}[/bold]: [dim]nothing[/dim]")


@main.command(name="check-schedule")
@click.argument("schedule")
def check_schedule(schedule):
    """Validate a schedule given as JSON text or a JSON file."""
    text = schedule
    if not schedule.lstrip().startswith("{") and Path(schedule).is_file():
        text = Path(schedule).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        fail(f"Not valid JSON: {e}")

    result = validate_schedule(data)
    if not result.ok:
        fail(f"{result.error.field}: {result.error.message}")

    click.echo(describe_schedule(result.schedule))
    click.echo(f"({schedule_label(result.schedule)})")


if __name__ == "__main__":
    main()
