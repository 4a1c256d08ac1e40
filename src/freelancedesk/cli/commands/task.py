"""Task commands, including recurring task series."""

from datetime import datetime, timedelta

import click
from freelancedesk.cli.error_handling import (
    handle_domain_error,
    parse_date_or_exit,
    parse_datetime_or_exit,
)
from freelancedesk.domain.entities import Priority, RecurringPattern, TaskStatus, TaskTemplate
from freelancedesk.domain.task import TaskService

STATUS_CHOICES = [s.value for s in TaskStatus]
PRIORITY_CHOICES = [p.value for p in Priority]
PATTERN_CHOICES = [p.value for p in RecurringPattern]


def _format_task(task) -> str:
    due = task.due_date.isoformat() if task.due_date else "-"
    hidden = " [hidden]" if not task.is_visible else ""
    return (
        f"ID: {task.id:4d} | {task.title:40s} | {task.status.value:11s} | "
        f"{task.priority.value:7s} | Due: {due}{hidden}"
    )


def _format_minutes(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest:02d}m"


@click.group()
def task_group():
    """Manage tasks."""
    pass


@task_group.command("add")
@click.argument("title")
@click.option("--description", help="Description")
@click.option(
    "--priority", type=click.Choice(PRIORITY_CHOICES), default="medium", show_default=True
)
@click.option("--due", help="Due date (YYYY-MM-DD or relative like 'tomorrow', 'in 3 days')")
@click.option("--project", "project_id", type=int, help="Project ID")
@click.option(
    "--repeat",
    type=click.Choice(PATTERN_CHOICES),
    help="Create a recurring series with this cadence",
)
@click.option("--every", "interval", type=int, default=1, show_default=True,
              help="Number of cadence units between occurrences")
@click.option("--count", type=int, default=1, show_default=True,
              help="Number of occurrences in the series")
@click.pass_context
def add_task(
    ctx,
    title: str,
    description: str | None,
    priority: str,
    due: str | None,
    project_id: int | None,
    repeat: str | None,
    interval: int,
    count: int,
):
    """Add a task, or a recurring series of tasks.

    A recurring series is created up front; only its first occurrence is
    listed until it is completed.

    Examples:
        freelancedesk task add "Send proposal" --due tomorrow --priority high
        freelancedesk task add "Weekly report" --repeat weekly --count 4 --due 2024-01-05
        freelancedesk task add "Backup" --repeat daily --every 2 --count 10
    """
    if repeat is None and (count != 1 or interval != 1):
        raise click.UsageError("--count and --every can only be used with --repeat")

    service = TaskService(ctx.obj["db"])

    template = TaskTemplate(
        title=title,
        description=description,
        priority=Priority(priority),
        due_date=parse_date_or_exit(ctx, due, "due date"),
        project_id=project_id,
        is_recurring=repeat is not None,
        recurring_pattern=repeat or RecurringPattern.WEEKLY.value,
        recurring_interval=interval,
        recurrence_count=count if repeat is not None else 1,
    )

    try:
        task_ids = service.create_task(template)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if len(task_ids) == 1:
        click.echo(f"Created task '{title}' (ID: {task_ids[0]})")
    else:
        first = service.get_task(task_ids[0])
        click.echo(
            f"Created recurring series of {len(task_ids)} tasks "
            f"(IDs: {task_ids[0]}-{task_ids[-1]}, series: {first.recurrence_id})"
        )


@task_group.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Filter by status")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), help="Filter by priority")
@click.option("--project", "project_id", type=int, help="Filter by project ID")
@click.option("--search", help="Search title and description")
@click.option("--all", "include_hidden", is_flag=True,
              help="Include upcoming occurrences of recurring series")
@click.pass_context
def list_tasks(
    ctx,
    status: str | None,
    priority: str | None,
    project_id: int | None,
    search: str | None,
    include_hidden: bool,
):
    """List tasks."""
    service = TaskService(ctx.obj["db"])
    tasks = service.list_tasks(
        status=status,
        priority=priority,
        project_id=project_id,
        search=search,
        include_hidden=include_hidden,
    )
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo("\nTasks:")
    click.echo("-" * 100)
    for task in tasks:
        click.echo(_format_task(task))


@task_group.command("series")
@click.argument("task_id", type=int)
@click.pass_context
def show_series(ctx, task_id: int):
    """Show every occurrence in the series of a recurring task."""
    service = TaskService(ctx.obj["db"])
    task = service.get_task(task_id)
    if task is None:
        click.echo(f"Error: Task {task_id} not found", err=True)
        ctx.exit(1)
    if not task.is_recurring:
        click.echo(f"Task {task_id} is not part of a recurring series.")
        return

    pattern = task.recurring_pattern.value
    click.echo(f"Series {task.recurrence_id} ({pattern}, every {task.recurring_interval}):")
    for member in service.list_series(task.recurrence_id):
        click.echo(_format_task(member))


@task_group.command("update")
@click.argument("task_id", type=int)
@click.option("--title", help="New title")
@click.option("--description", help="New description")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), help="New priority")
@click.option("--due", help="New due date")
@click.option("--project", "project_id", type=int, help="New project ID")
@click.pass_context
def update_task(
    ctx,
    task_id: int,
    title: str | None,
    description: str | None,
    priority: str | None,
    due: str | None,
    project_id: int | None,
):
    """Edit one task. Other occurrences of its series are not changed."""
    service = TaskService(ctx.obj["db"])
    changes = {
        "title": title,
        "description": description,
        "priority": priority,
        "due_date": parse_date_or_exit(ctx, due, "due date"),
        "project_id": project_id,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        task = service.update_task(task_id, **changes)
        click.echo(f"Updated task '{task.title}' (ID: {task_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


def _change_status(ctx, task_id: int, status: str) -> None:
    service = TaskService(ctx.obj["db"])
    try:
        task = service.update_status(task_id, status)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Task '{task.title}' is now {task.status.value}")

    if task.status == TaskStatus.COMPLETED and task.is_recurring:
        upcoming = [
            t
            for t in service.list_series(task.recurrence_id)
            if t.is_visible and t.instance_number > task.instance_number
        ]
        if upcoming:
            due = upcoming[0].due_date.isoformat() if upcoming[0].due_date else "-"
            click.echo(f"Next occurrence: '{upcoming[0].title}' (ID: {upcoming[0].id}, due {due})")


@task_group.command("status")
@click.argument("task_id", type=int)
@click.argument("status", type=click.Choice(STATUS_CHOICES))
@click.pass_context
def set_status(ctx, task_id: int, status: str):
    """Set a task's status.

    Allowed changes: pending -> in-progress -> completed, and pending or
    in-progress -> cancelled.
    """
    _change_status(ctx, task_id, status)


@task_group.command("start")
@click.argument("task_id", type=int)
@click.pass_context
def start_task(ctx, task_id: int):
    """Mark a task in progress."""
    _change_status(ctx, task_id, TaskStatus.IN_PROGRESS.value)


@task_group.command("complete")
@click.argument("task_id", type=int)
@click.pass_context
def complete_task(ctx, task_id: int):
    """Mark a task completed, revealing the next occurrence of its series."""
    _change_status(ctx, task_id, TaskStatus.COMPLETED.value)


@task_group.command("delete")
@click.argument("task_id", type=int)
@click.pass_context
def delete_task(ctx, task_id: int) -> None:
    """Delete one task (for a series, only this occurrence)."""
    service = TaskService(ctx.obj["db"])
    task = service.get_task(task_id)
    if task is None:
        click.echo(f"Error: Task {task_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete task '{task.title}' (ID: {task_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_task(task_id)
        click.echo(f"Deleted task '{task.title}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@task_group.command("stats")
@click.pass_context
def task_stats(ctx):
    """Show task statistics."""
    stats = TaskService(ctx.obj["db"]).get_stats()

    click.echo(f"Total tasks: {stats.total}")
    click.echo(f"  Pending:     {stats.pending}")
    click.echo(f"  In progress: {stats.in_progress}")
    click.echo(f"  Completed:   {stats.completed}")
    click.echo(f"  Cancelled:   {stats.cancelled}")
    click.echo(f"  Overdue:     {stats.overdue}")
    click.echo(f"Tracked time: {_format_minutes(stats.tracked_minutes)}")


@task_group.command("log-time")
@click.argument("task_id", type=int)
@click.option("--start", help="Start time (e.g., '2024-01-05 09:00' or 'now')")
@click.option("--end", help="End time; leave out to record a running timer")
@click.option("--minutes", type=int, help="Minutes spent (instead of, or overriding, end - start)")
@click.option("--description", help="What the time was spent on")
@click.pass_context
def log_time(
    ctx,
    task_id: int,
    start: str | None,
    end: str | None,
    minutes: int | None,
    description: str | None,
):
    """Log time spent on a task.

    Examples:
        freelancedesk task log-time 3 --minutes 90
        freelancedesk task log-time 3 --start "2024-01-05 09:00" --end "2024-01-05 11:15"
        freelancedesk task log-time 3 --start now --description "Client call"
    """
    start_time = parse_datetime_or_exit(ctx, start, "start time")
    end_time = parse_datetime_or_exit(ctx, end, "end time")
    if start_time is None:
        if minutes is None:
            raise click.UsageError("Give --start or --minutes")
        # Time just finished: it ended now and began 'minutes' ago
        end_time = end_time or datetime.now().replace(second=0, microsecond=0)
        start_time = end_time - timedelta(minutes=max(minutes, 0))

    service = TaskService(ctx.obj["db"])
    try:
        entry = service.add_time_entry(
            task_id,
            start_time,
            end_time=end_time,
            duration_minutes=minutes,
            description=description,
        )
        total = service.get_tracked_minutes(task_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if entry.is_running:
        click.echo(f"Started timer on task {task_id} at {entry.start_time:%Y-%m-%d %H:%M}")
    else:
        click.echo(f"Logged {entry.duration_minutes} minutes on task {task_id}")
    click.echo(f"Total tracked: {_format_minutes(total)}")


@task_group.command("time")
@click.argument("task_id", type=int)
@click.pass_context
def show_time(ctx, task_id: int):
    """List the time logged on a task."""
    service = TaskService(ctx.obj["db"])
    try:
        entries = service.list_time_entries(task_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not entries:
        click.echo("No time logged.")
        return

    for entry in entries:
        end = "running" if entry.is_running else f"{entry.end_time:%Y-%m-%d %H:%M}"
        click.echo(
            f"{entry.start_time:%Y-%m-%d %H:%M} -> {end:16s} "
            f"{_format_minutes(entry.duration_minutes):>8s}  {entry.description or ''}"
        )
    click.echo(f"Total tracked: {_format_minutes(sum(e.duration_minutes for e in entries))}")


def register_commands(cli):
    """Register task commands with main CLI."""
    cli.add_command(task_group, name="task")
