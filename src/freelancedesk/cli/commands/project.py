"""Project management commands."""

import click
from freelancedesk.cli.client_resolution import resolve_client_or_exit
from freelancedesk.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from freelancedesk.domain.client import ClientService
from freelancedesk.domain.entities import Priority, ProjectStatus
from freelancedesk.domain.project import ProjectService

STATUS_CHOICES = [s.value for s in ProjectStatus]
PRIORITY_CHOICES = [p.value for p in Priority]


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--client", help="Client ID, email or name")
@click.option("--description", help="Description")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="active", show_default=True)
@click.option(
    "--priority", type=click.Choice(PRIORITY_CHOICES), default="medium", show_default=True
)
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'today')")
@click.option("--deadline", help="Deadline (YYYY-MM-DD or relative like 'next month')")
@click.option("--budget", help="Budget amount (e.g., 50000 or ₹50,000)")
@click.pass_context
def create_project(
    ctx,
    name: str,
    client: str | None,
    description: str | None,
    status: str,
    priority: str,
    start_date: str | None,
    deadline: str | None,
    budget: str | None,
):
    """Create a new project.

    Examples:
        freelancedesk project create "Website redesign" --client Acme --budget 50000
        freelancedesk project create "Internal tools" --priority low
    """
    db = ctx.obj["db"]
    service = ProjectService(db)

    client_id = None
    if client is not None:
        client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    try:
        project_id = service.create_project(
            name=name,
            client_id=client_id,
            description=description,
            status=status,
            priority=priority,
            start_date=parse_date_or_exit(ctx, start_date, "start date"),
            deadline=parse_date_or_exit(ctx, deadline, "deadline"),
            budget=parse_amount_or_exit(ctx, budget, "budget"),
        )
        click.echo(f"Created project '{name}' (ID: {project_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@project_group.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Filter by status")
@click.option("--client", help="Filter by client ID, email or name")
@click.option("--all", "include_archived", is_flag=True, help="Include archived projects")
@click.pass_context
def list_projects(ctx, status: str | None, client: str | None, include_archived: bool):
    """List projects."""
    db = ctx.obj["db"]
    service = ProjectService(db)

    client_id = None
    if client is not None:
        client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    projects = service.list_projects(
        status=status, client_id=client_id, include_archived=include_archived
    )
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 90)
    for p in projects:
        deadline = p.deadline.isoformat() if p.deadline else "-"
        archived = " [archived]" if p.is_archived else ""
        click.echo(
            f"ID: {p.id:3d} | {p.name:30s} | {p.status.value:10s} | "
            f"{p.priority.value:7s} | Deadline: {deadline}{archived}"
        )


@project_group.command("update")
@click.argument("project_id", type=int)
@click.option("--name", help="New name")
@click.option("--client", help="New client ID, email or name")
@click.option("--description", help="New description")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="New status")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), help="New priority")
@click.option("--start-date", help="New start date")
@click.option("--deadline", help="New deadline")
@click.option("--budget", help="New budget")
@click.pass_context
def update_project(
    ctx,
    project_id: int,
    name: str | None,
    client: str | None,
    description: str | None,
    status: str | None,
    priority: str | None,
    start_date: str | None,
    deadline: str | None,
    budget: str | None,
):
    """Update a project. Only the given options change."""
    db = ctx.obj["db"]
    service = ProjectService(db)

    changes = {
        "name": name,
        "description": description,
        "status": status,
        "priority": priority,
        "start_date": parse_date_or_exit(ctx, start_date, "start date"),
        "deadline": parse_date_or_exit(ctx, deadline, "deadline"),
        "budget": parse_amount_or_exit(ctx, budget, "budget"),
    }
    if client is not None:
        changes["client_id"] = resolve_client_or_exit(ctx, ClientService(db), client)
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_project(project_id, **changes)
        click.echo(f"Updated project '{updated.name}' (ID: {project_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@project_group.command("archive")
@click.argument("project_id", type=int)
@click.option("--undo", is_flag=True, help="Unarchive instead")
@click.pass_context
def archive_project(ctx, project_id: int, undo: bool):
    """Archive (or unarchive) a project."""
    service = ProjectService(ctx.obj["db"])
    try:
        project = service.set_archived(project_id, archived=not undo)
        click.echo(f"{'Unarchived' if undo else 'Archived'} project '{project.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@project_group.command("delete")
@click.argument("project_id", type=int)
@click.pass_context
def delete_project(ctx, project_id: int) -> None:
    """Delete a project.

    The project can only be deleted if no tasks or expenses reference it.
    """
    service = ProjectService(ctx.obj["db"])
    project = service.get_project(project_id)
    if project is None:
        click.echo(f"Error: Project {project_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(
        f"Are you sure you want to delete project '{project.name}' (ID: {project_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_project(project_id)
        click.echo(f"Deleted project '{project.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@project_group.command("stats")
@click.pass_context
def project_stats(ctx):
    """Show project statistics."""
    stats = ProjectService(ctx.obj["db"]).get_stats()

    click.echo(f"Total projects: {stats.total}")
    click.echo(f"  Active:    {stats.active}")
    click.echo(f"  Completed: {stats.completed}")
    click.echo(f"  On hold:   {stats.on_hold}")
    click.echo(f"  Cancelled: {stats.cancelled}")
    click.echo(f"  Archived:  {stats.archived}")
    click.echo(f"Total budget: {stats.total_budget:,.2f}")
    if stats.by_priority:
        click.echo("By priority:")
        for priority in PRIORITY_CHOICES:
            if priority in stats.by_priority:
                click.echo(f"  {priority:8s} {stats.by_priority[priority]}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
