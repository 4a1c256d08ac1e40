"""Expense commands."""

import calendar
from datetime import date as date_type

import click
from freelancedesk.cli.date_filters import period_options, resolve_cli_date_range
from freelancedesk.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from freelancedesk.domain.entities import ExpenseCategory
from freelancedesk.domain.expense import ExpenseService

CATEGORY_CHOICES = [c.value for c in ExpenseCategory]


@click.group()
def expense_group():
    """Manage project expenses."""
    pass


@expense_group.command("add")
@click.option("--project", "project_id", type=int, required=True, help="Project ID")
@click.option("--amount", required=True, help="Amount (e.g., 1200 or ₹1,200.50)")
@click.option("--description", required=True, help="What the expense was for")
@click.option("--date", "date_str", default="today", show_default=True,
              help="Expense date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default="other",
              show_default=True)
@click.option("--task", "task_id", type=int, help="Related task ID")
@click.option("--reimbursable", is_flag=True, help="The client reimburses this expense")
@click.option("--notes", help="Notes")
@click.pass_context
def add_expense(
    ctx,
    project_id: int,
    amount: str,
    description: str,
    date_str: str,
    category: str,
    task_id: int | None,
    reimbursable: bool,
    notes: str | None,
):
    """Record an expense against a project.

    Examples:
        freelancedesk expense add --project 1 --amount 450 --description "Taxi" --category travel
        freelancedesk expense add --project 2 --amount 99 --description "Fonts" --reimbursable
    """
    service = ExpenseService(ctx.obj["db"])
    try:
        expense_id = service.create_expense(
            project_id=project_id,
            description=description,
            amount=parse_amount_or_exit(ctx, amount),
            date=parse_date_or_exit(ctx, date_str),
            category=category,
            task_id=task_id,
            is_reimbursable=reimbursable,
            notes=notes,
        )
        click.echo(f"Recorded expense '{description}' (ID: {expense_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@expense_group.command("list")
@click.option("--project", "project_id", type=int, help="Filter by project ID")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), help="Filter by category")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def list_expenses(
    ctx,
    project_id: int | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    **period_flags: bool,
):
    """List expenses, newest first."""
    service = ExpenseService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    expenses = service.list_expenses(
        project_id=project_id, category=category, start_date=start, end_date=end
    )
    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo("\nExpenses:")
    click.echo("-" * 90)
    for e in expenses:
        flag = ""
        if e.is_reimbursable:
            flag = " [reimbursed]" if e.is_reimbursed else " [reimbursable]"
        click.echo(
            f"ID: {e.id:3d} | {e.date.isoformat()} | {e.description:30s} | "
            f"{e.category.value:9s} | {e.amount:>10,.2f}{flag}"
        )


@expense_group.command("update")
@click.argument("expense_id", type=int)
@click.option("--project", "project_id", type=int, help="New project ID")
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@click.option("--date", "date_str", help="New date")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), help="New category")
@click.option("--reimbursable/--not-reimbursable", default=None, help="Reimbursable flag")
@click.option("--notes", help="New notes")
@click.pass_context
def update_expense(
    ctx,
    expense_id: int,
    project_id: int | None,
    amount: str | None,
    description: str | None,
    date_str: str | None,
    category: str | None,
    reimbursable: bool | None,
    notes: str | None,
):
    """Update an expense. Only the given options change."""
    service = ExpenseService(ctx.obj["db"])
    changes = {
        "project_id": project_id,
        "amount": parse_amount_or_exit(ctx, amount),
        "description": description,
        "date": parse_date_or_exit(ctx, date_str),
        "category": category,
        "is_reimbursable": reimbursable,
        "notes": notes,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        expense = service.update_expense(expense_id, **changes)
        click.echo(f"Updated expense '{expense.description}' (ID: {expense_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@expense_group.command("reimburse")
@click.argument("expense_id", type=int)
@click.option("--date", "date_str", help="Reimbursement date (defaults to today)")
@click.option("--undo", is_flag=True, help="Clear the reimbursed mark")
@click.pass_context
def reimburse_expense(ctx, expense_id: int, date_str: str | None, undo: bool):
    """Mark a reimbursable expense as reimbursed."""
    service = ExpenseService(ctx.obj["db"])
    try:
        expense = service.set_reimbursed(
            expense_id, reimbursed=not undo, when=parse_date_or_exit(ctx, date_str)
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    if expense.is_reimbursed:
        click.echo(f"Expense {expense_id} reimbursed on {expense.reimbursed_date.isoformat()}")
    else:
        click.echo(f"Expense {expense_id} marked as not reimbursed")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int) -> None:
    """Delete an expense."""
    service = ExpenseService(ctx.obj["db"])
    expense = service.get_expense(expense_id)
    if expense is None:
        click.echo(f"Error: Expense {expense_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(
        f"Are you sure you want to delete expense '{expense.description}' (ID: {expense_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_expense(expense_id)
        click.echo(f"Deleted expense '{expense.description}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@expense_group.command("stats")
@click.option("--project", "project_id", type=int, help="Filter by project ID")
@click.option("--year", type=int, help="Year of the monthly breakdown (defaults to this year)")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.pass_context
def expense_stats(
    ctx,
    project_id: int | None,
    year: int | None,
    start_date: str | None,
    end_date: str | None,
    **period_flags: bool,
):
    """Show expense totals by category, project and month."""
    service = ExpenseService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    year = year or date_type.today().year
    stats = service.get_stats(project_id=project_id, start_date=start, end_date=end, year=year)

    if stats.total_count == 0:
        click.echo("No expenses found.")
        return

    click.echo(f"Total: {stats.total_amount:,.2f} ({stats.total_count} expenses)")
    click.echo(
        f"Reimbursable: {stats.reimbursable_total:,.2f} ({stats.reimbursable_count} expenses)"
    )

    click.echo("\nBy category:")
    for c in stats.by_category:
        click.echo(f"  {c.category.value:12s} {c.total:>12,.2f} ({c.count})")

    click.echo("\nBy project:")
    for p in stats.by_project:
        click.echo(f"  {p.project_name:30s} {p.total:>12,.2f} ({p.count})")

    if stats.monthly:
        click.echo(f"\nMonthly ({year}):")
        for month, total in stats.monthly.items():
            click.echo(f"  {calendar.month_abbr[month]:4s} {total:>12,.2f}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
