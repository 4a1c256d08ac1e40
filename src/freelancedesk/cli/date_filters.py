"""CLI helpers for date range resolution."""

from datetime import date

import click

from freelancedesk.utils.date_parser import get_date_range, parse_date

PERIODS = ["this-week", "this-month", "this-year", "last-week", "last-month", "last-year"]


def period_options(command):
    """Add the --this-*/--last-* period flags to a command.

    The command receives them as keyword arguments (this_week, ...), which
    it passes on to resolve_cli_date_range as ``period_flags``.
    """
    for period in reversed(PERIODS):
        which, unit = period.split("-")
        command = click.option(
            f"--{period}",
            is_flag=True,
            help=f"Filter to {'current' if which == 'this' else 'previous'} {unit}",
        )(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from one period flag or explicit dates."""
    chosen = [name for name, is_set in period_flags.items() if is_set]

    if len(chosen) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-year, ...) "
            "can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if chosen and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if chosen:
        return get_date_range(chosen[0].replace("_", "-"))

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end
