"""Main CLI entry point."""

import click

from freelancedesk import __version__
from freelancedesk.config import configure_logging, get_settings
from freelancedesk.database.factories import create_sqlite_database

# Import and register all commands at module level
from freelancedesk.cli.commands import (
    client,
    project,
    task,
    invoice,
    expense,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FREELANCEDESK_DB_PATH environment variable)",
    envvar="FREELANCEDESK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides FREELANCEDESK_LOG_LEVEL environment variable)",
    envvar="FREELANCEDESK_LOG_LEVEL",
)
@click.version_option(__version__, prog_name="freelancedesk")
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Freelancedesk - Freelance business management.

    Keep track of clients, projects, tasks (including recurring ones),
    invoices and project expenses.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level or get_settings().log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
project.register_commands(cli)
task.register_commands(cli)
invoice.register_commands(cli)
expense.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
