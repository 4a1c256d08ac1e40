"""CLI helpers for client resolution."""

from __future__ import annotations

import click
from freelancedesk.domain.client import ClientService
from freelancedesk.utils.client_resolver import resolve_client


def resolve_client_or_exit(
    ctx: click.Context, client_service: ClientService, client: str | int
) -> int:
    """Resolve client ID, email or name, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_client(client_service, client)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
