"""Client management commands."""

import click
from freelancedesk.cli.client_resolution import resolve_client_or_exit
from freelancedesk.cli.error_handling import handle_domain_error
from freelancedesk.config import get_settings
from freelancedesk.domain.client import ClientService
from freelancedesk.domain.entities import ClientStatus

STATUS_CHOICES = [s.value for s in ClientStatus]


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("create")
@click.argument("name", metavar="CLIENT_NAME")
@click.option("--email", required=True, help="Contact email (must be unique)")
@click.option("--phone", help="Phone number")
@click.option("--company", help="Company name")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="active", show_default=True)
@click.option("--payment-terms", type=int, help="Days until invoices are due")
@click.option("--notes", help="Notes")
@click.pass_context
def create_client(
    ctx,
    name: str,
    email: str,
    phone: str | None,
    company: str | None,
    status: str,
    payment_terms: int | None,
    notes: str | None,
):
    """Create a new client.

    Examples:
        freelancedesk client create "Acme" --email billing@acme.test
        freelancedesk client create "Jane Doe" --email jane@example.com --payment-terms 15
    """
    service = ClientService(ctx.obj["db"])
    if payment_terms is None:
        payment_terms = get_settings().payment_terms

    try:
        client_id = service.create_client(
            name=name,
            email=email,
            phone=phone,
            company=company,
            status=status,
            payment_terms=payment_terms,
            notes=notes,
        )
        click.echo(f"Created client '{name}' (ID: {client_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@client_group.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Filter by status")
@click.option("--search", help="Search name, email and company")
@click.pass_context
def list_clients(ctx, status: str | None, search: str | None):
    """List clients."""
    service = ClientService(ctx.obj["db"])

    clients = service.list_clients(status=status, search=search)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 80)
    for c in clients:
        click.echo(
            f"ID: {c.id:3d} | {c.name:25s} | {c.email:30s} | {c.status.value}"
        )


@client_group.command("show")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def show_client(ctx, client: str):
    """Show client details.

    CLIENT can be a client ID, email or name.
    """
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)
    c = service.get_client(client_id)

    click.echo(f"Client {c.id}: {c.name}")
    click.echo(f"  Email:         {c.email}")
    if c.phone:
        click.echo(f"  Phone:         {c.phone}")
    if c.company:
        click.echo(f"  Company:       {c.company}")
    click.echo(f"  Status:        {c.status.value}")
    click.echo(f"  Payment terms: {c.payment_terms} days")
    if c.notes:
        click.echo(f"  Notes:         {c.notes}")


@client_group.command("update")
@click.argument("client", metavar="CLIENT")
@click.option("--name", help="New name")
@click.option("--email", help="New email")
@click.option("--phone", help="New phone number")
@click.option("--company", help="New company name")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="New status")
@click.option("--payment-terms", type=int, help="Days until invoices are due")
@click.option("--notes", help="New notes")
@click.pass_context
def update_client(ctx, client: str, **options):
    """Update a client.

    CLIENT can be a client ID, email or name. Only the given options change.

    Examples:
        freelancedesk client update Acme --status inactive
        freelancedesk client update 3 --email new@acme.test
    """
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)

    changes = {k: v for k, v in options.items() if v is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_client(client_id, **changes)
        click.echo(f"Updated client '{updated.name}' (ID: {client_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@client_group.command("delete")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def delete_client(ctx, client: str) -> None:
    """Delete a client.

    CLIENT can be a client ID, email or name.

    The client can only be deleted if no projects or invoices reference it.
    """
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)
    client_obj = service.get_client(client_id)

    if not click.confirm(
        f"Are you sure you want to delete client '{client_obj.name}' (ID: {client_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(client_id)
        click.echo(f"Deleted client '{client_obj.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
