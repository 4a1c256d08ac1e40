"""Invoice commands."""

import click
from freelancedesk.cli.client_resolution import resolve_client_or_exit
from freelancedesk.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from freelancedesk.domain.client import ClientService
from freelancedesk.domain.entities import DiscountKind, InvoiceStatus, LineItem
from freelancedesk.domain.invoice import InvoiceService
from freelancedesk.utils.amount_parser import parse_amount

STATUS_CHOICES = [s.value for s in InvoiceStatus]
DISCOUNT_CHOICES = [k.value for k in DiscountKind]


def parse_item(text: str) -> LineItem:
    """Parse "DESCRIPTION:QTY:RATE" or "DESCRIPTION:AMOUNT" into a LineItem.

    Raises:
        ValueError: If the item text has the wrong shape or a bad number
    """
    parts = text.rsplit(":", 2)
    if len(parts) == 3 and parts[0].strip():
        return LineItem(
            description=parts[0].strip(),
            quantity=parse_amount(parts[1]),
            unit_rate=parse_amount(parts[2]),
        )
    parts = text.rsplit(":", 1)
    if len(parts) == 2 and parts[0].strip():
        return LineItem(description=parts[0].strip(), amount=parse_amount(parts[1]))
    raise ValueError(f"Invalid item '{text}'. Use DESCRIPTION:QTY:RATE or DESCRIPTION:AMOUNT")


def _resolve_invoice(ctx, service: InvoiceService, reference: str):
    """Find an invoice by ID or INV-YYYY-NNNNNN number, or exit."""
    invoice = None
    if reference.isdigit():
        invoice = service.get_invoice(int(reference))
    else:
        invoice = service.get_invoice_by_number(reference)
    if invoice is None:
        click.echo(f"Error: Invoice '{reference}' not found", err=True)
        ctx.exit(1)
    return invoice


def _echo_invoice(invoice) -> None:
    currency = invoice.currency
    totals = invoice.totals
    click.echo(f"Invoice {invoice.invoice_number} (ID: {invoice.id}) [{invoice.status.value}]")
    click.echo(f"  Client: {invoice.client_id}")
    if invoice.project_id is not None:
        click.echo(f"  Project: {invoice.project_id}")
    click.echo(f"  Issued: {invoice.issue_date.isoformat()}  Due: {invoice.due_date.isoformat()}")
    if invoice.paid_date:
        click.echo(f"  Paid: {invoice.paid_date.isoformat()}")
    click.echo("-" * 70)
    if not invoice.items:
        click.echo("  (no items)")
    for position, item in enumerate(invoice.items, start=1):
        if item.amount is not None:
            detail = "flat"
            amount = item.amount
        else:
            detail = f"{item.quantity} x {item.unit_rate:,.2f}"
            amount = item.quantity * item.unit_rate
        click.echo(f"  {position:2d}. {item.description:35s} {detail:>15s} {amount:>12,.2f}")
    click.echo("-" * 70)
    click.echo(f"  {'Subtotal':50s} {totals.subtotal:>12,.2f}")
    click.echo(f"  {f'Tax ({invoice.tax_rate_percent}%)':50s} {totals.tax_amount:>12,.2f}")
    if totals.discount_amount:
        if invoice.discount_kind == DiscountKind.PERCENTAGE:
            label = f"Discount ({invoice.discount_value}%)"
        else:
            label = "Discount"
        click.echo(f"  {label:50s} {-totals.discount_amount:>12,.2f}")
    click.echo(f"  {'Total ' + currency:50s} {totals.total:>12,.2f}")


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("create")
@click.argument("client", metavar="CLIENT")
@click.option("--item", "items", multiple=True,
              help="Line item as DESCRIPTION:QTY:RATE or DESCRIPTION:AMOUNT (repeatable)")
@click.option("--project", "project_id", type=int, help="Project ID")
@click.option("--issue-date", help="Issue date (defaults to today)")
@click.option("--due-date", help="Due date (defaults to issue date + client payment terms)")
@click.option("--tax", help="Tax rate in percent (e.g., 18)")
@click.option("--discount", help="Discount value")
@click.option("--discount-kind", type=click.Choice(DISCOUNT_CHOICES), default="percentage",
              show_default=True)
@click.option("--currency", help="Currency code (defaults to FREELANCEDESK_CURRENCY)")
@click.option("--notes", help="Notes")
@click.option("--terms", help="Terms text")
@click.pass_context
def create_invoice(
    ctx,
    client: str,
    items: tuple[str, ...],
    project_id: int | None,
    issue_date: str | None,
    due_date: str | None,
    tax: str | None,
    discount: str | None,
    discount_kind: str,
    currency: str | None,
    notes: str | None,
    terms: str | None,
):
    """Create a draft invoice for a client.

    CLIENT can be a client ID, email or name.

    Examples:
        freelancedesk invoice create Acme --item "Design:10:1500" --tax 18
        freelancedesk invoice create 2 --item "Retainer:25000" --discount 10
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    try:
        line_items = [parse_item(text) for text in items]
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    try:
        invoice = service.create_invoice(
            client_id=client_id,
            items=line_items,
            issue_date=parse_date_or_exit(ctx, issue_date, "issue date"),
            due_date=parse_date_or_exit(ctx, due_date, "due date"),
            project_id=project_id,
            tax_rate_percent=parse_amount_or_exit(ctx, tax, "tax rate"),
            discount_kind=discount_kind,
            discount_value=parse_amount_or_exit(ctx, discount, "discount") or 0,
            currency=currency,
            notes=notes,
            terms=terms,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created invoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo(f"Total: {invoice.totals.total:,.2f} {invoice.currency}")


@invoice_group.command("list")
@click.option("--client", help="Filter by client ID, email or name")
@click.option("--project", "project_id", type=int, help="Filter by project ID")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Filter by status")
@click.pass_context
def list_invoices(ctx, client: str | None, project_id: int | None, status: str | None):
    """List invoices, newest first."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    client_id = None
    if client is not None:
        client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    invoices = service.list_invoices(client_id=client_id, project_id=project_id, status=status)
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\nInvoices:")
    click.echo("-" * 90)
    for inv in invoices:
        click.echo(
            f"ID: {inv.id:3d} | {inv.invoice_number} | {inv.status.value:9s} | "
            f"Due: {inv.due_date.isoformat()} | {inv.totals.total:>12,.2f} {inv.currency}"
        )


@invoice_group.command("show")
@click.argument("invoice", metavar="INVOICE")
@click.pass_context
def show_invoice(ctx, invoice: str):
    """Show an invoice with its items and totals.

    INVOICE can be an invoice ID or number.
    """
    service = InvoiceService(ctx.obj["db"])
    _echo_invoice(_resolve_invoice(ctx, service, invoice))


@invoice_group.command("add-item")
@click.argument("invoice", metavar="INVOICE")
@click.argument("item", metavar="DESCRIPTION:QTY:RATE|DESCRIPTION:AMOUNT")
@click.pass_context
def add_item(ctx, invoice: str, item: str):
    """Append a line item to an invoice."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.add_item(inv.id, parse_item(item))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added item to {updated.invoice_number}. Total: {updated.totals.total:,.2f}")


@invoice_group.command("update-item")
@click.argument("invoice", metavar="INVOICE")
@click.argument("position", type=int)
@click.option("--description", help="New description")
@click.option("--quantity", help="New quantity")
@click.option("--rate", help="New unit rate")
@click.option("--amount", help="New flat amount")
@click.pass_context
def update_item(
    ctx,
    invoice: str,
    position: int,
    description: str | None,
    quantity: str | None,
    rate: str | None,
    amount: str | None,
):
    """Edit the line item at POSITION (as shown by 'invoice show')."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    changes = {
        "description": description,
        "quantity": parse_amount_or_exit(ctx, quantity, "quantity"),
        "unit_rate": parse_amount_or_exit(ctx, rate, "rate"),
        "amount": parse_amount_or_exit(ctx, amount, "amount"),
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_item(inv.id, position, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated item {position} of {updated.invoice_number}. "
               f"Total: {updated.totals.total:,.2f}")


@invoice_group.command("remove-item")
@click.argument("invoice", metavar="INVOICE")
@click.argument("position", type=int)
@click.pass_context
def remove_item(ctx, invoice: str, position: int):
    """Remove the line item at POSITION."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.remove_item(inv.id, position)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Removed item {position} from {updated.invoice_number}. "
               f"Total: {updated.totals.total:,.2f}")


@invoice_group.command("rates")
@click.argument("invoice", metavar="INVOICE")
@click.option("--tax", help="Tax rate in percent")
@click.option("--discount", help="Discount value")
@click.option("--discount-kind", type=click.Choice(DISCOUNT_CHOICES), help="Discount kind")
@click.pass_context
def update_rates(
    ctx, invoice: str, tax: str | None, discount: str | None, discount_kind: str | None
):
    """Change the tax rate or discount of an invoice."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.update_rates(
            inv.id,
            tax_rate_percent=parse_amount_or_exit(ctx, tax, "tax rate"),
            discount_kind=discount_kind,
            discount_value=parse_amount_or_exit(ctx, discount, "discount"),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    _echo_invoice(updated)


@invoice_group.command("status")
@click.argument("invoice", metavar="INVOICE")
@click.argument("status", type=click.Choice(STATUS_CHOICES))
@click.option("--paid-date", help="Payment date when marking paid (defaults to today)")
@click.pass_context
def set_status(ctx, invoice: str, status: str, paid_date: str | None):
    """Set an invoice's status. Paid and cancelled invoices are final."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.update_status(
            inv.id, status, paid_date=parse_date_or_exit(ctx, paid_date, "paid date")
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Invoice {updated.invoice_number} is now {updated.status.value}")


@invoice_group.command("mark-overdue")
@click.pass_context
def mark_overdue(ctx):
    """Mark sent invoices past their due date as overdue."""
    changed = InvoiceService(ctx.obj["db"]).mark_overdue()
    if not changed:
        click.echo("No overdue invoices.")
        return
    for inv in changed:
        click.echo(f"{inv.invoice_number} is overdue (due {inv.due_date.isoformat()})")


@invoice_group.command("delete")
@click.argument("invoice", metavar="INVOICE")
@click.pass_context
def delete_invoice(ctx, invoice: str) -> None:
    """Delete an invoice and its items."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)

    if not click.confirm(f"Are you sure you want to delete invoice {inv.invoice_number}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_invoice(inv.id)
        click.echo(f"Deleted invoice {inv.invoice_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
