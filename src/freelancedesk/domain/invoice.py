"""Invoice domain service."""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from freelancedesk.config import get_settings
from freelancedesk.database.base import Database
from freelancedesk.domain.entities import (
    DiscountKind,
    Invoice as InvoiceEntity,
    InvoiceStatus,
    LineItem,
)
from freelancedesk.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    invalid_transition,
    not_found,
)
from freelancedesk.domain.validation import parse_choice, require_non_negative, require_text

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PREFIX = "INV"

# Paid and cancelled invoices are closed.
INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset(
        {InvoiceStatus.SENT, InvoiceStatus.PAID, InvoiceStatus.CANCELLED}
    ),
    InvoiceStatus.SENT: frozenset(
        {InvoiceStatus.DRAFT, InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED}
    ),
    InvoiceStatus.OVERDUE: frozenset(
        {InvoiceStatus.SENT, InvoiceStatus.PAID, InvoiceStatus.CANCELLED}
    ),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def format_invoice_number(year: int, sequence: int) -> str:
    """Format an invoice number as INV-YYYY-NNNNNN."""
    return f"{INVOICE_NUMBER_PREFIX}-{year}-{sequence:06d}"


def validate_item(item: LineItem) -> LineItem:
    """Return a cleaned line item.

    Raises:
        ValidationError: If the description is empty or an amount is negative
    """
    return LineItem(
        description=require_text(item.description, "item description"),
        quantity=require_non_negative(item.quantity, "quantity") or Decimal("0"),
        unit_rate=require_non_negative(item.unit_rate, "unit rate") or Decimal("0"),
        amount=require_non_negative(item.amount, "amount"),
    )


class InvoiceService:
    """Service for managing invoices and their line items."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_invoice(self, invoice_id: int) -> InvoiceEntity:
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(not_found("Invoice", invoice_id))
        return invoice

    def _require_open(self, invoice_id: int) -> InvoiceEntity:
        invoice = self._require_invoice(invoice_id)
        if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
            raise ValidationError(
                f"Invoice {invoice.invoice_number} is {invoice.status.value} and cannot be edited"
            )
        return invoice

    def _check_project(self, project_id: Optional[int], client_id: int) -> None:
        if project_id is None:
            return
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(not_found("Project", project_id))
        if project.client_id is not None and project.client_id != client_id:
            raise ValidationError(
                f"Project {project_id} belongs to client {project.client_id}, not {client_id}"
            )

    def next_invoice_number(self, year: int) -> str:
        """Generate the next invoice number for a year.

        Format: INV-YYYY-NNNNNN (e.g., INV-2024-000001)
        """
        prefix = f"{INVOICE_NUMBER_PREFIX}-{year}-"
        max_number = self.db.get_max_invoice_number(prefix)
        if max_number:
            sequence = int(max_number.split("-")[-1]) + 1
        else:
            sequence = 1
        return format_invoice_number(year, sequence)

    def create_invoice(
        self,
        client_id: int,
        items: Sequence[LineItem] = (),
        issue_date: Optional[date] = None,
        due_date: Optional[date] = None,
        project_id: Optional[int] = None,
        tax_rate_percent: Optional[Decimal] = None,
        discount_kind: Union[DiscountKind, str] = DiscountKind.PERCENTAGE,
        discount_value: Decimal = Decimal("0"),
        currency: Optional[str] = None,
        notes: Optional[str] = None,
        terms: Optional[str] = None,
    ) -> InvoiceEntity:
        """Create a draft invoice.

        Args:
            client_id: Billed client
            items: Line items, in display order
            issue_date: Issue date (defaults to today)
            due_date: Due date (defaults to issue date plus the client's
                payment terms)
            project_id: Optional project the invoice bills for
            tax_rate_percent: Tax rate (defaults to the configured rate)
            discount_kind: percentage or fixed
            discount_value: Discount percentage or amount
            currency: Currency code (defaults to the configured currency)
            notes: Optional notes
            terms: Optional payment terms text

        Returns:
            The created invoice with computed totals

        Raises:
            NotFoundError: If client or project not found
            ValidationError: If an item, rate or date is invalid
        """
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(not_found("Client", client_id))
        self._check_project(project_id, client_id)

        settings = get_settings()
        issue_date = issue_date or date.today()
        if due_date is None:
            due_date = issue_date + timedelta(days=client.payment_terms)
        if due_date < issue_date:
            raise ValidationError("Due date cannot be before the issue date")
        if tax_rate_percent is None:
            tax_rate_percent = settings.default_tax_rate

        invoice_number = self.next_invoice_number(issue_date.year)
        invoice_id = self.db.create_invoice(
            invoice_number=invoice_number,
            client_id=client_id,
            project_id=project_id,
            issue_date=issue_date,
            due_date=due_date,
            items=[validate_item(item) for item in items],
            currency=(currency or settings.currency).upper(),
            tax_rate_percent=require_non_negative(tax_rate_percent, "tax rate"),
            discount_kind=parse_choice(DiscountKind, discount_kind, "discount kind").value,
            discount_value=require_non_negative(discount_value, "discount"),
            notes=notes,
            terms=terms,
        )
        logger.info("Created invoice %s for client %s", invoice_number, client_id)
        return self.db.get_invoice(invoice_id)

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get invoice by ID.

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice entity or None if not found
        """
        return self.db.get_invoice(invoice_id)

    def get_invoice_by_number(self, invoice_number: str) -> Optional[InvoiceEntity]:
        """Get invoice by its INV-YYYY-NNNNNN number."""
        return self.db.get_invoice_by_number(invoice_number.strip().upper())

    def list_invoices(
        self,
        client_id: Optional[int] = None,
        project_id: Optional[int] = None,
        status: Union[InvoiceStatus, str, None] = None,
    ) -> list[InvoiceEntity]:
        """List invoices, newest first."""
        status_value = None
        if status is not None:
            status_value = parse_choice(InvoiceStatus, status, "invoice status").value
        return self.db.list_invoices(
            client_id=client_id, project_id=project_id, status=status_value
        )

    def add_item(self, invoice_id: int, item: LineItem) -> InvoiceEntity:
        """Append a line item.

        Raises:
            NotFoundError: If invoice not found
            ValidationError: If the item is invalid or the invoice is closed
        """
        invoice = self._require_open(invoice_id)
        items = list(invoice.items) + [validate_item(item)]
        self.db.replace_invoice_items(invoice_id, items)
        return self.db.get_invoice(invoice_id)

    def update_item(self, invoice_id: int, position: int, **fields: Any) -> InvoiceEntity:
        """Edit the line item at a 1-based position.

        Args:
            invoice_id: Invoice ID
            position: Item number as displayed, starting at 1
            **fields: Any of description, quantity, unit_rate, amount

        Raises:
            NotFoundError: If invoice not found
            ValidationError: If the position or a field is invalid
        """
        invoice = self._require_open(invoice_id)
        items = list(invoice.items)
        index = self._item_index(items, position)
        try:
            items[index] = validate_item(replace(items[index], **fields))
        except TypeError as e:
            raise ValidationError(f"Invalid item field: {e}") from None
        self.db.replace_invoice_items(invoice_id, items)
        return self.db.get_invoice(invoice_id)

    def remove_item(self, invoice_id: int, position: int) -> InvoiceEntity:
        """Remove the line item at a 1-based position.

        Raises:
            NotFoundError: If invoice not found
            ValidationError: If the position is invalid or the invoice is closed
        """
        invoice = self._require_open(invoice_id)
        items = list(invoice.items)
        del items[self._item_index(items, position)]
        self.db.replace_invoice_items(invoice_id, items)
        return self.db.get_invoice(invoice_id)

    @staticmethod
    def _item_index(items: list[LineItem], position: int) -> int:
        if not 1 <= position <= len(items):
            raise ValidationError(
                f"Item position {position} out of range (invoice has {len(items)} items)"
            )
        return position - 1

    def update_rates(
        self,
        invoice_id: int,
        tax_rate_percent: Optional[Decimal] = None,
        discount_kind: Union[DiscountKind, str, None] = None,
        discount_value: Optional[Decimal] = None,
    ) -> InvoiceEntity:
        """Change the tax rate and/or discount of an invoice.

        Arguments left as None keep their current value.

        Raises:
            NotFoundError: If invoice not found
            ValidationError: If a value is invalid or the invoice is closed
        """
        self._require_open(invoice_id)
        changes: dict[str, Any] = {}
        if tax_rate_percent is not None:
            changes["tax_rate_percent"] = require_non_negative(tax_rate_percent, "tax rate")
        if discount_kind is not None:
            changes["discount_kind"] = parse_choice(
                DiscountKind, discount_kind, "discount kind"
            ).value
        if discount_value is not None:
            changes["discount_value"] = require_non_negative(discount_value, "discount")
        if changes:
            self.db.update_invoice(invoice_id, **changes)
        return self.db.get_invoice(invoice_id)

    def update_details(self, invoice_id: int, **fields: Any) -> InvoiceEntity:
        """Edit due date, notes, terms or project of an open invoice.

        Raises:
            NotFoundError: If invoice or project not found
            ValidationError: If a field is invalid or the invoice is closed
        """
        invoice = self._require_open(invoice_id)
        allowed = {"due_date", "notes", "terms", "project_id"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValidationError(f"Cannot edit invoice field(s): {', '.join(sorted(unknown))}")
        if "due_date" in fields:
            if fields["due_date"] is None:
                raise ValidationError("Due date is required")
            if fields["due_date"] < invoice.issue_date:
                raise ValidationError("Due date cannot be before the issue date")
        if "project_id" in fields:
            self._check_project(fields["project_id"], invoice.client_id)
        if fields:
            self.db.update_invoice(invoice_id, **fields)
        return self.db.get_invoice(invoice_id)

    def update_status(
        self,
        invoice_id: int,
        status: Union[InvoiceStatus, str],
        paid_date: Optional[date] = None,
    ) -> InvoiceEntity:
        """Change an invoice's status.

        Args:
            invoice_id: Invoice ID
            status: New status
            paid_date: Payment date when marking paid (defaults to today)

        Raises:
            NotFoundError: If invoice not found
            InvalidTransitionError: If the invoice is paid or cancelled, or
                the change is otherwise not allowed
        """
        invoice = self._require_invoice(invoice_id)
        target = parse_choice(InvoiceStatus, status, "invoice status")
        if target == invoice.status:
            return invoice
        if target not in INVOICE_TRANSITIONS[invoice.status]:
            raise InvalidTransitionError(
                invalid_transition("invoice", invoice.status.value, target.value)
            )

        changes: dict[str, Any] = {"status": target.value}
        if target == InvoiceStatus.PAID:
            changes["paid_date"] = paid_date or date.today()
        self.db.update_invoice(invoice_id, **changes)
        logger.info(
            "Invoice %s status %s -> %s",
            invoice.invoice_number,
            invoice.status.value,
            target.value,
        )
        return self.db.get_invoice(invoice_id)

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice and its items.

        Raises:
            NotFoundError: If invoice not found
        """
        invoice = self._require_invoice(invoice_id)
        self.db.delete_invoice(invoice_id)
        logger.info("Deleted invoice %s", invoice.invoice_number)

    def mark_overdue(self, today: Optional[date] = None) -> list[InvoiceEntity]:
        """Flag sent invoices whose due date has passed as overdue.

        Args:
            today: Reference date (defaults to today)

        Returns:
            The invoices that changed
        """
        today = today or date.today()
        changed = []
        for invoice in self.db.list_invoices(status=InvoiceStatus.SENT.value):
            if invoice.due_date < today:
                self.db.update_invoice(invoice.id, status=InvoiceStatus.OVERDUE.value)
                changed.append(self.db.get_invoice(invoice.id))
        if changed:
            logger.info("Marked %d invoice(s) overdue", len(changed))
        return changed
