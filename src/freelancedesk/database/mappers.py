"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. Invoice totals are computed here,
on every load, so a stored invoice can never carry stale totals.
"""

from freelancedesk.domain import entities as domain
from freelancedesk.domain.invoice_calculator import recompute
from freelancedesk.database.models import (
    Client as ORMClient,
    Project as ORMProject,
    Task as ORMTask,
    TimeEntry as ORMTimeEntry,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Expense as ORMExpense,
)


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        email=orm_client.email,
        phone=orm_client.phone,
        company=orm_client.company,
        status=domain.ClientStatus(orm_client.status),
        payment_terms=orm_client.payment_terms,
        notes=orm_client.notes,
        created_at=orm_client.created_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        client_id=orm_project.client_id,
        description=orm_project.description,
        status=domain.ProjectStatus(orm_project.status),
        priority=domain.Priority(orm_project.priority),
        start_date=orm_project.start_date,
        deadline=orm_project.deadline,
        budget=orm_project.budget,
        is_archived=bool(orm_project.is_archived),
        created_at=orm_project.created_at,
    )


def task_to_domain(orm_task: ORMTask) -> domain.TaskInstance:
    """Convert SQLAlchemy Task model to domain TaskInstance entity."""
    pattern = orm_task.recurring_pattern
    return domain.TaskInstance(
        id=orm_task.id,
        title=orm_task.title,
        description=orm_task.description,
        priority=domain.Priority(orm_task.priority),
        status=domain.TaskStatus(orm_task.status),
        due_date=orm_task.due_date,
        project_id=orm_task.project_id,
        recurrence_id=orm_task.recurrence_id,
        instance_number=orm_task.instance_number,
        recurrence_count=orm_task.recurrence_count,
        recurring_pattern=domain.RecurringPattern(pattern) if pattern else None,
        recurring_interval=orm_task.recurring_interval,
        is_visible=bool(orm_task.is_visible),
        created_at=orm_task.created_at,
    )


def task_to_orm(task: domain.TaskInstance) -> ORMTask:
    """Build an unsaved SQLAlchemy Task row from a domain TaskInstance."""
    return ORMTask(
        title=task.title,
        description=task.description,
        priority=task.priority.value,
        status=task.status.value,
        due_date=task.due_date,
        project_id=task.project_id,
        recurrence_id=task.recurrence_id,
        instance_number=task.instance_number,
        recurrence_count=task.recurrence_count,
        recurring_pattern=task.recurring_pattern.value if task.recurring_pattern else None,
        recurring_interval=task.recurring_interval,
        is_visible=task.is_visible,
    )


def time_entry_to_domain(orm_entry: ORMTimeEntry) -> domain.TimeEntry:
    """Convert SQLAlchemy TimeEntry model to domain TimeEntry entity."""
    return domain.TimeEntry(
        id=orm_entry.id,
        task_id=orm_entry.task_id,
        start_time=orm_entry.start_time,
        end_time=orm_entry.end_time,
        duration_minutes=orm_entry.duration_minutes,
        description=orm_entry.description,
        created_at=orm_entry.created_at,
    )


def line_item_to_domain(orm_item: ORMInvoiceItem) -> domain.LineItem:
    """Convert SQLAlchemy InvoiceItem model to domain LineItem entity."""
    return domain.LineItem(
        description=orm_item.description,
        quantity=orm_item.quantity,
        unit_rate=orm_item.unit_rate,
        amount=orm_item.amount,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity with fresh totals."""
    items = tuple(line_item_to_domain(item) for item in orm_invoice.items)
    discount_kind = domain.DiscountKind(orm_invoice.discount_kind)
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        client_id=orm_invoice.client_id,
        project_id=orm_invoice.project_id,
        status=domain.InvoiceStatus(orm_invoice.status),
        issue_date=orm_invoice.issue_date,
        due_date=orm_invoice.due_date,
        paid_date=orm_invoice.paid_date,
        items=items,
        tax_rate_percent=orm_invoice.tax_rate_percent,
        discount_kind=discount_kind,
        discount_value=orm_invoice.discount_value,
        currency=orm_invoice.currency,
        notes=orm_invoice.notes,
        terms=orm_invoice.terms,
        totals=recompute(
            items,
            tax_rate_percent=orm_invoice.tax_rate_percent,
            discount_kind=discount_kind,
            discount_value=orm_invoice.discount_value,
        ),
        created_at=orm_invoice.created_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        project_id=orm_expense.project_id,
        task_id=orm_expense.task_id,
        description=orm_expense.description,
        amount=orm_expense.amount,
        date=orm_expense.date,
        category=domain.ExpenseCategory(orm_expense.category),
        is_reimbursable=bool(orm_expense.is_reimbursable),
        is_reimbursed=bool(orm_expense.is_reimbursed),
        reimbursed_date=orm_expense.reimbursed_date,
        notes=orm_expense.notes,
        created_at=orm_expense.created_at,
    )
