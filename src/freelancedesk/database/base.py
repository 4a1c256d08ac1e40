"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from freelancedesk.domain.entities import (
    Client,
    Project,
    TaskInstance,
    TimeEntry,
    Invoice,
    LineItem,
    Expense,
)


class Database(ABC):
    """Abstract database interface for freelancedesk."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Client operations
    @abstractmethod
    def create_client(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        status: str = "active",
        payment_terms: int = 30,
        notes: Optional[str] = None,
    ) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def get_client_by_email(self, email: str) -> Optional[Client]:
        """Get client by (lowercased) email."""
        pass

    @abstractmethod
    def list_clients(
        self, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[Client]:
        """List clients, optionally filtered by status or a name/email/company search."""
        pass

    @abstractmethod
    def update_client(self, client_id: int, **fields: Any) -> None:
        """Update client columns given as keyword arguments."""
        pass

    @abstractmethod
    def delete_client(self, client_id: int) -> None:
        """Delete a client."""
        pass

    @abstractmethod
    def get_client_dependency_counts(self, client_id: int) -> dict[str, int]:
        """Count projects and invoices referencing a client."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        name: str,
        client_id: Optional[int] = None,
        description: Optional[str] = None,
        status: str = "active",
        priority: str = "medium",
        start_date: Optional[date] = None,
        deadline: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(
        self,
        status: Optional[str] = None,
        client_id: Optional[int] = None,
        include_archived: bool = False,
    ) -> list[Project]:
        """List projects with optional filters."""
        pass

    @abstractmethod
    def update_project(self, project_id: int, **fields: Any) -> None:
        """Update project columns given as keyword arguments."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project."""
        pass

    @abstractmethod
    def get_project_dependency_counts(self, project_id: int) -> dict[str, int]:
        """Count tasks and expenses referencing a project."""
        pass

    @abstractmethod
    def get_project_summary(self) -> dict[str, Any]:
        """Get project counts by status and priority, archived count and budget sum.

        Returns a dict with 'by_status', 'by_priority', 'archived' and
        'total_budget'. Kept as dict for aggregation results.
        """
        pass

    # Task operations
    @abstractmethod
    def create_tasks(self, tasks: Sequence[TaskInstance]) -> list[int]:
        """Insert a batch of task instances in one transaction. Returns IDs in order."""
        pass

    @abstractmethod
    def get_task(self, task_id: int) -> Optional[TaskInstance]:
        """Get task by ID."""
        pass

    @abstractmethod
    def list_tasks(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        project_id: Optional[int] = None,
        search: Optional[str] = None,
        include_hidden: bool = False,
    ) -> list[TaskInstance]:
        """List tasks with optional filters.

        Args:
            status: Optional status filter
            priority: Optional priority filter
            project_id: Optional project ID filter
            search: Optional case-insensitive title/description search
            include_hidden: If True, also return invisible series members
        """
        pass

    @abstractmethod
    def list_series(self, recurrence_id: str) -> list[TaskInstance]:
        """List all members of a recurrence group ordered by instance number."""
        pass

    @abstractmethod
    def update_task(self, task_id: int, **fields: Any) -> None:
        """Update task columns given as keyword arguments."""
        pass

    @abstractmethod
    def set_task_visibility(self, task_id: int, is_visible: bool) -> None:
        """Set the visibility flag of one task."""
        pass

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        """Delete one task."""
        pass

    @abstractmethod
    def get_task_summary(self, today: date) -> dict[str, Any]:
        """Get task counts by status, priority and project plus the overdue count.

        Returns a dict with 'by_status', 'by_priority', 'by_project' and
        'overdue'. Kept as dict for aggregation results.
        """
        pass

    @abstractmethod
    def create_time_entry(
        self,
        task_id: int,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        duration_minutes: int = 0,
        description: Optional[str] = None,
    ) -> int:
        """Log time against a task. Returns time entry ID."""
        pass

    @abstractmethod
    def list_time_entries(self, task_id: int) -> list[TimeEntry]:
        """List a task's time entries ordered by start time."""
        pass

    @abstractmethod
    def get_tracked_minutes(self, task_id: Optional[int] = None) -> int:
        """Sum logged minutes for one task, or for all tasks when task_id is None."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_number: str,
        client_id: int,
        issue_date: date,
        due_date: date,
        items: Sequence[LineItem],
        currency: str,
        project_id: Optional[int] = None,
        status: str = "draft",
        tax_rate_percent: Decimal = Decimal("0"),
        discount_kind: str = "percentage",
        discount_value: Decimal = Decimal("0"),
        notes: Optional[str] = None,
        terms: Optional[str] = None,
    ) -> int:
        """Create an invoice with its items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by invoice number."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        client_id: Optional[int] = None,
        project_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Invoice]:
        """List invoices with optional filters, newest first."""
        pass

    @abstractmethod
    def replace_invoice_items(self, invoice_id: int, items: Sequence[LineItem]) -> None:
        """Replace the item list of an invoice, keeping the given order."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, **fields: Any) -> None:
        """Update invoice columns given as keyword arguments."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice and its items."""
        pass

    @abstractmethod
    def get_max_invoice_number(self, prefix: str) -> Optional[str]:
        """Get the highest invoice number starting with prefix, if any."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        project_id: int,
        description: str,
        amount: Decimal,
        date: date,
        category: str = "other",
        task_id: Optional[int] = None,
        is_reimbursable: bool = False,
        notes: Optional[str] = None,
    ) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        project_id: Optional[int] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Expense]:
        """List expenses with optional filters, newest first."""
        pass

    @abstractmethod
    def update_expense(self, expense_id: int, **fields: Any) -> None:
        """Update expense columns given as keyword arguments."""
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        pass

    @abstractmethod
    def get_expense_summary(
        self,
        year: int,
        project_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, Any]:
        """Get expense totals overall, by category, by project, by month and reimbursable.

        Returns a dict with 'total', 'count', 'by_category', 'by_project',
        'monthly', 'reimbursable_total' and 'reimbursable_count'. The
        monthly figures cover ``year`` within the other filters.
        """
        pass
