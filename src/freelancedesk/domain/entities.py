"""Domain model entities for freelancedesk.

These are pure data classes representing business concepts, independent of
database schema. Services and the pure calculators work on these; the
database layer maps its ORM rows onto them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ClientStatus(str, Enum):
    """Client relationship status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECT = "prospect"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Priority shared by projects and tasks."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    """Task instance status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurringPattern(str, Enum):
    """Cadence of a recurring task series."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class InvoiceStatus(str, Enum):
    """Invoice status."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class DiscountKind(str, Enum):
    """How an invoice discount value is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class ExpenseCategory(str, Enum):
    """Expense category."""

    TRAVEL = "travel"
    MEALS = "meals"
    SUPPLIES = "supplies"
    SOFTWARE = "software"
    HARDWARE = "hardware"
    MARKETING = "marketing"
    OTHER = "other"


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    name: str
    email: str
    phone: Optional[str]
    company: Optional[str]
    status: ClientStatus
    payment_terms: int
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: int
    name: str
    client_id: Optional[int]
    description: Optional[str]
    status: ProjectStatus
    priority: Priority
    start_date: Optional[date]
    deadline: Optional[date]
    budget: Optional[Decimal]
    is_archived: bool
    created_at: datetime


@dataclass(frozen=True)
class TaskTemplate:
    """Task as submitted by the user, before recurrence expansion.

    ``recurring_pattern`` is kept as given so that an unknown cadence can be
    rejected by the expander instead of silently defaulting.
    """

    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    project_id: Optional[int] = None
    is_recurring: bool = False
    recurring_pattern: str = RecurringPattern.WEEKLY.value
    recurring_interval: int = 1
    recurrence_count: int = 1


@dataclass(frozen=True)
class TaskInstance:
    """One stored task; a member of a recurrence group when recurrence_id is set."""

    id: Optional[int]
    title: str
    description: Optional[str]
    priority: Priority
    status: TaskStatus
    due_date: Optional[date]
    project_id: Optional[int]
    recurrence_id: Optional[str]
    instance_number: int
    recurrence_count: int
    recurring_pattern: Optional[RecurringPattern]
    recurring_interval: int
    is_visible: bool
    created_at: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_id is not None


@dataclass(frozen=True)
class TimeEntry:
    """Time spent on a task.

    An entry without ``end_time`` is still running; its ``duration_minutes``
    is whatever was given when it was logged (0 by default).
    """

    id: int
    task_id: int
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int
    description: Optional[str]
    created_at: datetime

    @property
    def is_running(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class LineItem:
    """One billable row on an invoice.

    ``amount`` is the flat variant; when it is None the amount is
    quantity * unit_rate.
    """

    description: str
    quantity: Decimal = Decimal("0")
    unit_rate: Decimal = Decimal("0")
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived monetary summary of an invoice."""

    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity. ``totals`` is always recomputed, never stored."""

    id: int
    invoice_number: str
    client_id: int
    project_id: Optional[int]
    status: InvoiceStatus
    issue_date: date
    due_date: date
    paid_date: Optional[date]
    items: tuple[LineItem, ...]
    tax_rate_percent: Decimal
    discount_kind: DiscountKind
    discount_value: Decimal
    currency: str
    notes: Optional[str]
    terms: Optional[str]
    totals: InvoiceTotals
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Expense domain entity."""

    id: int
    project_id: int
    task_id: Optional[int]
    description: str
    amount: Decimal
    date: date
    category: ExpenseCategory
    is_reimbursable: bool
    is_reimbursed: bool
    reimbursed_date: Optional[date]
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TaskStats:
    """Aggregate task counts."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    overdue: int = 0
    by_priority: dict[str, int] = field(default_factory=dict)
    by_project: dict[Optional[int], int] = field(default_factory=dict)
    tracked_minutes: int = 0


@dataclass(frozen=True)
class ProjectStats:
    """Aggregate project counts and budget."""

    total: int = 0
    active: int = 0
    completed: int = 0
    on_hold: int = 0
    cancelled: int = 0
    archived: int = 0
    total_budget: Decimal = Decimal("0")
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category."""

    category: ExpenseCategory
    total: Decimal
    count: int


@dataclass(frozen=True)
class ProjectTotal:
    """Expense total for one project."""

    project_id: int
    project_name: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class ExpenseStats:
    """Aggregate expense figures."""

    total_amount: Decimal = Decimal("0")
    total_count: int = 0
    by_category: tuple[CategoryTotal, ...] = ()
    by_project: tuple[ProjectTotal, ...] = ()
    monthly: dict[int, Decimal] = field(default_factory=dict)
    reimbursable_total: Decimal = Decimal("0")
    reimbursable_count: int = 0
