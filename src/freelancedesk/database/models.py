"""SQLAlchemy models for freelancedesk database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Text,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    company = Column(String(100), nullable=True)
    status = Column(String, default="active", nullable=False)
    payment_terms = Column(Integer, default=30, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    projects = relationship("Project", back_populates="client")
    invoices = relationship("Invoice", back_populates="client")


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String, default="active", nullable=False)
    priority = Column(String, default="medium", nullable=False)
    start_date = Column(Date, nullable=True)
    deadline = Column(Date, nullable=True)
    budget = Column(Numeric(12, 2), nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    client = relationship("Client", back_populates="projects")
    tasks = relationship("Task", back_populates="project")
    expenses = relationship("Expense", back_populates="project")


class Task(Base):
    """Task instance model. Members of one recurring series share recurrence_id."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String(220), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String, default="medium", nullable=False)
    status = Column(String, default="pending", nullable=False)
    due_date = Column(Date, nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    recurrence_id = Column(String(32), nullable=True)
    instance_number = Column(Integer, default=1, nullable=False)
    recurrence_count = Column(Integer, default=1, nullable=False)
    recurring_pattern = Column(String, nullable=True)
    recurring_interval = Column(Integer, default=1, nullable=False)
    is_visible = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_tasks_recurrence_id", "recurrence_id"),)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    time_entries = relationship(
        "TimeEntry",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TimeEntry.start_time",
    )


class TimeEntry(Base):
    """Time logged against one task. A missing end_time means the timer is running."""

    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, default=0, nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_time_entries_task_id", "task_id"),)

    # Relationships
    task = relationship("Task", back_populates="time_entries")


class Invoice(Base):
    """Invoice model.

    Totals are not columns: they are derived from the items and rates every
    time an invoice is loaded.
    """

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String(50), unique=True, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    status = Column(String, default="draft", nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)
    tax_rate_percent = Column(Numeric(7, 4), default=0, nullable=False)
    discount_kind = Column(String, default="percentage", nullable=False)
    discount_value = Column(Numeric(12, 4), default=0, nullable=False)
    currency = Column(String(3), nullable=False)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    client = relationship("Client", back_populates="invoices")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )


class InvoiceItem(Base):
    """Invoice line item model; ``position`` orders items within an invoice."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    position = Column(Integer, nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(Numeric(12, 4), default=0, nullable=False)
    unit_rate = Column(Numeric(12, 4), default=0, nullable=False)
    amount = Column(Numeric(12, 4), nullable=True)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True)
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    category = Column(String, default="other", nullable=False)
    is_reimbursable = Column(Boolean, default=False, nullable=False)
    is_reimbursed = Column(Boolean, default=False, nullable=False)
    reimbursed_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="expenses")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
