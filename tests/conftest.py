"""Shared pytest fixtures for freelancedesk tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
from click.testing import CliRunner

from freelancedesk.database.factories import create_sqlite_database
from freelancedesk.domain.client import ClientService
from freelancedesk.domain.project import ProjectService
from freelancedesk.domain.task import TaskService
from freelancedesk.domain.invoice import InvoiceService
from freelancedesk.domain.expense import ExpenseService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests independent of the developer's environment."""
    for name in (
        "FREELANCEDESK_DB_PATH",
        "FREELANCEDESK_LOG_LEVEL",
        "FREELANCEDESK_CURRENCY",
        "FREELANCEDESK_PAYMENT_TERMS",
        "FREELANCEDESK_TAX_RATE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def client_service(temp_db):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def task_service(temp_db):
    """Create a TaskService with a temporary database."""
    return TaskService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def sample_client(client_service):
    """Create a sample client for testing."""
    client_id = client_service.create_client(
        name="Acme Corp", email="Billing@Acme.test", company="Acme", payment_terms=15
    )
    return client_service.get_client(client_id)


@pytest.fixture
def sample_project(project_service, sample_client):
    """Create a sample project owned by the sample client."""
    project_id = project_service.create_project(
        name="Website Redesign",
        client_id=sample_client.id,
        priority="high",
        start_date=date(2024, 1, 1),
        deadline=date(2024, 3, 31),
        budget=Decimal("50000"),
    )
    return project_service.get_project(project_id)
