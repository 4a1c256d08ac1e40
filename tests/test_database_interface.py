"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from freelancedesk.domain import entities
from freelancedesk.domain.errors import NotFoundError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_client_returns_domain_model(self, temp_db):
        """Test that get_client returns a domain Client entity."""
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")

        client = temp_db.get_client(client_id)

        assert isinstance(client, entities.Client)
        assert client.id == client_id
        assert client.status == entities.ClientStatus.ACTIVE
        assert isinstance(client.created_at, datetime)

    def test_get_missing_returns_none(self, temp_db):
        assert temp_db.get_client(1) is None
        assert temp_db.get_project(1) is None
        assert temp_db.get_task(1) is None
        assert temp_db.get_invoice(1) is None
        assert temp_db.get_expense(1) is None

    def test_update_missing_raises(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_client(1, name="X")

    def test_update_unknown_field_raises(self, temp_db):
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")
        with pytest.raises(ValueError, match="Unknown field"):
            temp_db.update_client(client_id, favourite_colour="blue")

    def test_create_tasks_returns_ids_in_order(self, temp_db):
        from freelancedesk.domain.recurrence import expand

        template = entities.TaskTemplate(title="T", is_recurring=True, recurrence_count=3)
        ids = temp_db.create_tasks(expand(template, today=date(2024, 1, 1)))

        tasks = [temp_db.get_task(i) for i in ids]
        assert [t.instance_number for t in tasks] == [1, 2, 3]
        assert all(isinstance(t, entities.TaskInstance) for t in tasks)
        assert tasks[0].recurring_pattern == entities.RecurringPattern.WEEKLY

    def test_invoice_totals_recomputed_on_load(self, temp_db):
        """Invoices carry totals derived from their items, not stored values."""
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")
        invoice_id = temp_db.create_invoice(
            invoice_number="INV-2024-000001",
            client_id=client_id,
            issue_date=date(2024, 1, 1),
            due_date=date(2024, 1, 31),
            items=[entities.LineItem("Work", amount=Decimal("100"))],
            currency="INR",
            tax_rate_percent=Decimal("10"),
        )
        temp_db.replace_invoice_items(
            invoice_id,
            [
                entities.LineItem("Work", amount=Decimal("100")),
                entities.LineItem("More", quantity=Decimal("2"), unit_rate=Decimal("50")),
            ],
        )

        invoice = temp_db.get_invoice(invoice_id)
        assert isinstance(invoice, entities.Invoice)
        assert invoice.totals.subtotal == Decimal("200")
        assert invoice.totals.total == Decimal("220")
        assert [i.description for i in invoice.items] == ["Work", "More"]

    def test_max_invoice_number(self, temp_db):
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")
        for number in ("INV-2024-000002", "INV-2024-000010", "INV-2025-000001"):
            temp_db.create_invoice(
                invoice_number=number,
                client_id=client_id,
                issue_date=date(2024, 1, 1),
                due_date=date(2024, 1, 1),
                items=[],
                currency="INR",
            )
        assert temp_db.get_max_invoice_number("INV-2024-") == "INV-2024-000010"
        assert temp_db.get_max_invoice_number("INV-2023-") is None

    def test_max_invoice_number_is_numeric(self, temp_db):
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")
        for number in ("INV-2024-999999", "INV-2024-1000000", "INV-2024-000001"):
            temp_db.create_invoice(
                invoice_number=number,
                client_id=client_id,
                issue_date=date(2024, 1, 1),
                due_date=date(2024, 1, 1),
                items=[],
                currency="INR",
            )
        assert temp_db.get_max_invoice_number("INV-2024-") == "INV-2024-1000000"

    def test_time_entries(self, temp_db):
        from freelancedesk.domain.recurrence import expand

        task_id = temp_db.create_tasks(expand(entities.TaskTemplate(title="T")))[0]
        temp_db.create_time_entry(
            task_id,
            datetime(2024, 1, 5, 9, 0),
            end_time=datetime(2024, 1, 5, 9, 40),
            duration_minutes=40,
        )
        temp_db.create_time_entry(task_id, datetime(2024, 1, 4, 9, 0), duration_minutes=20)

        entries = temp_db.list_time_entries(task_id)
        assert [e.duration_minutes for e in entries] == [20, 40]
        assert isinstance(entries[0], entities.TimeEntry)
        assert temp_db.get_tracked_minutes(task_id) == 60
        assert temp_db.get_tracked_minutes() == 60
        assert temp_db.get_tracked_minutes(task_id + 1) == 0

    def test_time_entry_for_missing_task(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.create_time_entry(99, datetime(2024, 1, 5))

    def test_dependency_counts(self, temp_db):
        client_id = temp_db.create_client(name="Acme", email="a@acme.test")
        project_id = temp_db.create_project(name="P", client_id=client_id)
        temp_db.create_expense(
            project_id=project_id, description="E", amount=Decimal("1"), date=date(2024, 1, 1)
        )
        assert temp_db.get_client_dependency_counts(client_id) == {"project": 1, "invoice": 0}
        assert temp_db.get_project_dependency_counts(project_id) == {"task": 0, "expense": 1}
