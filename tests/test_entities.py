"""Tests for domain entities."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from freelancedesk.domain.entities import (
    Client,
    ClientStatus,
    ExpenseStats,
    LineItem,
    Priority,
    ProjectStatus,
    TaskStats,
    TaskStatus,
    TaskTemplate,
    TimeEntry,
)


class TestClient:
    """Tests for Client entity."""

    def test_client_immutability(self):
        """Test that Client entities are immutable."""
        client = Client(
            id=1,
            name="Acme",
            email="a@acme.test",
            phone=None,
            company=None,
            status=ClientStatus.ACTIVE,
            payment_terms=30,
            notes=None,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            client.name = "New Name"


class TestEnums:
    """Tests for status enums."""

    def test_hyphenated_values(self):
        assert ProjectStatus("on-hold") == ProjectStatus.ON_HOLD
        assert TaskStatus("in-progress") == TaskStatus.IN_PROGRESS

    def test_enums_compare_to_strings(self):
        assert Priority.URGENT == "urgent"


class TestTaskTemplate:
    """Tests for TaskTemplate defaults."""

    def test_defaults(self):
        template = TaskTemplate(title="Write tests")
        assert template.is_recurring is False
        assert template.recurring_pattern == "weekly"
        assert template.recurring_interval == 1
        assert template.recurrence_count == 1
        assert template.priority == Priority.MEDIUM


class TestLineItem:
    """Tests for LineItem entity."""

    def test_defaults(self):
        item = LineItem("Consulting")
        assert item.quantity == Decimal("0")
        assert item.unit_rate == Decimal("0")
        assert item.amount is None

    def test_equality(self):
        assert LineItem("A", amount=Decimal("1")) == LineItem("A", amount=Decimal("1"))
        assert LineItem("A", amount=Decimal("1")) != LineItem("B", amount=Decimal("1"))


class TestTimeEntry:
    """Tests for TimeEntry entity."""

    def test_is_running_until_ended(self):
        start = datetime(2024, 1, 5, 9, 0)
        running = TimeEntry(1, 1, start, None, 0, None, datetime.now(UTC))
        done = TimeEntry(2, 1, start, datetime(2024, 1, 5, 10, 0), 60, None, datetime.now(UTC))
        assert running.is_running
        assert not done.is_running


class TestStats:
    """Tests for aggregate entities."""

    def test_empty_stats(self):
        assert TaskStats().total == 0
        assert TaskStats().by_project == {}
        assert ExpenseStats().total_amount == Decimal("0")
        assert ExpenseStats().by_category == ()
