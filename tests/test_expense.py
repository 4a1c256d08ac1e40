"""Tests for expense service and commands."""

import pytest
from datetime import date
from decimal import Decimal

from freelancedesk.cli.main import cli
from freelancedesk.domain.entities import ExpenseCategory, TaskTemplate
from freelancedesk.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def second_project(project_service):
    project_id = project_service.create_project(name="Mobile App")
    return project_service.get_project(project_id)


@pytest.fixture
def expenses(expense_service, sample_project, second_project):
    """A spread of expenses across two projects and two years."""
    rows = [
        (sample_project.id, "Flight", "450.00", date(2024, 1, 5), "travel", True),
        (sample_project.id, "Lunch", "30.50", date(2024, 1, 20), "meals", False),
        (sample_project.id, "Hotel", "300", date(2024, 3, 2), "travel", True),
        (second_project.id, "IDE licence", "199", date(2024, 3, 15), "software", False),
        (second_project.id, "Old laptop", "999", date(2023, 12, 31), "hardware", False),
    ]
    ids = []
    for project_id, description, amount, when, category, reimbursable in rows:
        ids.append(
            expense_service.create_expense(
                project_id=project_id,
                description=description,
                amount=Decimal(amount),
                date=when,
                category=category,
                is_reimbursable=reimbursable,
            )
        )
    return ids


class TestExpenseService:
    """Tests for ExpenseService."""

    def test_create(self, expense_service, sample_project):
        expense_id = expense_service.create_expense(
            project_id=sample_project.id,
            description="Stock photos",
            amount=Decimal("49.99"),
            date=date(2024, 2, 1),
        )
        expense = expense_service.get_expense(expense_id)
        assert expense.category == ExpenseCategory.OTHER
        assert expense.amount == Decimal("49.99")
        assert expense.is_reimbursable is False
        assert expense.is_reimbursed is False

    def test_requires_existing_project(self, expense_service):
        with pytest.raises(NotFoundError):
            expense_service.create_expense(
                project_id=999, description="X", amount=Decimal("1"), date=date(2024, 1, 1)
            )

    def test_task_link_checked(self, expense_service, task_service, sample_project):
        ids = task_service.create_task(TaskTemplate(title="Shoot", project_id=sample_project.id))
        expense_id = expense_service.create_expense(
            project_id=sample_project.id,
            task_id=ids[0],
            description="Props",
            amount=Decimal("20"),
            date=date(2024, 1, 1),
        )
        assert expense_service.get_expense(expense_id).task_id == ids[0]
        with pytest.raises(NotFoundError):
            expense_service.create_expense(
                project_id=sample_project.id,
                task_id=ids[0] + 100,
                description="Props",
                amount=Decimal("20"),
                date=date(2024, 1, 1),
            )

    def test_negative_amount_rejected(self, expense_service, sample_project):
        with pytest.raises(ValidationError):
            expense_service.create_expense(
                project_id=sample_project.id,
                description="Refund",
                amount=Decimal("-10"),
                date=date(2024, 1, 1),
            )

    def test_invalid_category_rejected(self, expense_service, sample_project):
        with pytest.raises(ValidationError, match="Invalid expense category"):
            expense_service.create_expense(
                project_id=sample_project.id,
                description="X",
                amount=Decimal("1"),
                date=date(2024, 1, 1),
                category="fun",
            )

    def test_list_filters(self, expense_service, sample_project, expenses):
        travel = expense_service.list_expenses(category="travel")
        assert [e.description for e in travel] == ["Hotel", "Flight"]
        january = expense_service.list_expenses(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
        assert [e.description for e in january] == ["Lunch", "Flight"]
        assert len(expense_service.list_expenses(project_id=sample_project.id)) == 3

    def test_update(self, expense_service, expenses):
        updated = expense_service.update_expense(
            expenses[1], amount=Decimal("35"), category="supplies"
        )
        assert updated.amount == Decimal("35")
        assert updated.category == ExpenseCategory.SUPPLIES

    def test_update_cannot_detach_project(self, expense_service, expenses):
        with pytest.raises(ValidationError):
            expense_service.update_expense(expenses[0], project_id=None)

    def test_set_reimbursed(self, expense_service, expenses):
        expense = expense_service.set_reimbursed(expenses[0], when=date(2024, 2, 1))
        assert expense.is_reimbursed
        assert expense.reimbursed_date == date(2024, 2, 1)

        cleared = expense_service.set_reimbursed(expenses[0], reimbursed=False)
        assert not cleared.is_reimbursed
        assert cleared.reimbursed_date is None

    def test_reimburse_non_reimbursable_rejected(self, expense_service, expenses):
        with pytest.raises(ValidationError, match="not reimbursable"):
            expense_service.set_reimbursed(expenses[1])

    def test_delete(self, expense_service, expenses):
        expense_service.delete_expense(expenses[0])
        assert expense_service.get_expense(expenses[0]) is None

    def test_stats(self, expense_service, sample_project, second_project, expenses):
        stats = expense_service.get_stats(year=2024)

        assert stats.total_amount == Decimal("1978.50")
        assert stats.total_count == 5
        assert stats.reimbursable_total == Decimal("750")
        assert stats.reimbursable_count == 2

        assert [(c.category, c.total, c.count) for c in stats.by_category] == [
            (ExpenseCategory.HARDWARE, Decimal("999"), 1),
            (ExpenseCategory.TRAVEL, Decimal("750"), 2),
            (ExpenseCategory.SOFTWARE, Decimal("199"), 1),
            (ExpenseCategory.MEALS, Decimal("30.50"), 1),
        ]
        assert [(p.project_name, p.total) for p in stats.by_project] == [
            ("Mobile App", Decimal("1198")),
            ("Website Redesign", Decimal("780.50")),
        ]
        assert stats.monthly == {1: Decimal("480.50"), 3: Decimal("499")}

    def test_stats_with_filters(self, expense_service, sample_project, expenses):
        stats = expense_service.get_stats(
            project_id=sample_project.id, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
            year=2024,
        )
        assert stats.total_amount == Decimal("480.50")
        assert stats.total_count == 2
        assert stats.monthly == {1: Decimal("480.50")}

    def test_stats_empty(self, expense_service):
        stats = expense_service.get_stats(year=2024)
        assert stats.total_count == 0
        assert stats.by_category == ()
        assert stats.monthly == {}


def test_expense_add_command(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "expense",
            "add",
            "--project",
            str(sample_project.id),
            "--amount",
            "$1,200.50",
            "--description",
            "Conference ticket",
            "--date",
            "2024-04-02",
            "--category",
            "travel",
            "--reimbursable",
        ],
    )
    assert result.exit_code == 0
    assert "Recorded expense 'Conference ticket'" in result.output

    expense = temp_db.list_expenses()[0]
    assert expense.amount == Decimal("1200.50")
    assert expense.is_reimbursable


def test_expense_list_rejects_two_periods(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "expense", "list", "--this-month", "--last-year"],
    )
    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_expense_stats_command(cli_runner, temp_db, expenses):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "expense", "stats", "--year", "2024"]
    )
    assert result.exit_code == 0
    assert "Total: 1,978.50 (5 expenses)" in result.output
    assert "Mobile App" in result.output
    assert "Jan" in result.output
