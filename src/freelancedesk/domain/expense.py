"""Expense domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from freelancedesk.database.base import Database
from freelancedesk.domain.entities import (
    CategoryTotal,
    Expense as ExpenseEntity,
    ExpenseCategory,
    ExpenseStats,
    ProjectTotal,
)
from freelancedesk.domain.errors import NotFoundError, ValidationError, not_found
from freelancedesk.domain.validation import parse_choice, require_non_negative, require_text

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 200
EDITABLE_FIELDS = {
    "project_id",
    "task_id",
    "description",
    "amount",
    "date",
    "category",
    "is_reimbursable",
    "notes",
}


class ExpenseService:
    """Service for managing project expenses."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_expense(self, expense_id: int) -> ExpenseEntity:
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(not_found("Expense", expense_id))
        return expense

    def _check_links(self, project_id: Optional[int], task_id: Optional[int]) -> None:
        if project_id is not None and self.db.get_project(project_id) is None:
            raise NotFoundError(not_found("Project", project_id))
        if task_id is not None and self.db.get_task(task_id) is None:
            raise NotFoundError(not_found("Task", task_id))

    def create_expense(
        self,
        project_id: int,
        description: str,
        amount: Decimal,
        date: date,
        category: Union[ExpenseCategory, str] = ExpenseCategory.OTHER,
        task_id: Optional[int] = None,
        is_reimbursable: bool = False,
        notes: Optional[str] = None,
    ) -> int:
        """Record an expense.

        Args:
            project_id: Project the expense belongs to
            description: What was bought
            amount: Non-negative amount
            date: Expense date
            category: travel, meals, supplies, software, hardware, marketing or other
            task_id: Optional related task
            is_reimbursable: Whether the client reimburses it
            notes: Optional notes

        Returns:
            Expense ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If project or task not found
        """
        description = require_text(description, "description", DESCRIPTION_MAX_LENGTH)
        if amount is None:
            raise ValidationError("Amount is required")
        amount = require_non_negative(amount, "amount")
        expense_category = parse_choice(ExpenseCategory, category, "expense category")
        self._check_links(project_id, task_id)

        expense_id = self.db.create_expense(
            project_id=project_id,
            description=description,
            amount=amount,
            date=date,
            category=expense_category.value,
            task_id=task_id,
            is_reimbursable=is_reimbursable,
            notes=notes,
        )
        logger.info("Created expense %s (%s) for project %s", expense_id, amount, project_id)
        return expense_id

    def get_expense(self, expense_id: int) -> Optional[ExpenseEntity]:
        """Get expense by ID.

        Args:
            expense_id: Expense ID

        Returns:
            Expense entity or None if not found
        """
        return self.db.get_expense(expense_id)

    def list_expenses(
        self,
        project_id: Optional[int] = None,
        category: Union[ExpenseCategory, str, None] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ExpenseEntity]:
        """List expenses, newest first.

        Args:
            project_id: Optional project filter
            category: Optional category filter
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
        """
        category_value = None
        if category is not None:
            category_value = parse_choice(ExpenseCategory, category, "expense category").value
        return self.db.list_expenses(
            project_id=project_id,
            category=category_value,
            start_date=start_date,
            end_date=end_date,
        )

    def update_expense(self, expense_id: int, **fields: Any) -> ExpenseEntity:
        """Update an expense.

        Raises:
            NotFoundError: If expense, project or task not found
            ValidationError: If a field is invalid
        """
        self._require_expense(expense_id)

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit expense field(s): {', '.join(sorted(unknown))}")

        changes = dict(fields)
        if "description" in changes:
            changes["description"] = require_text(
                changes["description"], "description", DESCRIPTION_MAX_LENGTH
            )
        if "amount" in changes:
            if changes["amount"] is None:
                raise ValidationError("Amount is required")
            changes["amount"] = require_non_negative(changes["amount"], "amount")
        if "category" in changes:
            changes["category"] = parse_choice(
                ExpenseCategory, changes["category"], "expense category"
            ).value
        if "project_id" in changes and changes["project_id"] is None:
            raise ValidationError("An expense must belong to a project")
        self._check_links(changes.get("project_id"), changes.get("task_id"))

        if changes:
            self.db.update_expense(expense_id, **changes)
        return self.db.get_expense(expense_id)

    def set_reimbursed(
        self, expense_id: int, reimbursed: bool = True, when: Optional[date] = None
    ) -> ExpenseEntity:
        """Mark an expense as reimbursed, or clear the mark.

        Args:
            expense_id: Expense ID
            reimbursed: True to mark reimbursed, False to clear
            when: Reimbursement date (defaults to today)

        Raises:
            NotFoundError: If expense not found
            ValidationError: If the expense is not reimbursable
        """
        expense = self._require_expense(expense_id)
        if reimbursed and not expense.is_reimbursable:
            raise ValidationError(f"Expense {expense_id} is not reimbursable")
        self.db.update_expense(
            expense_id,
            is_reimbursed=reimbursed,
            reimbursed_date=(when or date.today()) if reimbursed else None,
        )
        return self.db.get_expense(expense_id)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If expense not found
        """
        self._require_expense(expense_id)
        self.db.delete_expense(expense_id)
        logger.info("Deleted expense %s", expense_id)

    def get_stats(
        self,
        project_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        year: Optional[int] = None,
    ) -> ExpenseStats:
        """Get expense statistics.

        Args:
            project_id: Optional project filter
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            year: Year of the monthly breakdown (defaults to the current year)

        Returns:
            ExpenseStats with category and project totals sorted by total,
            highest first
        """
        summary = self.db.get_expense_summary(
            year=year or date.today().year,
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
        )

        by_category = sorted(
            (
                CategoryTotal(
                    category=ExpenseCategory(category),
                    total=figures["total"],
                    count=figures["count"],
                )
                for category, figures in summary["by_category"].items()
            ),
            key=lambda c: c.total,
            reverse=True,
        )
        by_project = sorted(
            (
                ProjectTotal(
                    project_id=pid,
                    project_name=figures["project_name"],
                    total=figures["total"],
                    count=figures["count"],
                )
                for pid, figures in summary["by_project"].items()
            ),
            key=lambda p: p.total,
            reverse=True,
        )

        return ExpenseStats(
            total_amount=summary["total"],
            total_count=summary["count"],
            by_category=tuple(by_category),
            by_project=tuple(by_project),
            monthly=summary["monthly"],
            reimbursable_total=summary["reimbursable_total"],
            reimbursable_count=summary["reimbursable_count"],
        )
