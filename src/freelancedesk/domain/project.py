"""Project domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from freelancedesk.database.base import Database
from freelancedesk.domain.entities import (
    Priority,
    Project as ProjectEntity,
    ProjectStats,
    ProjectStatus,
)
from freelancedesk.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    delete_blocked,
    not_found,
)
from freelancedesk.domain.validation import parse_choice, require_non_negative, require_text

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 200


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_client(self, client_id: Optional[int]) -> None:
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(not_found("Client", client_id))

    @staticmethod
    def _check_dates(start_date: Optional[date], deadline: Optional[date]) -> None:
        if start_date is not None and deadline is not None and deadline < start_date:
            raise ValidationError("Deadline cannot be before the start date")

    def create_project(
        self,
        name: str,
        client_id: Optional[int] = None,
        description: Optional[str] = None,
        status: Union[ProjectStatus, str] = ProjectStatus.ACTIVE,
        priority: Union[Priority, str] = Priority.MEDIUM,
        start_date: Optional[date] = None,
        deadline: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> int:
        """Create a new project.

        Args:
            name: Project name
            client_id: Optional owning client
            description: Optional description
            status: active, completed, on-hold or cancelled
            priority: low, medium, high or urgent
            start_date: Optional start date
            deadline: Optional deadline
            budget: Optional non-negative budget

        Returns:
            Project ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the client doesn't exist
        """
        name = require_text(name, "name", NAME_MAX_LENGTH)
        project_status = parse_choice(ProjectStatus, status, "project status")
        project_priority = parse_choice(Priority, priority, "priority")
        budget = require_non_negative(budget, "budget")
        self._check_dates(start_date, deadline)
        self._check_client(client_id)

        project_id = self.db.create_project(
            name=name,
            client_id=client_id,
            description=description,
            status=project_status.value,
            priority=project_priority.value,
            start_date=start_date,
            deadline=deadline,
            budget=budget,
        )
        logger.info("Created project %s '%s'", project_id, name)
        return project_id

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID.

        Args:
            project_id: Project ID

        Returns:
            Project entity or None if not found
        """
        return self.db.get_project(project_id)

    def list_projects(
        self,
        status: Union[ProjectStatus, str, None] = None,
        client_id: Optional[int] = None,
        include_archived: bool = False,
    ) -> list[ProjectEntity]:
        """List projects.

        Args:
            status: Optional status filter
            client_id: Optional client filter
            include_archived: If True, include archived projects

        Returns:
            List of project entities ordered by deadline
        """
        status_value = None
        if status is not None:
            status_value = parse_choice(ProjectStatus, status, "project status").value
        return self.db.list_projects(
            status=status_value, client_id=client_id, include_archived=include_archived
        )

    def update_project(self, project_id: int, **fields: Any) -> ProjectEntity:
        """Update a project.

        Args:
            project_id: Project ID
            **fields: Any of name, client_id, description, status, priority,
                start_date, deadline, budget

        Returns:
            Updated project entity

        Raises:
            NotFoundError: If project or client not found
            ValidationError: If a field is invalid
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(not_found("Project", project_id))

        changes = dict(fields)
        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name", NAME_MAX_LENGTH)
        if "status" in changes:
            changes["status"] = parse_choice(
                ProjectStatus, changes["status"], "project status"
            ).value
        if "priority" in changes:
            changes["priority"] = parse_choice(Priority, changes["priority"], "priority").value
        if "budget" in changes:
            changes["budget"] = require_non_negative(changes["budget"], "budget")
        if "client_id" in changes:
            self._check_client(changes["client_id"])
        self._check_dates(
            changes.get("start_date", project.start_date),
            changes.get("deadline", project.deadline),
        )

        if changes:
            self.db.update_project(project_id, **changes)
        return self.db.get_project(project_id)

    def set_archived(self, project_id: int, archived: bool = True) -> ProjectEntity:
        """Archive or unarchive a project.

        Raises:
            NotFoundError: If project not found
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(not_found("Project", project_id))
        self.db.update_project(project_id, is_archived=archived)
        logger.info("%s project %s", "Archived" if archived else "Unarchived", project_id)
        return self.db.get_project(project_id)

    def delete_project(self, project_id: int) -> None:
        """Delete a project.

        Args:
            project_id: Project ID to delete

        Raises:
            NotFoundError: If project not found
            DependencyError: If tasks or expenses still reference the project
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(not_found("Project", project_id))

        counts = self.db.get_project_dependency_counts(project_id)
        if any(counts.values()):
            raise DependencyError(delete_blocked("project", project_id, counts))

        self.db.delete_project(project_id)
        logger.info("Deleted project %s", project_id)

    def get_stats(self) -> ProjectStats:
        """Get project statistics.

        Returns:
            ProjectStats with counts per status, archived count and budget total
        """
        summary = self.db.get_project_summary()
        by_status = summary["by_status"]
        return ProjectStats(
            total=sum(by_status.values()),
            active=by_status.get(ProjectStatus.ACTIVE.value, 0),
            completed=by_status.get(ProjectStatus.COMPLETED.value, 0),
            on_hold=by_status.get(ProjectStatus.ON_HOLD.value, 0),
            cancelled=by_status.get(ProjectStatus.CANCELLED.value, 0),
            archived=summary["archived"],
            total_budget=summary["total_budget"],
            by_status=dict(by_status),
            by_priority=dict(summary["by_priority"]),
        )
