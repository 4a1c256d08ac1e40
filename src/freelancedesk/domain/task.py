"""Task domain service."""

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence, Union

from freelancedesk.database.base import Database
from freelancedesk.domain import recurrence
from freelancedesk.domain.entities import (
    Priority,
    TaskInstance,
    TaskStats,
    TaskStatus,
    TaskTemplate,
    TimeEntry,
)
from freelancedesk.domain.errors import NotFoundError, ValidationError, not_found
from freelancedesk.domain.validation import parse_choice, require_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
TIME_DESCRIPTION_MAX_LENGTH = 500
EDITABLE_FIELDS = {"title", "description", "priority", "due_date", "project_id"}


class TaskService:
    """Service for managing tasks and recurring task series."""

    def __init__(self, db: Database):
        """Initialize task service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_task(self, task_id: int) -> TaskInstance:
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(not_found("Task", task_id))
        return task

    def _check_project(self, project_id: Optional[int]) -> None:
        if project_id is not None and self.db.get_project(project_id) is None:
            raise NotFoundError(not_found("Project", project_id))

    def _persist_visibility(
        self, before: Sequence[TaskInstance], after: Sequence[TaskInstance]
    ) -> None:
        """Write visibility flags that differ between two views of a series."""
        previous = {t.id: t.is_visible for t in before}
        for task in after:
            if previous.get(task.id) != task.is_visible:
                self.db.set_task_visibility(task.id, task.is_visible)
                logger.info(
                    "Revealed task %s (%s/%s of series %s)",
                    task.id,
                    task.instance_number,
                    task.recurrence_count,
                    task.recurrence_id,
                )

    def create_task(self, template: TaskTemplate, today: Optional[date] = None) -> list[int]:
        """Create a task, expanding a recurring template into its full series.

        Args:
            template: Submitted task
            today: Due date for the first instance of a recurring task with
                no due date (defaults to the current date)

        Returns:
            IDs of the created instances, in instance order

        Raises:
            ValidationError: If the title, priority or interval is invalid
            InvalidPatternError: If the recurrence pattern is unknown
            NotFoundError: If the project doesn't exist
        """
        require_text(template.title, "title", TITLE_MAX_LENGTH)
        parse_choice(Priority, template.priority, "priority")
        if template.is_recurring and template.recurrence_count < 1:
            raise ValidationError(
                f"Recurrence count must be at least 1, got {template.recurrence_count}"
            )
        self._check_project(template.project_id)

        instances = recurrence.expand(template, today=today)
        task_ids = self.db.create_tasks(instances)
        if len(task_ids) > 1:
            logger.info(
                "Created recurring series %s with %d tasks",
                instances[0].recurrence_id,
                len(task_ids),
            )
        else:
            logger.info("Created task %s", task_ids[0])
        return task_ids

    def get_task(self, task_id: int) -> Optional[TaskInstance]:
        """Get task by ID.

        Args:
            task_id: Task ID

        Returns:
            Task instance or None if not found
        """
        return self.db.get_task(task_id)

    def list_tasks(
        self,
        status: Union[TaskStatus, str, None] = None,
        priority: Union[Priority, str, None] = None,
        project_id: Optional[int] = None,
        search: Optional[str] = None,
        include_hidden: bool = False,
    ) -> list[TaskInstance]:
        """List tasks.

        Hidden members of recurring series are left out unless
        ``include_hidden`` is set.

        Returns:
            List of task instances ordered by due date
        """
        status_value = None
        if status is not None:
            status_value = parse_choice(TaskStatus, status, "task status").value
        priority_value = None
        if priority is not None:
            priority_value = parse_choice(Priority, priority, "priority").value
        return self.db.list_tasks(
            status=status_value,
            priority=priority_value,
            project_id=project_id,
            search=search,
            include_hidden=include_hidden,
        )

    def list_series(self, recurrence_id: str) -> list[TaskInstance]:
        """List every member of a recurring series, hidden ones included."""
        return self.db.list_series(recurrence_id)

    def update_task(self, task_id: int, **fields: Any) -> TaskInstance:
        """Edit a task's title, description, priority, due date or project.

        Only the given instance changes; siblings in its series are untouched.

        Raises:
            NotFoundError: If task or project not found
            ValidationError: If a field is invalid or not editable
        """
        self._require_task(task_id)

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit task field(s): {', '.join(sorted(unknown))}")

        changes = dict(fields)
        if "title" in changes:
            changes["title"] = require_text(changes["title"], "title", TITLE_MAX_LENGTH)
        if "priority" in changes:
            changes["priority"] = parse_choice(Priority, changes["priority"], "priority").value
        if "project_id" in changes:
            self._check_project(changes["project_id"])

        if changes:
            self.db.update_task(task_id, **changes)
        return self.db.get_task(task_id)

    def update_status(self, task_id: int, status: Union[TaskStatus, str]) -> TaskInstance:
        """Change a task's status.

        Completing a member of a recurring series reveals the next member.

        Args:
            task_id: Task ID
            status: New status

        Returns:
            Updated task instance

        Raises:
            NotFoundError: If task not found
            InvalidTransitionError: If the status change is not allowed
        """
        task = self._require_task(task_id)
        target = parse_choice(TaskStatus, status, "task status")
        recurrence.validate_transition(task.status, target)
        if target == task.status:
            return task

        self.db.update_task(task_id, status=target.value)
        logger.info("Task %s status %s -> %s", task_id, task.status.value, target.value)

        if target == TaskStatus.COMPLETED and task.is_recurring:
            series = self.db.list_series(task.recurrence_id)
            self._persist_visibility(series, recurrence.advance_on_completion(series, task_id))

        return self.db.get_task(task_id)

    def delete_task(self, task_id: int) -> None:
        """Delete one task instance.

        Siblings keep their instance numbers. When the deleted instance was
        the visible member of its series, the next remaining one is revealed.

        Raises:
            NotFoundError: If task not found
        """
        task = self._require_task(task_id)
        self.db.delete_task(task_id)
        logger.info("Deleted task %s", task_id)

        if task.is_recurring:
            remaining = self.db.list_series(task.recurrence_id)
            self._persist_visibility(remaining, recurrence.reveal_after_removal(remaining, task))

    def add_time_entry(
        self,
        task_id: int,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        """Log time spent on a task.

        Without an explicit duration, a finished entry counts the whole minutes
        between start and end, and a running entry (no end) counts 0.

        Args:
            task_id: Task ID
            start_time: When the work started
            end_time: When it stopped, or None while still running
            duration_minutes: Minutes to record instead of end - start
            description: Optional note

        Returns:
            The stored time entry

        Raises:
            NotFoundError: If task not found
            ValidationError: If end is before start, the duration is
                negative or the description is too long
        """
        self._require_task(task_id)
        if end_time is not None and end_time < start_time:
            raise ValidationError("End time cannot be before start time")
        if duration_minutes is None:
            if end_time is None:
                duration_minutes = 0
            else:
                duration_minutes = int((end_time - start_time).total_seconds() // 60)
        elif duration_minutes < 0:
            raise ValidationError("Duration cannot be negative")
        if description is not None:
            description = description.strip() or None
            if description and len(description) > TIME_DESCRIPTION_MAX_LENGTH:
                raise ValidationError(
                    f"Description cannot exceed {TIME_DESCRIPTION_MAX_LENGTH} characters"
                )

        entry_id = self.db.create_time_entry(
            task_id,
            start_time,
            end_time=end_time,
            duration_minutes=duration_minutes,
            description=description,
        )
        logger.info("Logged %d minutes on task %s", duration_minutes, task_id)
        return next(e for e in self.db.list_time_entries(task_id) if e.id == entry_id)

    def list_time_entries(self, task_id: int) -> list[TimeEntry]:
        """List the time logged on a task, oldest first.

        Raises:
            NotFoundError: If task not found
        """
        self._require_task(task_id)
        return self.db.list_time_entries(task_id)

    def get_tracked_minutes(self, task_id: int) -> int:
        """Total minutes logged on a task."""
        self._require_task(task_id)
        return self.db.get_tracked_minutes(task_id)

    def get_stats(self, today: Optional[date] = None) -> TaskStats:
        """Get task statistics.

        Args:
            today: Reference date for the overdue count (defaults to today)

        Returns:
            TaskStats with counts per status, priority and project
        """
        summary = self.db.get_task_summary(today or date.today())
        by_status = summary["by_status"]
        return TaskStats(
            total=sum(by_status.values()),
            pending=by_status.get(TaskStatus.PENDING.value, 0),
            in_progress=by_status.get(TaskStatus.IN_PROGRESS.value, 0),
            completed=by_status.get(TaskStatus.COMPLETED.value, 0),
            cancelled=by_status.get(TaskStatus.CANCELLED.value, 0),
            overdue=summary["overdue"],
            by_priority=dict(summary["by_priority"]),
            by_project=dict(summary["by_project"]),
            tracked_minutes=self.db.get_tracked_minutes(),
        )
