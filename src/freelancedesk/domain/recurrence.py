"""Recurring task expansion and the visibility cascade.

A recurring task template is expanded once, at submission time, into a
closed series of task instances that share a recurrence id. Only one member
of a series is visible at a time: instance 1 at first, then each completion
reveals the next sibling. The series never grows after creation.

Everything in this module is pure; persistence happens in TaskService.
"""

import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import date, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from freelancedesk.domain.entities import (
    RecurringPattern,
    TaskInstance,
    TaskStatus,
    TaskTemplate,
)
from freelancedesk.domain.errors import (
    InvalidPatternError,
    InvalidTransitionError,
    ValidationError,
    invalid_choice,
    invalid_transition,
)

# Allowed status changes; completed and cancelled are terminal.
TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}


def parse_pattern(value: Union[RecurringPattern, str, None]) -> RecurringPattern:
    """Parse a recurrence pattern name.

    Raises:
        InvalidPatternError: If the value is not a known pattern
    """
    if isinstance(value, RecurringPattern):
        return value
    try:
        return RecurringPattern(str(value).strip().lower())
    except ValueError:
        raise InvalidPatternError(
            invalid_choice("recurring pattern", str(value), RecurringPattern)
        ) from None


def step_date(start: date, pattern: RecurringPattern, interval: int, steps: int) -> date:
    """Return ``start`` advanced by ``steps`` steps of the pattern.

    Month and year steps clamp to the last day of a shorter month.

    Args:
        start: Date to advance from
        pattern: Cadence
        interval: Number of pattern units per step
        steps: Number of steps to advance

    Returns:
        The advanced date
    """
    units = interval * steps
    if pattern == RecurringPattern.DAILY:
        return start + timedelta(days=units)
    if pattern == RecurringPattern.WEEKLY:
        return start + timedelta(weeks=units)
    if pattern == RecurringPattern.MONTHLY:
        return start + relativedelta(months=units)
    if pattern == RecurringPattern.YEARLY:
        return start + relativedelta(years=units)
    raise InvalidPatternError(invalid_choice("recurring pattern", str(pattern), RecurringPattern))


def expand(
    template: TaskTemplate,
    today: Optional[date] = None,
    new_recurrence_id: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> list[TaskInstance]:
    """Expand a task template into the instances to store.

    Args:
        template: Submitted task
        today: Due date for instance 1 when the template has none
            (defaults to the current date)
        new_recurrence_id: Factory for the series id

    Returns:
        Ordered list of unsaved instances (``id`` is None)

    Raises:
        InvalidPatternError: If a recurring template has an unknown pattern
        ValidationError: If a recurring template has an interval below 1
    """
    if not template.is_recurring or template.recurrence_count <= 1:
        return [
            TaskInstance(
                id=None,
                title=template.title,
                description=template.description,
                priority=template.priority,
                status=TaskStatus.PENDING,
                due_date=template.due_date,
                project_id=template.project_id,
                recurrence_id=None,
                instance_number=1,
                recurrence_count=1,
                recurring_pattern=None,
                recurring_interval=1,
                is_visible=True,
            )
        ]

    pattern = parse_pattern(template.recurring_pattern)
    if template.recurring_interval < 1:
        raise ValidationError(
            f"Recurring interval must be at least 1, got {template.recurring_interval}"
        )

    count = template.recurrence_count
    recurrence_id = new_recurrence_id()
    due = template.due_date or today or date.today()

    instances = []
    for number in range(1, count + 1):
        if number > 1:
            # instance i steps from instance i-1
            due = step_date(due, pattern, template.recurring_interval, 1)
        instances.append(
            TaskInstance(
                id=None,
                title=f"{template.title} ({number}/{count})",
                description=template.description,
                priority=template.priority,
                status=TaskStatus.PENDING,
                due_date=due,
                project_id=template.project_id,
                recurrence_id=recurrence_id,
                instance_number=number,
                recurrence_count=count,
                recurring_pattern=pattern,
                recurring_interval=template.recurring_interval,
                is_visible=number == 1,
            )
        )
    return instances


def next_sibling(
    instances: Iterable[TaskInstance], instance: TaskInstance
) -> Optional[TaskInstance]:
    """Return the series member that follows ``instance``, if any.

    Normally that is instance_number + 1; if that one was deleted, the next
    remaining number is used.
    """
    if instance.recurrence_id is None:
        return None
    later = [
        t
        for t in instances
        if t.recurrence_id == instance.recurrence_id
        and t.instance_number > instance.instance_number
    ]
    if not later:
        return None
    return min(later, key=lambda t: t.instance_number)


def _reveal_after(instances: list[TaskInstance], instance: TaskInstance) -> list[TaskInstance]:
    following = next_sibling(instances, instance)
    if following is None or following.is_visible:
        return instances
    revealed = replace(following, is_visible=True)
    return [revealed if t is following else t for t in instances]


def advance_on_completion(
    instances: Sequence[TaskInstance], completed_instance_id: int
) -> list[TaskInstance]:
    """Reveal the next member of a series after one instance completes.

    Args:
        instances: Members of the series (other tasks are left untouched)
        completed_instance_id: ID of the instance that was just completed

    Returns:
        New list with at most one instance's ``is_visible`` flipped to True.
        Completing the last member, or a task outside any series, changes
        nothing.

    Raises:
        ValidationError: If no instance has the given ID
    """
    current = list(instances)
    completed = next((t for t in current if t.id == completed_instance_id), None)
    if completed is None:
        raise ValidationError(f"Task {completed_instance_id} is not part of the given instances")
    return _reveal_after(current, completed)


def reveal_after_removal(
    instances: Sequence[TaskInstance], removed: TaskInstance
) -> list[TaskInstance]:
    """Keep a series showing a member after its visible instance is deleted.

    Args:
        instances: Remaining members of the series
        removed: The deleted instance

    Returns:
        New list; unchanged unless ``removed`` was the visible member
    """
    current = list(instances)
    if not removed.is_visible:
        return current
    return _reveal_after(current, removed)


def validate_transition(current: TaskStatus, target: TaskStatus) -> None:
    """Check a task status change against the task state machine.

    Raises:
        InvalidTransitionError: If ``target`` cannot follow ``current``
    """
    if current == target:
        return
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(invalid_transition("task", current.value, target.value))
