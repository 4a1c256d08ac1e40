"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvalidPatternError(ValidationError):
    """Recurring task template names a cadence that cannot be stepped."""


class InvalidTransitionError(ValidationError):
    """Status change not allowed from the current status."""


def not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing entity by ID."""
    return f"{kind} {entity_id} not found"


def duplicate_client_email(email: str) -> str:
    """Return message for duplicate client email."""
    return f"A client with email '{email}' already exists"


def invalid_choice(field: str, value: str, choices) -> str:
    """Return message for a value outside an enumerated set."""
    allowed = ", ".join(str(getattr(c, "value", c)) for c in choices)
    return f"Invalid {field} '{value}'. Expected one of: {allowed}"


def invalid_transition(kind: str, current: str, target: str) -> str:
    """Return message for a rejected status transition."""
    return f"Cannot change {kind} status from '{current}' to '{target}'"


def delete_blocked(kind: str, entity_id: int, counts: dict[str, int]) -> str:
    """Return message when an entity still has dependent records."""
    parts = []
    for label, count in counts.items():
        if count > 0:
            parts.append(f"{count} {label}{'s' if count != 1 else ''}")
    return (
        f"Cannot delete {kind} {entity_id}: it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )
