"""Input validation helpers shared by the domain services."""

import re
from decimal import Decimal
from enum import Enum
from typing import Optional, TypeVar, Union

from freelancedesk.domain.errors import ValidationError, invalid_choice

E = TypeVar("E", bound=Enum)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_choice(enum_cls: type[E], value: Union[E, str], field: str) -> E:
    """Parse a value into a member of ``enum_cls``.

    Raises:
        ValidationError: If the value is not one of the enum's values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(invalid_choice(field, str(value), enum_cls)) from None


def require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    """Return the stripped text, rejecting empty or overlong values."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field.capitalize()} is required")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field.capitalize()} cannot exceed {max_length} characters")
    return text


def normalize_email(email: Optional[str]) -> str:
    """Lowercase and validate an email address."""
    normalized = require_text(email, "email").lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError(f"Invalid email address '{email}'")
    return normalized


def require_non_negative(value: Optional[Decimal], field: str) -> Optional[Decimal]:
    """Reject negative amounts; None passes through."""
    if value is None:
        return None
    amount = Decimal(value)
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field.capitalize()} cannot be negative")
    return amount
