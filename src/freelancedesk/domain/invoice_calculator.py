"""Invoice total computation.

Derives subtotal, tax, discount and total from an invoice's line items and
rates. The functions here are pure: they never raise on bad numeric input and
never touch the database. Invalid numbers (missing, non-numeric, NaN,
infinite, negative or above MAX_AMOUNT) count as zero so the result is
always renderable.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from freelancedesk.domain.entities import DiscountKind, InvoiceTotals, LineItem

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Inputs above this count as zero; products and sums of them stay far below
# the decimal context's exponent limit.
MAX_AMOUNT = Decimal("1e12")

ItemLike = Union[LineItem, Mapping[str, Any]]


def to_amount(value: Any) -> Decimal:
    """Coerce a user-supplied number to a non-negative finite Decimal.

    Args:
        value: int, float, Decimal, numeric string or anything else

    Returns:
        The value as Decimal, or 0 when it is not a usable amount
    """
    if value is None or isinstance(value, bool):
        return ZERO

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            # str() keeps 0.1 as 0.1 instead of its binary expansion
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip())
        else:
            logger.debug("Coercing non-numeric value %r to 0", value)
            return ZERO
    except (InvalidOperation, ValueError):
        logger.debug("Coercing unparsable value %r to 0", value)
        return ZERO

    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        logger.debug("Coercing out-of-range value %r to 0", value)
        return ZERO
    return amount


def _field(item: ItemLike, name: str, *aliases: str) -> Any:
    if isinstance(item, Mapping):
        for key in (name, *aliases):
            if key in item:
                return item[key]
        return None
    return getattr(item, name, None)


def line_amount(item: ItemLike) -> Decimal:
    """Return the billable amount of one line item.

    The flat ``amount`` wins when present; otherwise quantity times rate.
    Mappings may use ``rate`` in place of ``unit_rate``.
    """
    flat = _field(item, "amount")
    if flat is not None:
        return to_amount(flat)
    quantity = to_amount(_field(item, "quantity"))
    rate = to_amount(_field(item, "unit_rate", "unitRate", "rate"))
    return quantity * rate


def compute_discount(
    subtotal: Decimal, discount_kind: Union[DiscountKind, str], discount_value: Any
) -> Decimal:
    """Return the discount amount, never more than the subtotal."""
    value = to_amount(discount_value)
    if discount_kind == DiscountKind.PERCENTAGE:
        discount = subtotal * value / HUNDRED
    else:
        discount = value
    return min(discount, subtotal)


def recompute(
    items: Iterable[ItemLike],
    tax_rate_percent: Any = ZERO,
    discount_kind: Union[DiscountKind, str] = DiscountKind.PERCENTAGE,
    discount_value: Any = ZERO,
) -> InvoiceTotals:
    """Compute the monetary summary of an invoice.

    Args:
        items: Line items (LineItem or mappings with amount/quantity/unit_rate)
        tax_rate_percent: Tax rate in percent of the subtotal
        discount_kind: percentage of subtotal, or fixed amount
        discount_value: Percentage or amount, depending on discount_kind

    Returns:
        InvoiceTotals with total = subtotal + tax_amount - discount_amount
    """
    subtotal = sum((line_amount(item) for item in items), ZERO)
    tax_amount = subtotal * to_amount(tax_rate_percent) / HUNDRED
    discount_amount = compute_discount(subtotal, discount_kind, discount_value)
    total = subtotal + tax_amount - discount_amount

    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total=total,
    )
