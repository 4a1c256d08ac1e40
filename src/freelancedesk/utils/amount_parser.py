"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹]|\b(?:INR|USD|EUR|GBP|Rs\.?)\s*", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount typed on the command line.

    Handles:
    - "1200", "1200.50"
    - "$1,200.50", "₹1,20,000", "Rs. 500", "INR 500"
    - "12.5%" (the percent sign is dropped, for tax and discount rates)

    Args:
        amount_str: Amount string

    Returns:
        Non-negative Decimal amount

    Raises:
        ValueError: If the string is empty, not a number or negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = CURRENCY_SYMBOLS.sub("", amount_str.strip())
    cleaned = cleaned.replace(",", "").rstrip("%").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")
    return amount
