"""Validators for user input."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from momo_split.utils.constants import ERR_INVALID_AMOUNT, SUPPORTED_CURRENCIES


def validate_amount(text: str) -> Tuple[bool, Optional[Decimal], Optional[str]]:
    """
    Validate and parse amount from text.

    Args:
        text: User input text

    Returns:
        Tuple of (is_valid, amount, error_message)
    """
    # Remove spaces and replace comma with dot
    text = text.strip().replace(" ", "").replace(",", ".")

    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return False, None, ERR_INVALID_AMOUNT

    if not amount.is_finite():
        return False, None, ERR_INVALID_AMOUNT

    if amount <= 0:
        return False, None, "❌ Amount must be greater than zero"

    if amount > Decimal("100000000"):
        return False, None, "❌ Amount is too large (maximum 100,000,000)"

    # Round to 2 decimal places
    amount = amount.quantize(Decimal("0.01"))

    if amount <= 0:
        return False, None, "❌ Amount must be at least 0.01"

    return True, amount, None


def validate_group_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate group name.

    Returns:
        Tuple of (is_valid, error_message)
    """
    name = name.strip()

    if not name:
        return False, "❌ Name cannot be empty"

    if len(name) < 3:
        return False, "❌ Name is too short (at least 3 characters)"

    if len(name) > 100:
        return False, "❌ Name is too long (at most 100 characters)"

    return True, None


def validate_currency(code: str) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate currency code.

    Returns:
        Tuple of (is_valid, currency, error_message)
    """
    code = code.strip().upper()

    if code not in SUPPORTED_CURRENCIES:
        return False, None, f"❌ Unsupported currency. Use one of: {', '.join(SUPPORTED_CURRENCIES)}"

    return True, code, None


def validate_description(description: str) -> Tuple[bool, Optional[str]]:
    """
    Validate expense description.

    Returns:
        Tuple of (is_valid, error_message)
    """
    description = description.strip()

    if not description:
        return False, "❌ Description cannot be empty"

    if len(description) > 200:
        return False, "❌ Description is too long (at most 200 characters)"

    return True, None


def parse_id(text: Optional[str]) -> Optional[int]:
    """Parse a numeric group or user ID, None if it is not one."""
    if text is None:
        return None

    text = text.strip()
    if not re.fullmatch(r"\d+", text):
        return None

    return int(text)
