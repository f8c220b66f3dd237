"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"

    Journal line amounts are magnitudes, so negative amounts are rejected;
    the side of the entry (debit or credit) carries the sign.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols, thousands separators and whitespace
    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount '{amount_str}' must not be negative")
    return amount


def parse_line_spec(spec: str) -> tuple[str, Decimal]:
    """Parse a "CODE=AMOUNT" line specification.

    Args:
        spec: Line specification such as "1001000=150.00"

    Returns:
        Tuple of (account_code, amount)

    Raises:
        ValueError: If the specification is malformed
    """
    code, separator, amount = spec.partition("=")
    code = code.strip()
    if not separator or not code:
        raise ValueError(f"Invalid line '{spec}'. Expected ACCOUNT_CODE=AMOUNT")
    return code, parse_amount(amount)
