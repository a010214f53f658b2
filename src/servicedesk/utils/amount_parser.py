"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a currency string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "R$ 123,45"
    - "$1,234.56"
    - "1.234,56"

    When both separators appear, the last one is the decimal separator. A
    lone comma followed by one or two digits is a decimal comma.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = re.sub(r"R\$|[$€£]|\s", "", amount_str.strip())

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if re.search(r",\d{1,2}$", text) and text.count(",") == 1:
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount.quantize(CENTS)


def format_amount(amount: Decimal) -> str:
    """Render an amount for display, e.g. ``R$ 1,234.50``."""
    return f"R$ {amount:,.2f}"
