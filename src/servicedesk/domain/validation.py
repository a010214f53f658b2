"""Field checks shared by the domain services.

Each helper returns the cleaned value or raises ValidationError naming the
offending field.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from servicedesk.domain.errors import ValidationError, required_field
from servicedesk.utils.date_parser import parse_date

CENTS = Decimal("0.01")


def require_text(value: Optional[str], field: str, label: str, min_length: int = 1) -> str:
    """Strip ``value`` and check it has at least ``min_length`` characters."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(required_field(label), field=field)
    if len(text) < min_length:
        raise ValidationError(
            f"{label} must have at least {min_length} characters", field=field
        )
    return text


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank strings are stored as NULL."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def require_money(value, field: str, label: str) -> Decimal:
    """Coerce to a non-negative Decimal with two decimal places."""
    if value is None or value == "":
        raise ValidationError(required_field(label), field=field)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a number", field=field)
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative", field=field)
    return amount.quantize(CENTS)


def require_date(value, field: str, label: str) -> date:
    """Accept a date, a datetime or a parseable date string."""
    if value is None or value == "":
        raise ValidationError(required_field(label), field=field)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError:
            raise ValidationError(f"{label} must be a valid date", field=field)
    raise ValidationError(f"{label} must be a valid date", field=field)


def require_quantity(value, field: str = "quantity") -> int:
    """Quantities are whole numbers of at least 1."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be a whole number", field=field)
    if value < 1:
        raise ValidationError("Quantity must be at least 1", field=field)
    return value
