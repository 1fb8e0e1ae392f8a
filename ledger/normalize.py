"""
Money and date normalization.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """
    Convert a stored or aggregated amount to a Decimal rounded to cents.
    ``None`` (an empty SUM) becomes zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1
        value = str(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")


def parse_amount(value: Any) -> Decimal:
    """Parse user input into a Decimal without rounding it."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def to_utc_date(value: Union[date, datetime, str]) -> date:
    """
    Normalize a date-like value to a UTC calendar date.

    Aware datetimes are converted to UTC first; naive datetimes are taken
    as UTC. The time of day is discarded.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date")
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_utc_date(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}")
    raise ValueError(f"Invalid date: {value!r}")


def to_optional_utc_date(value: Optional[Union[date, datetime, str]]) -> Optional[date]:
    if value is None or value == "":
        return None
    return to_utc_date(value)


def utc_today() -> date:
    """Today's calendar date in UTC, not the server's local zone."""
    return datetime.now(timezone.utc).date()
