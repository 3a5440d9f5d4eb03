"""
Display formatting for money and dates (pt-BR)

Formatting never raises. Each function returns either Ok(text) or
UNREPRESENTABLE, so callers decide explicitly what an unparseable value
turns into instead of it silently becoming zero.
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Ok:
    value: str


class _Unrepresentable:
    """Marker for values that could not be formatted"""

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNREPRESENTABLE"


UNREPRESENTABLE = _Unrepresentable()

Formatted = Union[Ok, _Unrepresentable]

DATE_INPUT_FORMATS = ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%d/%m/%Y")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce numbers and numeric strings; None for anything else"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def to_date(value: Any) -> Optional[date]:
    """Coerce date/datetime objects and ISO or dd/mm/yyyy strings"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        for fmt in DATE_INPUT_FORMATS:
            try:
                return datetime.strptime(text[:19], fmt).date()
            except ValueError:
                continue
    return None


def format_money(value: Any) -> Formatted:
    """1234.5 -> Ok("1.234,50")"""
    amount = to_decimal(value)
    if amount is None:
        return UNREPRESENTABLE
    try:
        grouped = f"{amount.quantize(Decimal('0.01')):,.2f}"
    except InvalidOperation:
        return UNREPRESENTABLE
    # swap the en-US separators for pt-BR ones
    return Ok(grouped.replace(",", "_").replace(".", ",").replace("_", "."))


def format_date(value: Any) -> Formatted:
    """date(2024, 3, 5) -> Ok("05/03/2024")"""
    parsed = to_date(value)
    if parsed is None:
        return UNREPRESENTABLE
    return Ok(parsed.strftime("%d/%m/%Y"))


def money_or_zero(value: Any) -> str:
    formatted = format_money(value)
    return formatted.value if isinstance(formatted, Ok) else "0,00"


def date_or_none(value: Any) -> Optional[str]:
    formatted = format_date(value)
    return formatted.value if isinstance(formatted, Ok) else None
