"""Display formatting for amounts, percentages and dates.

Amounts use the Indian digit grouping (12,34,567.00): the last three digits
form a group, the digits above are grouped by two.
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal

from gstinvoice.documents.models import to_decimal
from gstinvoice.template.models import ColumnFormat

TWO_PLACES = Decimal("0.01")


def group_indian(digits: str) -> str:
    """Insert lakh/crore separators in a string of integer digits."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: object) -> str:
    """Format an amount with 2 decimals and Indian grouping (1,00,000.00)."""
    amount = to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{group_indian(integer)}.{fraction}"


def format_currency(value: object, symbol: str = "₹") -> str:
    """Format an amount in rupees, e.g. ₹2,360.00."""
    text = format_amount(value)
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}"


def format_percentage(value: object) -> str:
    """Format a percentage with 2 decimals, e.g. 18.00%."""
    return f"{to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP):.2f}%"


def format_number(value: object) -> str:
    """Format a number with 2 decimals, without grouping."""
    return f"{to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP):.2f}"


def format_date(value: datetime.date) -> str:
    """Format a date as on printed documents, e.g. 08 Jan 2025."""
    return value.strftime("%d %b %Y")


def format_value(value: object, fmt: ColumnFormat, currency_symbol: str = "₹") -> str:
    """Format a cell value according to a column format.

    Non-numeric values are passed through as text whatever the format.
    """
    if value is None:
        return ""
    if fmt == ColumnFormat.TEXT or not isinstance(value, (Decimal, int, float)):
        return str(value)
    if fmt == ColumnFormat.CURRENCY:
        return format_currency(value, currency_symbol)
    if fmt == ColumnFormat.PERCENTAGE:
        return format_percentage(value)
    return format_number(value)
