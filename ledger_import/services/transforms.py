from __future__ import annotations

import math
import re
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

"""Value transforms attached to target fields.

Every transform is total: whatever it is given (str, int, float, bool, None,
"", dates) it returns a coerced value and never raises. Fallbacks:

    amount / number / percent   unparseable -> 0.0
    quantity                    unparseable -> 1.0
    date_or_today               unparseable -> today (ISO date)
    due_date                    unparseable -> today + 30 days (ISO date)
    invoice_status              unknown     -> "PENDING"
    product_type                not service -> "goods"
    yes_no                      not yes/true -> False
"""

__all__ = [
    "TRANSFORMS",
    "DUE_DATE_DAYS",
    "get_transform",
    "parse_leading_number",
    "to_amount",
    "to_number",
    "to_quantity",
    "to_percent",
    "to_product_type",
    "to_yes_no",
    "to_date_or_today",
    "to_due_date",
    "to_invoice_status",
    "to_upper_text",
]

DUE_DATE_DAYS = 30

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")
_CURRENCY_CHARS = re.compile(r"[₹$€£,]")
_DATE_FORMATS = ("%m/%d/%Y", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d", "%d %b %Y", "%d %B %Y")


def parse_leading_number(value: Any) -> float | None:
    """Parse the numeric prefix of a value ("12.5kg" -> 12.5); None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        m = _LEADING_NUMBER.match(str(value))
        if m is None:
            return None
        try:
            number = float(m.group(1))
        except ValueError:  # pragma: no cover (regex guarantees a float literal)
            return None
    if not math.isfinite(number):
        return None
    return number


def to_number(value: Any) -> float:
    number = parse_leading_number(value)
    return 0.0 if number is None else number


def to_amount(value: Any) -> float:
    """Currency amount: strips ₹ $ € £ and thousands separators."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return to_number(value)
    return to_number(_CURRENCY_CHARS.sub("", str(value)))


def to_quantity(value: Any) -> float:
    number = parse_leading_number(value)
    # zero or unparseable quantity counts as one unit
    return number if number else 1.0


def to_percent(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return to_number(value)
    return to_number(str(value).replace("%", ""))


def to_product_type(value: Any) -> str:
    return "service" if str(value).strip().lower() == "service" else "goods"


def to_yes_no(value: Any) -> bool:
    if value is True:
        return True
    return str(value).strip().lower() in ("yes", "true")


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_date_or_today(value: Any) -> str:
    parsed = _parse_date(value)
    if parsed is None:
        parsed = date.today()
    return parsed.isoformat()


def to_due_date(value: Any) -> str:
    parsed = _parse_date(value)
    if parsed is None:
        parsed = date.today() + timedelta(days=DUE_DATE_DAYS)
    return parsed.isoformat()


def to_invoice_status(value: Any) -> str:
    status = str(value).upper()
    if "PAID" in status:
        return "PAID"
    if "OVERDUE" in status:
        return "OVERDUE"
    if "DRAFT" in status:
        return "DRAFT"
    return "PENDING"


def to_upper_text(value: Any) -> str:
    return str(value).strip().upper()


TRANSFORMS: dict[str, Callable[[Any], Any]] = {
    "amount": to_amount,
    "number": to_number,
    "quantity": to_quantity,
    "percent": to_percent,
    "product_type": to_product_type,
    "yes_no": to_yes_no,
    "date_or_today": to_date_or_today,
    "due_date": to_due_date,
    "invoice_status": to_invoice_status,
    "upper_text": to_upper_text,
}


def get_transform(name: str) -> Callable[[Any], Any]:
    """Look up a transform by its configuration name (KeyError when unknown)."""
    return TRANSFORMS[name]
