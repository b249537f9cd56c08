from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ledger_import.services.transforms import parse_leading_number

"""Per-entity record shaping applied right before the insert.

Contacts (clients, vendors): text trimmed, empty optional text -> None,
GSTIN upper-cased. Items: numeric rate (default 0), goods/service type,
boolean taxable flag. Other entities pass through unchanged.
"""

__all__ = [
    "RECORD_BUILDERS",
    "prepare_record",
]


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _contact(values: Mapping[str, Any]) -> dict[str, Any]:
    gstin = _text(values.get("gstin"))
    return {
        "name": _text(values.get("name")) or "",
        "email": _text(values.get("email")),
        "phone": _text(values.get("phone")),
        "address": _text(values.get("address")),
        "gstin": gstin.upper() if gstin else None,
    }


def _item(values: Mapping[str, Any]) -> dict[str, Any]:
    rate = values.get("rate")
    taxable = values.get("taxable")
    number = parse_leading_number(rate) if rate is not None else None
    return {
        "name": _text(values.get("name")) or "",
        "sku": _text(values.get("sku")),
        "rate": number if number is not None else 0.0,
        "description": _text(values.get("description")),
        "type": "service" if values.get("type") == "service" else "goods",
        "taxable": taxable is True or taxable in ("true", "Yes"),
    }


RECORD_BUILDERS: dict[str, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    "clients": _contact,
    "vendors": _contact,
    "items": _item,
}


def prepare_record(entity: str, values: Mapping[str, Any]) -> dict[str, Any]:
    builder = RECORD_BUILDERS.get(entity)
    if builder is None:
        return dict(values)
    return builder(values)
