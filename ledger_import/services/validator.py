from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ledger_import.models.import_outcome import ValidationError, ValidationResult
from ledger_import.models.row_data import RowData

"""Required-field validation of transformed rows.

Rows are partitioned, never raised on: every input row ends up either in
`valid` or as exactly one ValidationError citing its row_number.
"""

__all__ = [
    "MISSING_FIELDS_PREFIX",
    "is_blank",
    "validate_rows",
]

MISSING_FIELDS_PREFIX = "Missing required fields: "


def is_blank(value: Any) -> bool:
    """None, or a value whose str() is empty once stripped. 0 and False are not blank."""
    if value is None:
        return True
    return str(value).strip() == ""


def validate_rows(
    rows: Sequence[RowData],
    required_fields: Sequence[str],
    labels: Mapping[str, str] | None = None,
) -> ValidationResult:
    """Split rows into valid ones and row-numbered errors.

    labels, when given, replaces field keys in the error message.
    """
    valid: list[RowData] = []
    errors: list[ValidationError] = []
    for row in rows:
        missing = [f for f in required_fields if is_blank(row.values.get(f))]
        if missing:
            names = [labels.get(f, f) for f in missing] if labels else missing
            errors.append(
                ValidationError(row=row.row_number, message=MISSING_FIELDS_PREFIX + ", ".join(names))
            )
        else:
            valid.append(row)
    return ValidationResult(valid=valid, errors=errors)
