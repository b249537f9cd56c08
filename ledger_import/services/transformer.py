from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from ledger_import.models.field_spec import AliasEntry, FieldMapping
from ledger_import.models.row_data import RowData

"""Apply confirmed mappings (and per-field transforms) to parsed rows."""

__all__ = [
    "is_present",
    "transform_rows",
]


def is_present(value: Any) -> bool:
    """True unless the cell is None, NaN or an empty string."""
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return not (isinstance(value, str) and value == "")


def transform_rows(
    rows: Sequence[Mapping[str, Any]],
    mappings: Sequence[FieldMapping],
    aliases: Sequence[AliasEntry] | None = None,
) -> list[RowData]:
    """Build one RowData per input row, same order, row_number starting at 1.

    Only mapped target fields are populated; missing target values are not
    defaulted here. A field's transform runs only on present values.
    """
    transforms = {a.target_field: a.transform for a in (aliases or ()) if a.transform is not None}
    out: list[RowData] = []
    for index, raw in enumerate(rows, start=1):
        values: dict[str, Any] = {}
        for m in mappings:
            value = raw.get(m.source_field)
            fn = transforms.get(m.target_field)
            if fn is not None and is_present(value):
                value = fn(value)
            values[m.target_field] = value
        out.append(RowData(row_number=index, values=values, raw_values=raw))
    return out
