from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from ledger_import.models.field_spec import EntityDefinition

from .reader import UnsupportedFormatError, file_extension

"""Export helpers: records -> CSV / XLSX.

Structural inverse of the reader. Column order follows the first appearance
of each key across the records; no mapping or validation happens here.
"""

__all__ = [
    "EXPORT_SHEET_NAME",
    "export_records",
    "write_sample_template",
]

EXPORT_SHEET_NAME = "Data"


def _frame(records: Iterable[Mapping[str, Any]], columns: list[str] | None = None) -> pd.DataFrame:
    rows = [dict(r) for r in records]
    if columns is None:
        columns = []
        for r in rows:
            for key in r:
                if key not in columns:
                    columns.append(key)
    return pd.DataFrame(rows, columns=columns)


def export_records(
    records: Iterable[Mapping[str, Any]],
    path: Path,
    columns: list[str] | None = None,
) -> Path:
    """Write records to `path`; the extension (.csv / .xlsx) selects the format."""
    ext = file_extension(path.name)
    df = _frame(records, columns)
    if ext == "csv":
        df.to_csv(path, index=False, encoding="utf-8")
    elif ext == "xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
    else:
        raise UnsupportedFormatError("Unsupported export type. Please use CSV or XLSX.")
    return path


def write_sample_template(definition: EntityDefinition, path: Path) -> Path:
    """Write an entity's sample rows as an import template.

    Entities without sample rows get a header-only file built from the
    field labels.
    """
    if definition.sample_rows:
        return export_records(definition.sample_rows, path)
    labels = [f.label for f in definition.target_fields]
    return export_records([], path, columns=labels)
