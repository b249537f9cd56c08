from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

"""RowData model for the tabular import pipeline.

RowData is the transformed representation of one uploaded row: the values are
keyed by canonical target fields, the row_number is the 1-based position of
the row in the parsed file (first data row = 1) and survives validation so
that both validation errors and commit outcomes can cite it.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single row after mapping and transforms.

    The raw_values mapping is the untouched parsed row (header -> raw cell)
    and is kept for preview and debugging only.
    """
    row_number: int  # 1-based position in the transformed sequence
    values: dict[str, Any]  # Target field -> coerced value (mapped fields only)
    raw_values: Mapping[str, Any] | None = None  # Original parsed row (read-only view)
