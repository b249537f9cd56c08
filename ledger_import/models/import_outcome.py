from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .row_data import RowData

"""Validation and commit result models for the import pipeline.

ValidationResult is the partition produced by the validator
(len(valid) + len(errors) == rows validated). ImportOutcome keeps one
RowOutcome per committed row, in commit order, so failures stay addressable;
the success/failed counts are derived from it.
"""

__all__ = [
    "ValidationError",
    "ValidationResult",
    "RowOutcome",
    "ImportOutcome",
]


@dataclass(frozen=True)
class ValidationError:
    row: int  # 1-based position in the transformed sequence
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: list[RowData]
    errors: list[ValidationError]

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.errors)


@dataclass(frozen=True)
class RowOutcome:
    row_number: int  # row_number of the submitted RowData
    success: bool
    record_id: Any = None  # value returned by the insert operation
    error: str | None = None  # failure message when success is False


@dataclass(frozen=True)
class ImportOutcome:
    """Aggregated result of one commit run.

    success + failed always equals the number of rows submitted.
    """
    rows: list[RowOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def success(self) -> int:
        return sum(1 for r in self.rows if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.rows if not r.success)

    @property
    def submitted(self) -> int:
        return len(self.rows)

    @property
    def failures(self) -> list[RowOutcome]:
        return [r for r in self.rows if not r.success]

    def as_counts(self) -> dict[str, int]:
        return {"success": self.success, "failed": self.failed}
