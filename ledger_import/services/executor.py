from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from ledger_import.logging.error_log import ErrorLogBuffer, ErrorRecord
from ledger_import.models.import_outcome import ImportOutcome, RowOutcome
from ledger_import.models.row_data import RowData

from .progress import ProgressTracker

"""Best-effort row-by-row commit of validated rows.

Rows are submitted one at a time, in order, each awaited before the next.
Any Exception raised by the insert operation marks that row failed and the
loop moves on: no abort, no rollback, no retry. The outcome keeps one
RowOutcome per row so failed commits remain addressable by row number.

Timeouts belong to the insert operation; nothing here imposes one.
"""

__all__ = [
    "InsertOne",
    "execute_import",
]

logger = logging.getLogger(__name__)

InsertOne = Callable[[dict[str, Any]], Awaitable[Any]]


async def execute_import(
    rows: Sequence[RowData],
    insert_one: InsertOne,
    *,
    progress: ProgressTracker | None = None,
    error_log: ErrorLogBuffer | None = None,
    entity: str = "",
    filename: str = "",
) -> ImportOutcome:
    """Commit `rows` through `insert_one`; success + failed == len(rows).

    Args:
        rows: validated rows, committed in this order
        insert_one: async callable taking the row values and returning the new record id
        progress: optional tracker advanced once per row
        error_log: optional buffer receiving one INSERT_FAILED record per failed row
        entity: entity name used in log and error records
        filename: uploaded filename used in error records
    """
    start = time.monotonic()
    outcomes: list[RowOutcome] = []
    for row in rows:
        try:
            record_id = await insert_one(dict(row.values))
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("insert failed entity=%s row=%d: %s", entity, row.row_number, message)
            outcomes.append(RowOutcome(row_number=row.row_number, success=False, error=message))
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(
                        file=filename,
                        entity=entity,
                        row=row.row_number,
                        error_type="INSERT_FAILED",
                        message=message,
                    )
                )
            if progress is not None:
                progress.advance(success=False)
            continue
        logger.debug("inserted entity=%s row=%d id=%s", entity, row.row_number, record_id)
        outcomes.append(RowOutcome(row_number=row.row_number, success=True, record_id=record_id))
        if progress is not None:
            progress.advance(success=True)

    outcome = ImportOutcome(rows=outcomes, elapsed_seconds=time.monotonic() - start)
    logger.info(
        "import finished entity=%s success=%d failed=%d",
        entity, outcome.success, outcome.failed,
    )
    return outcome
