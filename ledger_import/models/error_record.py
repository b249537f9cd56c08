from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Supports row=-1 as a sentinel value for file-level errors (unsupported
format, unreadable file, aborted import) where no specific row applies.
The serialized key set is fixed: timestamp, file, entity, row, error_type,
message.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded filename being processed
        entity: Target entity type (clients, vendors, items, ...)
        row: Row number (1-based). Use -1 for file-level errors where row is unknown
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Validation message or datastore error text
    """
    timestamp: str  # ISO8601 UTC
    file: str
    entity: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, entity: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            entity=entity,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
