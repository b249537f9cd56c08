from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ledger_import.models.error_record import ErrorRecord

"""Per-session error log for rejected and failed import rows.

One wizard session owns one buffer. It collects VALIDATION_ERROR rows from
preview, INSERT_FAILED rows from the commit, and the file-level
FILE_PARSE_ERROR / IMPORT_ABORTED records (row -1). The CLI flushes it once on
exit into `logs/errors-YYYYMMDD-HHMMSS.log` (UTC), one JSON object per line
with the keys of contracts/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects entity/row error records until the session ends.

    Nothing is written while the wizard runs; flush() appends the records to
    the session log file and empties the buffer. The file name is stamped on
    first flush, so a session with no errors leaves no file behind.
    """
    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = Path(logs_dir) if logs_dir is not None else LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
