from __future__ import annotations

from collections.abc import Sequence

from ledger_import.models.import_outcome import ImportOutcome, ValidationError

"""SUMMARY line and plain-text import report rendering."""

__all__ = [
    "MAX_REPORTED_ERRORS",
    "format_seconds",
    "render_summary_line",
    "generate_import_report",
]

MAX_REPORTED_ERRORS = 10


def format_seconds(value: float) -> str:
    """Compact number: 0 -> "0", 2.0 -> "2", tiny values without exponent."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(
    entity: str,
    total_rows: int,
    invalid_rows: int,
    outcome: ImportOutcome | None,
) -> str:
    """Render the SUMMARY line of one import run.

    Format:
    SUMMARY entity={entity} rows={total} valid={valid} invalid={invalid}
    success={success} failed={failed} elapsed_sec={elapsed}

    Examples:
        >>> render_summary_line("clients", 3, 1, ImportOutcome())
        'SUMMARY entity=clients rows=3 valid=2 invalid=1 success=0 failed=0 elapsed_sec=0'
    """
    success = outcome.success if outcome is not None else 0
    failed = outcome.failed if outcome is not None else 0
    elapsed = outcome.elapsed_seconds if outcome is not None else 0.0
    return (
        f"SUMMARY entity={entity} "
        f"rows={total_rows} "
        f"valid={total_rows - invalid_rows} "
        f"invalid={invalid_rows} "
        f"success={success} "
        f"failed={failed} "
        f"elapsed_sec={format_seconds(elapsed)}"
    )


def generate_import_report(
    total_rows: int,
    success_count: int,
    errors: Sequence[ValidationError],
) -> str:
    """Human readable import summary listing at most MAX_REPORTED_ERRORS errors."""
    lines = [
        "Import Summary",
        "==============",
        f"Total rows: {total_rows}",
        f"Successfully imported: {success_count}",
        f"Failed: {len(errors)}",
    ]
    if errors:
        lines.append("")
        lines.append("Errors:")
        for err in errors[:MAX_REPORTED_ERRORS]:
            lines.append(f"  Row {err.row}: {err.message}")
        if len(errors) > MAX_REPORTED_ERRORS:
            lines.append(f"  ... and {len(errors) - MAX_REPORTED_ERRORS} more errors")
    return "\n".join(lines) + "\n"
