from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import IO, Any

import pandas as pd

"""Upload reader: CSV and spreadsheet workbooks -> ordered raw rows.

- csv: comma-delimited, first line is the header row, blank lines skipped,
  cell values kept as the strings found in the file.
- xls / xlsx: first sheet only, first row is the header row, rows that are
  entirely empty are skipped, typed cells (numbers, booleans, dates) kept
  without column-wide upcasting (an integer stays an int next to blanks).

Columns whose header cell is blank are dropped.

Rows are returned as read-only mappings; downstream stages derive new
structures and never write back into them.
"""

__all__ = [
    "FileParseError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "ParsedFile",
    "SUPPORTED_EXTENSIONS",
    "file_extension",
    "parse_import_file",
    "read_csv_rows",
    "read_workbook_rows",
]

SUPPORTED_EXTENSIONS = ("csv", "xls", "xlsx")

Source = str | Path | IO[bytes]

_UNNAMED = re.compile(r"^Unnamed: \d+(?:_level_\d+)?$")


class FileParseError(Exception):
    """Raised when an uploaded file cannot be turned into rows."""


class UnsupportedFormatError(FileParseError):
    """Raised for extensions other than csv / xls / xlsx."""

    def __init__(self, message: str = "Unsupported file type. Please use CSV, XLS, or XLSX files.") -> None:
        super().__init__(message)


class EmptyFileError(FileParseError):
    """Raised when the file parses but holds no data rows."""

    def __init__(self, message: str = "File is empty") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class ParsedFile:
    filename: str
    headers: tuple[str, ...]  # keys of the first row, in order
    rows: tuple[Mapping[str, Any], ...]  # file order

    def __len__(self) -> int:
        return len(self.rows)


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lstrip(".").lower()


def _cell(value: Any) -> Any:
    # NaN / NaT -> None; everything else as found
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    return value


def _frame_to_rows(df: pd.DataFrame) -> tuple[list[str], list[Mapping[str, Any]]]:
    # blank header cells come back as "Unnamed: N"; such columns cannot be mapped
    blank = [c for c in df.columns if _UNNAMED.match(str(c))]
    if blank:
        df = df.drop(columns=blank)
    columns = [str(c).strip() for c in df.columns]
    rows: list[Mapping[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        row = {col: _cell(val) for col, val in zip(columns, raw, strict=False)}
        rows.append(MappingProxyType(row))
    return columns, rows


def read_csv_rows(source: Source) -> tuple[list[str], list[Mapping[str, Any]]]:
    """Read a CSV upload. All cells stay strings; empty cells become ""."""
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as e:
        raise EmptyFileError() from e
    except ValueError as e:  # ParserError, UnicodeDecodeError
        raise FileParseError(f"failed to parse CSV: {e}") from e
    except OSError as e:
        raise FileParseError(f"failed to open CSV: {e}") from e
    return _frame_to_rows(df)


def read_workbook_rows(source: Source) -> tuple[list[str], list[Mapping[str, Any]]]:
    """Read the first sheet of an xls/xlsx upload (header = first row)."""
    try:
        df = pd.read_excel(source, sheet_name=0, header=0, dtype=object)
    except Exception as e:  # engine specific (BadZipFile, XLRDError, ValueError, ...)
        raise FileParseError(f"failed to read workbook: {e}") from e
    # Skip rows with no content at all
    df = df.dropna(how="all")
    return _frame_to_rows(df)


def parse_import_file(source: Source, filename: str | None = None) -> ParsedFile:
    """Parse an uploaded file into ordered raw rows.

    Parameters
    ----------
    source: path or binary file object
    filename: declared file name; its extension selects the reader
        (defaults to the path's name when source is a path)

    Raises
    ------
    UnsupportedFormatError: extension is not csv / xls / xlsx
    EmptyFileError: no data rows
    FileParseError: the underlying parser failed
    """
    if filename is None:
        if not isinstance(source, (str, Path)):
            raise FileParseError("filename is required when reading from a file object")
        filename = Path(source).name

    ext = file_extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError()

    if ext == "csv":
        _, rows = read_csv_rows(source)
    else:
        _, rows = read_workbook_rows(source)

    if not rows:
        raise EmptyFileError()

    headers = tuple(rows[0].keys())
    return ParsedFile(filename=filename, headers=headers, rows=tuple(rows))
