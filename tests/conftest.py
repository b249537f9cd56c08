# Shared pytest fixtures
from __future__ import annotations

import csv
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from ledger_import.models.field_spec import AliasEntry, AliasRegistry, EntityDefinition, TargetFieldSpec
from ledger_import.services.transforms import to_amount


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """error_log_dir: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
entities:
  bills:
    table: bills
    fields:
      - field: bill_number
        label: Bill Number
        required: true
        aliases: [Bill No, Bill#]
      - field: total
        label: Total
        aliases: [Amount]
        transform: amount
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_csv(path: Path, rows: list[list[object]]) -> Path:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        for row in rows:
            writer.writerow(row)
    return path


def write_xlsx(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_csv(tmp_path: Path):
    def _make(name: str, rows: list[list[object]]) -> Path:
        return write_csv(tmp_path / name, rows)
    return _make


@pytest.fixture()
def make_xlsx(tmp_path: Path):
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return write_xlsx(tmp_path / name, sheets)
    return _make


@pytest.fixture()
def customer_fields() -> list[TargetFieldSpec]:
    return [
        TargetFieldSpec("name", "Name", required=True),
        TargetFieldSpec("email", "Email"),
        TargetFieldSpec("gstin", "GSTIN"),
    ]


@pytest.fixture()
def customer_aliases() -> list[AliasEntry]:
    return [AliasEntry(aliases=("GST", "GSTIN"), target_field="gstin")]


@pytest.fixture()
def customer_registry(customer_fields, customer_aliases) -> AliasRegistry:
    """Small registry: customers(name*, email, gstin) and payments(ref*, amount)."""
    return AliasRegistry(
        [
            EntityDefinition(
                name="customers",
                table="customers",
                target_fields=tuple(customer_fields),
                aliases=tuple(customer_aliases),
            ),
            EntityDefinition(
                name="payments",
                table="payments",
                target_fields=(
                    TargetFieldSpec("ref", "Reference", required=True),
                    TargetFieldSpec("amount", "Amount"),
                ),
                aliases=(AliasEntry(aliases=("Paid",), target_field="amount", transform=to_amount),),
            ),
        ]
    )


class RecordingInsert:
    """Async insert-one double: records payloads, fails on chosen call numbers."""

    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.records: list[dict] = []
        self.calls = 0

    async def __call__(self, record: dict) -> int:
        self.calls += 1
        if self.calls in self.fail_on:
            raise RuntimeError(f"insert rejected #{self.calls}")
        self.records.append(record)
        return self.calls


@pytest.fixture()
def recording_insert():
    return RecordingInsert
