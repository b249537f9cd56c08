from __future__ import annotations

from pathlib import Path

import pytest

from ledger_import.cli import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from ledger_import.cli import main as cli_main
from ledger_import.logging.init import reset_logging

"""Exit code contract: 0 all rows imported, 2 some rows skipped or failed, 1 fatal."""


@pytest.fixture(autouse=True)
def _clean_logging(monkeypatch):
    reset_logging()
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    yield
    reset_logging()


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_code_fatal_startup(write_config: Path, capsys):
    write_config.write_text("entities: 3\n", encoding="utf-8")
    assert cli_main(["clients", "any.csv"]) == EXIT_FATAL
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, make_csv):
    src = make_csv("vendors.csv", [["Vendor Name", "Email"], ["Supply Co", "s@x.com"]])
    assert cli_main(["vendors", str(src), "--dry-run"]) == EXIT_SUCCESS_ALL


def test_exit_code_partial_failure(temp_workdir: Path, make_csv):
    src = make_csv("vendors.csv", [["Vendor Name", "Email"], ["Supply Co", "s@x.com"], ["", "x@x.com"]])
    assert cli_main(["vendors", str(src), "--dry-run"]) == EXIT_PARTIAL_FAILURE


def test_exit_code_empty_file(temp_workdir: Path, make_csv):
    src = make_csv("vendors.csv", [["Vendor Name", "Email"]])
    assert cli_main(["vendors", str(src), "--dry-run"]) == EXIT_FATAL
