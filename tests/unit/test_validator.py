from __future__ import annotations

import pytest

from ledger_import.models.row_data import RowData
from ledger_import.services.validator import MISSING_FIELDS_PREFIX, is_blank, validate_rows


def _rows(*values: dict) -> list[RowData]:
    return [RowData(row_number=i, values=v) for i, v in enumerate(values, start=1)]


def test_missing_required_value_is_reported_by_row():
    rows = _rows({"name": "Acme"}, {"name": ""})
    result = validate_rows(rows, ["name"])
    assert [r.row_number for r in result.valid] == [1]
    assert len(result.errors) == 1
    assert result.errors[0].row == 2
    assert result.errors[0].message == "Missing required fields: name"


def test_all_missing_fields_listed_in_declaration_order():
    rows = _rows({"ref": None, "name": "   "})
    result = validate_rows(rows, ["name", "ref"])
    assert result.errors[0].message == MISSING_FIELDS_PREFIX + "name, ref"


def test_labels_replace_keys_when_given():
    rows = _rows({"name": ""})
    result = validate_rows(rows, ["name"], labels={"name": "Customer Name"})
    assert result.errors[0].message == "Missing required fields: Customer Name"


def test_unmapped_required_field_counts_as_missing():
    result = validate_rows(_rows({"email": "a@x.com"}), ["name"])
    assert result.valid == []
    assert result.errors[0].row == 1


@pytest.mark.parametrize("value", [0, 0.0, False, "0", "x"])
def test_falsy_but_present_values_pass(value):
    result = validate_rows(_rows({"qty": value}), ["qty"])
    assert len(result.valid) == 1
    assert result.errors == []


@pytest.mark.parametrize("value,blank", [(None, True), ("", True), (" \t", True), (0, False), (False, False)])
def test_is_blank(value, blank):
    assert is_blank(value) is blank


def test_partition_covers_every_row():
    rows = _rows({"name": "a"}, {"name": ""}, {"name": "c"}, {}, {"name": None})
    result = validate_rows(rows, ["name"])
    assert result.total == len(rows)
    assert len(result.valid) + len(result.errors) == 5
    cited = {e.row for e in result.errors} | {r.row_number for r in result.valid}
    assert cited == {1, 2, 3, 4, 5}


def test_no_required_fields_everything_valid():
    rows = _rows({}, {"x": None})
    result = validate_rows(rows, [])
    assert len(result.valid) == 2
