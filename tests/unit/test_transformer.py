from __future__ import annotations

import math
from types import MappingProxyType

from ledger_import.models.field_spec import AliasEntry, FieldMapping
from ledger_import.services.transformer import is_present, transform_rows
from ledger_import.services.transforms import to_amount, to_quantity


def test_is_present():
    assert not is_present(None)
    assert not is_present("")
    assert not is_present(math.nan)
    assert is_present(0)
    assert is_present(False)
    assert is_present(" ")


def test_only_mapped_fields_are_populated():
    rows = [{"Customer Name": "Acme", "Email": "a@x.com", "Notes": "vip"}]
    mappings = [FieldMapping("Customer Name", "name"), FieldMapping("Email", "email")]
    out = transform_rows(rows, mappings)
    assert out[0].values == {"name": "Acme", "email": "a@x.com"}
    assert out[0].row_number == 1


def test_output_has_one_row_per_input_in_order():
    rows = [{"Name": str(i)} for i in range(5)]
    out = transform_rows(rows, [FieldMapping("Name", "name")])
    assert [r.row_number for r in out] == [1, 2, 3, 4, 5]
    assert [r.values["name"] for r in out] == ["0", "1", "2", "3", "4"]


def test_transform_runs_on_present_values_only():
    calls = []

    def spy(value):
        calls.append(value)
        return to_amount(value)

    rows = [{"Paid": "₹1,200"}, {"Paid": ""}, {"Paid": None}, {}]
    aliases = [AliasEntry(aliases=("Paid",), target_field="amount", transform=spy)]
    out = transform_rows(rows, [FieldMapping("Paid", "amount")], aliases)
    assert [r.values["amount"] for r in out] == [1200.0, "", None, None]
    assert calls == ["₹1,200"]


def test_missing_values_are_not_defaulted():
    aliases = [AliasEntry(aliases=("Qty",), target_field="quantity", transform=to_quantity)]
    out = transform_rows([{"Qty": None}], [FieldMapping("Qty", "quantity")], aliases)
    assert out[0].values["quantity"] is None


def test_raw_rows_are_not_mutated():
    raw = MappingProxyType({"Paid": "$5"})
    aliases = [AliasEntry(aliases=("Paid",), target_field="amount", transform=to_amount)]
    out = transform_rows([raw], [FieldMapping("Paid", "amount")], aliases)
    assert raw["Paid"] == "$5"
    assert out[0].raw_values is raw
    assert out[0].values == {"amount": 5.0}


def test_no_mappings_gives_empty_values():
    out = transform_rows([{"A": 1}, {"A": 2}], [])
    assert [r.values for r in out] == [{}, {}]
