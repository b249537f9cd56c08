from __future__ import annotations

import pytest

from ledger_import.db.records import prepare_record


@pytest.mark.parametrize("entity", ["clients", "vendors"])
def test_contact_record(entity):
    record = prepare_record(entity, {"name": "  Acme  ", "email": " ", "gstin": " 27aabcu9603r1zm "})
    assert record == {
        "name": "Acme",
        "email": None,
        "phone": None,
        "address": None,
        "gstin": "27AABCU9603R1ZM",
    }


def test_item_record_defaults():
    record = prepare_record("items", {"name": "Widget"})
    assert record == {
        "name": "Widget",
        "sku": None,
        "rate": 0.0,
        "description": None,
        "type": "goods",
        "taxable": False,
    }


def test_item_record_with_transformed_values():
    record = prepare_record("items", {"name": "Consulting", "rate": 5000.0, "type": "service", "taxable": True})
    assert record["rate"] == 5000.0
    assert record["type"] == "service"
    assert record["taxable"] is True


def test_item_record_untransformed_strings():
    record = prepare_record("items", {"name": "W", "rate": "12.5 per unit", "taxable": "Yes"})
    assert record["rate"] == 12.5
    assert record["taxable"] is True


def test_other_entities_pass_through():
    values = {"invoice_number": "INV-1", "total_amount": 10.0}
    record = prepare_record("invoices", values)
    assert record == values
    assert record is not values
