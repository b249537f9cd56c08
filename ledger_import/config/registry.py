from __future__ import annotations

from collections.abc import Iterable

from ledger_import.models.config_models import EntityConfig, ImportConfig
from ledger_import.models.field_spec import AliasEntry, AliasRegistry, EntityDefinition, TargetFieldSpec
from ledger_import.services.transforms import TRANSFORMS

"""Built-in entity definitions and registry construction.

The defaults cover the entity types exported by common bookkeeping tools
(customers, vendors, items, invoices, invoice line items). Header aliases are
the column titles those exports use. Configured entities (config/import.yml)
are merged over the defaults by build_registry().
"""

__all__ = [
    "DEFAULT_ENTITIES",
    "default_registry",
    "entity_from_config",
    "build_registry",
    "RegistryError",
]


class RegistryError(Exception):
    pass


def _entity(
    name: str,
    table: str,
    fields: list[tuple[str, str, bool, list[str], str | None]],
    samples: list[dict[str, str]] | None = None,
) -> EntityDefinition:
    targets = []
    aliases = []
    for field, label, required, spellings, transform in fields:
        targets.append(TargetFieldSpec(field=field, label=label, required=required))
        aliases.append(
            AliasEntry(
                aliases=tuple(spellings),
                target_field=field,
                required=required,
                transform=TRANSFORMS[transform] if transform else None,
            )
        )
    return EntityDefinition(
        name=name,
        table=table,
        target_fields=tuple(targets),
        aliases=tuple(aliases),
        sample_rows=tuple(samples or ()),
    )


_CONTACT_PHONE = ["Phone", "Phone Number", "Mobile", "Contact Number"]
_CONTACT_ADDRESS = ["Billing Address", "Address", "Street Address"]
_CONTACT_GSTIN = ["GSTIN", "GST Number", "GST No", "GST", "Tax Number"]

DEFAULT_ENTITIES: tuple[EntityDefinition, ...] = (
    _entity(
        "clients",
        "clients",
        [
            ("name", "Customer Name", True, ["Customer Name", "Name", "Customer"], None),
            ("email", "Email", False, ["Email", "Email Address", "Customer Email"], None),
            ("phone", "Phone", False, _CONTACT_PHONE, None),
            ("address", "Address", False, _CONTACT_ADDRESS, None),
            ("gstin", "GSTIN", False, _CONTACT_GSTIN, None),
        ],
        samples=[
            {"Customer Name": "Acme Corp", "Email": "contact@acme.com", "Phone": "9876543210",
             "Address": "123 Main St, Mumbai", "GSTIN": "27AABCU9603R1ZM"},
            {"Customer Name": "Beta Industries", "Email": "info@beta.in", "Phone": "9123456789",
             "Address": "456 Park Ave, Delhi", "GSTIN": ""},
        ],
    ),
    _entity(
        "vendors",
        "vendors",
        [
            ("name", "Vendor Name", True, ["Vendor Name", "Name", "Supplier Name"], None),
            ("email", "Email", False, ["Email", "Email Address", "Vendor Email"], None),
            ("phone", "Phone", False, _CONTACT_PHONE, None),
            ("address", "Address", False, ["Address", "Billing Address", "Street Address"], None),
            ("gstin", "GSTIN", False, _CONTACT_GSTIN, None),
        ],
        samples=[
            {"Vendor Name": "Supply Co", "Email": "sales@supply.com", "Phone": "9876543210",
             "Address": "789 Industrial Area", "GSTIN": "29AABCS1429B1Z9"},
            {"Vendor Name": "Parts Ltd", "Email": "orders@parts.in", "Phone": "9123456789",
             "Address": "101 Factory Lane", "GSTIN": ""},
        ],
    ),
    _entity(
        "items",
        "items",
        [
            ("name", "Item Name", True, ["Item Name", "Name", "Product Name"], None),
            ("sku", "SKU", False, ["SKU", "Item Code", "Product Code", "Code"], None),
            ("rate", "Rate", False, ["Rate", "Price", "Selling Price", "Unit Price"], "number"),
            ("description", "Description", False,
             ["Description", "Item Description", "Product Description"], None),
            ("type", "Type (goods/service)", False, ["Product Type", "Type", "Item Type"], "product_type"),
            ("taxable", "Taxable", False, ["Is Taxable", "Taxable", "Tax"], "yes_no"),
        ],
        samples=[
            {"Item Name": "Widget A", "SKU": "WGT-001", "Rate": "1500", "Description": "Standard widget",
             "Product Type": "goods", "Is Taxable": "Yes"},
            {"Item Name": "Consulting Service", "SKU": "SVC-001", "Rate": "5000",
             "Description": "Per hour consulting", "Product Type": "service", "Is Taxable": "Yes"},
        ],
    ),
    _entity(
        "invoices",
        "invoices",
        [
            ("invoice_number", "Invoice Number", True,
             ["Invoice Number", "Invoice#", "Invoice No", "Invoice"], None),
            ("customer_name", "Customer Name", True,
             ["Customer Name", "Client Name", "Customer", "Client"], None),
            ("date_issued", "Invoice Date", False,
             ["Invoice Date", "Date", "Issue Date", "Created Date"], "date_or_today"),
            ("due_date", "Due Date", False, ["Due Date", "Payment Due Date"], "due_date"),
            ("total_amount", "Total", False,
             ["Total", "Amount", "Invoice Total", "Grand Total", "Total Amount"], "amount"),
            ("status", "Status", False, ["Status", "Invoice Status", "Payment Status"], "invoice_status"),
            ("notes", "Notes", False, ["Notes", "Customer Notes", "Invoice Notes", "Memo"], None),
        ],
    ),
    _entity(
        "invoice_items",
        "invoice_items",
        [
            ("invoice_number", "Invoice Number", True, ["Invoice Number", "Invoice#", "Invoice No"], None),
            ("description", "Item", True,
             ["Item Name", "Product Name", "Item", "Description", "Item Description"], None),
            ("quantity", "Quantity", False, ["Quantity", "Qty"], "quantity"),
            ("rate", "Rate", False, ["Rate", "Price", "Unit Price"], "amount"),
            ("tax_percent", "Tax %", False, ["Tax", "Tax %", "Tax Rate", "Tax Percent", "GST %"], "percent"),
            ("total", "Amount", False, ["Amount", "Total", "Line Total", "Item Total"], "amount"),
        ],
    ),
)


def default_registry() -> AliasRegistry:
    return AliasRegistry(DEFAULT_ENTITIES)


def entity_from_config(entity: EntityConfig) -> EntityDefinition:
    """Resolve transform names of a configured entity into an EntityDefinition."""
    targets = []
    aliases = []
    for f in entity.fields:
        transform = None
        if f.transform:
            try:
                transform = TRANSFORMS[f.transform]
            except KeyError:
                raise RegistryError(
                    f"entity '{entity.name}' field '{f.field}': unknown transform '{f.transform}'"
                ) from None
        targets.append(TargetFieldSpec(field=f.field, label=f.label, required=f.required))
        if f.aliases or transform is not None:
            aliases.append(
                AliasEntry(
                    aliases=tuple(f.aliases),
                    target_field=f.field,
                    required=f.required,
                    transform=transform,
                )
            )
    return EntityDefinition(
        name=entity.name,
        table=entity.table,
        target_fields=tuple(targets),
        aliases=tuple(aliases),
        sample_rows=tuple(entity.samples),
    )


def build_registry(
    config: ImportConfig | None = None,
    base: Iterable[EntityDefinition] = DEFAULT_ENTITIES,
) -> AliasRegistry:
    """Built-in definitions with configured entities replacing same-named ones."""
    registry = AliasRegistry(base)
    if config is None or not config.entities:
        return registry
    return registry.merged(entity_from_config(e) for e in config.entities.values())
