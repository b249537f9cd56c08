from __future__ import annotations

from collections.abc import Iterable, Sequence

from ledger_import.models.field_spec import NONE_SENTINEL, FieldMapping, TargetFieldSpec

"""Mapping editor: the confirmed source -> target mapping of one session.

Edits are per target field, so each target field holds at most one mapping at
any time. The editor performs no I/O and no value transformation.
"""

__all__ = [
    "MappingError",
    "MappingEditor",
]


class MappingError(ValueError):
    """Raised for an unknown target field or source column."""


class MappingEditor:
    def __init__(
        self,
        target_fields: Sequence[TargetFieldSpec],
        source_columns: Sequence[str] | None = None,
        proposed: Iterable[FieldMapping] = (),
    ) -> None:
        self._targets = {t.field: t for t in target_fields}
        self._target_order = [t.field for t in target_fields]
        self._sources = list(source_columns) if source_columns is not None else None
        self._mappings: list[FieldMapping] = []
        # proposals apply in order: the last one for a target wins
        for m in proposed:
            self.set_mapping(m.target_field, m.source_field)

    @property
    def mappings(self) -> tuple[FieldMapping, ...]:
        return tuple(self._mappings)

    @property
    def source_columns(self) -> list[str] | None:
        return list(self._sources) if self._sources is not None else None

    def set_mapping(self, target_field: str, source_field: str | None) -> None:
        """Map `target_field` to `source_field`; "none" or None unmaps it."""
        if target_field not in self._targets:
            raise MappingError(f"unknown target field: {target_field}")
        unmap = source_field is None or source_field == NONE_SENTINEL or source_field == ""
        if not unmap and self._sources is not None and source_field not in self._sources:
            raise MappingError(f"unknown source column: {source_field}")

        self._mappings = [m for m in self._mappings if m.target_field != target_field]
        if not unmap:
            self._mappings.append(FieldMapping(source_field=source_field, target_field=target_field))

    def is_mapped(self, target_field: str) -> bool:
        return any(m.target_field == target_field for m in self._mappings)

    def mapped_source(self, target_field: str) -> str:
        for m in self._mappings:
            if m.target_field == target_field:
                return m.source_field
        return NONE_SENTINEL

    def missing_required(self) -> list[str]:
        return [
            f for f in self._target_order
            if self._targets[f].required and not self.is_mapped(f)
        ]

    def all_required_mapped(self) -> bool:
        return not self.missing_required()

    def as_dict(self) -> dict[str, str]:
        """target field -> source column, in target declaration order."""
        return {
            f: self.mapped_source(f) for f in self._target_order if self.is_mapped(f)
        }
