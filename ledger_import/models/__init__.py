"""Domain models for the tabular import tool.

This package contains the dataclasses shared by the parser, the mapping
services, the wizard and the CLI.
"""

from .config_models import DatabaseConfig, EntityConfig, FieldConfig, ImportConfig
from .field_spec import (
    NONE_SENTINEL,
    AliasEntry,
    AliasRegistry,
    EntityDefinition,
    FieldMapping,
    TargetFieldSpec,
    UnknownEntityError,
)
from .import_outcome import ImportOutcome, RowOutcome, ValidationError, ValidationResult
from .row_data import RowData
from .wizard_step import WizardStep

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "EntityConfig",
    "FieldConfig",
    "ImportConfig",
    # Field declarations
    "NONE_SENTINEL",
    "AliasEntry",
    "AliasRegistry",
    "EntityDefinition",
    "FieldMapping",
    "TargetFieldSpec",
    "UnknownEntityError",
    # Processing models
    "RowData",
    "ValidationError",
    "ValidationResult",
    "RowOutcome",
    "ImportOutcome",
    "WizardStep",
]
