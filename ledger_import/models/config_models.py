from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Config dataclasses for the tabular import tool.

These are the typed form of config/import.yml as returned by
ledger_import.config.loader.load_config. Entity declarations stay close to the
YAML shape here; ledger_import.config.registry turns them into
EntityDefinition objects once transform names have been resolved.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class FieldConfig:
    """One target field of a configured entity."""
    field: str
    label: str
    required: bool = False
    aliases: tuple[str, ...] = ()
    transform: str | None = None  # name in ledger_import.services.transforms.TRANSFORMS


@dataclass(frozen=True)
class EntityConfig:
    """Configured entity type: target table plus ordered field list."""
    name: str
    table: str
    fields: tuple[FieldConfig, ...]
    samples: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import tool."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    error_log_dir: str = "./logs"  # errors-YYYYMMDD-HHMMSS.log destination
    entities: dict[str, EntityConfig] = field(default_factory=dict)
