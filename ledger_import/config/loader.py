from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ledger_import.models.config_models import DatabaseConfig, EntityConfig, FieldConfig, ImportConfig
from ledger_import.services.transforms import TRANSFORMS

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate it against the JSON schema shipped next to this module
- Apply defaults (error_log_dir=./logs, label=field, required=false)
- Reject transform names that are not registered
"""

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except SchemaValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _entity_config(name: str, raw: dict[str, Any]) -> EntityConfig:
    fields = []
    for f in raw["fields"]:
        transform = f.get("transform")
        if transform and transform not in TRANSFORMS:
            raise ConfigError(
                f"entity '{name}' field '{f['field']}': unknown transform '{transform}' "
                f"(available: {', '.join(sorted(TRANSFORMS))})"
            )
        fields.append(
            FieldConfig(
                field=f["field"],
                label=f.get("label") or f["field"],
                required=bool(f.get("required", False)),
                aliases=tuple(f.get("aliases") or ()),
                transform=transform,
            )
        )
    return EntityConfig(
        name=name,
        table=raw.get("table", name),
        fields=tuple(fields),
        samples=tuple(raw.get("samples") or ()),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    entities = {
        name: _entity_config(name, raw) for name, raw in (data.get("entities") or {}).items()
    }
    return ImportConfig(
        database=db,
        error_log_dir=data.get("error_log_dir", "./logs"),
        entities=entities,
    )
