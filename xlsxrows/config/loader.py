from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Parser configuration loader.

Responsibilities:
- Load a YAML parser config (e.g. ``config/xlsxrows.yml``)
- Validate it against ``parser_config.schema.json`` (no extra keys)
- Apply defaults for anything not given
- Apply environment overrides (``XLSXROWS_TMP_DIR``)
"""

__all__ = [
    "ConfigError",
    "ParserConfig",
    "load_config",
    "apply_env_overrides",
    "SCHEMA_PATH",
    "TMP_DIR_ENV",
]

SCHEMA_PATH = Path(__file__).parent / "parser_config.schema.json"
TMP_DIR_ENV = "XLSXROWS_TMP_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ParserConfig:
    sheet: int = 1  # 1-based worksheet number
    has_header_row: bool = True
    header_overrides: dict[int | str, str] = field(default_factory=dict)  # column (index or letters) -> name
    row_numbers: bool = False  # add __row_number to each row
    tmp_dir: str | None = None  # base extraction directory; None -> system temp dir


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ParserConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    # YAML turns `0: id` into an int key; the schema checks keys as strings.
    overrides = data.get("header_overrides")
    if isinstance(overrides, dict):
        data["header_overrides"] = {str(k): v for k, v in overrides.items()}

    _validate_config_schema(data)

    return ParserConfig(
        sheet=data.get("sheet", 1),
        has_header_row=data.get("has_header_row", True),
        header_overrides=data.get("header_overrides", {}),
        row_numbers=data.get("row_numbers", False),
        tmp_dir=data.get("tmp_dir"),
    )


def apply_env_overrides(cfg: ParserConfig) -> ParserConfig:
    """Return ``cfg`` with environment settings applied (environment wins)."""
    tmp_dir = os.getenv(TMP_DIR_ENV)
    if tmp_dir:
        return replace(cfg, tmp_dir=tmp_dir)
    return cfg
