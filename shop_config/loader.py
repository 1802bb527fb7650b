"""
Configuration Loader (``shop_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a frozen
``ShopConfig``.  The single public entry point for runtime config is
``shop_config.get_active_config()``; this module is its implementation.

Invariants enforced
-------------------
* Every validation problem is collected and reported together in one
  ``InvalidConfigError``; no silent defaults for required keys.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Structurally or semantically invalid document -> ``InvalidConfigError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from shop_config.schema import ShopConfig
from shop_kernel.exceptions import InvalidConfigError

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _section(data: dict[str, Any], name: str, errors: list[str]) -> dict[str, Any]:
    section = data.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        errors.append(f"'{name}' must be a mapping")
        return {}
    return section


def _positive_int(section: dict[str, Any], key: str, default: int, errors: list[str]) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        errors.append(f"'{key}' must be a positive integer, got {value!r}")
        return default
    return value


def parse_config(data: Any, source: str = "<memory>") -> ShopConfig:
    """Validate a parsed YAML document and build a ShopConfig."""
    if not isinstance(data, dict):
        raise InvalidConfigError(source, ["top level must be a mapping"])

    errors: list[str] = []

    config_id = data.get("config_id")
    if not isinstance(config_id, str) or not config_id.strip():
        errors.append("'config_id' is required")
    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        errors.append("'version' must be an integer")

    billing = _section(data, "billing", errors)
    reporting = _section(data, "reporting", errors)
    database = _section(data, "database", errors)
    log_section = _section(data, "logging", errors)

    rate: Decimal | None = None
    raw_rate = billing.get("default_hourly_rate")
    try:
        rate = Decimal(str(raw_rate)) if raw_rate is not None else None
    except InvalidOperation:
        rate = None
    if rate is None or not rate.is_finite() or rate <= 0:
        errors.append(
            f"'billing.default_hourly_rate' must be a positive number, got {raw_rate!r}"
        )

    untyped_label = str(reporting.get("untyped_label", "Untyped")).strip()
    if not untyped_label:
        errors.append("'reporting.untyped_label' must not be blank")
    unknown_name = str(reporting.get("unknown_employee_name", "Unknown"))
    top_types = _positive_int(reporting, "top_service_types", 10, errors)
    trend_months = _positive_int(reporting, "trend_months", 6, errors)

    database_url = database.get("url")
    if database_url is not None and not isinstance(database_url, str):
        errors.append("'database.url' must be a string")

    log_level = str(log_section.get("level", "INFO")).upper()
    if log_level not in _VALID_LOG_LEVELS:
        errors.append(f"'logging.level' must be one of {', '.join(_VALID_LOG_LEVELS)}")

    if errors:
        raise InvalidConfigError(source, errors)

    return ShopConfig(
        config_id=config_id,
        version=version,
        default_hourly_rate=rate,
        untyped_label=untyped_label,
        unknown_employee_name=unknown_name,
        top_service_types=top_types,
        trend_months=trend_months,
        database_url=database_url,
        log_level=log_level,
        checksum=compute_checksum(data),
    )


def load_config_file(path: Path) -> ShopConfig:
    """Read and parse one YAML configuration file."""
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_config(data, source=str(path))


def log_level_value(config: ShopConfig) -> int:
    """Numeric logging level for ``configure_logging``."""
    return logging.getLevelName(config.log_level)
