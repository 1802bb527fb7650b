"""
Configuration Schema (``shop_config.schema``).

Frozen dataclass shapes for the parsed YAML configuration.  Pure data;
parsing and validation live in ``shop_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ShopConfig:
    """Runtime configuration for the profitability dashboard."""

    config_id: str
    version: int
    # Billing rate used when the settings row is missing or unusable
    default_hourly_rate: Decimal
    untyped_label: str = "Untyped"
    unknown_employee_name: str = "Unknown"
    top_service_types: int = 10
    trend_months: int = 6
    database_url: str | None = None
    log_level: str = "INFO"
    checksum: str = ""
