"""
Reporting Configuration Schema.

Labels and window sizes used when assembling dashboard reports.  Built from
the active ``ShopConfig`` or from plain defaults in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from shop_config.schema import ShopConfig
from shop_engines import TOP_SERVICE_TYPES, TREND_MONTHS, UNKNOWN_EMPLOYEE, UNTYPED
from shop_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls fallback labels and how many rows and months reports carry.
    """

    # Label for services whose type is blank or missing
    untyped_label: str = UNTYPED

    # Name shown for time entries of employees not on the roster
    unknown_employee_name: str = UNKNOWN_EMPLOYEE

    # Rows kept in the service type breakdown
    top_service_types: int = TOP_SERVICE_TYPES

    # Months in the profit trend, ending at the selected month
    trend_months: int = TREND_MONTHS

    def __post_init__(self):
        if self.top_service_types <= 0:
            raise ValueError("top_service_types must be positive")
        if self.trend_months <= 0:
            raise ValueError("trend_months must be positive")
        if not self.untyped_label.strip():
            raise ValueError("untyped_label cannot be blank")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_shop_config(cls, config: ShopConfig) -> Self:
        """Create config from the active shop configuration."""
        logger.info(
            "reporting_config_loading_from_shop_config",
            extra={"config_id": config.config_id, "config_version": config.version},
        )
        return cls(
            untyped_label=config.untyped_label,
            unknown_employee_name=config.unknown_employee_name,
            top_service_types=config.top_service_types,
            trend_months=config.trend_months,
        )
