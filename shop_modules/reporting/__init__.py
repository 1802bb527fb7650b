"""
Shop Reporting Module (``shop_modules.reporting``).

Responsibility
--------------
Read-only module that turns a ``ShopSnapshot`` into the dashboard, the
services overview and the service detail report.  All figures come from
the pure functions in ``shop_engines``.
"""

from shop_modules.reporting.config import ReportingConfig
from shop_modules.reporting.models import (
    DashboardReport,
    ServiceDetailReport,
    ServicesOverview,
    render_to_dict,
)
from shop_modules.reporting.service import ReportingService

__all__ = [
    "DashboardReport",
    "ReportingConfig",
    "ReportingService",
    "ServiceDetailReport",
    "ServicesOverview",
    "render_to_dict",
]
