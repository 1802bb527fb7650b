"""Store models for the shop kernel."""

from shop_kernel.models.store import (
    EmployeeModel,
    FixedExpenseModel,
    ServiceModel,
    SettingsModel,
    TimeEntryModel,
)

__all__ = [
    "EmployeeModel",
    "FixedExpenseModel",
    "ServiceModel",
    "SettingsModel",
    "TimeEntryModel",
]
