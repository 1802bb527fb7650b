"""
Reporting Module Service (``shop_modules.reporting.service``).

Responsibility
--------------
Assembles the dashboard, services overview and service detail reports
from a ``ShopSnapshot`` by delegating to the pure functions in
``shop_engines``.  This is a **read-only** service: it never writes to the
store and holds no state between calls apart from its clock and config.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ReportingService`` is the sole public
entry point for report generation.  Constructor: ``clock`` + ``config``.
The snapshot is passed in per call, so one service instance can serve any
number of snapshots (and threads).

Invariants enforced
-------------------
* Every figure of one report is derived from the single snapshot passed in.
* All monetary amounts use ``Decimal`` -- NEVER ``float``; no rounding.
* The month defaults to the injected clock's current month.

Failure modes
-------------
* Malformed month key  -> ``InvalidMonthKeyError`` before any computation.
* Unknown service id in ``service_detail``  -> ``ServiceNotFoundError``.
"""

from __future__ import annotations

from shop_engines import (
    compute_month_totals,
    current_month_key,
    derive_cost_rates,
    entries_for_services,
    fixed_expense_total,
    ids_of,
    labor_totals,
    parse_month_key,
    profit_by_employee,
    profit_by_service,
    profit_trend,
    service_type_breakdown,
    services_in_month,
    summarize_services,
)
from shop_kernel.domain.clock import Clock, SystemClock
from shop_kernel.domain.records import ShopSnapshot
from shop_kernel.exceptions import ServiceNotFoundError
from shop_kernel.logging_config import LogContext, get_logger
from shop_modules.reporting.config import ReportingConfig
from shop_modules.reporting.models import (
    DashboardReport,
    ServiceDetailReport,
    ServicesOverview,
)

logger = get_logger("modules.reporting.service")


class ReportingService:
    """
    Dashboard report generation service.

    Contract
    --------
    * Every public method returns a frozen report DTO.
    * All methods are read-only and safe to call concurrently.

    Non-goals
    ---------
    * Does NOT load snapshots; callers pass one in.
    * Does NOT format numbers for display.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()

        logger.info(
            "reporting_service_initialized",
            extra={
                "top_service_types": self._config.top_service_types,
                "trend_months": self._config.trend_months,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _resolve_month(self, month_key: str | None) -> str:
        if month_key is None:
            return current_month_key(self._clock)
        parse_month_key(month_key)
        return month_key

    def _generated_at(self) -> str:
        return self._clock.now().isoformat()

    # =========================================================================
    # Reports
    # =========================================================================

    def dashboard(
        self,
        snapshot: ShopSnapshot,
        month_key: str | None = None,
    ) -> DashboardReport:
        """Month totals, employee and service breakdowns, and the trend."""
        month_key = self._resolve_month(month_key)
        with LogContext.bind(month_key=month_key):
            rate = snapshot.hourly_rate
            cost_rates = derive_cost_rates(snapshot.employees)
            fixed_total = fixed_expense_total(snapshot.fixed_expenses)
            month_services = services_in_month(snapshot.services, month_key)
            entries = entries_for_services(snapshot.time_entries, ids_of(month_services))

            totals = compute_month_totals(
                month_key=month_key,
                services=snapshot.services,
                entries=snapshot.time_entries,
                cost_rates=cost_rates,
                billing_rate=rate,
                fixed_expenses_total=fixed_total,
            )
            by_employee = profit_by_employee(
                entries=entries,
                employees=snapshot.employees,
                cost_rates=cost_rates,
                billing_rate=rate,
                unknown_name=self._config.unknown_employee_name,
            )
            types = service_type_breakdown(
                month_services=month_services,
                entries=entries,
                services=snapshot.services,
                limit=self._config.top_service_types,
                untyped_label=self._config.untyped_label,
            )
            by_service = profit_by_service(
                month_services=month_services,
                entries=entries,
                cost_rates=cost_rates,
                billing_rate=rate,
            )
            trend = profit_trend(
                month_key=month_key,
                services=snapshot.services,
                entries=snapshot.time_entries,
                cost_rates=cost_rates,
                billing_rate=rate,
                fixed_expenses_total=fixed_total,
                months=self._config.trend_months,
            )

            logger.info(
                "dashboard_generated",
                extra={
                    "service_count": len(month_services),
                    "time_entry_count": len(entries),
                    "net_profit": totals.net_profit,
                    "is_profitable": totals.is_profitable,
                },
            )

        return DashboardReport(
            month_key=month_key,
            hourly_rate=rate,
            generated_at=self._generated_at(),
            totals=totals,
            by_employee=tuple(by_employee),
            top_service_types=tuple(types),
            by_service=tuple(by_service),
            trend=tuple(trend),
        )

    def services_overview(
        self,
        snapshot: ShopSnapshot,
        month_key: str | None = None,
    ) -> ServicesOverview:
        """Per-service labor figures for the month plus their totals."""
        month_key = self._resolve_month(month_key)
        with LogContext.bind(month_key=month_key):
            month_services = services_in_month(snapshot.services, month_key)
            rows = profit_by_service(
                month_services=month_services,
                entries=entries_for_services(snapshot.time_entries, ids_of(month_services)),
                cost_rates=derive_cost_rates(snapshot.employees),
                billing_rate=snapshot.hourly_rate,
            )
            logger.info("services_overview_generated", extra={"service_count": len(rows)})

        return ServicesOverview(
            month_key=month_key,
            generated_at=self._generated_at(),
            rows=tuple(rows),
            summary=summarize_services(rows),
        )

    def service_detail(
        self,
        snapshot: ShopSnapshot,
        service_id: str,
    ) -> ServiceDetailReport:
        """One service with its time entries and labor totals."""
        service = next((s for s in snapshot.services if s.id == service_id), None)
        if service is None:
            logger.warning("service_not_found", extra={"service_id": service_id})
            raise ServiceNotFoundError(service_id)

        entries = entries_for_services(snapshot.time_entries, {service_id})
        totals = labor_totals(
            entries, derive_cost_rates(snapshot.employees), snapshot.hourly_rate,
        )
        logger.info(
            "service_detail_generated",
            extra={"service_id": service_id, "time_entry_count": len(entries)},
        )
        return ServiceDetailReport(
            service=service,
            generated_at=self._generated_at(),
            entries=tuple(entries),
            totals=totals,
        )
