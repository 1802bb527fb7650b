#!/usr/bin/env python3
"""
View the monthly profitability dashboard.

Reads a snapshot either from a JSON export (``--snapshot``) or from the
configured database, then prints month totals, per-employee and per-service
profit, the busiest service types and the profit trend.

Usage:
    python3 scripts/view_dashboard.py --snapshot export.json --month 2024-03
    python3 scripts/view_dashboard.py --db-url sqlite:///shop.db
"""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 78


# =============================================================================
# Formatting
# =============================================================================

def hline(char: str = "=") -> str:
    return char * W


def fmt_money(v: Decimal) -> str:
    """Format a Decimal as 1,234.56 with negatives in parentheses."""
    formatted = f"{abs(v):,.2f}"
    return f"({formatted})" if not v.is_nan() and v < 0 else f" {formatted} "


def fmt_hours(v: Decimal) -> str:
    return f"{v:,.1f}h"


def print_dashboard(report) -> None:
    t = report.totals
    print(hline())
    print(f"  PROFITABILITY DASHBOARD  {report.month_key}".center(W))
    print(hline())
    print(f"  {'Hourly rate':<28}{fmt_money(report.hourly_rate):>20}")
    print(f"  {'Hours worked':<28}{fmt_hours(t.total_hours):>19}")
    print(f"  {'Revenue':<28}{fmt_money(t.revenue):>20}")
    print(f"  {'Labor cost':<28}{fmt_money(t.cost):>20}")
    print(f"  {'Fixed expenses':<28}{fmt_money(t.fixed_expenses):>20}")
    print(hline("-"))
    status = "PROFITABLE" if t.is_profitable else "LOSS"
    print(f"  {'Net profit':<28}{fmt_money(t.net_profit):>20}   [{status}]")
    print()

    print(hline("-"))
    print("  BY EMPLOYEE")
    print(hline("-"))
    if not report.by_employee:
        print("  (no hours booked)")
    for row in report.by_employee:
        print(
            f"  {row.name[:22]:<22} {row.role[:12]:<12}"
            f"{fmt_hours(row.hours):>9}{fmt_money(row.revenue):>15}{fmt_money(row.profit):>15}"
        )
    print()

    print(hline("-"))
    print("  SERVICE TYPES")
    print(hline("-"))
    for row in report.top_service_types:
        print(f"  {row.service_type[:34]:<34}{row.count:>6}{fmt_hours(row.hours):>12}")
    print()

    print(hline("-"))
    print("  SERVICES")
    print(hline("-"))
    for row in report.by_service:
        label = row.service_no or row.service_id
        print(
            f"  {label[:14]:<14} {(row.plate or '')[:10]:<10}"
            f"{fmt_hours(row.hours):>9}{fmt_money(row.revenue):>15}{fmt_money(row.profit):>15}"
        )
    print()

    print(hline("-"))
    print("  TREND")
    print(hline("-"))
    for point in report.trend:
        print(
            f"  {point.month_key:<10}{fmt_money(point.revenue):>15}"
            f"{fmt_money(point.cost):>15}{fmt_money(point.net_profit):>15}"
        )
    print()


# =============================================================================
# Main
# =============================================================================

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Print the monthly labor profitability dashboard.",
    )
    parser.add_argument(
        "--snapshot", type=Path,
        help="JSON export of the five tables; the database is used when omitted",
    )
    parser.add_argument(
        "--month", type=str, default=None,
        help="Month as YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Configuration YAML (default: SHOP_CONFIG_PATH or bundled default)",
    )
    parser.add_argument(
        "--db-url", type=str, default=None,
        help="Database URL (default: database.url from the configuration)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Output the dashboard as JSON",
    )
    args = parser.parse_args(argv)

    import yaml

    from shop_config import get_active_config, log_level_value
    from shop_ingestion import JsonSnapshotAdapter, build_snapshot, load_snapshot
    from shop_kernel.db.engine import init_engine_from_url, session_scope
    from shop_kernel.domain.clock import SystemClock
    from shop_kernel.exceptions import ShopKernelError
    from shop_kernel.logging_config import configure_logging
    from shop_modules.reporting import ReportingConfig, ReportingService, render_to_dict

    try:
        config = get_active_config(args.config)
    except (OSError, yaml.YAMLError, ShopKernelError) as exc:
        print(f"  ERROR: Cannot load configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(level=log_level_value(config))

    try:
        if args.snapshot is not None:
            rows = JsonSnapshotAdapter().read(args.snapshot)
            snapshot = build_snapshot(rows, config.default_hourly_rate)
        else:
            db_url = args.db_url or config.database_url
            if not db_url:
                print("  ERROR: No database URL configured.", file=sys.stderr)
                return 1
            # Suppress noisy library logging during DB init
            logging.disable(logging.CRITICAL)
            try:
                init_engine_from_url(db_url, echo=False)
            finally:
                logging.disable(logging.NOTSET)
            with session_scope() as session:
                snapshot = load_snapshot(session, config.default_hourly_rate)

        service = ReportingService(
            clock=SystemClock(),
            config=ReportingConfig.from_shop_config(config),
        )
        report = service.dashboard(snapshot, args.month)
    except (OSError, ShopKernelError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(render_to_dict(report), indent=2))
    else:
        print_dashboard(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
