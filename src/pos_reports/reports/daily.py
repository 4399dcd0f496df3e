"""Daily summary payload.

Pure: takes an order snapshot and returns the JSON-shaped report. Every
section is computed from the same snapshot and no section reads another's
output.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from pos_reports.config import ReportConfig
from pos_reports.money import ZERO
from pos_reports.payments.cash import cash_summary, tips_and_cash_balance
from pos_reports.payments.reconcile import reconcile_payments
from pos_reports.sales.buckets import (
    department_section,
    revenue_centers,
    sales_by_daypart,
    sales_by_department,
    sales_by_order_type,
)
from pos_reports.sales.exception_tally import compute_exceptions
from pos_reports.sales.taxes import compute_tax_by_rate, compute_tax_summary
from pos_reports.snapshot.models import OrderSnapshot

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_NAME = "Restaurant"


def build_daily_summary(
    orders: Sequence[OrderSnapshot],
    report_date: date,
    config: ReportConfig | None = None,
    business_name: str | None = None,
) -> dict[str, Any]:
    """Build the daily summary payload.

    Args:
        orders: Orders created on ``report_date`` (items of every status).
        report_date: The reported calendar day.
        config: Bucket tables and tax rate.
        business_name: Display name; "Restaurant" when unknown.

    Returns:
        Dict with ``business_name, report_date, has_activity, sales_by_dept,
        sales_by_daypart, revenue_centers, order_type, exceptions, payments,
        cash_summary, tips_cash_balance, taxes, tax_summary``.
    """
    config = config or ReportConfig()

    departments = sales_by_department(orders)
    dayparts = sales_by_daypart(orders, config)
    has_completed = any(order.is_completed for order in orders)
    has_activity = (
        has_completed
        or departments.totals.gross_sales > ZERO
        or dayparts.totals.gross_sales > ZERO
    )

    payload = {
        "business_name": business_name or DEFAULT_BUSINESS_NAME,
        "report_date": report_date.isoformat(),
        "has_activity": has_activity,
        "sales_by_dept": department_section(departments),
        "sales_by_daypart": dayparts.to_section("dayparts"),
        "revenue_centers": revenue_centers(orders, config).to_section("revenue_centers"),
        "order_type": sales_by_order_type(orders, config).to_section("order_types"),
        "exceptions": compute_exceptions(orders).to_section(),
        "payments": reconcile_payments(orders).to_section(),
        "cash_summary": cash_summary(orders),
        "tips_cash_balance": tips_and_cash_balance(orders),
        "taxes": compute_tax_by_rate(orders, config.tax_rate_percent),
        "tax_summary": compute_tax_summary(orders),
    }
    logger.debug("Daily summary for %s: %s orders, has_activity=%s", report_date, len(orders), has_activity)
    return payload
