"""Shift reports: the X-report (mid-shift) and Z-report (end of day).

Unlike the daily summary these reports ignore TEMP and VOID items, include
modifier prices in item totals, subtract refunded payments from net sales
and only count tips on completed payments. Closed orders are the
``completed`` ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence

from pos_reports.config import GratuitySetting, ReportConfig, TipOutRule
from pos_reports.money import HUNDRED, ZERO, quantize, safe_divide, to_fixed2
from pos_reports.payments.cash import (
    cash_balance,
    cash_out,
    cash_summary,
    completed_tips,
    payments_by_mode,
    service_charge_for_order,
    shift_net_sales,
    total_tips,
)
from pos_reports.snapshot.models import OrderSnapshot

logger = logging.getLogger(__name__)

X_REPORT = "X-REPORT"
Z_REPORT = "Z-REPORT"
DEFAULT_BUSINESS_NAME = "RESTAURANT"
UNKNOWN_SERVER = "Unknown"
ALL_SERVERS = "All Servers"


@dataclass
class OrderTotals:
    """Shift totals of a set of orders."""

    net_sales: Decimal = ZERO
    taxes: Decimal = ZERO
    service_charge: Decimal = ZERO
    tips: Decimal = ZERO
    fees: Decimal = ZERO
    guests: int = 0

    @property
    def total(self) -> Decimal:
        return self.net_sales + self.taxes + self.service_charge + self.tips + self.fees

    @property
    def ppa(self) -> Decimal:
        return safe_divide(self.net_sales, self.guests)

    def to_dict(self) -> dict[str, Any]:
        return {
            "guests": self.guests,
            "ppa": to_fixed2(self.ppa),
            "net_sales": to_fixed2(self.net_sales),
            "taxes": to_fixed2(self.taxes),
            "service_charge": to_fixed2(self.service_charge),
            "tips": to_fixed2(self.tips),
            "fees": to_fixed2(self.fees),
            "total": to_fixed2(self.total),
        }


def order_totals(
    orders: Iterable[OrderSnapshot], gratuity_setting: GratuitySetting | None = None
) -> OrderTotals:
    totals = OrderTotals()
    for order in orders:
        net = shift_net_sales(order)
        totals.guests += order.customer_count
        totals.net_sales += net
        totals.taxes += order.tax_value
        totals.fees += order.fee_value
        totals.service_charge += service_charge_for_order(order, net, gratuity_setting)
        totals.tips += completed_tips(order)
    return totals


def sales_summary(
    orders: Sequence[OrderSnapshot], gratuity_setting: GratuitySetting | None = None
) -> dict[str, Any]:
    """Closed, open and combined sales totals."""
    closed = order_totals((o for o in orders if o.is_completed), gratuity_setting)
    open_ = order_totals((o for o in orders if not o.is_completed), gratuity_setting)
    combined = order_totals(orders, gratuity_setting)
    return {
        "closed_orders": closed.to_dict(),
        "open_orders": open_.to_dict(),
        "total_sales": {
            "guests": combined.guests,
            "ppa": to_fixed2(combined.ppa),
            "total_amount": to_fixed2(combined.total),
        },
    }


def server_sales_tips(orders: Iterable[OrderSnapshot], employee_id: int | None = None) -> dict[str, Any]:
    """Net sales and completed tips per creating employee, in first-seen order."""
    servers: dict[int | None, dict[str, Any]] = {}
    for order in orders:
        server_id = order.created_by_employee_id
        if employee_id is not None and server_id != employee_id:
            continue
        if server_id not in servers:
            servers[server_id] = {
                "employee_id": server_id,
                "name": order.created_by_employee or UNKNOWN_SERVER,
                "sales": ZERO,
                "tips": ZERO,
            }
        servers[server_id]["sales"] += shift_net_sales(order)
        servers[server_id]["tips"] += completed_tips(order)

    total_sales = ZERO
    tips = ZERO
    for server in servers.values():
        total_sales += server["sales"]
        tips += server["tips"]
    return {
        "servers": [
            {**server, "sales": to_fixed2(server["sales"]), "tips": to_fixed2(server["tips"])}
            for server in servers.values()
        ],
        "totals": {"sales": to_fixed2(total_sales), "tips": to_fixed2(tips)},
    }


def report_number(report_date: date) -> str:
    """Z-report number ``YYYY-DDD`` (day of year, zero padded).

    Examples:
        >>> report_number(date(2025, 11, 3))
        '2025-307'

    """
    return f"{report_date.year}-{report_date.timetuple().tm_yday:03d}"


def suggested_tip_out(closed_net_sales: Decimal, rules: Sequence[TipOutRule]) -> list[dict[str, str]]:
    base = quantize(closed_net_sales)
    return [
        {
            "role": rule.role,
            "percentage": to_fixed2(rule.percentage),
            "base_amount": to_fixed2(base),
            "tip_out": to_fixed2(base * rule.percentage / HUNDRED),
        }
        for rule in rules
    ]


def build_x_report(
    orders: Sequence[OrderSnapshot],
    report_date: date,
    config: ReportConfig | None = None,
    business_name: str | None = None,
    employee_id: int | None = None,
) -> dict[str, Any]:
    """Build the X-report payload (running totals, nothing is closed out)."""
    config = config or ReportConfig()
    payload = {
        "report_type": X_REPORT,
        "business_name": business_name or DEFAULT_BUSINESS_NAME,
        "report_date": report_date.isoformat(),
        "has_activity": bool(orders),
        "sales_summary": sales_summary(orders, config.gratuity_setting),
        "payments": payments_by_mode(orders),
        "cash_summary": cash_summary(orders),
        "cash_balance": cash_balance(orders, config.gratuity_setting),
        "server_sales_tips": server_sales_tips(orders, employee_id),
    }
    logger.debug("X-report for %s over %s orders", report_date, len(orders))
    return payload


def build_z_report(
    orders: Sequence[OrderSnapshot],
    report_date: date,
    config: ReportConfig | None = None,
    business_name: str | None = None,
    employee_id: int | None = None,
    server_name: str | None = None,
) -> dict[str, Any]:
    """Build the Z-report payload.

    Adds to the X-report the report number, the server's cash out, what is
    owed to the restaurant, total tips and the suggested tip-out.
    """
    config = config or ReportConfig()
    payload = build_x_report(orders, report_date, config, business_name, employee_id)
    closed = order_totals((o for o in orders if o.is_completed), config.gratuity_setting)
    out = cash_out(orders, config.gratuity_setting)

    payload["report_type"] = Z_REPORT
    payload["report_number"] = report_number(report_date)
    if server_name is None:
        server_name = ALL_SERVERS if employee_id is None else UNKNOWN_SERVER
    payload["server_name"] = server_name
    payload["cash_out"] = out.to_dict()
    payload["total_owed_to_restaurant"] = to_fixed2(out.total_owed_to_restaurant)
    payload["total_tips"] = to_fixed2(total_tips(orders))
    payload["suggested_tip_out"] = suggested_tip_out(closed.net_sales, config.tip_out_rules)
    return payload
