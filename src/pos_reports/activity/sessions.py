"""Activity Session Analyzer.

Summarises how employees worked orders, from order access-log sessions. A
session is either open (no end date yet) or closed with a whole-minute
duration; only closed sessions contribute time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from pos_reports.money import ZERO, safe_divide, sum_money, to_fixed2
from pos_reports.sales.buckets import to_local
from pos_reports.sales.classify import classify, order_item_count, order_net
from pos_reports.snapshot.models import (
    AccessLogRecord,
    ClosedSession,
    ItemStatus,
    OrderSnapshot,
    PaymentRecord,
)

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = Decimal("60")
UNKNOWN_EMPLOYEE = "Unknown Employee"
UNKNOWN = "Unknown"
NO_TABLE = "N/A"
OPEN = "Open"
CLOSED = "Closed"


@dataclass
class EmployeeActivity:
    """Per-employee session totals."""

    employee_id: int
    employee_name: str
    order_ids: list[int] = field(default_factory=list)
    active_orders: int = 0
    completed_sessions: int = 0
    total_time_minutes: int = 0

    @property
    def total_orders(self) -> int:
        return len(self.order_ids)

    @property
    def avg_time_per_order(self) -> Decimal:
        """Average minutes per closed session."""
        return safe_divide(self.total_time_minutes, self.completed_sessions)

    def add(self, log: AccessLogRecord) -> None:
        if log.order_id not in self.order_ids:
            self.order_ids.append(log.order_id)
        session = log.session
        if isinstance(session, ClosedSession):
            self.completed_sessions += 1
            self.total_time_minutes += session.duration_minutes
        else:
            self.active_orders += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total_orders": self.total_orders,
            "active_orders": self.active_orders,
            "completed_sessions": self.completed_sessions,
            "total_time_minutes": to_fixed2(self.total_time_minutes),
            "avg_time_per_order": to_fixed2(self.avg_time_per_order),
        }


@dataclass
class ActivitySummary:
    """Result of :func:`summarize_activity`.

    Attributes:
        employees: Per-employee totals, busiest first.
        open_orders: Touched orders not yet completed/closed, newest first.
        closed_orders: Touched completed/closed orders, newest first.
    """

    employees: list[EmployeeActivity]
    open_orders: list[dict[str, Any]]
    closed_orders: list[dict[str, Any]]

    @property
    def has_activity(self) -> bool:
        return bool(self.employees or self.open_orders or self.closed_orders)

    @property
    def completed_sessions(self) -> int:
        return sum(e.completed_sessions for e in self.employees)

    @property
    def total_time_minutes(self) -> int:
        return sum(e.total_time_minutes for e in self.employees)

    def totals(self) -> dict[str, Any]:
        minutes = Decimal(self.total_time_minutes)
        avg_minutes = safe_divide(minutes, self.completed_sessions)
        return {
            "total_employees": len(self.employees),
            "total_orders": sum(e.total_orders for e in self.employees),
            "total_active_orders": sum(e.active_orders for e in self.employees),
            "total_completed_sessions": self.completed_sessions,
            "total_time_minutes": to_fixed2(minutes),
            "total_time_hours": to_fixed2(minutes / MINUTES_PER_HOUR),
            "avg_time_per_session_minutes": to_fixed2(avg_minutes),
            "avg_time_per_session_hours": to_fixed2(avg_minutes / MINUTES_PER_HOUR),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_activity": [e.to_dict() for e in self.employees],
            "totals": self.totals(),
            "order_details": {
                "open_orders": self.open_orders,
                "closed_orders": self.closed_orders,
                "total_open_orders": len(self.open_orders),
                "total_closed_orders": len(self.closed_orders),
            },
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def payment_label(payment_mode: str) -> str:
    """Display label of a payment mode, e.g. ``"CASH"`` -> ``"Cash"``."""
    return payment_mode.lower().capitalize()


def payment_entry(payment: PaymentRecord) -> dict[str, Any]:
    return {
        "id": payment.id,
        "payment_mode": payment_label(payment.payment_mode),
        "amount": to_fixed2(payment.amount),
        "tip_amount": to_fixed2(payment.tip_amount),
        "status": payment.status,
        "is_refund": payment.is_refund,
        "payment_is_refund": payment.payment_is_refund,
        "refunded_payment_id": payment.refunded_payment_id,
        "refund_reason": payment.refund_reason,
        "comment": payment.comment,
        "employee_id": payment.employee_id,
        "employee_name": payment.employee_name or UNKNOWN,
        "created_at": _iso(payment.created_at),
    }


def session_items(order: OrderSnapshot, employee_id: int) -> list[dict[str, Any]]:
    """Items an employee entered on an order, grouped by menu-item name.

    TEMP items are skipped. Quantities and net amounts are summed (voids add
    quantity but no amount) and the hold/fire/void flags are set when any
    grouped line had that status.
    """
    grouped: dict[str, dict[str, Any]] = {}
    for item in order.iter_items():
        if item.employee_id != employee_id or item.is_temp:
            continue
        entry = grouped.setdefault(
            item.menu_item_name,
            {"item_name": item.menu_item_name, "qty": 0, "hold": False, "fire": False, "void": False, "amount": ZERO},
        )
        entry["qty"] += item.qty
        entry["hold"] = entry["hold"] or item.order_status == ItemStatus.HOLD
        entry["fire"] = entry["fire"] or item.order_status == ItemStatus.FIRE
        entry["void"] = entry["void"] or item.is_void
        entry["amount"] += classify(item).net_amount

    return [{**entry, "amount": to_fixed2(entry["amount"])} for entry in grouped.values()]


def session_entry(log: AccessLogRecord, order: OrderSnapshot) -> dict[str, Any]:
    session = log.session
    if isinstance(session, ClosedSession):
        minutes = session.duration_minutes
        hours: str = to_fixed2(Decimal(minutes) / MINUTES_PER_HOUR)
    else:
        minutes = 0
        hours = "N/A"
    return {
        "employee_id": log.employee_id,
        "employee_name": log.employee_name or UNKNOWN_EMPLOYEE,
        "start_date": _iso(log.start_date),
        "end_date": _iso(log.end_date),
        "duration_minutes": minutes,
        "duration_hours": hours,
        "is_active": session.is_active,
        "order_items": session_items(order, log.employee_id),
    }


def order_entry(order: OrderSnapshot) -> dict[str, Any]:
    payments = sorted(order.payment_histories, key=lambda p: p.created_at)
    return {
        "order_id": order.id,
        "order_ticket_id": order.order_ticket_id,
        "order_ticket_title": order.order_ticket_title,
        "status": CLOSED if order.is_closed else OPEN,
        "original_status": order.status,
        "created_at": _iso(order.created_at),
        "created_by_employee": order.created_by_employee or UNKNOWN,
        "table_name": order.table_name or NO_TABLE,
        "customer_count": order.customer_count,
        "order_items_count": order_item_count(order),
        "order_total": to_fixed2(order_net(order)),
        "payment_total": to_fixed2(sum_money(p.amount for p in payments)),
        "payment_histories": [payment_entry(p) for p in payments],
        "employee_activities": [],
    }


def summarize_activity(
    access_logs: Iterable[AccessLogRecord],
    orders: Iterable[OrderSnapshot],
    date_window: tuple[datetime, datetime] | None = None,
    employee_id: int | None = None,
    timezone: str | None = None,
) -> ActivitySummary:
    """Summarise employee activity over order access-log sessions.

    Args:
        access_logs: Sessions of the window, in encounter order.
        orders: Snapshots of the orders those sessions touch.
        date_window: Optional inclusive ``(start, end)``; sessions starting
            outside it are ignored.
        employee_id: Only sessions of this employee when given.
        timezone: Restaurant timezone; aware timestamps are compared with
            the window in this zone's local time.

    Returns:
        ActivitySummary. Sessions whose order is not among ``orders`` still
        count for their employee but get no per-order record.
    """
    orders_by_id = {order.id: order for order in orders}
    employees: dict[int, EmployeeActivity] = {}
    order_records: dict[int, dict[str, Any]] = {}
    missing: set[int] = set()
    if date_window is not None:
        window_start, window_end = (to_local(t, timezone) for t in date_window)

    for log in access_logs:
        if employee_id is not None and log.employee_id != employee_id:
            continue
        if date_window is not None and not window_start <= to_local(log.start_date, timezone) <= window_end:
            continue

        if log.employee_id not in employees:
            employees[log.employee_id] = EmployeeActivity(
                employee_id=log.employee_id,
                employee_name=log.employee_name or UNKNOWN_EMPLOYEE,
            )
        employees[log.employee_id].add(log)

        order = orders_by_id.get(log.order_id)
        if order is None:
            missing.add(log.order_id)
            continue
        if order.id not in order_records:
            order_records[order.id] = order_entry(order)
        order_records[order.id]["employee_activities"].append(session_entry(log, order))

    if missing:
        logger.warning("Access-log sessions reference %s orders missing from the snapshot: %s", len(missing), sorted(missing))

    ranked = sorted(employees.values(), key=lambda e: e.total_orders, reverse=True)

    open_orders = []
    closed_orders = []
    for order_id, record in order_records.items():
        if orders_by_id[order_id].is_closed:
            closed_orders.append(record)
        else:
            open_orders.append(record)

    def newest_first(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=lambda r: orders_by_id[r["order_id"]].created_at, reverse=True)

    summary = ActivitySummary(
        employees=ranked,
        open_orders=newest_first(open_orders),
        closed_orders=newest_first(closed_orders),
    )
    logger.debug(
        "Activity: %s employees, %s open orders, %s closed orders",
        len(summary.employees),
        len(summary.open_orders),
        len(summary.closed_orders),
    )
    return summary
