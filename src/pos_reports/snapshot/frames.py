"""Convert tabular reads into snapshot records.

The functions here are pure: they take :class:`pandas.DataFrame` objects (one
per table, already joined with names) and return immutable snapshot graphs.
The loader feeds them from SQL, but any source producing the documented
columns works.

Monetary columns may arrive as Decimal, str, int or float; they are always
converted through :func:`pos_reports.money.to_decimal`.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Iterable

import pandas as pd

from pos_reports.exceptions import DataQualityError
from pos_reports.money import to_decimal
from pos_reports.snapshot.models import (
    AccessLogRecord,
    CheckSnapshot,
    ItemStatus,
    ModifierSnapshot,
    OrderItemSnapshot,
    OrderSnapshot,
    PaymentRecord,
)

logger = logging.getLogger(__name__)

ORDER_COLUMNS = [
    "id",
    "business_id",
    "status",
    "created_at",
    "tax_value",
    "fee_value",
    "gratuity_value",
    "customer",
    "table_name",
    "created_by_employee_id",
    "created_by_employee",
    "order_ticket_id",
    "order_ticket_title",
    "gratuity_key",
    "gratuity_type",
]
CHECK_COLUMNS = ["id", "order_id"]
ITEM_COLUMNS = [
    "id",
    "order_id",
    "check_id",
    "menu_item_name",
    "category_name",
    "parent_category_name",
    "unit_price",
    "qty",
    "discount_amount",
    "order_status",
    "employee_id",
    "customer_no",
]
MODIFIER_COLUMNS = ["order_item_id", "name", "qty", "price"]
PAYMENT_COLUMNS = [
    "id",
    "order_id",
    "check_id",
    "employee_id",
    "employee_name",
    "amount",
    "tip_amount",
    "payment_mode",
    "status",
    "refunded_payment_id",
    "refund_reason",
    "comment",
    "payment_is_refund",
    "created_at",
]
ACCESS_LOG_COLUMNS = ["id", "order_id", "employee_id", "employee_name", "start_date", "end_date"]

UNKNOWN_ITEM = "Unknown Item"


def empty_frame(columns: list[str]) -> pd.DataFrame:
    """Return an empty DataFrame with the given columns."""
    return pd.DataFrame(columns=columns)


def require_columns(df: pd.DataFrame, required: list[str], name: str) -> None:
    """Raise DataQualityError if ``df`` lacks any of ``required``."""
    missing_cols = [col for col in required if col not in df.columns]
    if missing_cols:
        raise DataQualityError(
            f"Missing required columns in {name}: {missing_cols}. Required: {required}"
        )


def full_name(first: Any, last: Any) -> str | None:
    """Join first and last name, or None when both are missing."""
    parts = [str(p).strip() for p in (first, last) if not _isna(p) and str(p).strip()]
    if not parts:
        return None
    return " ".join(parts)


def _isna(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _opt_int(value: Any) -> int | None:
    return None if _isna(value) else int(value)


def _opt_str(value: Any) -> str | None:
    return None if _isna(value) else str(value)


def _timestamp(value: Any) -> datetime | None:
    if _isna(value):
        return None
    if isinstance(value, datetime) and not isinstance(value, pd.Timestamp):
        return value
    return pd.Timestamp(value).to_pydatetime()


def _rows(df: pd.DataFrame) -> Iterable[dict[str, Any]]:
    return df.to_dict(orient="records")


def build_modifiers(modifiers_df: pd.DataFrame) -> dict[int, list[ModifierSnapshot]]:
    """Group modifier rows by ``order_item_id``."""
    require_columns(modifiers_df, MODIFIER_COLUMNS, "modifiers")
    by_item: dict[int, list[ModifierSnapshot]] = defaultdict(list)
    for row in _rows(modifiers_df):
        qty = _opt_int(row["qty"])
        by_item[int(row["order_item_id"])].append(
            ModifierSnapshot(
                name=_opt_str(row["name"]) or "",
                qty=1 if qty is None else qty,
                price=to_decimal(row["price"]),
            )
        )
    return by_item


def _build_item(row: dict[str, Any], modifiers: list[ModifierSnapshot]) -> OrderItemSnapshot:
    status = _opt_int(row["order_status"])
    try:
        order_status = ItemStatus.HOLD if status is None else ItemStatus(status)
    except ValueError as e:
        raise DataQualityError(
            f"Order item {row['id']} has unknown order_status {row['order_status']!r}"
        ) from e
    return OrderItemSnapshot(
        id=int(row["id"]),
        menu_item_name=_opt_str(row["menu_item_name"]) or UNKNOWN_ITEM,
        category_name=_opt_str(row["category_name"]),
        parent_category_name=_opt_str(row["parent_category_name"]),
        unit_price=to_decimal(row["unit_price"]),
        qty=_opt_int(row["qty"]) or 0,
        discount_amount=to_decimal(row["discount_amount"]),
        order_status=order_status,
        employee_id=_opt_int(row["employee_id"]),
        customer_no=_opt_int(row["customer_no"]),
        modifiers=tuple(modifiers),
    )


def build_payment(row: dict[str, Any]) -> PaymentRecord:
    """Map one payment-history row onto a PaymentRecord."""
    created_at = _timestamp(row["created_at"])
    if created_at is None:
        raise DataQualityError(f"Payment {row['id']} has no created_at")
    return PaymentRecord(
        id=int(row["id"]),
        order_id=int(row["order_id"]),
        check_id=_opt_int(row["check_id"]),
        employee_id=_opt_int(row["employee_id"]),
        employee_name=_opt_str(row["employee_name"]),
        amount=to_decimal(row["amount"]),
        tip_amount=to_decimal(row["tip_amount"]),
        payment_mode=_opt_str(row["payment_mode"]) or "Unknown",
        status=_opt_str(row["status"]) or "",
        refunded_payment_id=_opt_int(row["refunded_payment_id"]) or 0,
        refund_reason=_opt_str(row["refund_reason"]) or "",
        comment=_opt_str(row["comment"]) or "",
        payment_is_refund=bool(_opt_int(row["payment_is_refund"]) or 0),
        created_at=created_at,
    )


def build_order_snapshots(
    orders_df: pd.DataFrame,
    checks_df: pd.DataFrame,
    items_df: pd.DataFrame,
    modifiers_df: pd.DataFrame,
    payments_df: pd.DataFrame,
) -> list[OrderSnapshot]:
    """Assemble order snapshots from per-table DataFrames.

    Orders keep the row order of ``orders_df``; checks, items and payments keep
    the row order of their own frames within each order.

    Args:
        orders_df: One row per order (see ``ORDER_COLUMNS``).
        checks_df: One row per check (``CHECK_COLUMNS``).
        items_df: One row per order item with menu item and category names
            already resolved (``ITEM_COLUMNS``).
        modifiers_df: One row per item modifier (``MODIFIER_COLUMNS``).
        payments_df: One row per payment history entry (``PAYMENT_COLUMNS``).

    Returns:
        List of OrderSnapshot, empty when ``orders_df`` is empty.

    Raises:
        DataQualityError: If a frame misses required columns or a row holds
            an unusable value.
    """
    require_columns(orders_df, ORDER_COLUMNS, "orders")
    require_columns(checks_df, CHECK_COLUMNS, "checks")
    require_columns(items_df, ITEM_COLUMNS, "order_items")
    require_columns(payments_df, PAYMENT_COLUMNS, "payment_histories")

    modifiers_by_item = build_modifiers(modifiers_df)

    items_by_check: dict[int, list[OrderItemSnapshot]] = defaultdict(list)
    for row in _rows(items_df):
        item = _build_item(row, modifiers_by_item.get(int(row["id"]), []))
        items_by_check[int(row["check_id"])].append(item)

    checks_by_order: dict[int, list[CheckSnapshot]] = defaultdict(list)
    seen_checks: set[int] = set()
    for row in _rows(checks_df):
        check_id = int(row["id"])
        order_id = int(row["order_id"])
        seen_checks.add(check_id)
        checks_by_order[order_id].append(
            CheckSnapshot(id=check_id, order_id=order_id, items=tuple(items_by_check.get(check_id, [])))
        )

    orphaned = set(items_by_check) - seen_checks
    if orphaned:
        logger.warning("Dropping items of %s unknown checks: %s", len(orphaned), sorted(orphaned))

    payments_by_order: dict[int, list[PaymentRecord]] = defaultdict(list)
    for row in _rows(payments_df):
        payment = build_payment(row)
        payments_by_order[payment.order_id].append(payment)

    snapshots = []
    for row in _rows(orders_df):
        order_id = int(row["id"])
        created_at = _timestamp(row["created_at"])
        if created_at is None:
            raise DataQualityError(f"Order {order_id} has no created_at")
        snapshots.append(
            OrderSnapshot(
                id=order_id,
                business_id=int(row["business_id"]),
                status=_opt_str(row["status"]) or "",
                created_at=created_at,
                tax_value=to_decimal(row["tax_value"]),
                fee_value=to_decimal(row["fee_value"]),
                gratuity_value=to_decimal(row["gratuity_value"]),
                customer_count=_opt_int(row["customer"]) or 0,
                table_name=_opt_str(row["table_name"]),
                created_by_employee_id=_opt_int(row["created_by_employee_id"]),
                created_by_employee=_opt_str(row["created_by_employee"]),
                order_ticket_id=_opt_str(row["order_ticket_id"]),
                order_ticket_title=_opt_str(row["order_ticket_title"]) or "",
                gratuity_key=_opt_str(row["gratuity_key"]) or "NotApplicable",
                gratuity_type=_opt_str(row["gratuity_type"]),
                checks=tuple(checks_by_order.get(order_id, [])),
                payment_histories=tuple(payments_by_order.get(order_id, [])),
            )
        )

    logger.debug("Built %s order snapshots", len(snapshots))
    return snapshots


def build_access_logs(logs_df: pd.DataFrame) -> list[AccessLogRecord]:
    """Map access-log rows onto AccessLogRecord, keeping row order."""
    require_columns(logs_df, ACCESS_LOG_COLUMNS, "order_access_logs")
    records = []
    for row in _rows(logs_df):
        start = _timestamp(row["start_date"])
        if start is None:
            raise DataQualityError(f"Access log {row['id']} has no start_date")
        records.append(
            AccessLogRecord(
                id=_opt_int(row["id"]),
                order_id=int(row["order_id"]),
                employee_id=int(row["employee_id"]),
                employee_name=_opt_str(row["employee_name"]),
                start_date=start,
                end_date=_timestamp(row["end_date"]),
            )
        )
    return records
