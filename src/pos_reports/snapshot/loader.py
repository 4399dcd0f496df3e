"""Order Snapshot Loader.

Reads everything one report needs in a handful of bulk queries through
:func:`pandas.read_sql_query` and hands the frames to
:mod:`pos_reports.snapshot.frames`. Per-item lazy loading is never used.

The loader works with any DB-API 2.0 connection pandas accepts. The
``placeholder`` must match the driver's paramstyle (``"?"`` for sqlite3,
``"%s"`` for psycopg/pymysql).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import pandas as pd

from pos_reports.exceptions import SnapshotLoadError
from pos_reports.snapshot.frames import (
    ACCESS_LOG_COLUMNS,
    CHECK_COLUMNS,
    ITEM_COLUMNS,
    MODIFIER_COLUMNS,
    PAYMENT_COLUMNS,
    build_access_logs,
    build_order_snapshots,
    empty_frame,
    full_name,
)
from pos_reports.snapshot.models import AccessLogRecord, OrderSnapshot

logger = logging.getLogger(__name__)

_ORDERS_SELECT = """
SELECT o.id, o.business_id, o.status, o.created_at, o.tax_value, o.fee_value,
       o.gratuity_value, o.customer, t.name AS table_name,
       o.created_by_employee_id, e.first_name AS creator_first_name,
       e.last_name AS creator_last_name, o.order_ticket_id, o.order_ticket_title,
       o.gratuity_key, o.gratuity_type
FROM orders o
LEFT JOIN restaurant_tables t ON t.id = o.table_id
LEFT JOIN employees e ON e.id = o.created_by_employee_id
"""

_CHECKS_SELECT = "SELECT c.id, c.order_id FROM checks c WHERE c.order_id IN ({ids}) ORDER BY c.id"

_ITEMS_SELECT = """
SELECT i.id, i.order_id, i.check_id, m.name AS menu_item_name,
       c.name AS category_name, p.name AS parent_category_name,
       i.unit_price, i.qty, i.discount_amount, i.order_status, i.employee_id,
       i.customer_no
FROM order_items i
LEFT JOIN menu_items m ON m.id = i.menu_item_id
LEFT JOIN menu_categories c ON c.id = m.menu_category_id
LEFT JOIN menu_categories p ON p.id = c.parent_id
WHERE i.order_id IN ({ids})
ORDER BY i.id
"""

_MODIFIERS_SELECT = """
SELECT om.order_item_id, md.name, om.qty, om.price
FROM order_item_modifiers om
JOIN order_items i ON i.id = om.order_item_id
LEFT JOIN modifiers md ON md.id = om.modifier_id
WHERE i.order_id IN ({ids})
ORDER BY om.id
"""

_PAYMENTS_SELECT = """
SELECT ph.id, ph.order_id, ph.check_id, ph.employee_id,
       e.first_name AS employee_first_name, e.last_name AS employee_last_name,
       ph.amount, ph.tip_amount, ph.payment_mode, ph.status,
       ph.refunded_payment_id, ph.refund_reason, ph.comment,
       ph.payment_is_refund, ph.created_at
FROM payment_histories ph
LEFT JOIN employees e ON e.id = ph.employee_id
WHERE ph.order_id IN ({ids})
ORDER BY ph.created_at, ph.id
"""

_ACCESS_LOGS_SELECT = """
SELECT l.id, l.order_id, l.employee_id, e.first_name AS employee_first_name,
       e.last_name AS employee_last_name, l.start_date, l.end_date
FROM order_access_logs l
JOIN orders o ON o.id = l.order_id
LEFT JOIN employees e ON e.id = l.employee_id
WHERE o.business_id = {ph} AND l.start_date >= {ph} AND l.start_date <= {ph}
"""

WINDOW_START_FORMAT = "%Y-%m-%d %H:%M:%S"
WINDOW_END_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class SnapshotLoader:
    """Bulk reader producing order snapshots for a reporting window.

    Args:
        connection: Open DB-API connection (``sqlite3.Connection`` in tests).
        placeholder: Query parameter marker of the driver.

    Examples:
        >>> import sqlite3
        >>> from pos_reports.snapshot.schema import create_schema
        >>> conn = sqlite3.connect(":memory:")
        >>> create_schema(conn)
        >>> SnapshotLoader(conn).business_name(1) is None
        True

    """

    def __init__(self, connection: Any, placeholder: str = "?") -> None:
        self.connection = connection
        self.placeholder = placeholder

    @contextmanager
    def read_only(self) -> Iterator[SnapshotLoader]:
        """Run the enclosed reads inside one transaction.

        Connections that are already inside a transaction, or that expose
        no ``rollback``, are used as they are.
        """
        rollback = getattr(self.connection, "rollback", None)
        if rollback is None or getattr(self.connection, "in_transaction", False):
            yield self
            return
        cursor = self.connection.cursor()
        try:
            cursor.execute("BEGIN")
        except Exception as e:
            raise SnapshotLoadError(f"Cannot open read transaction: {e}") from e
        try:
            yield self
        finally:
            rollback()

    def _query(
        self,
        sql: str,
        params: Sequence[Any] = (),
        parse_dates: list[str] | None = None,
    ) -> pd.DataFrame:
        try:
            return pd.read_sql_query(
                sql,
                self.connection,
                params=list(params),
                parse_dates=parse_dates,
                coerce_float=False,
            )
        except Exception as e:
            raise SnapshotLoadError(f"Snapshot query failed: {e}") from e

    def _in_list(self, count: int) -> str:
        return ", ".join([self.placeholder] * count)

    @staticmethod
    def _window(start_of_day: Any, end_of_day: Any) -> tuple[str, str]:
        start = pd.Timestamp(start_of_day).strftime(WINDOW_START_FORMAT)
        end = pd.Timestamp(end_of_day).strftime(WINDOW_END_FORMAT)
        return start, end

    @staticmethod
    def _with_names(df: pd.DataFrame, target: str, first: str, last: str) -> pd.DataFrame:
        df = df.copy()
        if df.empty:
            df[target] = pd.Series(dtype=object)
        else:
            df[target] = [full_name(f, n) for f, n in zip(df[first], df[last])]
        return df.drop(columns=[first, last])

    def load(
        self,
        business_id: int,
        start_of_day: Any,
        end_of_day: Any,
        employee_id: int | None = None,
    ) -> list[OrderSnapshot]:
        """Load every order of a business created inside ``[start, end]``.

        Args:
            business_id: Tenant whose orders are read.
            start_of_day: Inclusive window start (datetime or parseable string).
            end_of_day: Inclusive window end.
            employee_id: Only orders created by this employee when given.

        Returns:
            Order snapshots sorted by creation time, with items of every
            status. Empty list when nothing matches.

        Raises:
            SnapshotLoadError: If the store fails during the read.
        """
        start, end = self._window(start_of_day, end_of_day)
        ph = self.placeholder
        sql = _ORDERS_SELECT + f"WHERE o.business_id = {ph} AND o.created_at >= {ph} AND o.created_at <= {ph}"
        params: list[Any] = [business_id, start, end]
        if employee_id is not None:
            sql += f" AND o.created_by_employee_id = {ph}"
            params.append(employee_id)
        sql += " ORDER BY o.created_at, o.id"

        orders_df = self._query(sql, params, parse_dates=["created_at"])
        snapshots = self._complete(orders_df)
        logger.info(
            "Loaded %s orders for business %s between %s and %s",
            len(snapshots),
            business_id,
            start,
            end,
        )
        return snapshots

    def load_orders_by_ids(self, business_id: int, order_ids: Sequence[int]) -> list[OrderSnapshot]:
        """Load specific orders of a business regardless of creation date."""
        ids = sorted({int(i) for i in order_ids})
        if not ids:
            return []
        ph = self.placeholder
        sql = (
            _ORDERS_SELECT
            + f"WHERE o.business_id = {ph} AND o.id IN ({self._in_list(len(ids))}) ORDER BY o.created_at, o.id"
        )
        orders_df = self._query(sql, [business_id, *ids], parse_dates=["created_at"])
        return self._complete(orders_df)

    def _complete(self, orders_df: pd.DataFrame) -> list[OrderSnapshot]:
        orders_df = self._with_names(
            orders_df, "created_by_employee", "creator_first_name", "creator_last_name"
        )
        if orders_df.empty:
            return []

        ids = [int(i) for i in orders_df["id"]]
        in_list = self._in_list(len(ids))
        checks_df = self._query(_CHECKS_SELECT.format(ids=in_list), ids)
        items_df = self._query(_ITEMS_SELECT.format(ids=in_list), ids)
        modifiers_df = self._query(_MODIFIERS_SELECT.format(ids=in_list), ids)
        payments_df = self._query(_PAYMENTS_SELECT.format(ids=in_list), ids, parse_dates=["created_at"])
        payments_df = self._with_names(
            payments_df, "employee_name", "employee_first_name", "employee_last_name"
        )
        logger.debug(
            "Snapshot rows: %s checks, %s items, %s modifiers, %s payments",
            len(checks_df),
            len(items_df),
            len(modifiers_df),
            len(payments_df),
        )
        return build_order_snapshots(
            orders_df,
            checks_df if not checks_df.empty else empty_frame(CHECK_COLUMNS),
            items_df if not items_df.empty else empty_frame(ITEM_COLUMNS),
            modifiers_df if not modifiers_df.empty else empty_frame(MODIFIER_COLUMNS),
            payments_df if not payments_df.empty else empty_frame(PAYMENT_COLUMNS),
        )

    def load_access_logs(
        self,
        business_id: int,
        start_of_day: Any,
        end_of_day: Any,
        employee_id: int | None = None,
    ) -> list[AccessLogRecord]:
        """Load access-log sessions of the business that started in the window."""
        start, end = self._window(start_of_day, end_of_day)
        ph = self.placeholder
        sql = _ACCESS_LOGS_SELECT.format(ph=ph)
        params: list[Any] = [business_id, start, end]
        if employee_id is not None:
            sql += f" AND l.employee_id = {ph}"
            params.append(employee_id)
        sql += " ORDER BY l.start_date, l.id"

        logs_df = self._query(sql, params, parse_dates=["start_date", "end_date"])
        logs_df = self._with_names(logs_df, "employee_name", "employee_first_name", "employee_last_name")
        if logs_df.empty:
            return []
        records = build_access_logs(logs_df[ACCESS_LOG_COLUMNS])
        logger.info("Loaded %s access-log sessions for business %s", len(records), business_id)
        return records

    def business_name(self, business_id: int) -> str | None:
        df = self._query(f"SELECT name FROM businesses WHERE id = {self.placeholder}", [business_id])
        if df.empty:
            return None
        return str(df["name"].iloc[0])

    def employee_name(self, employee_id: int) -> str | None:
        df = self._query(
            f"SELECT first_name, last_name FROM employees WHERE id = {self.placeholder}",
            [employee_id],
        )
        if df.empty:
            return None
        return full_name(df["first_name"].iloc[0], df["last_name"].iloc[0])

    def employee_belongs_to_business(self, business_id: int, employee_id: int) -> bool:
        df = self._query(
            f"SELECT id FROM employees WHERE id = {self.placeholder} AND business_id = {self.placeholder}",
            [employee_id, business_id],
        )
        return not df.empty
