"""Integration tests for the snapshot loader against an in-memory SQLite store."""

import sqlite3
from datetime import datetime
from decimal import Decimal

import pandas as pd
import pytest

from pos_reports.exceptions import DataQualityError, SnapshotLoadError
from pos_reports.snapshot.frames import (
    CHECK_COLUMNS,
    ITEM_COLUMNS,
    MODIFIER_COLUMNS,
    PAYMENT_COLUMNS,
    build_order_snapshots,
    empty_frame,
    full_name,
)
from pos_reports.snapshot.loader import SnapshotLoader
from pos_reports.snapshot.models import ItemStatus
from tests.test_utils import seed_database

DAY_START = datetime(2025, 1, 15, 0, 0)
DAY_END = datetime(2025, 1, 15, 23, 59, 59, 999999)


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    seed_database(connection)
    yield connection
    connection.close()


@pytest.fixture
def loader(conn) -> SnapshotLoader:
    return SnapshotLoader(conn)


@pytest.mark.integration
class TestLoad:
    """Tests for SnapshotLoader.load."""

    def test_window_and_business_filter(self, loader: SnapshotLoader) -> None:
        orders = loader.load(1, DAY_START, DAY_END)
        assert [o.id for o in orders] == [1, 2]

    def test_order_graph(self, loader: SnapshotLoader) -> None:
        order = loader.load(1, DAY_START, DAY_END)[0]
        assert order.status == "completed"
        assert order.created_at == datetime(2025, 1, 15, 12, 30)
        assert order.tax_value == Decimal("1.50")
        assert order.customer_count == 2
        assert order.table_name == "T1"
        assert order.created_by_employee == "Ana Lopez"
        assert order.order_ticket_id == "T-001"
        assert [c.id for c in order.checks] == [11]

        items = list(order.iter_items())
        assert [i.id for i in items] == [101, 102, 103]
        burger = items[0]
        assert burger.menu_item_name == "Cheeseburger"
        assert (burger.category_name, burger.parent_category_name) == ("Burgers", "Food")
        assert burger.unit_price == Decimal("10.00")
        assert burger.discount_amount == Decimal("2.00")
        assert burger.modifier_total == Decimal("1.00")
        assert burger.modifiers[0].name == "Extra Cheese"
        assert items[2].order_status == ItemStatus.VOID

    def test_uncategorized_item_and_payments(self, loader: SnapshotLoader) -> None:
        order = loader.load(1, DAY_START, DAY_END)[1]
        item = next(order.iter_items())
        assert item.category_name is None
        assert item.customer_no is None
        assert item.order_status == ItemStatus.HOLD
        assert order.table_name is None

        payment = order.payment_histories[0]
        assert payment.payment_mode == "card"
        assert payment.amount == Decimal("5.00")
        assert payment.tip_amount == Decimal("1.00")
        assert payment.employee_name == "Ben Ortiz"
        assert payment.created_at == datetime(2025, 1, 15, 19, 20)
        assert not payment.is_refund

    def test_employee_filter(self, loader: SnapshotLoader) -> None:
        assert [o.id for o in loader.load(1, DAY_START, DAY_END, employee_id=2)] == [2]

    def test_empty_window(self, loader: SnapshotLoader) -> None:
        assert loader.load(1, datetime(2025, 2, 1), datetime(2025, 2, 1, 23, 59, 59)) == []

    def test_load_orders_by_ids_ignores_date_and_tenant(self, loader: SnapshotLoader) -> None:
        orders = loader.load_orders_by_ids(1, [3, 1, 4, 3])
        assert [o.id for o in orders] == [3, 1]
        assert loader.load_orders_by_ids(1, []) == []


@pytest.mark.integration
class TestAccessLogsAndLookups:
    """Tests for access logs and name lookups."""

    def test_access_logs(self, loader: SnapshotLoader) -> None:
        logs = loader.load_access_logs(1, DAY_START, DAY_END)
        assert [log.id for log in logs] == [4, 1, 3, 2]
        assert logs[0].employee_name == "Ana Lopez"
        assert logs[0].end_date == datetime(2025, 1, 15, 0, 40)
        assert logs[3].end_date is None

    def test_access_logs_employee_filter(self, loader: SnapshotLoader) -> None:
        logs = loader.load_access_logs(1, DAY_START, DAY_END, employee_id=2)
        assert [log.id for log in logs] == [3, 2]

    def test_lookups(self, loader: SnapshotLoader) -> None:
        assert loader.business_name(1) == "Harbor Grill"
        assert loader.business_name(99) is None
        assert loader.employee_name(2) == "Ben Ortiz"
        assert loader.employee_belongs_to_business(1, 2)
        assert not loader.employee_belongs_to_business(1, 3)


@pytest.mark.integration
class TestReadOnly:
    """Tests for the read transaction and error wrapping."""

    def test_read_only_rolls_back(self, conn, loader: SnapshotLoader) -> None:
        with loader.read_only():
            assert conn.in_transaction
            loader.load(1, DAY_START, DAY_END)
        assert not conn.in_transaction

    def test_existing_transaction_is_reused(self, conn, loader: SnapshotLoader) -> None:
        conn.execute("BEGIN")
        with loader.read_only():
            loader.business_name(1)
        assert conn.in_transaction
        conn.rollback()

    def test_query_failure_wrapped(self, loader: SnapshotLoader) -> None:
        loader.connection.execute("DROP TABLE order_items")
        with pytest.raises(SnapshotLoadError, match="Snapshot query failed") as excinfo:
            loader.load(1, DAY_START, DAY_END)
        assert excinfo.value.__cause__ is not None


class TestFrames:
    """Tests for the pure DataFrame -> snapshot conversion."""

    def test_missing_columns(self) -> None:
        orders_df = pd.DataFrame({"id": [1]})
        with pytest.raises(DataQualityError, match="Missing required columns in orders"):
            build_order_snapshots(
                orders_df,
                empty_frame(CHECK_COLUMNS),
                empty_frame(ITEM_COLUMNS),
                empty_frame(MODIFIER_COLUMNS),
                empty_frame(PAYMENT_COLUMNS),
            )

    def test_unknown_item_status(self, loader: SnapshotLoader) -> None:
        loader.connection.execute("UPDATE order_items SET order_status = 9 WHERE id = 102")
        with pytest.raises(DataQualityError, match="unknown order_status"):
            loader.load(1, DAY_START, DAY_END)

    @pytest.mark.parametrize(
        "first,last,expected",
        [("Ana", "Lopez", "Ana Lopez"), ("Ana", None, "Ana"), (None, float("nan"), None), ("  ", "Lopez", "Lopez")],
    )
    def test_full_name(self, first, last, expected) -> None:
        assert full_name(first, last) == expected
