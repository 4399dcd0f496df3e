"""Tests for DataFrame views of report payloads."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from pos_reports.reports.daily import build_daily_summary
from pos_reports.reports.frames import department_frame, section_frame
from tests.test_utils import make_item, make_order, make_payment


@pytest.fixture
def payload() -> dict:
    orders = [
        make_order(
            id=1,
            created_at=datetime(2025, 1, 15, 12, 0),
            items=(
                make_item(id=1, unit_price="12.00", category="Burgers", parent="Food"),
                make_item(id=2, unit_price="4.00", category="Drinks"),
            ),
            payments=(make_payment(id=1, amount="16.00"),),
        )
    ]
    return build_daily_summary(orders, date(2025, 1, 15), business_name="Harbor Grill")


class TestSectionFrame:
    """Tests for section_frame."""

    def test_money_columns_become_decimal(self, payload: dict) -> None:
        df = section_frame(payload, "sales_by_daypart.dayparts")
        assert list(df["name"]) == ["Lunch"]
        assert df["net_sales"].iloc[0] == Decimal("16.00")
        assert df["orders"].iloc[0] == 1

    def test_payment_methods(self, payload: dict) -> None:
        df = section_frame(payload, "payments.payment_methods")
        assert df.loc[0, "total_amount"] == Decimal("16.00")

    def test_missing_section(self, payload: dict) -> None:
        with pytest.raises(KeyError, match="no section"):
            section_frame(payload, "sales_by_daypart.nope")

    def test_not_a_row_list(self, payload: dict) -> None:
        with pytest.raises(ValueError, match="not a list of rows"):
            section_frame(payload, "sales_by_daypart.totals")


class TestDepartmentFrame:
    """Tests for department_frame."""

    def test_flattens_sub_departments(self, payload: dict) -> None:
        df = department_frame(payload)
        assert list(zip(df["department"], df["sub_department"])) == [
            ("Food", None),
            ("Food", "Burgers"),
            ("Drinks", None),
        ]
        assert df["sub_department"].dtype == object
        assert df["sub_department"].iloc[0] is None
        assert df["gross_sales"].sum() == Decimal("28.00")
