"""Tests for the X-report and Z-report builders."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from pos_reports.config import GratuitySetting, ReportConfig
from pos_reports.reports.shift import build_x_report, build_z_report, report_number, suggested_tip_out
from pos_reports.snapshot.models import ItemStatus
from tests.test_utils import make_item, make_modifier, make_order, make_payment

REPORT_DATE = date(2025, 1, 15)


@pytest.fixture
def config() -> ReportConfig:
    return ReportConfig(gratuity_setting=GratuitySetting("fixed_money", Decimal("1.50")))


@pytest.fixture
def orders() -> list:
    """A closed order with a refund and an open order on auto gratuity.

    Closed: 20.00 net with modifiers less a 5.00 refund, 2.00 tax, 10%
    manual gratuity. Open: 8.00 net, fixed 1.50 business gratuity.
    """
    return [
        make_order(
            id=1,
            created_at=datetime(2025, 1, 15, 12, 0),
            customer_count=2,
            tax="2.00",
            fee="1.00",
            gratuity="10",
            gratuity_key="Manual",
            gratuity_type="percentage",
            created_by_employee_id=1,
            created_by_employee="Ana Lopez",
            items=(
                make_item(id=1, unit_price="10.00", qty=2, discount="2.00", modifiers=(make_modifier(qty=2),)),
                make_item(id=2, unit_price="5.00", status=ItemStatus.TEMP),
                make_item(id=3, unit_price="4.00", status=ItemStatus.VOID),
            ),
            payments=(
                make_payment(id=1, amount="30.00", tip="3.00"),
                make_payment(id=2, mode="card", amount="10.00", tip="2.00"),
                make_payment(id=3, amount="5.00", status="refunded", refunded_payment_id=1),
            ),
        ),
        make_order(
            id=2,
            status="pending",
            created_at=datetime(2025, 1, 15, 19, 0),
            customer_count=1,
            gratuity_key="Auto",
            created_by_employee_id=2,
            created_by_employee="Ben Ortiz",
            items=(make_item(id=4, unit_price="8.00"),),
        ),
    ]


class TestXReport:
    """Tests for build_x_report."""

    def test_sales_summary(self, orders: list, config: ReportConfig) -> None:
        summary = build_x_report(orders, REPORT_DATE, config)["sales_summary"]
        assert summary["closed_orders"] == {
            "guests": 2,
            "ppa": "7.50",
            "net_sales": "15.00",
            "taxes": "2.00",
            "service_charge": "1.70",
            "tips": "5.00",
            "fees": "1.00",
            "total": "24.70",
        }
        assert summary["open_orders"]["service_charge"] == "1.50"
        assert summary["open_orders"]["total"] == "9.50"
        assert summary["total_sales"] == {"guests": 3, "ppa": "7.67", "total_amount": "34.20"}

    def test_cash_sections(self, orders: list, config: ReportConfig) -> None:
        report = build_x_report(orders, REPORT_DATE, config)
        assert report["cash_summary"]["closed_orders"] == "25.00"
        assert report["cash_summary"]["open_orders"] == "0.00"
        assert report["cash_balance"] == {
            "cash_on_hand": "25.00",
            "credit_tips": "2.00",
            "service_charge": "3.20",
            "total_cash": "30.20",
        }
        assert report["payments"]["payments"]["cash"] == {"qty": 0, "tips": "3.00", "total": "25.00"}

    def test_server_sales_tips(self, orders: list, config: ReportConfig) -> None:
        servers = build_x_report(orders, REPORT_DATE, config)["server_sales_tips"]
        assert servers["servers"] == [
            {"employee_id": 1, "name": "Ana Lopez", "sales": "15.00", "tips": "5.00"},
            {"employee_id": 2, "name": "Ben Ortiz", "sales": "8.00", "tips": "0.00"},
        ]
        assert servers["totals"] == {"sales": "23.00", "tips": "5.00"}

    def test_header(self, orders: list) -> None:
        report = build_x_report(orders, REPORT_DATE)
        assert report["report_type"] == "X-REPORT"
        assert report["business_name"] == "RESTAURANT"
        assert report["report_date"] == "2025-01-15"
        assert report["has_activity"] is True

    def test_empty(self) -> None:
        report = build_x_report([], REPORT_DATE)
        assert report["has_activity"] is False
        assert report["sales_summary"]["total_sales"] == {"guests": 0, "ppa": "0.00", "total_amount": "0.00"}
        assert report["cash_balance"]["total_cash"] == "0.00"


class TestZReport:
    """Tests for build_z_report."""

    def test_close_out(self, orders: list, config: ReportConfig) -> None:
        report = build_z_report(orders, REPORT_DATE, config, "Harbor Grill", server_name="Ana Lopez")
        assert report["report_type"] == "Z-REPORT"
        assert report["report_number"] == "2025-015"
        assert report["server_name"] == "Ana Lopez"
        assert report["cash_out"] == {"credit_tips": "2.00", "service_charge": "3.20", "cash_on_hand": "25.00"}
        assert report["total_owed_to_restaurant"] == "19.80"
        assert report["total_tips"] == "5.00"
        assert report["sales_summary"]["closed_orders"]["net_sales"] == "15.00"

    def test_suggested_tip_out_on_closed_net(self, orders: list, config: ReportConfig) -> None:
        tip_out = build_z_report(orders, REPORT_DATE, config)["suggested_tip_out"]
        assert tip_out[0] == {"role": "Bar", "percentage": "10.00", "base_amount": "15.00", "tip_out": "1.50"}
        assert tip_out[1]["tip_out"] == "0.45"
        assert [t["role"] for t in tip_out] == ["Bar", "Busser", "Runner", "Bar Back"]

    def test_server_name_fallbacks(self, orders: list, config: ReportConfig) -> None:
        """Unfiltered reports cover all servers; an unnamed employee is Unknown."""
        assert build_z_report(orders, REPORT_DATE, config)["server_name"] == "All Servers"
        assert build_z_report(orders, REPORT_DATE, config, employee_id=7)["server_name"] == "Unknown"


class TestHelpers:
    """Tests for report numbering and tip-out."""

    @pytest.mark.parametrize(
        "day,expected",
        [(date(2025, 1, 1), "2025-001"), (date(2025, 11, 3), "2025-307"), (date(2024, 12, 31), "2024-366")],
    )
    def test_report_number(self, day: date, expected: str) -> None:
        assert report_number(day) == expected

    def test_tip_out_rounds_base_first(self) -> None:
        rules = ReportConfig().tip_out_rules[:1]
        assert suggested_tip_out(Decimal("10.005"), rules)[0]["base_amount"] == "10.01"
