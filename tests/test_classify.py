"""Tests for item classification and per-order sales helpers."""

from decimal import Decimal

from pos_reports.sales.classify import (
    classify,
    order_comps,
    order_gross,
    order_guests,
    order_item_count,
    order_net,
    order_net_with_modifiers,
    order_voids,
    resolve_department,
)
from pos_reports.snapshot.models import CheckSnapshot, ItemStatus
from tests.test_utils import make_item, make_modifier, make_order


class TestResolveDepartment:
    """Tests for category -> department resolution."""

    def test_child_category_rolls_up_to_parent(self) -> None:
        assert resolve_department("Beer", "Drinks") == ("Drinks", "Beer")

    def test_top_level_category(self) -> None:
        assert resolve_department("Desserts", None) == ("Desserts", None)

    def test_missing_category(self) -> None:
        assert resolve_department(None, None) == ("Uncategorized", None)


class TestClassify:
    """Tests for per-item amounts."""

    def test_discounted_item(self) -> None:
        """Two burgers at 10.00 with a 2.00 discount: gross 20, net 18, comp 2."""
        item = classify(make_item(unit_price="10.00", qty=2, discount="2.00", category="Burgers", parent="Food"))
        assert item.gross_amount == Decimal("20.00")
        assert item.net_amount == Decimal("18.00")
        assert item.discount_amount == Decimal("2.00")
        assert item.void_amount == Decimal("0")
        assert (item.department, item.sub_department) == ("Food", "Burgers")

    def test_void_item_counts_only_as_void(self) -> None:
        """A voided 5.00 item with a discount is a 5.00 void and nothing else."""
        item = classify(make_item(unit_price="5.00", discount="1.00", status=ItemStatus.VOID))
        assert item.is_void
        assert item.void_amount == Decimal("5.00")
        assert item.sales_gross == Decimal("0")
        assert item.net_amount == Decimal("0")
        assert item.discount_amount == Decimal("0")


class TestOrderHelpers:
    """Tests for order-level sums."""

    def test_order_with_void_scenario(self) -> None:
        """Order with a 10.00 item and a voided 5.00 item."""
        order = make_order(
            items=(
                make_item(id=1, unit_price="10.00"),
                make_item(id=2, unit_price="5.00", status=ItemStatus.VOID),
            )
        )
        assert order_gross(order) == Decimal("10.00")
        assert order_net(order) == Decimal("10.00")
        assert order_voids(order) == Decimal("5.00")
        assert order_comps(order) == Decimal("0")
        assert order_item_count(order) == 1

    def test_guests_from_distinct_seats_per_check(self) -> None:
        check_a = CheckSnapshot(
            id=1,
            order_id=1,
            items=(
                make_item(id=1, customer_no=1),
                make_item(id=2, customer_no=2),
                make_item(id=3, customer_no=2),
                make_item(id=4, customer_no=3, status=ItemStatus.VOID),
            ),
        )
        check_b = CheckSnapshot(id=2, order_id=1, items=(make_item(id=5),))
        order = make_order(checks=(check_a, check_b))
        assert order_guests(order) == 3

    def test_order_without_checks_is_one_guest(self) -> None:
        assert order_guests(make_order()) == 1

    def test_net_with_modifiers_skips_temp_and_void(self) -> None:
        order = make_order(
            items=(
                make_item(id=1, unit_price="10.00", qty=2, discount="2.00", modifiers=(make_modifier(qty=2),)),
                make_item(id=2, unit_price="5.00", status=ItemStatus.TEMP),
                make_item(id=3, unit_price="4.00", status=ItemStatus.VOID),
            )
        )
        assert order_net_with_modifiers(order) == Decimal("20.00")
