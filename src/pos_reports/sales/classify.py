"""Line-item classification and per-order sales helpers.

An item's gross amount is ``unit_price * qty`` regardless of status. A VOID
item contributes its gross to voids only: it never counts towards gross or
net sales, and its discount is not a comp.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos_reports.config import UNCATEGORIZED
from pos_reports.money import ZERO
from pos_reports.snapshot.models import OrderItemSnapshot, OrderSnapshot


@dataclass(frozen=True)
class ClassifiedItem:
    """Derived amounts and reporting buckets of one order item."""

    is_void: bool
    is_temp: bool
    gross_amount: Decimal
    net_amount: Decimal
    discount_amount: Decimal
    void_amount: Decimal
    category_name: str | None
    parent_category_name: str | None
    department: str
    sub_department: str | None

    @property
    def sales_gross(self) -> Decimal:
        """Gross that counts as sales (zero for voids)."""
        return ZERO if self.is_void else self.gross_amount


def resolve_department(
    category_name: str | None, parent_category_name: str | None
) -> tuple[str, str | None]:
    """Return ``(department, sub_department)`` for a menu category.

    Examples:
        >>> resolve_department("Beer", "Drinks")
        ('Drinks', 'Beer')
        >>> resolve_department("Desserts", None)
        ('Desserts', None)
        >>> resolve_department(None, None)
        ('Uncategorized', None)

    """
    if category_name is None:
        return UNCATEGORIZED, None
    if parent_category_name is not None:
        return parent_category_name, category_name
    return category_name, None


def classify(item: OrderItemSnapshot) -> ClassifiedItem:
    """Derive gross/net/void/comp amounts and the department of an item."""
    gross = item.unit_price * item.qty
    is_void = item.is_void
    department, sub_department = resolve_department(item.category_name, item.parent_category_name)
    return ClassifiedItem(
        is_void=is_void,
        is_temp=item.is_temp,
        gross_amount=gross,
        net_amount=ZERO if is_void else gross - item.discount_amount,
        discount_amount=ZERO if is_void else item.discount_amount,
        void_amount=gross if is_void else ZERO,
        category_name=item.category_name,
        parent_category_name=item.parent_category_name,
        department=department,
        sub_department=sub_department,
    )


def order_gross(order: OrderSnapshot) -> Decimal:
    total = ZERO
    for item in order.iter_items():
        total += classify(item).sales_gross
    return total


def order_net(order: OrderSnapshot) -> Decimal:
    total = ZERO
    for item in order.iter_items():
        total += classify(item).net_amount
    return total


def order_comps(order: OrderSnapshot) -> Decimal:
    total = ZERO
    for item in order.iter_items():
        total += classify(item).discount_amount
    return total


def order_voids(order: OrderSnapshot) -> Decimal:
    total = ZERO
    for item in order.iter_items():
        total += classify(item).void_amount
    return total


def order_guests(order: OrderSnapshot) -> int:
    """Guests of an order.

    Per check: the number of distinct non-null ``customer_no`` values among
    non-void items, at least 1. An order without checks counts 1 guest.
    """
    if not order.checks:
        return 1
    guests = 0
    for check in order.checks:
        seats = {item.customer_no for item in check.items if not item.is_void and item.customer_no is not None}
        guests += max(len(seats), 1)
    return guests


def order_item_count(order: OrderSnapshot) -> int:
    """Number of non-void item lines on an order."""
    return sum(1 for item in order.iter_items() if not item.is_void)


def item_total_with_modifiers(item: OrderItemSnapshot) -> Decimal:
    """Item price including modifiers, less discount."""
    return item.unit_price * item.qty + item.modifier_total - item.discount_amount


def order_net_with_modifiers(order: OrderSnapshot) -> Decimal:
    """Net item sales used by the shift reports.

    TEMP and VOID items are skipped, modifier prices are included. Refunds
    are not applied here.
    """
    total = ZERO
    for item in order.iter_items():
        if item.is_void or item.is_temp:
            continue
        total += item_total_with_modifiers(item)
    return total
