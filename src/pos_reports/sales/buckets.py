"""Bucketing Engine.

Groups orders (or, for departments, classified items) into named buckets and
computes each bucket's share of the grand total. Buckets keep insertion
order, with seeded names first, so output is deterministic for a given
snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence
from zoneinfo import ZoneInfo

from pos_reports.config import DEFAULT_DAYPART, DEFAULT_DAYPARTS, UNCATEGORIZED, DaypartRange, ReportConfig
from pos_reports.money import ZERO, percent_of, safe_divide, to_fixed2
from pos_reports.sales.classify import (
    ClassifiedItem,
    classify,
    order_comps,
    order_gross,
    order_guests,
    order_net,
    order_voids,
)
from pos_reports.snapshot.models import OrderSnapshot

logger = logging.getLogger(__name__)

FULL_PERCENT = "100.00"
NO_PERCENT = "0.00"

# Fields emitted for order-level buckets (dayparts, revenue centers, order types).
ORDER_FIELDS = (
    "gross_sales",
    "net_sales",
    "tax",
    "comps",
    "voids",
    "fees",
    "sales_plus_fees",
    "orders",
    "avg_order",
    "guests",
    "ppa",
)
DEPARTMENT_FIELDS = ("gross_sales", "net_sales", "tax", "comps", "voids")


@dataclass
class ReportBucket:
    """Running totals of one named bucket."""

    name: str
    gross_sales: Decimal = ZERO
    net_sales: Decimal = ZERO
    tax: Decimal = ZERO
    comps: Decimal = ZERO
    voids: Decimal = ZERO
    fees: Decimal = ZERO
    orders: int = 0
    guests: int = 0
    sub_buckets: dict[str, ReportBucket] = field(default_factory=dict)

    @property
    def sales_plus_fees(self) -> Decimal:
        return self.net_sales + self.fees

    @property
    def avg_order(self) -> Decimal:
        return safe_divide(self.net_sales, self.orders)

    @property
    def ppa(self) -> Decimal:
        """Net sales per guest."""
        return safe_divide(self.net_sales, self.guests)

    def add_order(self, order: OrderSnapshot) -> None:
        self.gross_sales += order_gross(order)
        self.net_sales += order_net(order)
        self.comps += order_comps(order)
        self.voids += order_voids(order)
        self.fees += order.fee_value
        if order.is_completed:
            self.tax += order.tax_value
        self.orders += 1
        self.guests += order_guests(order)

    def add_item(self, item: ClassifiedItem) -> None:
        self.gross_sales += item.sales_gross
        self.net_sales += item.net_amount
        self.comps += item.discount_amount
        self.voids += item.void_amount

    def sub_bucket(self, name: str) -> ReportBucket:
        if name not in self.sub_buckets:
            self.sub_buckets[name] = ReportBucket(name)
        return self.sub_buckets[name]

    def values(self, names: Sequence[str]) -> dict[str, Any]:
        """Wire values of ``names``: money as 2-decimal strings, counts as ints."""
        row: dict[str, Any] = {}
        for name in names:
            value = getattr(self, name)
            row[name] = value if isinstance(value, int) else to_fixed2(value)
        return row


@dataclass
class BucketSet:
    """Ordered buckets plus their grand total."""

    buckets: list[ReportBucket]
    totals: ReportBucket

    def get(self, name: str) -> ReportBucket | None:
        for bucket in self.buckets:
            if bucket.name == name:
                return bucket
        return None

    @property
    def names(self) -> list[str]:
        return [bucket.name for bucket in self.buckets]

    def rows(self, names: Sequence[str] = ORDER_FIELDS) -> list[dict[str, Any]]:
        rows = []
        for bucket in self.buckets:
            row: dict[str, Any] = {"name": bucket.name}
            row.update(bucket.values(names))
            row["gross_sales_percent"] = to_fixed2(percent_of(bucket.gross_sales, self.totals.gross_sales))
            row["net_sales_percent"] = to_fixed2(percent_of(bucket.net_sales, self.totals.net_sales))
            rows.append(row)
        return rows

    def totals_row(self, names: Sequence[str] = ORDER_FIELDS) -> dict[str, Any]:
        row = self.totals.values(names)
        row["gross_sales_percent"] = FULL_PERCENT if self.totals.gross_sales != ZERO else NO_PERCENT
        row["net_sales_percent"] = FULL_PERCENT if self.totals.net_sales != ZERO else NO_PERCENT
        return row

    def to_section(self, list_key: str, names: Sequence[str] = ORDER_FIELDS) -> dict[str, Any]:
        return {list_key: self.rows(names), "totals": self.totals_row(names)}


def bucket_by(
    orders: Iterable[OrderSnapshot],
    key_fn: Callable[[OrderSnapshot], str],
    seed_names: Sequence[str] = (),
) -> BucketSet:
    """Accumulate whole orders into buckets chosen by ``key_fn``.

    Args:
        orders: Orders of the window.
        key_fn: Returns the bucket name of an order.
        seed_names: Buckets created up front (in this order) even when no
            order falls into them.

    Returns:
        BucketSet with buckets in seed order, then first-seen order.
    """
    buckets: dict[str, ReportBucket] = {name: ReportBucket(name) for name in seed_names}
    totals = ReportBucket("Total")
    for order in orders:
        name = key_fn(order)
        if name not in buckets:
            buckets[name] = ReportBucket(name)
        buckets[name].add_order(order)
        totals.add_order(order)
    return BucketSet(list(buckets.values()), totals)


def resolve_daypart(
    hour: int,
    dayparts: Sequence[DaypartRange] = DEFAULT_DAYPARTS,
    default: str = DEFAULT_DAYPART,
) -> str:
    """Name of the first daypart containing ``hour``, else ``default``.

    Examples:
        >>> resolve_daypart(23), resolve_daypart(10), resolve_daypart(16)
        ('Late Night', 'Breakfast', 'Dinner')

    """
    for daypart in dayparts:
        if daypart.contains(hour):
            return daypart.name
    return default


def to_local(value: datetime, timezone: str | None = None) -> datetime:
    """Naive local time of a timestamp.

    Naive timestamps are already local; aware ones are converted to
    ``timezone`` (when given) and stripped of their offset.
    """
    if value.tzinfo is None:
        return value
    if timezone:
        value = value.astimezone(ZoneInfo(timezone))
    return value.replace(tzinfo=None)


def local_hour(created_at: datetime, timezone: str | None = None) -> int:
    """Hour of day in the restaurant's timezone."""
    return to_local(created_at, timezone).hour


def sales_by_daypart(orders: Iterable[OrderSnapshot], config: ReportConfig | None = None) -> BucketSet:
    config = config or ReportConfig()
    return bucket_by(
        orders,
        lambda order: resolve_daypart(
            local_hour(order.created_at, config.timezone), config.dayparts, config.default_daypart
        ),
    )


def revenue_centers(orders: Iterable[OrderSnapshot], config: ReportConfig | None = None) -> BucketSet:
    """Single revenue center holding every order."""
    config = config or ReportConfig()
    name = config.revenue_center_name
    return bucket_by(orders, lambda order: name, seed_names=(name,))


def sales_by_order_type(orders: Iterable[OrderSnapshot], config: ReportConfig | None = None) -> BucketSet:
    """Order-type buckets; orders carry no type so all land in the default."""
    config = config or ReportConfig()
    default = config.default_order_type
    return bucket_by(orders, lambda order: default, seed_names=config.order_types)


def sales_by_department(orders: Iterable[OrderSnapshot]) -> BucketSet:
    """Item-level department buckets with nested sub-departments.

    Voided items add to their department's ``voids`` only. Tax collected on
    completed orders is spread over departments by their share of total
    gross; sub-departments carry no tax.
    """
    orders = list(orders)
    departments: dict[str, ReportBucket] = {}
    totals = ReportBucket("Total")
    uncategorized = 0

    for order in orders:
        for item in order.iter_items():
            classified = classify(item)
            if classified.department == UNCATEGORIZED:
                uncategorized += 1
            if classified.department not in departments:
                departments[classified.department] = ReportBucket(classified.department)
            department = departments[classified.department]
            department.add_item(classified)
            if classified.sub_department is not None:
                department.sub_bucket(classified.sub_department).add_item(classified)
            totals.add_item(classified)

    if uncategorized:
        logger.warning("%s order items have no menu category; reported as %s", uncategorized, UNCATEGORIZED)

    total_tax = ZERO
    for order in orders:
        if order.is_completed:
            total_tax += order.tax_value
    totals.tax = total_tax
    if totals.gross_sales != ZERO:
        for department in departments.values():
            department.tax = department.gross_sales / totals.gross_sales * total_tax

    return BucketSet(list(departments.values()), totals)


def department_section(bucket_set: BucketSet) -> dict[str, Any]:
    """Wire form of :func:`sales_by_department` with nested sub-departments."""
    rows = bucket_set.rows(DEPARTMENT_FIELDS)
    for row, bucket in zip(rows, bucket_set.buckets):
        row["sub_departments"] = [
            {"name": sub.name, **sub.values(DEPARTMENT_FIELDS)} for sub in bucket.sub_buckets.values()
        ]
    return {"departments": rows, "totals": bucket_set.totals_row(DEPARTMENT_FIELDS)}
