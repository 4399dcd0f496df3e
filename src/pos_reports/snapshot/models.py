"""Read-only snapshot records for a reporting window.

Snapshots are built fresh for every report request from the current state of
the store and discarded once the report is assembled. All records are frozen
dataclasses holding tuples, so calculators can share one snapshot without
being able to mutate each other's inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Iterator, Union

from pos_reports.money import ZERO

logger = logging.getLogger(__name__)

COMPLETED = "completed"
CLOSED_STATUSES = frozenset({"completed", "closed"})
REFUNDED = "refunded"


class ItemStatus(IntEnum):
    """Kitchen status of an order item as stored in ``order_items.order_status``."""

    HOLD = 0
    FIRE = 1
    TEMP = 2
    VOID = 3


@dataclass(frozen=True)
class ModifierSnapshot:
    """A modifier attached to an order item (price is per unit)."""

    name: str
    qty: int
    price: Decimal

    @property
    def total(self) -> Decimal:
        return self.price * self.qty


@dataclass(frozen=True)
class OrderItemSnapshot:
    """One menu-item line on a check.

    ``category_name``/``parent_category_name`` are None when the menu item
    has no category (or it was deleted).
    """

    id: int
    menu_item_name: str
    category_name: str | None
    parent_category_name: str | None
    unit_price: Decimal
    qty: int
    discount_amount: Decimal
    order_status: ItemStatus
    employee_id: int | None = None
    customer_no: int | None = None
    modifiers: tuple[ModifierSnapshot, ...] = ()

    @property
    def is_void(self) -> bool:
        return self.order_status == ItemStatus.VOID

    @property
    def is_temp(self) -> bool:
        return self.order_status == ItemStatus.TEMP

    @property
    def modifier_total(self) -> Decimal:
        total = ZERO
        for modifier in self.modifiers:
            total += modifier.total
        return total


@dataclass(frozen=True)
class CheckSnapshot:
    """A sub-bill of an order."""

    id: int
    order_id: int
    items: tuple[OrderItemSnapshot, ...] = ()


@dataclass(frozen=True)
class PaymentRecord:
    """One row of an order's payment history.

    Refund amounts may be stored as positive magnitudes; ``is_refund`` is
    derived from status and ``refunded_payment_id``, never from the sign.
    """

    id: int
    order_id: int
    check_id: int | None
    employee_id: int | None
    amount: Decimal
    tip_amount: Decimal
    payment_mode: str
    status: str
    created_at: datetime
    refunded_payment_id: int = 0
    refund_reason: str = ""
    comment: str = ""
    payment_is_refund: bool = False
    employee_name: str | None = None

    @property
    def is_refund(self) -> bool:
        return self.status == REFUNDED or self.refunded_payment_id != 0


@dataclass(frozen=True)
class OrderSnapshot:
    """An order with its checks, items and payment history."""

    id: int
    business_id: int
    status: str
    created_at: datetime
    tax_value: Decimal = ZERO
    fee_value: Decimal = ZERO
    gratuity_value: Decimal = ZERO
    customer_count: int = 0
    table_name: str | None = None
    created_by_employee_id: int | None = None
    created_by_employee: str | None = None
    order_ticket_id: str | None = None
    order_ticket_title: str = ""
    gratuity_key: str = "NotApplicable"
    gratuity_type: str | None = None
    checks: tuple[CheckSnapshot, ...] = ()
    payment_histories: tuple[PaymentRecord, ...] = ()

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_closed(self) -> bool:
        """Completed or closed; used by the activity report's Open/Closed split."""
        return self.status in CLOSED_STATUSES

    def iter_items(self) -> Iterator[OrderItemSnapshot]:
        for check in self.checks:
            yield from check.items


@dataclass(frozen=True)
class OpenSession:
    """An access session that has not ended yet."""

    is_active: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ClosedSession:
    """A finished access session with its whole-minute duration."""

    duration_minutes: int
    is_active: bool = field(default=False, init=False)


Session = Union[OpenSession, ClosedSession]


@dataclass(frozen=True)
class AccessLogRecord:
    """An employee working an order between ``start_date`` and ``end_date``."""

    order_id: int
    employee_id: int
    start_date: datetime
    end_date: datetime | None = None
    employee_name: str | None = None
    id: int | None = None

    @property
    def session(self) -> Session:
        if self.end_date is None:
            return OpenSession()
        seconds = (self.end_date - self.start_date).total_seconds()
        if seconds < 0:
            logger.warning(
                "Access log %s ends before it starts (%s < %s); counting 0 minutes",
                self.id,
                self.end_date,
                self.start_date,
            )
            seconds = 0
        return ClosedSession(duration_minutes=int(seconds // 60))
