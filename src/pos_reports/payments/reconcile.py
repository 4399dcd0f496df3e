"""Payments Reconciler.

The daily summary splits payment records by the sign of ``amount``: a
non-negative amount is a payment, a negative one a refund counted by its
absolute value. Everywhere else a record is a refund when its status is
``refunded`` or it points at the payment it refunds. The two rules can
disagree on malformed rows; :func:`find_refund_discrepancies` lists those
rows instead of silently picking one answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from pos_reports.money import ZERO, to_fixed2
from pos_reports.snapshot.models import OrderSnapshot, PaymentRecord

logger = logging.getLogger(__name__)


@dataclass
class PaymentMethodTotals:
    """Sign-split totals of one raw payment mode."""

    name: str
    payment_count: int = 0
    payment_amount: Decimal = ZERO
    refund_count: int = 0
    refund_amount: Decimal = ZERO

    @property
    def total_amount(self) -> Decimal:
        return self.payment_amount - self.refund_amount

    def add(self, payment: PaymentRecord) -> None:
        if payment.amount >= ZERO:
            self.payment_count += 1
            self.payment_amount += payment.amount
        else:
            self.refund_count += 1
            self.refund_amount += abs(payment.amount)

    def to_row(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "payment_count": self.payment_count,
            "payment_amount": to_fixed2(self.payment_amount),
            "refund_count": self.refund_count,
            "refund_amount": to_fixed2(self.refund_amount),
            "total_amount": to_fixed2(self.total_amount),
        }


@dataclass
class PaymentsSummary:
    """Per-method payment totals plus the refund-rule audit."""

    methods: list[PaymentMethodTotals]
    refund_discrepancies: list[int] = field(default_factory=list)

    def method(self, name: str) -> PaymentMethodTotals | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    @property
    def totals(self) -> PaymentMethodTotals:
        totals = PaymentMethodTotals("Total")
        for method in self.methods:
            totals.payment_count += method.payment_count
            totals.payment_amount += method.payment_amount
            totals.refund_count += method.refund_count
            totals.refund_amount += method.refund_amount
        return totals

    def to_section(self) -> dict[str, Any]:
        totals = self.totals.to_row()
        del totals["name"]
        return {
            "payment_methods": [m.to_row() for m in self.methods],
            "totals": totals,
            "refund_discrepancies": list(self.refund_discrepancies),
        }


def iter_payments(orders: Iterable[OrderSnapshot]) -> Iterable[PaymentRecord]:
    for order in orders:
        yield from order.payment_histories


def find_refund_discrepancies(orders: Iterable[OrderSnapshot]) -> list[int]:
    """Ids of payments whose sign disagrees with their refund status.

    A record is flagged when it has a negative amount but is not a refund by
    status/``refunded_payment_id``, or is such a refund but has a
    non-negative amount.
    """
    flagged = []
    for payment in iter_payments(orders):
        if (payment.amount < ZERO) != payment.is_refund:
            flagged.append(payment.id)
    if flagged:
        logger.warning(
            "%s payment records disagree between sign and refund status: %s",
            len(flagged),
            flagged,
        )
    return flagged


def reconcile_payments(orders: Iterable[OrderSnapshot]) -> PaymentsSummary:
    """Group every payment record by raw ``payment_mode`` and split by sign.

    Args:
        orders: Orders of the window; payments of every status are included.

    Returns:
        PaymentsSummary with methods in first-seen order.

    Examples:
        A 15.00 cash payment and a -5.00 cash refund give one payment, one
        refund and a 10.00 net for "cash".

    """
    orders = list(orders)
    methods: dict[str, PaymentMethodTotals] = {}
    for payment in iter_payments(orders):
        if payment.payment_mode not in methods:
            methods[payment.payment_mode] = PaymentMethodTotals(payment.payment_mode)
        methods[payment.payment_mode].add(payment)

    return PaymentsSummary(
        methods=list(methods.values()),
        refund_discrepancies=find_refund_discrepancies(orders),
    )
