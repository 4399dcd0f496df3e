"""Tips, service charge and cash position.

:func:`tips_and_cash_balance` is the daily-summary view (completed orders,
every payment row). The remaining helpers feed the shift reports and are
status based: ``completed`` rows add, ``refunded`` rows subtract. Refund
amounts are taken by magnitude, so stores that keep refunds negative and
stores that keep them positive give the same result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from pos_reports.config import GratuitySetting
from pos_reports.money import HUNDRED, ZERO, to_fixed2
from pos_reports.sales.classify import order_net_with_modifiers
from pos_reports.snapshot.models import COMPLETED, REFUNDED, OrderSnapshot, PaymentRecord

logger = logging.getLogger(__name__)

CASH = "cash"
PAYMENT_MODES = ("cash", "card", "online")

AUTO = "Auto"
MANUAL = "Manual"
NOT_APPLICABLE = "NotApplicable"
PERCENTAGE = "percentage"


def _mode(payment: PaymentRecord) -> str:
    return payment.payment_mode.lower()


def tips_and_cash_balance(orders: Iterable[OrderSnapshot]) -> dict[str, str]:
    """Service charge, tips and cash on hand from completed orders."""
    tips = ZERO
    service_charge = ZERO
    cash_on_hand = ZERO
    for order in orders:
        if not order.is_completed:
            continue
        service_charge += order.gratuity_value
        for payment in order.payment_histories:
            tips += payment.tip_amount
            if _mode(payment) == CASH:
                cash_on_hand += payment.amount

    return {
        "total_cash_balance": to_fixed2(cash_on_hand),
        "cash_on_hand": to_fixed2(cash_on_hand),
        "subtotal_tips_service_charge": to_fixed2(tips + service_charge),
        "service_charge": to_fixed2(service_charge),
        "tips": to_fixed2(tips),
    }


def refunded_amount(order: OrderSnapshot) -> Decimal:
    """Magnitude of all ``refunded`` payment rows of an order."""
    total = ZERO
    for payment in order.payment_histories:
        if payment.status == REFUNDED:
            total += abs(payment.amount)
    return total


def shift_net_sales(order: OrderSnapshot) -> Decimal:
    """Net sales with modifiers, less refunds."""
    return order_net_with_modifiers(order) - refunded_amount(order)


def service_charge_for_order(
    order: OrderSnapshot,
    net_sales: Decimal,
    gratuity_setting: GratuitySetting | None = None,
) -> Decimal:
    """Gratuity owed on an order.

    Percentage gratuities apply to net sales plus tax. "Manual" uses the
    order's own type and value, "Auto" the business setting, and
    "NotApplicable" (or anything unrecognised) yields zero.

    Args:
        order: The order.
        net_sales: Net sales of the order as computed by the caller.
        gratuity_setting: Business auto-gratuity, used for "Auto".

    Returns:
        Unrounded service charge.
    """
    amount_after_tax = net_sales + order.tax_value
    if order.gratuity_key == MANUAL:
        if order.gratuity_type and order.gratuity_value > ZERO:
            if order.gratuity_type == PERCENTAGE:
                return amount_after_tax * order.gratuity_value / HUNDRED
            return order.gratuity_value
        return ZERO
    if order.gratuity_key == AUTO:
        if gratuity_setting is None:
            return ZERO
        if gratuity_setting.gratuity_type == PERCENTAGE:
            return amount_after_tax * gratuity_setting.gratuity_value / HUNDRED
        return gratuity_setting.gratuity_value
    if order.gratuity_key != NOT_APPLICABLE:
        logger.warning(
            "Order %s has unknown gratuity key %r; no service charge applied",
            order.id,
            order.gratuity_key,
        )
    return ZERO


def total_service_charge(
    orders: Iterable[OrderSnapshot], gratuity_setting: GratuitySetting | None = None
) -> Decimal:
    total = ZERO
    for order in orders:
        total += service_charge_for_order(order, shift_net_sales(order), gratuity_setting)
    return total


def net_cash(order: OrderSnapshot) -> Decimal:
    """Completed cash less refunded cash for one order."""
    total = ZERO
    for payment in order.payment_histories:
        if _mode(payment) != CASH:
            continue
        if payment.status == COMPLETED:
            total += payment.amount
        elif payment.status == REFUNDED:
            total -= abs(payment.amount)
    return total


def cash_on_hand(orders: Iterable[OrderSnapshot]) -> Decimal:
    total = ZERO
    for order in orders:
        total += net_cash(order)
    return total


def cash_summary(orders: Iterable[OrderSnapshot]) -> dict[str, str]:
    """Net cash split by closed (completed) and open orders."""
    closed = ZERO
    open_ = ZERO
    for order in orders:
        if order.is_completed:
            closed += net_cash(order)
        else:
            open_ += net_cash(order)
    return {
        "closed_orders": to_fixed2(closed),
        "open_orders": to_fixed2(open_),
        "prepaid_load": to_fixed2(closed),
        "pay_in_pay_out": to_fixed2(ZERO),
        "cash_on_hand_total": to_fixed2(closed + open_),
    }


def completed_tips(order: OrderSnapshot) -> Decimal:
    total = ZERO
    for payment in order.payment_histories:
        if payment.status == COMPLETED:
            total += payment.tip_amount
    return total


def credit_tips(orders: Iterable[OrderSnapshot]) -> Decimal:
    """Tips on completed non-cash payments."""
    total = ZERO
    for order in orders:
        for payment in order.payment_histories:
            if payment.status == COMPLETED and _mode(payment) != CASH:
                total += payment.tip_amount
    return total


def cash_tips(orders: Iterable[OrderSnapshot]) -> Decimal:
    total = ZERO
    for order in orders:
        for payment in order.payment_histories:
            if payment.status == COMPLETED and _mode(payment) == CASH:
                total += payment.tip_amount
    return total


def total_tips(orders: Iterable[OrderSnapshot]) -> Decimal:
    orders = list(orders)
    return cash_tips(orders) + credit_tips(orders)


def payments_by_mode(orders: Iterable[OrderSnapshot]) -> dict[str, Any]:
    """Cash/card/online counts, tips and totals.

    Completed payments add one to ``qty`` and their amounts; refunded ones
    subtract one and their amounts. Other modes and statuses are ignored.
    """
    qty = {mode: 0 for mode in PAYMENT_MODES}
    tips = {mode: ZERO for mode in PAYMENT_MODES}
    totals = {mode: ZERO for mode in PAYMENT_MODES}

    for order in orders:
        for payment in order.payment_histories:
            mode = _mode(payment)
            if mode not in qty or payment.status not in (COMPLETED, REFUNDED):
                continue
            if payment.status == REFUNDED:
                qty[mode] -= 1
                tips[mode] -= payment.tip_amount
                totals[mode] -= abs(payment.amount)
            else:
                qty[mode] += 1
                tips[mode] += payment.tip_amount
                totals[mode] += payment.amount

    tips_total = ZERO
    grand_total = ZERO
    for mode in PAYMENT_MODES:
        tips_total += tips[mode]
        grand_total += totals[mode]

    return {
        "payments": {
            mode: {"qty": qty[mode], "tips": to_fixed2(tips[mode]), "total": to_fixed2(totals[mode])}
            for mode in PAYMENT_MODES
        },
        "totals": {"tips": to_fixed2(tips_total), "total": to_fixed2(grand_total)},
    }


@dataclass(frozen=True)
class CashOut:
    """What a server hands over at the end of a shift."""

    credit_tips: Decimal
    service_charge: Decimal
    cash_on_hand: Decimal

    @property
    def total_owed_to_restaurant(self) -> Decimal:
        """Cash on hand less credit tips and service charge owed to staff."""
        return self.cash_on_hand - (self.credit_tips + self.service_charge)

    def to_dict(self) -> dict[str, str]:
        return {
            "credit_tips": to_fixed2(self.credit_tips),
            "service_charge": to_fixed2(self.service_charge),
            "cash_on_hand": to_fixed2(self.cash_on_hand),
        }


def cash_out(orders: Iterable[OrderSnapshot], gratuity_setting: GratuitySetting | None = None) -> CashOut:
    orders = list(orders)
    return CashOut(
        credit_tips=credit_tips(orders),
        service_charge=total_service_charge(orders, gratuity_setting),
        cash_on_hand=cash_on_hand(orders),
    )


def total_owed_to_restaurant(
    orders: Iterable[OrderSnapshot], gratuity_setting: GratuitySetting | None = None
) -> Decimal:
    return cash_out(orders, gratuity_setting).total_owed_to_restaurant


def cash_balance(
    orders: Iterable[OrderSnapshot], gratuity_setting: GratuitySetting | None = None
) -> dict[str, str]:
    """Cash on hand plus credit tips and service charge."""
    out = cash_out(orders, gratuity_setting)
    return {
        "cash_on_hand": to_fixed2(out.cash_on_hand),
        "credit_tips": to_fixed2(out.credit_tips),
        "service_charge": to_fixed2(out.service_charge),
        "total_cash": to_fixed2(out.cash_on_hand + out.credit_tips + out.service_charge),
    }
