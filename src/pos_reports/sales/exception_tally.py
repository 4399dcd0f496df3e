"""Exceptions Calculator: comps and voids.

Every discounted non-void item counts as a "Marketing Comps" action since
discounts carry no reason code in the snapshot. "Organizational" is kept as
a fixed, always-zero row so consumers see a stable set of categories.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from pos_reports.config import EXCEPTION_CATEGORIES, MARKETING_COMPS, VOIDS
from pos_reports.money import ZERO, percent_of, to_fixed2
from pos_reports.sales.classify import classify, order_gross, order_net
from pos_reports.snapshot.models import OrderSnapshot

logger = logging.getLogger(__name__)


@dataclass
class ExceptionCategory:
    name: str
    actions: int = 0
    amount: Decimal = ZERO


@dataclass
class ExceptionSummary:
    """Exception categories against the window's gross and net sales."""

    categories: list[ExceptionCategory]
    total_gross: Decimal = ZERO
    total_net: Decimal = ZERO
    _by_name: dict[str, ExceptionCategory] = field(default_factory=dict, repr=False)

    def __getitem__(self, name: str) -> ExceptionCategory:
        return self._by_name[name]

    @property
    def total_actions(self) -> int:
        return sum(c.actions for c in self.categories)

    @property
    def total_amount(self) -> Decimal:
        total = ZERO
        for category in self.categories:
            total += category.amount
        return total

    def _row(self, name: str, actions: int, amount: Decimal) -> dict[str, Any]:
        return {
            "name": name,
            "actions": actions,
            "amount": to_fixed2(amount),
            "percent_from_gross": to_fixed2(percent_of(amount, self.total_gross)),
            "percent_from_net": to_fixed2(percent_of(amount, self.total_net)),
        }

    def to_section(self) -> dict[str, Any]:
        totals = self._row("Total", self.total_actions, self.total_amount)
        del totals["name"]
        return {
            "exceptions": [self._row(c.name, c.actions, c.amount) for c in self.categories],
            "totals": totals,
        }


def compute_exceptions(orders: Iterable[OrderSnapshot]) -> ExceptionSummary:
    """Tally comps and voids for the window.

    Args:
        orders: Orders of the window, items of every status included.

    Returns:
        ExceptionSummary with the fixed categories in their fixed order.
    """
    categories = [ExceptionCategory(name) for name in EXCEPTION_CATEGORIES]
    by_name = {c.name: c for c in categories}
    summary = ExceptionSummary(categories=categories, _by_name=by_name)

    for order in orders:
        summary.total_gross += order_gross(order)
        summary.total_net += order_net(order)
        for item in order.iter_items():
            classified = classify(item)
            if classified.is_void:
                by_name[VOIDS].actions += 1
                by_name[VOIDS].amount += classified.void_amount
            elif classified.discount_amount > ZERO:
                by_name[MARKETING_COMPS].actions += 1
                by_name[MARKETING_COMPS].amount += classified.discount_amount

    logger.debug(
        "Exceptions: %s comps, %s voids",
        by_name[MARKETING_COMPS].actions,
        by_name[VOIDS].actions,
    )
    return summary
