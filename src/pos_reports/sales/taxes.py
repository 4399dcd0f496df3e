"""Tax Calculator.

Only completed orders contribute. Net item sales are taxable; gratuity
(service charge) and fees are not. Department-level tax distribution lives
in :func:`pos_reports.sales.buckets.sales_by_department`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from pos_reports.config import DEFAULT_TAX_RATE
from pos_reports.money import ZERO, to_decimal, to_fixed2
from pos_reports.sales.classify import order_net
from pos_reports.snapshot.models import OrderSnapshot


def _tax_line(taxable: Decimal, non_taxable: Decimal) -> dict[str, str]:
    return {
        "taxable_amount": to_fixed2(taxable),
        "non_taxable_amount": to_fixed2(non_taxable),
        "total_amount": to_fixed2(taxable + non_taxable),
    }


def compute_tax_summary(orders: Iterable[OrderSnapshot]) -> dict[str, Any]:
    """Taxable vs non-taxable breakdown of completed orders.

    Returns:
        Dict with ``total``, ``sales``, ``service_charge`` and ``fees`` lines,
        each holding ``taxable_amount``, ``non_taxable_amount`` and
        ``total_amount``.
    """
    sales = ZERO
    service_charge = ZERO
    fees = ZERO
    for order in orders:
        if not order.is_completed:
            continue
        sales += order_net(order)
        service_charge += order.gratuity_value
        fees += order.fee_value

    return {
        "total": _tax_line(sales, service_charge + fees),
        "sales": _tax_line(sales, ZERO),
        "service_charge": _tax_line(ZERO, service_charge),
        "fees": _tax_line(ZERO, fees),
    }


def format_rate(rate_percent: object) -> str:
    """Render a rate for display, e.g. ``Decimal("6.625")`` -> ``'6.625%'``.

    Examples:
        >>> format_rate("8.00")
        '8%'

    """
    rate = to_decimal(rate_percent).normalize()
    return f"{rate:f}%"


def compute_tax_by_rate(
    orders: Iterable[OrderSnapshot], rate_percent: object = DEFAULT_TAX_RATE
) -> dict[str, Any]:
    """Single synthetic tax-rate bucket over completed orders.

    The bucket only appears when at least one completed order exists.
    """
    taxable = ZERO
    collected = ZERO
    completed = 0
    for order in orders:
        if not order.is_completed:
            continue
        completed += 1
        taxable += order_net(order)
        collected += order.tax_value

    tax_rates = []
    if completed:
        tax_rates.append(
            {
                "rate": format_rate(rate_percent),
                "taxable_amount": to_fixed2(taxable),
                "tax_collected": to_fixed2(collected),
            }
        )
    return {"tax_rates": tax_rates, "total_tax": to_fixed2(collected)}
