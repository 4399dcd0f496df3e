"""Payment reconciliation and cash position.

- **reconcile**: per-method payment/refund split and the refund-rule audit
- **cash**: tips, service charge, cash summary, cash balance and cash out
"""

from pos_reports.payments.cash import (
    CashOut,
    cash_balance,
    cash_out,
    cash_summary,
    credit_tips,
    net_cash,
    payments_by_mode,
    service_charge_for_order,
    tips_and_cash_balance,
    total_owed_to_restaurant,
    total_tips,
)
from pos_reports.payments.reconcile import (
    PaymentMethodTotals,
    PaymentsSummary,
    find_refund_discrepancies,
    reconcile_payments,
)

__all__ = [
    "CashOut",
    "PaymentMethodTotals",
    "PaymentsSummary",
    "cash_balance",
    "cash_out",
    "cash_summary",
    "credit_tips",
    "find_refund_discrepancies",
    "net_cash",
    "payments_by_mode",
    "reconcile_payments",
    "service_charge_for_order",
    "tips_and_cash_balance",
    "total_owed_to_restaurant",
    "total_tips",
]
