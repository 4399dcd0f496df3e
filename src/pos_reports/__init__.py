"""POS Reports - financial reconciliation and reporting for restaurant POS data.

This package turns a read-only snapshot of orders, checks, items, payments
and order access logs for one business day into structured report payloads:

- **Daily summary**: sales by department / daypart / revenue center / order
  type, comps and voids, payments, cash, tips and taxes
- **Activity summary**: employee sessions on orders
- **Shift reports**: X-report and Z-report

Module Structure:
    pos_reports.snapshot: Snapshot records and the bulk SQL loader
    pos_reports.sales: Item classification, bucketing, exceptions, taxes
    pos_reports.payments: Payment reconciliation and cash position
    pos_reports.activity: Employee session analytics
    pos_reports.reports: Request validation, payload builders, assembler
    pos_reports.config: ReportConfig and fixed bucket tables
    pos_reports.money: Decimal money helpers

Quick Start:
    >>> import sqlite3
    >>> from pos_reports import ReportAssembler, ReportConfig, SnapshotLoader, to_json
    >>>
    >>> conn = sqlite3.connect("pos.db")  # doctest: +SKIP
    >>> assembler = ReportAssembler(SnapshotLoader(conn), ReportConfig(timezone="America/New_York"))  # doctest: +SKIP
    >>>
    >>> daily = assembler.assemble_daily_summary(business_id=1, date="2025-01-15")  # doctest: +SKIP
    >>> activity = assembler.assemble_activity_summary(business_id=1, date="2025-01-15")  # doctest: +SKIP
    >>> print(to_json(daily))  # doctest: +SKIP

Money fields are 2-decimal strings, counts are integers, and an empty day
yields ``has_activity: false`` rather than an error.
"""

__version__ = "0.1.0"

from pos_reports.config import ReportConfig
from pos_reports.exceptions import (
    ConfigError,
    DataQualityError,
    InputValidationError,
    PosReportError,
    SnapshotLoadError,
)
from pos_reports.reports import ReportAssembler, to_json
from pos_reports.snapshot import SnapshotLoader

__all__ = [
    "ConfigError",
    "DataQualityError",
    "InputValidationError",
    "PosReportError",
    "ReportAssembler",
    "ReportConfig",
    "SnapshotLoader",
    "SnapshotLoadError",
    "__version__",
    "to_json",
]
