"""Read-only snapshot of a reporting window.

- **models**: frozen OrderSnapshot / CheckSnapshot / OrderItemSnapshot /
  PaymentRecord / AccessLogRecord records
- **frames**: pure DataFrame -> snapshot conversion
- **loader**: bulk SQL reads through pandas
- **schema**: the tables the loader reads

Example:
    >>> import sqlite3
    >>> from pos_reports.snapshot import SnapshotLoader, create_schema
    >>>
    >>> conn = sqlite3.connect(":memory:")
    >>> create_schema(conn)
    >>> orders = SnapshotLoader(conn).load(1, "2025-01-01 00:00:00", "2025-01-01 23:59:59")
    >>> orders
    []
"""

from pos_reports.snapshot.frames import build_access_logs, build_order_snapshots
from pos_reports.snapshot.loader import SnapshotLoader
from pos_reports.snapshot.models import (
    AccessLogRecord,
    CheckSnapshot,
    ClosedSession,
    ItemStatus,
    ModifierSnapshot,
    OpenSession,
    OrderItemSnapshot,
    OrderSnapshot,
    PaymentRecord,
)
from pos_reports.snapshot.schema import create_schema

__all__ = [
    "AccessLogRecord",
    "CheckSnapshot",
    "ClosedSession",
    "ItemStatus",
    "ModifierSnapshot",
    "OpenSession",
    "OrderItemSnapshot",
    "OrderSnapshot",
    "PaymentRecord",
    "SnapshotLoader",
    "build_access_logs",
    "build_order_snapshots",
    "create_schema",
]
