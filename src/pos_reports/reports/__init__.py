"""Report payloads.

- **validation**: request parameters (date, employee filter)
- **daily**: daily summary payload
- **shift**: X-report and Z-report payloads
- **assembler**: load once, build, serialize
- **frames**: pandas views of payload sections

Example:
    >>> import sqlite3
    >>> from pos_reports.snapshot import SnapshotLoader, create_schema
    >>> from pos_reports.reports import ReportAssembler, to_json
    >>>
    >>> conn = sqlite3.connect(":memory:")
    >>> create_schema(conn)
    >>> payload = ReportAssembler(SnapshotLoader(conn)).assemble_daily_summary(1, "2025-01-15")
    >>> payload["sales_by_dept"]["totals"]["gross_sales"]
    '0.00'
"""

from pos_reports.reports.assembler import ReportAssembler, to_json
from pos_reports.reports.daily import build_daily_summary
from pos_reports.reports.frames import department_frame, section_frame
from pos_reports.reports.shift import build_x_report, build_z_report
from pos_reports.reports.validation import ReportRequest, validate_request

__all__ = [
    "ReportAssembler",
    "ReportRequest",
    "build_daily_summary",
    "build_x_report",
    "build_z_report",
    "department_frame",
    "section_frame",
    "to_json",
    "validate_request",
]
