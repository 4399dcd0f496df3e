"""Report Assembler.

Validates the request, loads the snapshot once inside a read transaction
and hands it to the pure payload builders. Payloads carry no wall-clock
fields, so assembling twice over unchanged data gives identical output.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pos_reports.activity.sessions import summarize_activity
from pos_reports.config import ReportConfig
from pos_reports.reports.daily import DEFAULT_BUSINESS_NAME, build_daily_summary
from pos_reports.reports.shift import build_x_report, build_z_report
from pos_reports.reports.validation import ReportRequest, validate_request
from pos_reports.snapshot.loader import SnapshotLoader

logger = logging.getLogger(__name__)


def to_json(payload: dict[str, Any], indent: int | None = 2) -> str:
    """Serialize a payload deterministically (key order is preserved)."""
    return json.dumps(payload, indent=indent, ensure_ascii=False)


class ReportAssembler:
    """Entry point for building report payloads.

    Args:
        loader: Snapshot loader bound to the store.
        config: Report configuration; defaults to ``ReportConfig()``.

    Examples:
        >>> import sqlite3
        >>> from pos_reports.snapshot import SnapshotLoader, create_schema
        >>> conn = sqlite3.connect(":memory:")
        >>> create_schema(conn)
        >>> assembler = ReportAssembler(SnapshotLoader(conn))
        >>> assembler.assemble_daily_summary(1, "2025-01-15")["has_activity"]
        False

    """

    def __init__(self, loader: SnapshotLoader, config: ReportConfig | None = None) -> None:
        self.loader = loader
        self.config = config or ReportConfig()

    def _validate(self, business_id: int, date: Any, employee_id: Any) -> ReportRequest:
        return validate_request(business_id, date, employee_id, self.config, self.loader)

    def _load_orders(self, request: ReportRequest) -> tuple[list, str | None]:
        with self.loader.read_only():
            orders = self.loader.load(
                request.business_id,
                request.start_of_day,
                request.end_of_day,
                request.employee_id,
            )
            business_name = self.loader.business_name(request.business_id)
        return orders, business_name

    def assemble_daily_summary(
        self, business_id: int, date: Any = None, employee_id: Any = None
    ) -> dict[str, Any]:
        """Daily summary for one business day.

        Raises:
            InputValidationError: On a malformed date or employee filter.
            SnapshotLoadError: If the store fails during the read.
        """
        request = self._validate(business_id, date, employee_id)
        orders, business_name = self._load_orders(request)
        payload = build_daily_summary(orders, request.report_date, self.config, business_name)
        logger.info(
            "Assembled daily summary for business %s on %s (%s orders)",
            business_id,
            request.report_date,
            len(orders),
        )
        return payload

    def assemble_activity_summary(
        self, business_id: int, date: Any = None, employee_id: Any = None
    ) -> dict[str, Any]:
        """Employee activity for sessions started on one business day.

        Orders touched by those sessions are loaded whatever their creation
        date.
        """
        request = self._validate(business_id, date, employee_id)
        with self.loader.read_only():
            logs = self.loader.load_access_logs(
                request.business_id,
                request.start_of_day,
                request.end_of_day,
                request.employee_id,
            )
            orders = self.loader.load_orders_by_ids(
                request.business_id, sorted({log.order_id for log in logs})
            )
            business_name = self.loader.business_name(request.business_id)

        summary = summarize_activity(
            logs,
            orders,
            date_window=(request.start_of_day, request.end_of_day),
            employee_id=request.employee_id,
            timezone=self.config.timezone,
        )
        payload = {
            "business_name": business_name or DEFAULT_BUSINESS_NAME,
            "report_date": request.report_date.isoformat(),
            "has_activity": summary.has_activity,
        }
        payload.update(summary.to_dict())
        logger.info(
            "Assembled activity summary for business %s on %s (%s sessions)",
            business_id,
            request.report_date,
            len(logs),
        )
        return payload

    def assemble_x_report(
        self, business_id: int, date: Any = None, employee_id: Any = None
    ) -> dict[str, Any]:
        request = self._validate(business_id, date, employee_id)
        orders, business_name = self._load_orders(request)
        logger.info("Assembled X-report for business %s on %s", business_id, request.report_date)
        return build_x_report(
            orders, request.report_date, self.config, business_name, request.employee_id
        )

    def assemble_z_report(
        self, business_id: int, date: Any = None, employee_id: Any = None
    ) -> dict[str, Any]:
        request = self._validate(business_id, date, employee_id)
        orders, business_name = self._load_orders(request)
        server_name = None
        if request.employee_id is not None:
            server_name = self.loader.employee_name(request.employee_id)
        logger.info("Assembled Z-report for business %s on %s", business_id, request.report_date)
        return build_z_report(
            orders,
            request.report_date,
            self.config,
            business_name,
            request.employee_id,
            server_name,
        )
