"""Report request validation.

Runs before any snapshot is loaded. Every rejection is an
:class:`~pos_reports.exceptions.InputValidationError` naming the offending
parameter, which the transport layer answers with HTTP 422.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from pos_reports.config import ReportConfig
from pos_reports.exceptions import InputValidationError

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ReportRequest:
    """A validated report request covering one calendar day."""

    business_id: int
    report_date: date
    employee_id: int | None = None

    @property
    def start_of_day(self) -> datetime:
        return datetime.combine(self.report_date, time.min)

    @property
    def end_of_day(self) -> datetime:
        return datetime.combine(self.report_date, time.max)


def parse_report_date(value: Any, config: ReportConfig | None = None) -> date:
    """Parse a ``YYYY-MM-DD`` report date.

    Args:
        value: ISO date string, a ``date``, or None for today in the
            configured timezone.
        config: Supplies the timezone for the default.

    Raises:
        InputValidationError: If the value is not a valid calendar date in
            ``YYYY-MM-DD`` form.

    Examples:
        >>> parse_report_date("2025-02-28")
        datetime.date(2025, 2, 28)

    """
    if value is None or value == "":
        return (config or ReportConfig()).today()
    if isinstance(value, datetime):
        raise InputValidationError("date must be a calendar date, not a timestamp", field="date")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InputValidationError(f"date {value!r} does not match YYYY-MM-DD", field="date")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InputValidationError(f"date {value!r} is not a valid calendar date", field="date") from e


def parse_employee_id(value: Any) -> int | None:
    """Parse the optional employee filter into a positive integer."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InputValidationError("employee_id must be an integer", field="employee_id")
    if isinstance(value, str):
        # ASCII digits only; isdigit() also accepts superscripts and other scripts
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise InputValidationError(f"employee_id {value!r} must be an integer", field="employee_id")
        value = int(text)
    if not isinstance(value, int):
        raise InputValidationError(f"employee_id {value!r} must be an integer", field="employee_id")
    if value <= 0:
        raise InputValidationError("employee_id must be positive", field="employee_id")
    return value


def validate_request(
    business_id: int,
    report_date: Any = None,
    employee_id: Any = None,
    config: ReportConfig | None = None,
    loader: Any = None,
) -> ReportRequest:
    """Validate raw request parameters.

    Args:
        business_id: Tenant resolved by the caller's authentication.
        report_date: Raw date parameter (see :func:`parse_report_date`).
        employee_id: Raw employee filter.
        config: Report configuration (timezone for the default date).
        loader: When given, the employee must belong to ``business_id``
            according to ``loader.employee_belongs_to_business``.

    Returns:
        ReportRequest.

    Raises:
        InputValidationError: On any invalid parameter.
    """
    parsed_date = parse_report_date(report_date, config)
    parsed_employee = parse_employee_id(employee_id)
    if parsed_employee is not None and loader is not None:
        if not loader.employee_belongs_to_business(business_id, parsed_employee):
            raise InputValidationError(
                f"employee {parsed_employee} does not belong to business {business_id}",
                field="employee_id",
            )
    logger.debug(
        "Validated report request: business=%s date=%s employee=%s",
        business_id,
        parsed_date,
        parsed_employee,
    )
    return ReportRequest(business_id=business_id, report_date=parsed_date, employee_id=parsed_employee)
