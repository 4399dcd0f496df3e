"""Employee activity on orders, from order access-log sessions."""

from pos_reports.activity.sessions import ActivitySummary, EmployeeActivity, summarize_activity

__all__ = ["ActivitySummary", "EmployeeActivity", "summarize_activity"]
