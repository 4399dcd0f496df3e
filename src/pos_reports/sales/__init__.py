"""Sales calculators.

- **classify**: per-item gross/net/void/comp amounts and department path
- **buckets**: department, daypart, revenue-center and order-type buckets
- **exception_tally**: comps and voids
- **taxes**: tax summary and per-rate breakdown
"""

from pos_reports.sales.buckets import (
    BucketSet,
    ReportBucket,
    bucket_by,
    department_section,
    resolve_daypart,
    revenue_centers,
    sales_by_daypart,
    sales_by_department,
    sales_by_order_type,
)
from pos_reports.sales.classify import ClassifiedItem, classify
from pos_reports.sales.exception_tally import ExceptionSummary, compute_exceptions
from pos_reports.sales.taxes import compute_tax_by_rate, compute_tax_summary

__all__ = [
    "BucketSet",
    "ClassifiedItem",
    "ExceptionSummary",
    "ReportBucket",
    "bucket_by",
    "classify",
    "compute_exceptions",
    "compute_tax_by_rate",
    "compute_tax_summary",
    "department_section",
    "resolve_daypart",
    "revenue_centers",
    "sales_by_daypart",
    "sales_by_department",
    "sales_by_order_type",
]
