"""Tabular views of report payloads.

Row-list sections (departments, dayparts, payment methods, employee
activity, ...) convert to :class:`pandas.DataFrame` for exporting or further
analysis. Monetary columns come back as :class:`decimal.Decimal`.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import pandas as pd

from pos_reports.money import parse_money

logger = logging.getLogger(__name__)

MONEY_PATTERN = re.compile(r"^-?\d+\.\d{2}$")


def _resolve(payload: dict[str, Any], section: str) -> Any:
    node: Any = payload
    for key in section.split("."):
        if not isinstance(node, dict) or key not in node:
            raise KeyError(f"Report payload has no section '{section}'")
        node = node[key]
    return node


def _is_money_column(series: pd.Series) -> bool:
    values = series.dropna()
    if values.empty:
        return False
    return all(isinstance(v, str) and MONEY_PATTERN.match(v) for v in values)


def section_frame(payload: dict[str, Any], section: str) -> pd.DataFrame:
    """Turn a row-list section of a payload into a DataFrame.

    Args:
        payload: Any report payload.
        section: Dotted path to a list of row dicts, e.g.
            ``"sales_by_daypart.dayparts"`` or ``"employee_activity"``.

    Returns:
        DataFrame with one row per entry. Columns whose values are all
        2-decimal strings are converted to Decimal; nested lists are kept
        as-is.

    Raises:
        KeyError: If the section does not exist.
        ValueError: If the section is not a list of rows.

    Examples:
        >>> payload = {"payments": {"payment_methods": [{"name": "cash", "total_amount": "10.00"}]}}
        >>> section_frame(payload, "payments.payment_methods")["total_amount"].iloc[0]
        Decimal('10.00')

    """
    rows = _resolve(payload, section)
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise ValueError(f"Section '{section}' is not a list of rows")

    df = pd.DataFrame(rows)
    for col in df.columns:
        if _is_money_column(df[col]):
            df[col] = df[col].map(lambda v: parse_money(v) if isinstance(v, str) else v)
    logger.debug("Section %s -> %s rows x %s columns", section, len(df), len(df.columns))
    return df


def department_frame(payload: dict[str, Any]) -> pd.DataFrame:
    """Departments and their sub-departments flattened into one frame.

    Department rows have ``sub_department`` set to None.
    """
    rows = []
    for dept in _resolve(payload, "sales_by_dept.departments"):
        base = {k: v for k, v in dept.items() if k != "sub_departments"}
        rows.append({"department": dept["name"], "sub_department": None, **base})
        for sub in dept.get("sub_departments", []):
            rows.append({"department": dept["name"], "sub_department": sub["name"], **sub})
    df = section_frame({"rows": rows}, "rows")
    if "sub_department" in df.columns:
        # string inference would turn the department rows' None into NaN
        df["sub_department"] = pd.Series(
            [None if pd.isna(v) else v for v in df["sub_department"]], index=df.index, dtype=object
        )
    return df
