"""Unified configuration for POS Reports.

This module provides the fixed bucket tables (dayparts, exception
categories, order types, tip-out rules) as immutable data, and a single
ReportConfig dataclass passed to every report builder.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pos_reports.exceptions import ConfigError
from pos_reports.money import to_decimal


@dataclass(frozen=True)
class DaypartRange:
    """A named hour range. ``end_hour`` is exclusive.

    A range whose start is not below its end wraps midnight, e.g.
    ``DaypartRange("Late Night", 23, 6)`` covers 23:00-05:59.
    """

    name: str
    start_hour: int
    end_hour: int

    def contains(self, hour: int) -> bool:
        if self.start_hour < self.end_hour:
            return self.start_hour <= hour < self.end_hour
        return hour >= self.start_hour or hour < self.end_hour


@dataclass(frozen=True)
class TipOutRule:
    """Suggested tip-out share for a support role, in percent of net sales."""

    role: str
    percentage: Decimal


@dataclass(frozen=True)
class GratuitySetting:
    """Business-level automatic gratuity.

    Attributes:
        gratuity_type: "percentage" or "fixed_money".
        gratuity_value: Percent (0-100) or fixed amount.
    """

    gratuity_type: str
    gratuity_value: Decimal


# Evaluation order matters: first match wins at boundary hours.
DEFAULT_DAYPARTS: tuple[DaypartRange, ...] = (
    DaypartRange("Lunch", 11, 16),
    DaypartRange("Dinner", 16, 23),
    DaypartRange("Breakfast", 6, 11),
    DaypartRange("Late Night", 23, 6),
)
DEFAULT_DAYPART = "Dinner"

EXCEPTION_CATEGORIES: tuple[str, ...] = ("Marketing Comps", "Organizational", "Voids")
MARKETING_COMPS, ORGANIZATIONAL, VOIDS = EXCEPTION_CATEGORIES

DEFAULT_ORDER_TYPES: tuple[str, ...] = ("Seated", "TA", "Delivery")
DEFAULT_REVENUE_CENTER = "Restaurant (default)"
DEFAULT_TAX_RATE = Decimal("6.625")
UNCATEGORIZED = "Uncategorized"

DEFAULT_TIP_OUT_RULES: tuple[TipOutRule, ...] = (
    TipOutRule("Bar", Decimal("10.00")),
    TipOutRule("Busser", Decimal("3.00")),
    TipOutRule("Runner", Decimal("3.00")),
    TipOutRule("Bar Back", Decimal("3.00")),
)

GRATUITY_TYPES = ("percentage", "fixed_money")


@dataclass
class ReportConfig:
    """Settings shared by all report builders.

    Attributes:
        timezone: IANA timezone used to resolve "today" when no report date
            is given.
        tax_rate_percent: Rate shown on the single tax-rate bucket.
        dayparts: Ordered daypart table; the first matching range wins.
        default_daypart: Bucket for hours no range matches.
        revenue_center_name: Name of the single revenue center.
        order_types: Order-type buckets, always emitted in this order.
        default_order_type: Bucket every order is counted in.
        gratuity_setting: Automatic gratuity applied to orders whose
            gratuity key is "Auto". None disables it.
        tip_out_rules: Suggested tip-out shares for the Z-report.
    """

    timezone: str = "UTC"
    tax_rate_percent: Decimal = DEFAULT_TAX_RATE
    dayparts: tuple[DaypartRange, ...] = DEFAULT_DAYPARTS
    default_daypart: str = DEFAULT_DAYPART
    revenue_center_name: str = DEFAULT_REVENUE_CENTER
    order_types: tuple[str, ...] = DEFAULT_ORDER_TYPES
    default_order_type: str = "Seated"
    gratuity_setting: GratuitySetting | None = None
    tip_out_rules: tuple[TipOutRule, ...] = field(default=DEFAULT_TIP_OUT_RULES)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every setting, raising ConfigError on the first bad value."""
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone '{self.timezone}'") from e

        if not self.dayparts:
            raise ConfigError("Daypart table must not be empty")
        for daypart in self.dayparts:
            for hour in (daypart.start_hour, daypart.end_hour):
                if not 0 <= hour <= 23:
                    raise ConfigError(
                        f"Daypart '{daypart.name}' hour {hour} is outside 0-23"
                    )

        if self.default_order_type not in self.order_types:
            raise ConfigError(
                f"Default order type '{self.default_order_type}' is not one of {self.order_types}"
            )

        if self.tax_rate_percent < 0:
            raise ConfigError("tax_rate_percent must not be negative")

        for rule in self.tip_out_rules:
            if rule.percentage < 0:
                raise ConfigError(f"Tip-out percentage for '{rule.role}' must not be negative")

        if self.gratuity_setting is not None:
            if self.gratuity_setting.gratuity_type not in GRATUITY_TYPES:
                raise ConfigError(
                    f"Invalid gratuity type '{self.gratuity_setting.gratuity_type}'. "
                    f"Must be one of {GRATUITY_TYPES}."
                )

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return datetime.now(ZoneInfo(self.timezone)).date()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ReportConfig:
        """Build a config from plain JSON-like data.

        Args:
            data: Mapping with any of the ReportConfig field names. Dayparts
                are ``[{"name", "start_hour", "end_hour"}, ...]``, tip-out
                rules ``[{"role", "percentage"}, ...]`` and the gratuity
                setting ``{"gratuity_type", "gratuity_value"}``.

        Returns:
            ReportConfig instance.

        Raises:
            ConfigError: If keys are unknown or values are invalid.

        Examples:
            >>> cfg = ReportConfig.from_mapping({"timezone": "America/New_York"})
            >>> cfg.default_daypart
            'Dinner'

        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")

        kwargs: dict[str, Any] = dict(data)
        try:
            if "tax_rate_percent" in kwargs:
                kwargs["tax_rate_percent"] = to_decimal(kwargs["tax_rate_percent"])
            if "dayparts" in kwargs:
                kwargs["dayparts"] = tuple(
                    DaypartRange(str(d["name"]), int(d["start_hour"]), int(d["end_hour"]))
                    for d in kwargs["dayparts"]
                )
            if "order_types" in kwargs:
                kwargs["order_types"] = tuple(str(t) for t in kwargs["order_types"])
            if "tip_out_rules" in kwargs:
                kwargs["tip_out_rules"] = tuple(
                    TipOutRule(str(r["role"]), to_decimal(r["percentage"]))
                    for r in kwargs["tip_out_rules"]
                )
            if kwargs.get("gratuity_setting") is not None:
                g = kwargs["gratuity_setting"]
                kwargs["gratuity_setting"] = GratuitySetting(
                    str(g["gratuity_type"]), to_decimal(g["gratuity_value"])
                )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str | Path) -> ReportConfig:
        """Load a config from a JSON file (see :meth:`from_mapping`)."""
        if isinstance(path, str):
            path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read report config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Report config {path} must contain a JSON object")
        return cls.from_mapping(data)
