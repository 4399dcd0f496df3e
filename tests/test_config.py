"""Tests for ReportConfig and the fixed bucket tables."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from pos_reports.config import (
    DEFAULT_DAYPARTS,
    DaypartRange,
    GratuitySetting,
    ReportConfig,
)
from pos_reports.exceptions import ConfigError, PosReportError


class TestDaypartRange:
    """Tests for hour-range membership."""

    def test_plain_range_end_is_exclusive(self) -> None:
        lunch = DaypartRange("Lunch", 11, 16)
        assert lunch.contains(11)
        assert lunch.contains(15)
        assert not lunch.contains(16)

    def test_range_wrapping_midnight(self) -> None:
        late = DaypartRange("Late Night", 23, 6)
        assert late.contains(23)
        assert late.contains(0)
        assert late.contains(5)
        assert not late.contains(6)
        assert not late.contains(22)

    def test_default_table_order(self) -> None:
        assert [d.name for d in DEFAULT_DAYPARTS] == ["Lunch", "Dinner", "Breakfast", "Late Night"]


class TestReportConfig:
    """Tests for ReportConfig validation and loading."""

    def test_defaults(self) -> None:
        config = ReportConfig()
        assert config.timezone == "UTC"
        assert config.tax_rate_percent == Decimal("6.625")
        assert config.default_daypart == "Dinner"
        assert config.order_types == ("Seated", "TA", "Delivery")
        assert [r.role for r in config.tip_out_rules] == ["Bar", "Busser", "Runner", "Bar Back"]

    def test_unknown_timezone(self) -> None:
        with pytest.raises(ConfigError, match="Unknown timezone"):
            ReportConfig(timezone="Mars/Olympus_Mons")

    def test_daypart_hour_out_of_range(self) -> None:
        with pytest.raises(ConfigError, match="outside 0-23"):
            ReportConfig(dayparts=(DaypartRange("Bad", 10, 24),))

    def test_default_order_type_must_be_listed(self) -> None:
        with pytest.raises(ConfigError):
            ReportConfig(default_order_type="Drive-thru")

    def test_invalid_gratuity_type(self) -> None:
        with pytest.raises(ConfigError, match="Invalid gratuity type"):
            ReportConfig(gratuity_setting=GratuitySetting("flat", Decimal("5")))

    def test_config_error_is_a_report_error(self) -> None:
        with pytest.raises(PosReportError):
            ReportConfig(tax_rate_percent=Decimal("-1"))

    def test_from_mapping(self) -> None:
        config = ReportConfig.from_mapping(
            {
                "timezone": "America/New_York",
                "tax_rate_percent": "8.875",
                "dayparts": [{"name": "All Day", "start_hour": 0, "end_hour": 0}],
                "gratuity_setting": {"gratuity_type": "percentage", "gratuity_value": "18"},
            }
        )
        assert config.tax_rate_percent == Decimal("8.875")
        assert config.dayparts == (DaypartRange("All Day", 0, 0),)
        assert config.gratuity_setting == GratuitySetting("percentage", Decimal("18"))

    def test_from_mapping_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys"):
            ReportConfig.from_mapping({"currency": "USD"})

    def test_from_mapping_rejects_incomplete_rules(self) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            ReportConfig.from_mapping({"tip_out_rules": [{"role": "Bar"}]})

    def test_from_json(self, tmp_path: Path) -> None:
        path = tmp_path / "report.json"
        path.write_text(json.dumps({"revenue_center_name": "Patio"}), encoding="utf-8")
        assert ReportConfig.from_json(path).revenue_center_name == "Patio"

    def test_from_json_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read report config"):
            ReportConfig.from_json(tmp_path / "missing.json")
