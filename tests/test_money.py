"""Tests for the Decimal money helpers."""

from decimal import Decimal

import pytest

from pos_reports.money import parse_money, percent_of, quantize, safe_divide, sum_money, to_decimal, to_fixed2


class TestToDecimal:
    """Tests for to_decimal coercion."""

    def test_float_goes_through_str(self) -> None:
        """0.1 stays 0.1 instead of its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_and_nan_are_zero(self) -> None:
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(float("nan")) == Decimal("0")
        assert to_decimal("") == Decimal("0")

    def test_thousands_separator(self) -> None:
        assert to_decimal("1,234.50") == Decimal("1234.50")

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="Not a monetary amount"):
            to_decimal("ten dollars")


class TestToFixed2:
    """Tests for wire formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("2.675"), "2.68"),
            (Decimal("-2.675"), "-2.68"),
            (Decimal("0.005"), "0.01"),
            (Decimal("1234567.891"), "1234567.89"),
            (18, "18.00"),
            (Decimal("-0.001"), "0.00"),
            (Decimal("-0.00"), "0.00"),
        ],
    )
    def test_formats_half_up(self, value, expected: str) -> None:
        assert to_fixed2(value) == expected

    def test_reformatting_is_stable(self) -> None:
        """Formatting a parsed value gives back the same string."""
        for text in ["0.00", "12.35", "-7.10", "100.00"]:
            assert to_fixed2(parse_money(text)) == text

    def test_quantize_keeps_cents(self) -> None:
        assert quantize("3.14159") == Decimal("3.14")


class TestDivision:
    """Tests for zero-safe division helpers."""

    def test_safe_divide_by_zero(self) -> None:
        assert safe_divide(Decimal("10"), 0) == Decimal("0")

    def test_safe_divide(self) -> None:
        assert safe_divide(Decimal("10"), 4) == Decimal("2.5")

    def test_percent_of_zero_whole(self) -> None:
        assert percent_of(Decimal("5"), Decimal("0")) == Decimal("0")

    def test_percent_of(self) -> None:
        assert to_fixed2(percent_of(Decimal("1"), Decimal("3"))) == "33.33"

    def test_sum_money_mixed_inputs(self) -> None:
        assert sum_money([Decimal("1.10"), "2.20", 3, None]) == Decimal("6.30")
