"""Tests for display formatting helpers."""

from decimal import Decimal

import pytest

from dealcheck_core.formatting import (
    format_currency,
    format_currency_exact,
    format_percent,
    frequency_label,
)
from dealcheck_core.models import PaymentFrequency
from dealcheck_core.rounding import quantize_half_up


class TestFormatCurrency:
    """Test suite for currency formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("0", "$0"),
            ("44", "$44"),
            ("1234.5", "$1,235"),
            ("3000", "$3,000"),
            ("1250000", "$1,250,000"),
            ("-40", "-$40"),
            ("-0.4", "$0"),
        ],
    )
    def test_whole_dollars(self, value, expected):
        assert format_currency(Decimal(value)) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("513.888", "$513.89"), ("538.75", "$538.75"), ("0.005", "$0.01"), ("-12.5", "-$12.50")],
    )
    def test_exact(self, value, expected):
        assert format_currency_exact(Decimal(value)) == expected


class TestFormatPercent:
    """Test suite for percent formatting."""

    @pytest.mark.parametrize(
        "value,precision,expected",
        [
            ("4.4444", 1, "4.4%"),
            ("12.6083", 1, "12.6%"),
            ("1.25", 1, "1.3%"),
            ("55", 1, "55.0%"),
            ("-6", 1, "-6.0%"),
            ("4.4444", 2, "4.44%"),
        ],
    )
    def test_format_percent(self, value, precision, expected):
        assert format_percent(Decimal(value), precision) == expected


class TestFrequencyLabel:
    """Test suite for frequency_label."""

    def test_labels(self):
        assert frequency_label(PaymentFrequency.MONTHLY) == "month"
        assert frequency_label(PaymentFrequency.BIWEEKLY) == "biweekly"


class TestLargeValues:
    """Values whose rounded form has more than 28 digits."""

    def test_currency(self):
        assert format_currency(Decimal("1E+28")) == "$10,000,000,000,000,000,000,000,000,000"
        assert format_currency(Decimal("-1E+28")) == "-$10,000,000,000,000,000,000,000,000,000"

    def test_percent(self):
        assert format_percent(Decimal("1.56E+31")) == "15600000000000000000000000000000.0%"

    def test_quantize_half_up(self):
        value = Decimal("123456789012345678901234567890.5")

        assert quantize_half_up(value, Decimal("1")) == Decimal("123456789012345678901234567891")
        assert quantize_half_up(Decimal("-2.5"), Decimal("1")) == Decimal("-3")
