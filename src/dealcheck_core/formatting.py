"""Consistent formatting for money and percentages. Never render raw Decimals."""

from decimal import Decimal

from .models import PaymentFrequency
from .rounding import quantize_half_up


def _quantize(value: Decimal, precision: int) -> Decimal:
    return quantize_half_up(value, Decimal(1).scaleb(-precision))


def format_currency(value: Decimal, precision: int = 0) -> str:
    """Format as dollars, e.g. ``$1,235`` or ``-$40``."""
    rounded = _quantize(value, precision)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${rounded.copy_abs():,.{precision}f}"


def format_currency_exact(value: Decimal) -> str:
    """Format as dollars and cents."""
    return format_currency(value, precision=2)


def format_percent(value: Decimal, precision: int = 1) -> str:
    """Format a value already expressed in percent, e.g. ``4.4%``."""
    return f"{_quantize(value, precision):.{precision}f}%"


def frequency_label(frequency: PaymentFrequency) -> str:
    """Word used after a slash in per-period amounts ("$650/month")."""
    return "biweekly" if frequency == PaymentFrequency.BIWEEKLY else "month"
