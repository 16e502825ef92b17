"""Payment period conversions.

All rate math runs on monthly amounts. Biweekly quotes (26 payments a year)
are converted in, and display values converted back out, through here.
"""

from decimal import Decimal

from .models import PaymentFrequency
from .rounding import quantize_half_up

BIWEEKLY_PERIODS_PER_YEAR = 26
MONTHS_PER_YEAR = 12


def to_monthly(amount: Decimal, frequency: PaymentFrequency) -> Decimal:
    """Convert a per-period amount to its monthly equivalent.

    Biweekly: amount × 26 / 12. Monthly amounts pass through unchanged.
    """
    if frequency == PaymentFrequency.BIWEEKLY:
        return amount * BIWEEKLY_PERIODS_PER_YEAR / MONTHS_PER_YEAR
    return amount


def to_per_period(monthly_amount: Decimal, frequency: PaymentFrequency) -> Decimal:
    """Convert a monthly amount to the given payment frequency."""
    if frequency == PaymentFrequency.BIWEEKLY:
        return monthly_amount * MONTHS_PER_YEAR / BIWEEKLY_PERIODS_PER_YEAR
    return monthly_amount


def total_payments(term_months: int, frequency: PaymentFrequency) -> int:
    """Number of payments over the lease term.

    Biweekly counts are rounded half away from zero, e.g. 39 months gives
    84.5 and rounds to 85.
    """
    if frequency == PaymentFrequency.BIWEEKLY:
        exact = Decimal(term_months) * BIWEEKLY_PERIODS_PER_YEAR / MONTHS_PER_YEAR
        return int(quantize_half_up(exact, Decimal("1")))
    return term_months
