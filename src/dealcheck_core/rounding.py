"""Half-away-from-zero rounding for Decimal amounts of any magnitude."""

from decimal import ROUND_HALF_UP, Decimal, localcontext


def quantize_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    """
    Round ``value`` to the place of ``exponent`` (e.g. ``Decimal("0.01")``).

    Precision is widened for the call when the rounded result has more
    digits than the current context holds.
    """
    value = Decimal(value)
    with localcontext() as ctx:
        digits = value.adjusted() - exponent.as_tuple().exponent + 2
        ctx.prec = max(ctx.prec, digits)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)
