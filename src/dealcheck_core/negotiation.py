"""Negotiation tips with monthly savings estimates.

Every rule is evaluated against the same TipContext and may add one tip.
Savings are reported in whole dollars per month; the emission thresholds
compare the unrounded estimate.
"""

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel

from .formatting import format_currency, format_percent
from .models import (
    FeeAnalysisItem,
    FeeLegitimacy,
    LeaseInput,
    NegotiationTip,
    TipPriority,
)
from .rounding import quantize_half_up

logger = structlog.get_logger()

APR_TO_MONEY_FACTOR = Decimal("2400")

HIGH_APR_THRESHOLD = Decimal("4")
HIGH_APR_REFERENCE = Decimal("3")
MODERATE_APR_THRESHOLD = Decimal("2")
MODERATE_APR_REFERENCE = Decimal("1.5")
MODERATE_APR_MIN_SAVINGS = Decimal("5")

PRICE_DISCOUNT_THRESHOLD = Decimal("3")
TARGET_DISCOUNT = Decimal("0.06")
PRICE_MIN_SAVINGS = Decimal("5")

NEGOTIABLE_RECOVERY_SHARE = Decimal("0.5")
NEGOTIABLE_MIN_SAVINGS = Decimal("3")

DOWN_PAYMENT_WARNING_THRESHOLD = Decimal("500")

ONE_PERCENT_BENCHMARK_THRESHOLD = Decimal("1.3")
BENCHMARK_MAX_PRIOR_TIPS = 5


class TipContext(BaseModel):
    """Everything the advisor may look at, computed by the lease calculator."""

    model_config = {"frozen": True}

    apr: Decimal
    money_factor: Decimal
    selling_price_discount: Decimal
    residual_percent: Decimal
    one_percent_rule: Decimal
    total_junk_fees: Decimal
    fee_analysis: list[FeeAnalysisItem]
    rent_charge: Decimal
    depreciation_payment: Decimal
    adjusted_cap_cost: Decimal
    effective_monthly_cost: Decimal
    lease_input: LeaseInput


def whole_dollars(amount: Decimal) -> Decimal:
    return quantize_half_up(amount, Decimal("1"))


def rent_savings_at(context: TipContext, reference_apr: Decimal) -> Decimal:
    """Monthly rent charge saved if the lease were written at ``reference_apr``."""
    reference_mf = reference_apr / APR_TO_MONEY_FACTOR
    better_rent = (context.adjusted_cap_cost + context.lease_input.residual_value) * reference_mf
    return max(context.rent_charge - better_rent, Decimal("0"))


def _money_factor_tip(context: TipContext) -> Optional[NegotiationTip]:
    apr_text = format_percent(context.apr)

    if context.apr > HIGH_APR_THRESHOLD:
        savings = whole_dollars(rent_savings_at(context, HIGH_APR_REFERENCE))
        return NegotiationTip(
            priority=TipPriority.HIGH,
            title="Negotiate the money factor (hidden interest rate)",
            detail=(
                f"Your hidden APR is {apr_text}. The dealer is likely marking up the base rate. "
                'Ask: "What is the buy rate money factor from the bank?" Then say: "I\'d like the '
                'lease at the buy rate, not a marked-up rate." This alone could save you '
                f"{format_currency(savings)}/month."
            ),
            potential_savings=savings,
        )

    if context.apr > MODERATE_APR_THRESHOLD:
        savings = rent_savings_at(context, MODERATE_APR_REFERENCE)
        if savings > MODERATE_APR_MIN_SAVINGS:
            return NegotiationTip(
                priority=TipPriority.MEDIUM,
                title="Ask about manufacturer lease specials",
                detail=(
                    f"Your APR of {apr_text} is okay but not great. Many manufacturers offer "
                    'subsidized rates as low as 0-2%. Ask: "Are there any manufacturer lease '
                    'incentives or special money factors available right now?"'
                ),
                potential_savings=whole_dollars(savings),
            )

    return None


def _selling_price_tip(context: TipContext) -> Optional[NegotiationTip]:
    if context.selling_price_discount >= PRICE_DISCOUNT_THRESHOLD:
        return None

    lease = context.lease_input
    target_price = lease.msrp * (1 - TARGET_DISCOUNT)
    monthly_savings = (lease.selling_price - target_price) / lease.lease_term
    if monthly_savings <= PRICE_MIN_SAVINGS:
        return None

    if context.selling_price_discount < 0:
        detail = (
            "You're paying ABOVE MSRP (dealer markup). Unless this is a very scarce vehicle, "
            "negotiate the selling price down to at least MSRP, ideally below. Get competing "
            "quotes from other dealers."
        )
    else:
        detail = (
            "You're paying near sticker price. Most vehicles can be negotiated 5-8% below MSRP. "
            "Get quotes from 3+ dealers and use them as leverage. Email dealers for internet pricing."
        )

    return NegotiationTip(
        priority=TipPriority.HIGH,
        title="Negotiate the selling price down",
        detail=detail,
        potential_savings=whole_dollars(monthly_savings),
    )


def _fees_with(context: TipContext, legitimacy: FeeLegitimacy) -> list[FeeAnalysisItem]:
    return [fee for fee in context.fee_analysis if fee.legitimacy == legitimacy]


def _junk_fee_tip(context: TipContext) -> Optional[NegotiationTip]:
    junk = _fees_with(context, FeeLegitimacy.JUNK)
    if not junk:
        return None

    total = sum((fee.amount for fee in junk), Decimal("0"))
    names = ", ".join(fee.name for fee in junk)
    return NegotiationTip(
        priority=TipPriority.HIGH,
        title="Remove junk fees",
        detail=(
            f"These fees are dealer add-ons with little to no value: {names}. Tell the dealer: "
            '"I want these removed from the deal." They may push back, so stand firm. These are '
            "profit centers, not required costs."
        ),
        potential_savings=whole_dollars(total / context.lease_input.lease_term),
    )


def _negotiable_fee_tip(context: TipContext) -> Optional[NegotiationTip]:
    negotiable = _fees_with(context, FeeLegitimacy.NEGOTIABLE)
    if not negotiable:
        return None

    total = sum((fee.amount for fee in negotiable), Decimal("0"))
    monthly_savings = total * NEGOTIABLE_RECOVERY_SHARE / context.lease_input.lease_term
    if monthly_savings <= NEGOTIABLE_MIN_SAVINGS:
        return None

    names = ", ".join(fee.name for fee in negotiable)
    return NegotiationTip(
        priority=TipPriority.MEDIUM,
        title="Negotiate optional fees",
        detail=(
            f"These fees may be negotiable: {names}. Ask the dealer to justify each one and "
            "push for reductions."
        ),
        potential_savings=whole_dollars(monthly_savings),
    )


def _down_payment_tip(context: TipContext) -> Optional[NegotiationTip]:
    down_payment = context.lease_input.down_payment
    if down_payment <= DOWN_PAYMENT_WARNING_THRESHOLD:
        return None

    # Risk warning, not a savings opportunity
    return NegotiationTip(
        priority=TipPriority.HIGH,
        title="Reconsider your down payment",
        detail=(
            f"You're putting {format_currency(down_payment)} down. On a lease, if the car is "
            "totaled or stolen, you LOSE your down payment: insurance pays the leasing company, "
            "not you. Keep your down payment at $0 and accept a higher payment instead. It's safer."
        ),
        potential_savings=Decimal("0"),
    )


def _benchmark_tip(context: TipContext, tips_so_far: int) -> Optional[NegotiationTip]:
    if context.one_percent_rule <= ONE_PERCENT_BENCHMARK_THRESHOLD:
        return None
    if tips_so_far >= BENCHMARK_MAX_PRIOR_TIPS:
        return None

    return NegotiationTip(
        priority=TipPriority.MEDIUM,
        title="Overall deal is above the 1% benchmark",
        detail=(
            "Your effective payment (normalized to $0 down) is "
            f"{format_percent(context.one_percent_rule)} of MSRP. A good lease deal is at or "
            "below 1%. This means the combination of price, rate, residual, and fees isn't "
            "competitive. Consider shopping other brands/models with better lease programs."
        ),
        potential_savings=Decimal("0"),
    )


def sort_tips(tips: list[NegotiationTip]) -> list[NegotiationTip]:
    """Order by priority, then by descending savings. Ties keep their order."""
    return sorted(tips, key=lambda tip: (tip.priority.rank, -tip.potential_savings))


def generate_tips(context: TipContext) -> list[NegotiationTip]:
    """
    Generate actionable negotiation tips for a lease.

    Args:
        context: Intermediate results from the lease calculator

    Returns:
        Tips sorted by priority then by descending monthly savings
    """
    tips: list[NegotiationTip] = []

    for rule in (
        _money_factor_tip,
        _selling_price_tip,
        _junk_fee_tip,
        _negotiable_fee_tip,
        _down_payment_tip,
    ):
        tip = rule(context)
        if tip is not None:
            tips.append(tip)

    benchmark = _benchmark_tip(context, len(tips))
    if benchmark is not None:
        tips.append(benchmark)

    logger.info(
        "negotiation_tips_generated",
        count=len(tips),
        titles=[tip.title for tip in tips],
    )

    return sort_tips(tips)
