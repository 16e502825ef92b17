"""Letter grades for lease metrics.

Four single-metric graders plus a weighted composite. Each grader is a step
function onto A-F; the composite averages the component scores with fixed
weights and subtracts a junk-fee penalty.
"""

from decimal import Decimal

from .models import Grade, GradeLetter

GRADE_SCORES: dict[GradeLetter, int] = {
    GradeLetter.A: 4,
    GradeLetter.B: 3,
    GradeLetter.C: 2,
    GradeLetter.D: 1,
    GradeLetter.F: 0,
}

# Composite weights
ONE_PERCENT_WEIGHT = Decimal("0.35")
MONEY_FACTOR_WEIGHT = Decimal("0.30")
SELLING_PRICE_WEIGHT = Decimal("0.20")
RESIDUAL_WEIGHT = Decimal("0.15")

JUNK_FEE_PENALTY_DIVISOR = Decimal("1000")
MAX_JUNK_FEE_PENALTY = Decimal("1.5")


def _grade(letter: GradeLetter, label: str, description: str) -> Grade:
    return Grade(letter=letter, label=label, description=description)


def grade_money_factor(apr: Decimal) -> Grade:
    """
    Grade the APR implied by the money factor.

    Subsidized rates (0-2%) earn an A, typical good rates (2-4%) a B.
    """
    if apr <= 2:
        return _grade(GradeLetter.A, "Excellent Rate", "This APR is subsidized or very low. Great financing terms.")
    if apr <= 4:
        return _grade(GradeLetter.B, "Good Rate", "This APR is reasonable for a lease. Close to typical buy rates.")
    if apr <= 6:
        return _grade(
            GradeLetter.C,
            "Average Rate",
            "This APR is average. The dealer may have marked up the money factor.",
        )
    if apr <= 8:
        return _grade(
            GradeLetter.D,
            "High Rate",
            "This APR is above average. The dealer is likely marking up the money factor significantly.",
        )
    return _grade(
        GradeLetter.F,
        "Very High Rate",
        "This APR is very high. The dealer is almost certainly marking up the money factor "
        "well above the buy rate.",
    )


def grade_selling_price(discount_percent: Decimal) -> Grade:
    """Grade the discount from MSRP. Negative means a markup."""
    if discount_percent >= 8:
        return _grade(GradeLetter.A, "Great Price", "Excellent discount off MSRP. Strong negotiation.")
    if discount_percent >= 5:
        return _grade(GradeLetter.B, "Good Price", "Solid discount below MSRP.")
    if discount_percent >= 2:
        return _grade(GradeLetter.C, "Fair Price", "Modest discount. There may be room to negotiate further.")
    if discount_percent >= 0:
        return _grade(
            GradeLetter.D,
            "MSRP or Near",
            "You're paying at or near sticker price. Try to negotiate lower.",
        )
    return _grade(
        GradeLetter.F,
        "Above MSRP",
        "You're paying ABOVE sticker price (dealer markup/market adjustment). Walk away unless "
        "this is a very high-demand vehicle.",
    )


def residual_threshold_adjustment(term_months: int) -> int:
    """Shift applied to residual thresholds; shorter leases carry higher residuals."""
    if term_months <= 24:
        return 5
    if term_months <= 36:
        return 0
    return -5


def grade_residual(residual_percent: Decimal, term_months: int) -> Grade:
    """Grade the residual as a percentage of MSRP, benchmarked by term."""
    adj = residual_threshold_adjustment(term_months)

    if residual_percent >= 60 + adj:
        return _grade(
            GradeLetter.A,
            "Strong Residual",
            "This vehicle holds its value well. Less depreciation means lower payments.",
        )
    if residual_percent >= 55 + adj:
        return _grade(GradeLetter.B, "Good Residual", "Above-average residual value. Reasonable depreciation.")
    if residual_percent >= 50 + adj:
        return _grade(GradeLetter.C, "Average Residual", "Typical residual for this term length.")
    if residual_percent >= 45 + adj:
        return _grade(
            GradeLetter.D,
            "Below Average",
            "Lower residual means more depreciation and higher payments.",
        )
    return _grade(
        GradeLetter.F,
        "Poor Residual",
        "This vehicle depreciates heavily. Your monthly payments will be high relative to the car's value.",
    )


def grade_one_percent(percent: Decimal) -> Grade:
    """Grade the $0-down monthly payment as a percentage of MSRP."""
    if percent <= Decimal("0.8"):
        return _grade(
            GradeLetter.A,
            "Exceptional Deal",
            "Well under the 1% rule. This is an outstanding lease deal.",
        )
    if percent <= Decimal("1.0"):
        return _grade(GradeLetter.B, "Good Deal", "Meets the 1% rule. This is a good lease deal.")
    if percent <= Decimal("1.2"):
        return _grade(
            GradeLetter.C,
            "Fair Deal",
            "Slightly above the 1% rule. Decent but there's room for improvement.",
        )
    if percent <= Decimal("1.5"):
        return _grade(
            GradeLetter.D,
            "Below Average",
            "Noticeably above the 1% rule. You're likely overpaying.",
        )
    return _grade(GradeLetter.F, "Poor Deal", "Well above the 1% rule. This deal needs significant improvement.")


def junk_fee_penalty(total_junk_fees: Decimal) -> Decimal:
    """One grade point per $1,000 of junk fees, capped at 1.5."""
    return min(total_junk_fees / JUNK_FEE_PENALTY_DIVISOR, MAX_JUNK_FEE_PENALTY)


def composite_score(
    money_factor_grade: Grade,
    selling_price_grade: Grade,
    residual_grade: Grade,
    one_percent_grade: Grade,
    total_junk_fees: Decimal,
) -> Decimal:
    """Weighted component score minus the junk-fee penalty, floored at 0."""
    weighted = (
        GRADE_SCORES[one_percent_grade.letter] * ONE_PERCENT_WEIGHT
        + GRADE_SCORES[money_factor_grade.letter] * MONEY_FACTOR_WEIGHT
        + GRADE_SCORES[selling_price_grade.letter] * SELLING_PRICE_WEIGHT
        + GRADE_SCORES[residual_grade.letter] * RESIDUAL_WEIGHT
    )
    return max(weighted - junk_fee_penalty(total_junk_fees), Decimal("0"))


def grade_overall(
    money_factor_grade: Grade,
    selling_price_grade: Grade,
    residual_grade: Grade,
    one_percent_grade: Grade,
    total_junk_fees: Decimal,
) -> Grade:
    """
    Overall grade from the component grades.

    Weighted: 1% rule (35%), money factor (30%), selling price (20%),
    residual (15%), minus min(junk fees / 1000, 1.5).
    """
    score = composite_score(
        money_factor_grade,
        selling_price_grade,
        residual_grade,
        one_percent_grade,
        total_junk_fees,
    )

    if score >= Decimal("3.5"):
        return _grade(
            GradeLetter.A,
            "Great Deal",
            "This lease is well-structured with competitive terms across the board.",
        )
    if score >= Decimal("2.5"):
        return _grade(GradeLetter.B, "Good Deal", "This is a solid lease deal. Minor areas could be improved.")
    if score >= Decimal("1.5"):
        return _grade(
            GradeLetter.C,
            "Fair Deal",
            "This deal is average. Several areas could be negotiated for better terms.",
        )
    if score >= Decimal("0.75"):
        return _grade(
            GradeLetter.D,
            "Below Average",
            "This deal has significant issues. You should negotiate before signing.",
        )
    return _grade(
        GradeLetter.F,
        "Bad Deal",
        "This deal has major problems. Do not sign without substantial changes.",
    )
