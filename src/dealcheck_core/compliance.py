"""Ontario dealer compliance checks (OMVIC / Consumer Protection Act).

Two sources of violations:
1. Auto-detected - flagged from the lease analysis numbers alone
2. Checklist - yes/no questions the consumer answers about the dealer

Sources:
- OMVIC Mandatory Disclosures (omvic.ca)
- Consumer Protection Act, 2002 (CPA) Part VIII, s.14-17
- Motor Vehicle Dealers Act (MVDA), O. Reg. 333/08 s.35-36, s.43
- O. Reg. 17/05 s.29 (lease disclosure requirements)
"""

from decimal import Decimal
from typing import Mapping, Optional, Union

import structlog

from .exceptions import ValidationError
from .formatting import format_percent
from .models import (
    ChecklistAnswer,
    ComplianceReport,
    ComplianceRule,
    LeaseAnalysis,
    Violation,
    ViolationCategory,
    ViolationSeverity,
)

logger = structlog.get_logger()

EXTREME_APR_THRESHOLD = Decimal("10")
ABOVE_MSRP_THRESHOLD = Decimal("-5")


# =============================================================================
# AUTO-DETECTED VIOLATIONS
# =============================================================================


def detect_auto_violations(analysis: LeaseAnalysis) -> list[Violation]:
    """Flag violations visible in the lease numbers without asking the user."""
    violations: list[Violation] = []

    if analysis.apr > EXTREME_APR_THRESHOLD:
        violations.append(
            Violation(
                id="auto_extreme_apr",
                title="Extremely high hidden APR",
                severity=ViolationSeverity.SERIOUS,
                regulation="CPA s.74 / O. Reg. 17/05 s.29",
                explanation=(
                    f"Your lease has a hidden APR of {format_percent(analysis.apr)}. Ontario law "
                    "requires the APR to be clearly disclosed on the contract with equal prominence "
                    "to the payment amount. An APR this high may indicate the money factor has been "
                    "marked up well beyond the buy rate, or that fees have been rolled into the "
                    "financing without disclosure."
                ),
                remedy=(
                    "Check your contract for the APR. If it's missing or doesn't match, file a "
                    "complaint with OMVIC. The dealer is required by law to disclose it."
                ),
                auto_detected=True,
            )
        )

    if analysis.selling_price_discount < ABOVE_MSRP_THRESHOLD:
        violations.append(
            Violation(
                id="auto_above_msrp",
                title="Selling significantly above MSRP",
                severity=ViolationSeverity.MODERATE,
                regulation="O. Reg. 333/08 s.35 (All-in Pricing)",
                explanation=(
                    "The selling price is more than 5% above MSRP. While not illegal on its own, "
                    'any "market adjustment" or "additional dealer markup" must be included in the '
                    "all-in advertised price under Ontario law. If the advertised price was lower "
                    "than what you're being charged, that's an all-in pricing violation."
                ),
                remedy=(
                    "Compare the price on the contract to what was advertised. If they added fees "
                    "on top of the advertised price (other than HST and licensing), file an OMVIC "
                    "complaint."
                ),
                auto_detected=True,
            )
        )

    return violations


# =============================================================================
# CHECKLIST
# =============================================================================

_YES = ChecklistAnswer.YES

OMVIC_RULES: tuple[ComplianceRule, ...] = (
    # Pricing
    ComplianceRule(
        id="all_in_pricing",
        category=ViolationCategory.PRICING,
        question=(
            "Did the dealer add fees on top of the advertised or posted price "
            "(other than HST and licensing)?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="All-in pricing violation",
        regulation="O. Reg. 333/08 s.35-36",
        explanation=(
            "Ontario's all-in pricing law requires the advertised price to include ALL dealer "
            "fees: admin, documentation, freight, PDI, OMVIC fee, everything. The ONLY things "
            "that can be added on top are HST and government licensing/registration."
        ),
        remedy=(
            "File an OMVIC complaint (1-800-943-6002 or consumers@omvic.on.ca). The dealer can be "
            "fined and must refund the excess fees. Keep a screenshot of the advertisement and a "
            "copy of your contract."
        ),
    ),
    ComplianceRule(
        id="preinstalled_upcharge",
        category=ViolationCategory.PRICING,
        question=(
            "Did the dealer charge you extra for products already installed on the vehicle "
            "(nitrogen tires, VIN etching, paint protection, etc.) that weren't in the advertised price?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Pre-installed products not in advertised price",
        regulation="O. Reg. 333/08 s.36",
        explanation=(
            "If a product is already installed on the vehicle when you see it, its cost must be "
            "included in the advertised all-in price. The dealer cannot install something and "
            "then charge you for it on top of the sticker."
        ),
        remedy=(
            "File an OMVIC complaint. You should not have to pay above the advertised price for "
            "pre-installed items."
        ),
    ),
    ComplianceRule(
        id="fees_not_disclosed",
        category=ViolationCategory.PRICING,
        question=(
            "Were there fees or charges on the final contract that were not shown to you in "
            "writing before you agreed to the deal?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Fees not disclosed before signing",
        regulation="CPA s.74 / O. Reg. 333/08 s.39-42",
        explanation=(
            "All costs must be clearly disclosed in writing before you sign, and every fee must "
            "be separately itemized on the bill of sale."
        ),
        remedy=(
            "File an OMVIC complaint. You may be able to have the contract rescinded (voided) "
            "under the CPA."
        ),
    ),
    # Lease disclosure
    ComplianceRule(
        id="apr_not_shown",
        category=ViolationCategory.LEASE_TERMS,
        question=(
            "Is the Annual Percentage Rate (APR) missing from your lease contract, or is it "
            "buried in fine print while the payment amount is prominent?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="APR not properly disclosed",
        regulation="CPA s.74 / O. Reg. 17/05 s.29",
        explanation=(
            "Ontario law requires the APR to be displayed on the lease contract with equal "
            "prominence to the payment amount."
        ),
        remedy=(
            "Ask the dealer to provide the APR in writing. If they refuse, file an OMVIC "
            "complaint. The missing APR may be grounds to rescind the contract."
        ),
    ),
    ComplianceRule(
        id="total_cost_missing",
        category=ViolationCategory.LEASE_TERMS,
        question=(
            "Does your lease contract fail to show the total cost of the lease (total of all "
            "payments over the full term)?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.MODERATE,
        title="Total lease obligation not disclosed",
        regulation="O. Reg. 17/05 s.29",
        explanation=(
            "The total obligation, the sum of all payments you'll make over the life of the "
            "lease, must be clearly stated on the contract."
        ),
        remedy="Ask the dealer to add this figure. File an OMVIC complaint if they refuse.",
    ),
    ComplianceRule(
        id="residual_not_clear",
        category=ViolationCategory.LEASE_TERMS,
        question=(
            "Does your lease fail to clearly state the residual value and whether you can "
            "purchase the vehicle at lease end?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.MODERATE,
        title="Residual value / purchase option not disclosed",
        regulation="O. Reg. 17/05 s.29",
        explanation=(
            "For option leases, the purchase option price and how to exercise it must be stated. "
            "For residual obligation leases, the estimated residual value and estimated residual "
            "cash payment must be disclosed."
        ),
        remedy="Ask the dealer to clarify this in writing before signing.",
    ),
    # Sales practices
    ComplianceRule(
        id="tied_selling",
        category=ViolationCategory.SALES_PRACTICES,
        question=(
            "Did the dealer say you must buy additional products (extended warranty, paint "
            "protection, coating, etc.) to get the vehicle or the quoted price?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Tied selling (forced add-ons)",
        regulation="CPA s.14",
        explanation=(
            "Dealers cannot require you to purchase additional products or services as a "
            'condition of the sale. "This price is only available with the protection package" '
            "is illegal tied selling."
        ),
        remedy=(
            "Tell the dealer you want the vehicle without the add-ons. If they refuse, file an "
            "OMVIC complaint."
        ),
    ),
    ComplianceRule(
        id="unauthorized_addons",
        category=ViolationCategory.SALES_PRACTICES,
        question=(
            "Were there products or charges on the final contract that you did not specifically "
            "ask for or agree to?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Unauthorized add-ons (negative option billing)",
        regulation="CPA s.13",
        explanation=(
            "Dealers cannot add products or services that you did not explicitly agree to, such "
            "as paint protection, nitrogen fill or VIN etching."
        ),
        remedy=(
            "Refuse to sign until they're removed. If you already signed, file an OMVIC "
            "complaint."
        ),
    ),
    ComplianceRule(
        id="pressure_tactics",
        category=ViolationCategory.SALES_PRACTICES,
        question=(
            'Did the dealer pressure you with false urgency, e.g. "someone else is coming to buy '
            'it today" or "this price expires in one hour"?'
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="False or misleading representations",
        regulation="CPA s.14",
        explanation=(
            "Making false or misleading representations about the urgency of a purchase is a "
            "prohibited unfair practice under Ontario's Consumer Protection Act."
        ),
        remedy=(
            "Walk away. A legitimate deal will still be available tomorrow. If you already signed "
            "under pressure, file an OMVIC complaint."
        ),
    ),
    ComplianceRule(
        id="misrepresentation",
        category=ViolationCategory.SALES_PRACTICES,
        question=(
            "Did the dealer make claims about the vehicle (features, condition, history, mileage) "
            "that you later found to be untrue?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Misrepresentation of vehicle",
        regulation="CPA s.14 / O. Reg. 332/08 (Code of Ethics)",
        explanation=(
            "Dealers must not make false or misleading representations about the vehicle. Under "
            "the CPA, you can rescind a contract entered into through unfair practices within 1 year."
        ),
        remedy=(
            "Document what was claimed vs. reality and file an OMVIC complaint. Misrepresentation "
            "is grounds to rescind the contract within 1 year (CPA s.18)."
        ),
    ),
    ComplianceRule(
        id="contract_not_explained",
        category=ViolationCategory.SALES_PRACTICES,
        question=(
            'Did the dealer say "just sign here" without explaining the key terms: total cost, '
            "interest rate, or your obligations?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.MODERATE,
        title="Contract terms not explained before signing",
        regulation="O. Reg. 332/08 (Code of Ethics)",
        explanation=(
            "The Code of Ethics requires the dealer to explain the terms of the contract before "
            "you sign, including your total financial obligation and interest rate."
        ),
        remedy="File an OMVIC complaint. Code of Ethics violations can result in fines for the dealer.",
    ),
    # Vehicle history
    ComplianceRule(
        id="no_history_disclosure",
        category=ViolationCategory.DISCLOSURE,
        question=(
            "Did the dealer fail to disclose IN WRITING whether the vehicle was ever a "
            "rental/police car, had structural damage, was flood/fire damaged, branded as "
            "salvage/rebuilt, or had repairs over $3,000?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Mandatory vehicle history not disclosed",
        regulation="O. Reg. 333/08 s.42-43 / s.50",
        explanation=(
            "Ontario dealers must disclose vehicle history IN WRITING on the contract. Verbal "
            "disclosure does not count."
        ),
        remedy=(
            "You have a 90-day cancellation right (O. Reg. 333/08 s.50) for undisclosed branding, "
            "prior rental/police/taxi use, or an inaccurate odometer. Send written cancellation "
            "notice and file an OMVIC complaint."
        ),
    ),
    ComplianceRule(
        id="odometer_issue",
        category=ViolationCategory.DISCLOSURE,
        question=(
            "Do you suspect the odometer reading is inaccurate, or did the dealer fail to confirm "
            "in writing whether the odometer has been replaced or tampered with?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Odometer disclosure issue",
        regulation="O. Reg. 333/08 s.42 / s.50 / Criminal Code s.380",
        explanation=(
            "Dealers must disclose the odometer reading in writing and confirm whether it's "
            "believed to be accurate."
        ),
        remedy=(
            "You have a 90-day cancellation right if the odometer is inaccurate. File an OMVIC "
            "complaint and consider reporting deliberate tampering to police."
        ),
    ),
    # Deposits
    ComplianceRule(
        id="deposit_not_returned",
        category=ViolationCategory.DEPOSITS,
        question=(
            "Did you leave a deposit and then have trouble getting it back when you decided not "
            "to proceed (before signing a final binding contract)?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Deposit not returned",
        regulation="MVDA / CPA / OMVIC guidance",
        explanation=(
            "If no binding contract was signed, the dealer must return your deposit. There is no "
            'such thing as a "non-refundable deposit" before a binding contract exists.'
        ),
        remedy=(
            "Send a written demand by registered mail and file an OMVIC complaint. Small Claims "
            "Court is also an option."
        ),
    ),
    # Trade-in
    ComplianceRule(
        id="trade_in_not_itemized",
        category=ViolationCategory.TRADE_IN,
        question=(
            "If you traded in a vehicle, was the trade-in value missing from the paperwork or "
            "rolled into the price rather than shown as a separate line?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.MODERATE,
        title="Trade-in value not separately disclosed",
        regulation="O. Reg. 333/08 s.43(4)",
        explanation="The trade-in value must be clearly shown as a separate line item.",
        remedy="Ask for the trade-in value to be shown separately on a revised breakdown.",
    ),
    ComplianceRule(
        id="trade_in_not_returned",
        category=ViolationCategory.TRADE_IN,
        question=(
            "Did you ask for your trade-in vehicle back before the deal was finalized, and the "
            "dealer refused or said they already sold it?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Trade-in not returned on request",
        regulation="O. Reg. 333/08 s.38",
        explanation=(
            "If you request the return of your trade-in BEFORE the contract for the new vehicle "
            "is complete, the dealer MUST return it immediately."
        ),
        remedy=(
            "File an OMVIC complaint immediately. If they disposed of it, pursue the value "
            "through Small Claims Court."
        ),
    ),
    ComplianceRule(
        id="trade_in_bait_switch",
        category=ViolationCategory.TRADE_IN,
        question=(
            "Did the dealer raise the selling price of the vehicle after you discussed your "
            "trade-in, effectively taking back the trade-in value through a higher price?"
        ),
        violation_answer=_YES,
        severity=ViolationSeverity.SERIOUS,
        title="Trade-in bait and switch",
        regulation="CPA s.14 (unfair practice)",
        explanation=(
            "Inflating the trade-in value while quietly raising the selling price is a deceptive "
            "practice under the CPA."
        ),
        remedy=(
            "Compare the selling price to what was quoted before the trade-in discussion. File "
            "an OMVIC complaint if the price was inflated."
        ),
    ),
)

_RULES_BY_ID = {rule.id: rule for rule in OMVIC_RULES}

CATEGORY_LABELS: dict[ViolationCategory, str] = {
    ViolationCategory.PRICING: "Pricing & Fees",
    ViolationCategory.LEASE_TERMS: "Lease Contract Disclosure",
    ViolationCategory.SALES_PRACTICES: "Sales Tactics",
    ViolationCategory.DISCLOSURE: "Vehicle History",
    ViolationCategory.DEPOSITS: "Deposits",
    ViolationCategory.TRADE_IN: "Trade-in",
}

CATEGORY_ORDER: tuple[ViolationCategory, ...] = (
    ViolationCategory.SALES_PRACTICES,
    ViolationCategory.PRICING,
    ViolationCategory.LEASE_TERMS,
    ViolationCategory.DISCLOSURE,
    ViolationCategory.TRADE_IN,
    ViolationCategory.DEPOSITS,
)


def rules_by_category() -> dict[ViolationCategory, list[ComplianceRule]]:
    """Checklist rules grouped by category, in display order."""
    return {
        category: [rule for rule in OMVIC_RULES if rule.category == category]
        for category in CATEGORY_ORDER
    }


def _parse_answer(rule_id: str, answer: Union[ChecklistAnswer, str]) -> ChecklistAnswer:
    try:
        return ChecklistAnswer(answer)
    except ValueError as e:
        raise ValidationError(
            f"Invalid answer for compliance question {rule_id!r}",
            field=rule_id,
            value=answer,
            constraint="Must be 'yes' or 'no'",
        ) from e


def evaluate_checklist(
    answers: Mapping[str, Union[ChecklistAnswer, str, None]],
) -> list[Violation]:
    """
    Turn checklist answers into violations.

    Args:
        answers: Rule id to "yes"/"no". None or missing means unanswered.

    Returns:
        Violations for every rule answered with its violation answer,
        in checklist order

    Raises:
        ValidationError: An id is not a known rule or an answer is not yes/no
    """
    parsed: dict[str, ChecklistAnswer] = {}
    for rule_id, answer in answers.items():
        if rule_id not in _RULES_BY_ID:
            raise ValidationError(
                "Unknown compliance question",
                field="answers",
                value=rule_id,
                constraint="Must be one of the OMVIC_RULES ids",
            )
        if answer is not None:
            parsed[rule_id] = _parse_answer(rule_id, answer)

    return [
        Violation(
            id=rule.id,
            title=rule.title,
            severity=rule.severity,
            regulation=rule.regulation,
            explanation=rule.explanation,
            remedy=rule.remedy,
        )
        for rule in OMVIC_RULES
        if parsed.get(rule.id) == rule.violation_answer
    ]


def check_dealer_compliance(
    analysis: LeaseAnalysis,
    answers: Optional[Mapping[str, Union[ChecklistAnswer, str, None]]] = None,
) -> ComplianceReport:
    """Combine auto-detected violations with checklist answers."""
    violations = detect_auto_violations(analysis) + evaluate_checklist(answers or {})

    report = ComplianceReport(violations=violations)
    logger.info(
        "dealer_compliance_checked",
        violations=len(report.violations),
        serious=report.serious_count,
    )
    return report
