"""Dealer fee rule table and classifier.

Each itemized fee on a lease worksheet is matched against FEE_RULES by
case-insensitive substring. Rules are checked top to bottom and the first
match wins, so a rule's position is its priority. Fees nobody recognizes are
treated as negotiable and the consumer is told to ask about them.
"""

from dataclasses import dataclass
from typing import Iterable

import structlog

from .models import FeeAnalysisItem, FeeClassification, FeeItem, FeeLegitimacy

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeeRule:
    """Trigger substrings and the classification they map to."""

    patterns: tuple[str, ...]
    legitimacy: FeeLegitimacy
    explanation: str

    def matches(self, normalized_name: str) -> bool:
        return any(pattern in normalized_name for pattern in self.patterns)


# =============================================================================
# LEGITIMATE FEES
# =============================================================================

_LEGITIMATE_RULES = (
    FeeRule(
        patterns=("acquisition", "bank fee"),
        legitimacy=FeeLegitimacy.LEGITIMATE,
        explanation=(
            "Set by the leasing company to originate the lease. Typically $595-$1,095. "
            "Not negotiable but legitimate."
        ),
    ),
    FeeRule(
        patterns=("registration", "title", "license", "plate", "tag", "dmv"),
        legitimacy=FeeLegitimacy.LEGITIMATE,
        explanation="Government fee required for vehicle registration. Legitimate cost.",
    ),
    FeeRule(
        patterns=("disposition",),
        legitimacy=FeeLegitimacy.LEGITIMATE,
        explanation=(
            "Charged at lease end if you return the vehicle. Typically $300-$495. "
            "Set by the leasing company."
        ),
    ),
    FeeRule(
        patterns=("tax", "sales tax"),
        legitimacy=FeeLegitimacy.LEGITIMATE,
        explanation="Required by your provincial/local government. Legitimate cost.",
    ),
)


# =============================================================================
# NEGOTIABLE FEES
# =============================================================================

_NEGOTIABLE_RULES = (
    FeeRule(
        patterns=("doc", "documentation", "document"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation=(
            "Dealer processing fee. Ranges $0-$500+ depending on the dealer. "
            "Often inflated, negotiate it down."
        ),
    ),
    FeeRule(
        patterns=("dealer fee", "dealer handling", "administrative"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation="Generic dealer fee. Often inflated. Push back or ask them to reduce/waive it.",
    ),
    FeeRule(
        patterns=("market adjustment", "adm", "addendum", "markup"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation=(
            "Pure dealer profit added above MSRP. On most vehicles this can be negotiated "
            "away. Walk away if they won't budge."
        ),
    ),
    FeeRule(
        patterns=("maintenance", "service contract", "warranty", "extended"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation=(
            "Optional product. On a lease, manufacturer warranty typically covers the full "
            "term. Usually unnecessary."
        ),
    ),
    FeeRule(
        patterns=("gap", "gap insurance"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation=(
            "GAP coverage is often INCLUDED free by captive lease companies. Verify before "
            "paying extra for it."
        ),
    ),
    FeeRule(
        patterns=("wheel", "tire protection", "tire & wheel", "tire and wheel"),
        legitimacy=FeeLegitimacy.NEGOTIABLE,
        explanation=(
            "Optional protection. Can be worth it on vehicles with expensive low-profile "
            "tires, but price is often inflated."
        ),
    ),
)


# =============================================================================
# JUNK FEES
# =============================================================================

_JUNK_RULES = (
    FeeRule(
        patterns=("paint protection", "paint sealant", "clear coat", "clearcoat"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "Typically a cheap sealant worth $30 being sold for $300-$1,500. Modern car "
            "paint doesn't need this. Remove it."
        ),
    ),
    FeeRule(
        patterns=("fabric protection", "interior protection", "scotchguard", "stain"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "A can of Scotchguard costs $10. You're being charged $200-$800 for essentially "
            "the same thing. Remove it."
        ),
    ),
    FeeRule(
        patterns=("vin etch", "vin etching", "theft deterrent", "anti-theft etch"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "VIN etching kits cost $20 online. Dealers charge $200-$500. Provides negligible "
            "theft protection. Remove it."
        ),
    ),
    FeeRule(
        patterns=("nitrogen", "nitro fill", "nitrogen tire"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "Air is already 78% nitrogen. No meaningful benefit for passenger vehicles. "
            "Remove it."
        ),
    ),
    FeeRule(
        patterns=("pinstripe", "pin stripe", "striping"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "Worth $20-50 at most, but dealers charge $200-$500. Remove unless you "
            "specifically want it."
        ),
    ),
    FeeRule(
        patterns=("dealer prep", "dealer preparation", "pdi", "pre-delivery"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "The manufacturer already pays the dealer for vehicle preparation. This is "
            "double-dipping. Remove it."
        ),
    ),
    FeeRule(
        patterns=("advertising", "ad fee", "regional ad"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation="The dealer's advertising cost is their business expense, not yours. Remove it.",
    ),
    FeeRule(
        patterns=("compliance", "environmental", "enviro"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation="Bogus fee with no basis. There's no 'compliance fee' required. Remove it.",
    ),
    FeeRule(
        patterns=("electronic filing", "e-filing", "efiling"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation="Filing paperwork electronically costs the dealer nothing extra. Remove it.",
    ),
    FeeRule(
        patterns=("lojack", "lo jack", "tracking", "gps tracking"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "Pre-installed tracking device. Often marked up enormously. On a lease, you "
            "don't own the car. Remove it."
        ),
    ),
    FeeRule(
        patterns=("protection package", "appearance package", "dealer package", "accessory package"),
        legitimacy=FeeLegitimacy.JUNK,
        explanation=(
            "Bundled dealer add-ons (often paint + fabric + VIN etch combined). Typically "
            "$50 worth of product for $1,000+. Remove it."
        ),
    ),
)

# Order is priority: earlier rules win.
FEE_RULES: tuple[FeeRule, ...] = _LEGITIMATE_RULES + _NEGOTIABLE_RULES + _JUNK_RULES

UNKNOWN_FEE = FeeClassification(
    legitimacy=FeeLegitimacy.NEGOTIABLE,
    explanation=(
        "We don't recognize this fee. Ask the dealer to explain exactly what it covers "
        "and whether it can be removed."
    ),
)

# Presets offered by fee entry forms
COMMON_FEES: tuple[str, ...] = (
    "Acquisition Fee",
    "Documentation Fee",
    "Registration/Title/License",
    "Dealer Preparation",
    "Paint Protection",
    "Fabric Protection",
    "VIN Etching",
    "Nitrogen Tire Fill",
    "Market Adjustment",
    "GAP Insurance",
    "Maintenance Package",
    "Wheel & Tire Protection",
    "Pinstriping",
    "Protection Package",
)


def classify_fee(name: str, rules: Iterable[FeeRule] = FEE_RULES) -> FeeClassification:
    """
    Classify a fee by name.

    Args:
        name: Fee name as printed on the worksheet
        rules: Ordered rule table, first match wins

    Returns:
        FeeClassification from the first matching rule, or UNKNOWN_FEE
    """
    normalized = name.lower().strip()

    for rule in rules:
        if rule.matches(normalized):
            return FeeClassification(legitimacy=rule.legitimacy, explanation=rule.explanation)

    logger.debug("unrecognized_fee", fee_name=name)
    return UNKNOWN_FEE


def analyze_fees(fees: Iterable[FeeItem]) -> list[FeeAnalysisItem]:
    """Classify every fee, preserving input order."""
    analyzed = []
    for fee in fees:
        classification = classify_fee(fee.name)
        analyzed.append(
            FeeAnalysisItem(
                name=fee.name,
                amount=fee.amount,
                legitimacy=classification.legitimacy,
                explanation=classification.explanation,
            )
        )
    return analyzed
