"""Lease analysis result models.

A LeaseAnalysis has no identity of its own. It is rebuilt from a LeaseInput
on every call, so two analyses of the same input compare equal.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..rounding import quantize_half_up
from .lease import PaymentFrequency


class FeeLegitimacy(str, Enum):
    """How much a consumer should trust an itemized fee."""

    LEGITIMATE = "legitimate"
    NEGOTIABLE = "negotiable"
    JUNK = "junk"


class GradeLetter(str, Enum):
    """Five-level letter grade."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class TipPriority(str, Enum):
    """Priority of a negotiation tip."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, lowest first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TipPriority.HIGH: 0,
    TipPriority.MEDIUM: 1,
    TipPriority.LOW: 2,
}


class FeeClassification(BaseModel):
    """Outcome of matching a fee name against the fee rule table."""

    model_config = {"frozen": True}

    legitimacy: FeeLegitimacy
    explanation: str


class FeeAnalysisItem(BaseModel):
    """An input fee together with its classification."""

    model_config = {"frozen": True}

    name: str
    amount: Decimal
    legitimacy: FeeLegitimacy
    explanation: str


class Grade(BaseModel):
    """A letter grade with its consumer-facing label and description."""

    model_config = {"frozen": True}

    letter: GradeLetter
    label: str
    description: str


class NegotiationTip(BaseModel):
    """One actionable piece of negotiation advice."""

    model_config = {"frozen": True}

    priority: TipPriority
    title: str
    detail: str
    potential_savings: Decimal = Field(
        description="Estimated monthly savings in whole dollars"
    )


class CalculationStep(BaseModel):
    """Audit entry for one step of the lease calculation."""

    model_config = {"frozen": True}

    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class LeaseAnalysis(BaseModel):
    """Complete analysis of a lease quote."""

    model_config = {"frozen": True}

    # Input context
    payment_frequency: PaymentFrequency
    due_on_delivery: Decimal

    # Cap cost and payment breakdown (monthly)
    gross_cap_cost: Decimal
    adjusted_cap_cost: Decimal
    depreciation: Decimal
    depreciation_payment: Decimal
    rent_charge: Decimal
    calculated_payment: Decimal

    # Rates
    money_factor: Decimal
    apr: Decimal

    # Ratios (percent)
    residual_percent: Decimal
    selling_price_discount: Decimal
    one_percent_rule: Decimal

    # Totals
    total_lease_cost: Decimal
    effective_monthly_cost: Decimal

    # Per-period display values
    per_period_depreciation: Decimal
    per_period_rent_charge: Decimal
    per_period_calculated_payment: Decimal
    per_period_effective_cost: Decimal

    # Dealer quote vs. reconstructed payment, per-period units
    payment_difference: Decimal
    has_payment_discrepancy: bool

    fee_analysis: list[FeeAnalysisItem]
    total_junk_fees: Decimal

    # Grades
    overall_grade: Grade
    money_factor_grade: Grade
    selling_price_grade: Grade
    residual_grade: Grade
    one_percent_grade: Grade

    tips: list[NegotiationTip]

    # Potential savings
    potential_savings_monthly: Decimal
    potential_savings_per_period: Decimal
    potential_savings_total: Decimal

    audit_log: list[CalculationStep] = Field(default_factory=list)

    def to_deal_record(self) -> dict[str, Any]:
        """Flatten the computed values stored alongside a submitted deal.

        Rounding matches what the deals table keeps for filtering and trends.
        """
        return {
            "apr": _round(self.apr, "0.01"),
            "money_factor": _round(self.money_factor, "0.000001"),
            "residual_percent": _round(self.residual_percent, "0.1"),
            "discount_percent": _round(self.selling_price_discount, "0.1"),
            "one_percent_rule": _round(self.one_percent_rule, "0.01"),
            "overall_grade": self.overall_grade.letter.value,
            "total_junk_fees": self.total_junk_fees,
        }


def _round(value: Decimal, places: str) -> Decimal:
    return quantize_half_up(value, Decimal(places))
