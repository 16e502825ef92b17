"""Dealer compliance models (Ontario OMVIC / Consumer Protection Act)."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class ViolationSeverity(str, Enum):
    SERIOUS = "serious"
    MODERATE = "moderate"


class ViolationCategory(str, Enum):
    DISCLOSURE = "disclosure"
    PRICING = "pricing"
    LEASE_TERMS = "lease_terms"
    SALES_PRACTICES = "sales_practices"
    DEPOSITS = "deposits"
    TRADE_IN = "trade_in"


class ChecklistAnswer(str, Enum):
    YES = "yes"
    NO = "no"


class ComplianceRule(BaseModel):
    """A yes/no checklist question about the dealer's conduct."""

    model_config = {"frozen": True}

    id: str
    category: ViolationCategory
    question: str
    violation_answer: ChecklistAnswer = Field(
        description="Answer that means the dealer broke the rule"
    )
    severity: ViolationSeverity
    title: str
    regulation: str
    explanation: str
    remedy: str


class Violation(BaseModel):
    """A rule the dealer appears to have broken."""

    model_config = {"frozen": True}

    id: str
    title: str
    severity: ViolationSeverity
    regulation: str
    explanation: str
    remedy: str
    auto_detected: bool = Field(
        default=False,
        description="True when flagged from the lease numbers alone",
    )


class ComplianceReport(BaseModel):
    """Auto-detected and self-reported violations for one deal."""

    violations: list[Violation] = Field(default_factory=list)

    @computed_field
    @property
    def serious_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == ViolationSeverity.SERIOUS)

    @computed_field
    @property
    def has_violations(self) -> bool:
        return bool(self.violations)
