"""Data models for dealcheck-core.

This package provides:
- Lease quote input (lease.py)
- Analysis results, grades, fees and tips (analysis.py)
- Dealer compliance checklist types (compliance.py)
"""

from dealcheck_core.models.lease import (
    FeeItem,
    LeaseInput,
    PaymentFrequency,
)
from dealcheck_core.models.analysis import (
    CalculationStep,
    FeeAnalysisItem,
    FeeClassification,
    FeeLegitimacy,
    Grade,
    GradeLetter,
    LeaseAnalysis,
    NegotiationTip,
    TipPriority,
)
from dealcheck_core.models.compliance import (
    ChecklistAnswer,
    ComplianceReport,
    ComplianceRule,
    Violation,
    ViolationCategory,
    ViolationSeverity,
)

__all__ = [
    # Input
    "FeeItem",
    "LeaseInput",
    "PaymentFrequency",
    # Analysis
    "CalculationStep",
    "FeeAnalysisItem",
    "FeeClassification",
    "FeeLegitimacy",
    "Grade",
    "GradeLetter",
    "LeaseAnalysis",
    "NegotiationTip",
    "TipPriority",
    # Compliance
    "ChecklistAnswer",
    "ComplianceReport",
    "ComplianceRule",
    "Violation",
    "ViolationCategory",
    "ViolationSeverity",
]
