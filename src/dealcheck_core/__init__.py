"""DealCheck Core - Lease quote analysis and negotiation advice."""

__version__ = "0.1.0"

from .calculator import LeaseCalculator, analyze
from .compliance import check_dealer_compliance
from .models import FeeItem, LeaseAnalysis, LeaseInput, PaymentFrequency

__all__ = [
    "LeaseCalculator",
    "analyze",
    "check_dealer_compliance",
    "FeeItem",
    "LeaseAnalysis",
    "LeaseInput",
    "PaymentFrequency",
]
