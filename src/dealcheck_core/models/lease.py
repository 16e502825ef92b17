"""Lease quote input models.

These are the numbers a consumer can read off a dealer's lease worksheet.
Field constraints are the only validation in the pipeline: the calculator
assumes anything that made it into a LeaseInput is arithmetically usable.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class PaymentFrequency(str, Enum):
    """Cadence of the dealer-quoted payment."""

    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"


class FeeItem(BaseModel):
    """A single itemized charge on the lease worksheet."""

    model_config = {"frozen": True}

    name: str = Field(description="Fee name as printed by the dealer")
    amount: Decimal = Field(ge=0, description="Fee amount rolled into the cap cost")


class LeaseInput(BaseModel):
    """A structured lease quote.

    Immutable for the duration of one analysis. Money fields are Decimal;
    floats and strings are coerced on construction.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "msrp": "50000",
                    "selling_price": "46000",
                    "down_payment": "0",
                    "trade_in_value": "0",
                    "rebates": "0",
                    "fees": [{"name": "Acquisition Fee", "amount": "795"}],
                    "payment_frequency": "monthly",
                    "payment_amount": "650",
                    "lease_term": 36,
                    "residual_value": "27500",
                    "annual_km": 20000,
                    "due_on_delivery": "1500",
                }
            ]
        },
    }

    # Vehicle
    msrp: Decimal = Field(gt=0, description="Manufacturer's suggested retail price")
    selling_price: Decimal = Field(gt=0, description="Negotiated vehicle price")

    # Cap cost reductions
    down_payment: Decimal = Field(default=Decimal("0"), ge=0)
    trade_in_value: Decimal = Field(default=Decimal("0"), ge=0)
    rebates: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Manufacturer rebates and other credits",
    )

    fees: list[FeeItem] = Field(default_factory=list)

    # Lease terms
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_amount: Decimal = Field(gt=0, description="Dealer-quoted payment per period, pre-tax")
    lease_term: int = Field(gt=0, description="Lease term in months")
    residual_value: Decimal = Field(gt=0, description="Contractual value at lease end")
    annual_km: int = Field(default=20000, ge=0, description="Annual kilometre allowance")

    due_on_delivery: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Total out-of-pocket cash at signing",
    )

    @computed_field
    @property
    def total_fees(self) -> Decimal:
        """Sum of all itemized fees."""
        return sum((fee.amount for fee in self.fees), Decimal("0"))
