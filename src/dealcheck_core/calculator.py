"""Lease analysis engine.

Dealers hide the money factor, but it can be reverse-engineered from the
numbers they do show on the worksheet:

    Monthly Payment = Depreciation + Rent Charge
    Depreciation    = (Adj Cap Cost - Residual) / Term
    Rent Charge     = (Adj Cap Cost + Residual) × Money Factor

so

    Money Factor = (Monthly Payment - Depreciation) / (Adj Cap Cost + Residual)
    APR          = Money Factor × 2400
"""

from decimal import Decimal
from typing import Optional

import structlog

from .config import AnalysisSettings
from .fee_rules import analyze_fees
from .grading import (
    grade_money_factor,
    grade_one_percent,
    grade_overall,
    grade_residual,
    grade_selling_price,
)
from .models import (
    CalculationStep,
    FeeLegitimacy,
    LeaseAnalysis,
    LeaseInput,
)
from .negotiation import APR_TO_MONEY_FACTOR, TipContext, generate_tips
from .periods import to_monthly, to_per_period, total_payments

logger = structlog.get_logger()


class LeaseCalculator:
    """
    Turn a structured lease quote into a full LeaseAnalysis.

    The calculator holds read-only settings only. Every call to
    ``calculate`` builds its own audit log, so one instance can serve
    concurrent callers.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None):
        """
        Initialize calculator.

        Args:
            settings: Analysis settings (default: loaded from environment)
        """
        self.settings = settings or AnalysisSettings()

    def _log_step(
        self,
        audit_log: list[CalculationStep],
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        audit_log.append(
            CalculationStep(
                step=step,
                input_value=input_value,
                output_value=output_value,
                source=source,
                notes=notes,
            )
        )
        logger.debug(
            "lease_calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def calculate(self, lease_input: LeaseInput) -> LeaseAnalysis:
        """
        Analyze a lease quote.

        Args:
            lease_input: Validated lease quote

        Returns:
            LeaseAnalysis with grades, fee breakdown, tips and audit trail
        """
        audit_log: list[CalculationStep] = []
        frequency = lease_input.payment_frequency
        term = lease_input.lease_term

        # Step 1-3: Cap cost
        total_fees = lease_input.total_fees
        gross_cap_cost = lease_input.selling_price + total_fees
        adjusted_cap_cost = (
            gross_cap_cost
            - lease_input.down_payment
            - lease_input.trade_in_value
            - lease_input.rebates
        )
        self._log_step(
            audit_log,
            step="gross_cap_cost",
            input_value=f"selling_price={lease_input.selling_price} + fees={total_fees}",
            output_value=str(gross_cap_cost),
            source="Selling price plus itemized fees",
        )
        self._log_step(
            audit_log,
            step="adjusted_cap_cost",
            input_value=(
                f"{gross_cap_cost} - down={lease_input.down_payment} "
                f"- trade_in={lease_input.trade_in_value} - rebates={lease_input.rebates}"
            ),
            output_value=str(adjusted_cap_cost),
            source="Cap cost reductions",
        )

        # Step 4-5: Depreciation, negative when the residual exceeds the cap cost
        depreciation = adjusted_cap_cost - lease_input.residual_value
        depreciation_payment = depreciation / term
        self._log_step(
            audit_log,
            step="depreciation_payment",
            input_value=f"({adjusted_cap_cost} - residual={lease_input.residual_value}) / {term}",
            output_value=str(depreciation_payment),
            source="Depreciation formula",
        )

        # Step 6-7: Rent charge from the quoted payment
        monthly_payment = to_monthly(lease_input.payment_amount, frequency)
        rent_charge = monthly_payment - depreciation_payment
        self._log_step(
            audit_log,
            step="rent_charge",
            input_value=f"monthly_payment={monthly_payment} - depreciation={depreciation_payment}",
            output_value=str(rent_charge),
            source="Reverse-engineered from quoted payment",
            notes=f"Quoted {lease_input.payment_amount} {frequency.value}",
        )

        # Step 8-9: Money factor and APR
        rate_base = adjusted_cap_cost + lease_input.residual_value
        if rate_base > 0:
            money_factor = rent_charge / rate_base
        else:
            money_factor = Decimal("0")
            logger.warning(
                "degenerate_rate_base",
                adjusted_cap_cost=str(adjusted_cap_cost),
                residual_value=str(lease_input.residual_value),
            )
        apr = money_factor * APR_TO_MONEY_FACTOR
        self._log_step(
            audit_log,
            step="money_factor",
            input_value=f"{rent_charge} / ({adjusted_cap_cost} + {lease_input.residual_value})",
            output_value=f"money_factor={money_factor}, apr={apr}",
            source="Money factor × 2400 = APR",
        )

        # Step 10: Reconstructed payment
        calculated_payment = depreciation_payment + rent_charge

        # Step 11: Ratios against MSRP
        residual_percent = lease_input.residual_value / lease_input.msrp * 100
        selling_price_discount = (lease_input.msrp - lease_input.selling_price) / lease_input.msrp * 100

        # Step 12: Discrepancy in per-period units
        per_period_calculated = to_per_period(calculated_payment, frequency)
        payment_difference = abs(lease_input.payment_amount - per_period_calculated)
        has_payment_discrepancy = payment_difference > self.settings.payment_discrepancy_tolerance
        self._log_step(
            audit_log,
            step="payment_discrepancy",
            input_value=f"quoted={lease_input.payment_amount}, calculated={per_period_calculated}",
            output_value=f"difference={payment_difference}, flagged={has_payment_discrepancy}",
            source=f"Tolerance {self.settings.payment_discrepancy_tolerance} per period",
        )

        # Step 13: 1% rule, normalized to $0 down
        normalized_monthly = monthly_payment
        if lease_input.down_payment > 0:
            normalized_monthly += lease_input.down_payment / term
        one_percent_rule = normalized_monthly / lease_input.msrp * 100
        self._log_step(
            audit_log,
            step="one_percent_rule",
            input_value=f"normalized_monthly={normalized_monthly} / msrp={lease_input.msrp}",
            output_value=str(one_percent_rule),
            source="1% rule at $0 down",
        )

        # Step 14: Total cost
        num_payments = total_payments(term, frequency)
        total_lease_cost = lease_input.payment_amount * num_payments + lease_input.due_on_delivery
        effective_monthly_cost = total_lease_cost / term
        self._log_step(
            audit_log,
            step="total_lease_cost",
            input_value=(
                f"{lease_input.payment_amount} × {num_payments} payments "
                f"+ due_on_delivery={lease_input.due_on_delivery}"
            ),
            output_value=f"total={total_lease_cost}, effective_monthly={effective_monthly_cost}",
            source="Total of payments plus cash at signing",
        )

        # Step 16: Fees
        fee_analysis = analyze_fees(lease_input.fees)
        total_junk_fees = sum(
            (fee.amount for fee in fee_analysis if fee.legitimacy == FeeLegitimacy.JUNK),
            Decimal("0"),
        )
        self._log_step(
            audit_log,
            step="fee_analysis",
            input_value=f"{len(fee_analysis)} fees",
            output_value=f"total_junk_fees={total_junk_fees}",
            source="Dealer fee rule table",
        )

        # Step 17: Grades
        money_factor_grade = grade_money_factor(apr)
        selling_price_grade = grade_selling_price(selling_price_discount)
        residual_grade = grade_residual(residual_percent, term)
        one_percent_grade = grade_one_percent(one_percent_rule)
        overall_grade = grade_overall(
            money_factor_grade,
            selling_price_grade,
            residual_grade,
            one_percent_grade,
            total_junk_fees,
        )
        self._log_step(
            audit_log,
            step="grades",
            input_value=(
                f"money_factor={money_factor_grade.letter.value}, "
                f"selling_price={selling_price_grade.letter.value}, "
                f"residual={residual_grade.letter.value}, "
                f"one_percent={one_percent_grade.letter.value}"
            ),
            output_value=f"overall={overall_grade.letter.value}",
            source="Weighted composite less junk fee penalty",
        )

        # Step 18: Negotiation tips
        tips = generate_tips(
            TipContext(
                apr=apr,
                money_factor=money_factor,
                selling_price_discount=selling_price_discount,
                residual_percent=residual_percent,
                one_percent_rule=one_percent_rule,
                total_junk_fees=total_junk_fees,
                fee_analysis=fee_analysis,
                rent_charge=rent_charge,
                depreciation_payment=depreciation_payment,
                adjusted_cap_cost=adjusted_cap_cost,
                effective_monthly_cost=effective_monthly_cost,
                lease_input=lease_input,
            )
        )
        potential_savings_monthly = sum((tip.potential_savings for tip in tips), Decimal("0"))

        logger.info(
            "lease_analyzed",
            apr=str(apr),
            overall_grade=overall_grade.letter.value,
            tips=len(tips),
            payment_discrepancy=has_payment_discrepancy,
        )

        return LeaseAnalysis(
            payment_frequency=frequency,
            due_on_delivery=lease_input.due_on_delivery,
            gross_cap_cost=gross_cap_cost,
            adjusted_cap_cost=adjusted_cap_cost,
            depreciation=depreciation,
            depreciation_payment=depreciation_payment,
            rent_charge=rent_charge,
            calculated_payment=calculated_payment,
            money_factor=money_factor,
            apr=apr,
            residual_percent=residual_percent,
            selling_price_discount=selling_price_discount,
            one_percent_rule=one_percent_rule,
            total_lease_cost=total_lease_cost,
            effective_monthly_cost=effective_monthly_cost,
            # Step 15: Per-period display values
            per_period_depreciation=to_per_period(depreciation_payment, frequency),
            per_period_rent_charge=to_per_period(rent_charge, frequency),
            per_period_calculated_payment=per_period_calculated,
            per_period_effective_cost=to_per_period(effective_monthly_cost, frequency),
            payment_difference=payment_difference,
            has_payment_discrepancy=has_payment_discrepancy,
            fee_analysis=fee_analysis,
            total_junk_fees=total_junk_fees,
            overall_grade=overall_grade,
            money_factor_grade=money_factor_grade,
            selling_price_grade=selling_price_grade,
            residual_grade=residual_grade,
            one_percent_grade=one_percent_grade,
            tips=tips,
            potential_savings_monthly=potential_savings_monthly,
            potential_savings_per_period=to_per_period(potential_savings_monthly, frequency),
            potential_savings_total=potential_savings_monthly * term,
            audit_log=audit_log,
        )


def analyze(lease_input: LeaseInput, settings: Optional[AnalysisSettings] = None) -> LeaseAnalysis:
    """Analyze a lease quote with a fresh calculator."""
    return LeaseCalculator(settings).calculate(lease_input)
