"""Tests for dealer compliance checks."""

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from dealcheck_core import analyze, check_dealer_compliance
from dealcheck_core.compliance import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    OMVIC_RULES,
    detect_auto_violations,
    evaluate_checklist,
    rules_by_category,
)
from dealcheck_core.exceptions import DealCheckError, ValidationError
from dealcheck_core.models import ChecklistAnswer, ViolationCategory, ViolationSeverity

from conftest import make_lease


class TestAutoDetection:
    """Violations visible in the numbers alone."""

    def test_clean_deal_has_none(self, base_lease):
        assert detect_auto_violations(analyze(base_lease)) == []

    def test_extreme_apr(self):
        """$900/month on the baseline deal implies about 12.6% APR."""
        analysis = analyze(make_lease(payment_amount=Decimal("900")))

        violations = detect_auto_violations(analysis)

        assert analysis.apr > 10
        assert [v.id for v in violations] == ["auto_extreme_apr"]
        assert violations[0].severity == ViolationSeverity.SERIOUS
        assert violations[0].auto_detected is True
        assert "12.6%" in violations[0].explanation

    def test_far_above_msrp(self):
        analysis = analyze(make_lease(selling_price=Decimal("53000")))

        violations = detect_auto_violations(analysis)

        assert analysis.selling_price_discount == Decimal("-6")
        assert "auto_above_msrp" in [v.id for v in violations]
        above = next(v for v in violations if v.id == "auto_above_msrp")
        assert above.severity == ViolationSeverity.MODERATE

    def test_five_percent_over_is_not_flagged(self):
        analysis = analyze(make_lease(selling_price=Decimal("52500")))

        assert "auto_above_msrp" not in [v.id for v in detect_auto_violations(analysis)]


class TestChecklist:
    """Test suite for evaluate_checklist."""

    def test_rule_table(self):
        ids = [rule.id for rule in OMVIC_RULES]

        assert len(ids) == 17
        assert len(set(ids)) == len(ids)
        assert all(rule.violation_answer == ChecklistAnswer.YES for rule in OMVIC_RULES)

    def test_yes_answers_become_violations_in_table_order(self):
        violations = evaluate_checklist(
            {"trade_in_bait_switch": "yes", "all_in_pricing": ChecklistAnswer.YES, "tied_selling": "no"}
        )

        assert [v.id for v in violations] == ["all_in_pricing", "trade_in_bait_switch"]
        assert all(v.auto_detected is False for v in violations)

    def test_unanswered_questions_are_skipped(self):
        assert evaluate_checklist({"apr_not_shown": None}) == []
        assert evaluate_checklist({}) == []

    def test_unknown_question(self):
        with pytest.raises(ValidationError) as exc_info:
            evaluate_checklist({"made_up_rule": "yes"})

        assert exc_info.value.value == "made_up_rule"
        assert exc_info.value.recoverable is True

    def test_invalid_answer(self):
        with pytest.raises(ValidationError) as exc_info:
            evaluate_checklist({"odometer_issue": "maybe"})

        assert exc_info.value.field == "odometer_issue"
        assert exc_info.value.details["value"] == "maybe"
        assert isinstance(exc_info.value, DealCheckError)

    def test_rules_by_category(self):
        grouped = rules_by_category()

        assert list(grouped) == list(CATEGORY_ORDER)
        assert [rule.id for rule in grouped[ViolationCategory.TRADE_IN]] == [
            "trade_in_not_itemized",
            "trade_in_not_returned",
            "trade_in_bait_switch",
        ]
        assert sum(len(rules) for rules in grouped.values()) == len(OMVIC_RULES)
        assert set(CATEGORY_LABELS) == set(CATEGORY_ORDER)


class TestComplianceReport:
    """Test suite for check_dealer_compliance."""

    def test_auto_violations_come_first(self):
        analysis = analyze(make_lease(payment_amount=Decimal("900")))

        report = check_dealer_compliance(analysis, {"total_cost_missing": "yes", "misrepresentation": "yes"})

        assert [v.id for v in report.violations] == ["auto_extreme_apr", "total_cost_missing", "misrepresentation"]
        assert report.serious_count == 2
        assert report.has_violations is True

    def test_clean_report(self, base_lease):
        report = check_dealer_compliance(analyze(base_lease))

        assert report.violations == []
        assert report.serious_count == 0
        assert report.has_violations is False

    def test_logs_summary(self, base_lease):
        analysis = analyze(base_lease)

        with capture_logs() as logs:
            check_dealer_compliance(analysis, {"pressure_tactics": "yes"})

        checked = [entry for entry in logs if entry["event"] == "dealer_compliance_checked"]
        assert checked[0]["violations"] == 1
        assert checked[0]["serious"] == 1
