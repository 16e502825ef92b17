"""Tests for input and result models and package exceptions."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from dealcheck_core import analyze
from dealcheck_core.exceptions import DealCheckError, ValidationError
from dealcheck_core.models import (
    FeeItem,
    LeaseInput,
    PaymentFrequency,
    TipPriority,
)

from conftest import make_lease


class TestLeaseInput:
    """Test suite for LeaseInput validation."""

    def test_defaults(self):
        lease = LeaseInput(
            msrp=Decimal("50000"),
            selling_price=Decimal("46000"),
            payment_amount=Decimal("650"),
            lease_term=36,
            residual_value=Decimal("27500"),
        )

        assert lease.down_payment == 0
        assert lease.trade_in_value == 0
        assert lease.rebates == 0
        assert lease.fees == []
        assert lease.payment_frequency == PaymentFrequency.MONTHLY
        assert lease.annual_km == 20000
        assert lease.due_on_delivery == 0

    def test_coerces_strings_and_floats(self):
        lease = LeaseInput(
            msrp="50000",
            selling_price=46000.5,
            payment_amount="650.25",
            lease_term="36",
            residual_value=27500,
            payment_frequency="biweekly",
        )

        assert lease.msrp == Decimal("50000")
        assert lease.payment_amount == Decimal("650.25")
        assert lease.lease_term == 36
        assert lease.payment_frequency == PaymentFrequency.BIWEEKLY

    @pytest.mark.parametrize(
        "field,value",
        [
            ("msrp", Decimal("0")),
            ("selling_price", Decimal("-1")),
            ("payment_amount", Decimal("0")),
            ("lease_term", 0),
            ("residual_value", Decimal("0")),
            ("down_payment", Decimal("-100")),
            ("trade_in_value", Decimal("-1")),
            ("rebates", Decimal("-1")),
            ("due_on_delivery", Decimal("-1")),
            ("annual_km", -1),
            ("payment_frequency", "weekly"),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(PydanticValidationError):
            make_lease(**{field: value})

    def test_negative_fee_rejected(self):
        with pytest.raises(PydanticValidationError):
            FeeItem(name="Doc Fee", amount=Decimal("-5"))

    def test_total_fees(self):
        lease = make_lease(
            fees=[
                FeeItem(name="Acquisition Fee", amount=Decimal("795")),
                FeeItem(name="Doc Fee", amount=Decimal("499.50")),
            ]
        )

        assert lease.total_fees == Decimal("1294.50")
        assert lease.model_dump()["total_fees"] == Decimal("1294.50")

    def test_frozen(self, base_lease):
        with pytest.raises(PydanticValidationError):
            base_lease.payment_amount = Decimal("1")

    def test_json_round_trip(self, paint_protection_lease):
        restored = LeaseInput.model_validate_json(
            paint_protection_lease.model_dump_json(exclude={"total_fees"})
        )

        assert restored == paint_protection_lease


class TestTipPriority:
    def test_rank_order(self):
        assert TipPriority.HIGH.rank < TipPriority.MEDIUM.rank < TipPriority.LOW.rank


class TestExceptions:
    """Test suite for the exception hierarchy."""

    def test_base_error(self):
        error = DealCheckError("Something went wrong", details={"code": 500})

        assert str(error) == "Something went wrong"
        assert error.details == {"code": 500}
        assert error.recoverable is False
        assert repr(error) == (
            "DealCheckError(message='Something went wrong', details={'code': 500}, recoverable=False)"
        )

    def test_validation_error_collects_details(self):
        error = ValidationError(
            "Invalid answer",
            field="odometer_issue",
            value="maybe",
            constraint="Must be 'yes' or 'no'",
        )

        assert isinstance(error, DealCheckError)
        assert error.recoverable is True
        assert error.details == {
            "field": "odometer_issue",
            "value": "maybe",
            "constraint": "Must be 'yes' or 'no'",
        }

    def test_details_default_to_empty_dict(self):
        assert ValidationError("bad").details == {}


class TestLeaseAnalysis:
    """Test suite for the analysis result model."""

    def test_frozen(self, base_lease):
        result = analyze(base_lease)

        with pytest.raises(PydanticValidationError):
            result.apr = Decimal("0")
