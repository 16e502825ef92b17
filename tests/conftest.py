"""Shared fixtures for dealcheck-core tests."""

from decimal import Decimal

import pytest
import structlog

from dealcheck_core.models import FeeItem, LeaseInput, PaymentFrequency


def make_lease(**overrides) -> LeaseInput:
    """A $50k vehicle at 8% off, 36 months, 55% residual, $650/month."""
    fields = dict(
        msrp=Decimal("50000"),
        selling_price=Decimal("46000"),
        down_payment=Decimal("0"),
        trade_in_value=Decimal("0"),
        rebates=Decimal("0"),
        fees=[],
        payment_frequency=PaymentFrequency.MONTHLY,
        payment_amount=Decimal("650"),
        lease_term=36,
        residual_value=Decimal("27500"),
        due_on_delivery=Decimal("0"),
    )
    fields.update(overrides)
    return LeaseInput(**fields)


def approx(actual: Decimal, expected: str, tolerance: str = "0.01") -> bool:
    """True when ``actual`` is within ``tolerance`` of ``expected``."""
    return abs(actual - Decimal(expected)) <= Decimal(tolerance)


@pytest.fixture
def base_lease() -> LeaseInput:
    return make_lease()


@pytest.fixture
def paint_protection_lease() -> LeaseInput:
    return make_lease(fees=[FeeItem(name="Paint Protection", amount=Decimal("895"))])


@pytest.fixture
def down_payment_lease() -> LeaseInput:
    return make_lease(down_payment=Decimal("3000"))


@pytest.fixture
def biweekly_lease() -> LeaseInput:
    return make_lease(
        payment_frequency=PaymentFrequency.BIWEEKLY,
        payment_amount=Decimal("300"),
        lease_term=48,
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()
