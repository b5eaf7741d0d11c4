import json
import math
from decimal import Decimal

import hypothesis.strategies as st
from hypothesis import given

from irrf_api.core.calc import compute_irrf
from irrf_api.core.constants import SIMPLIFIED_MINIMUM_DEDUCTION
from irrf_api.core.models import IrrfInput, SimplifiedDeduction
from irrf_api.core.validate import validate_irrf_payload
from tests.fixtures.irrf_inputs import make_payload

money = st.decimals(min_value=0, max_value=100_000, places=2, allow_nan=False, allow_infinity=False)
dependents = st.integers(min_value=0, max_value=12)

# anything a JSON client can send that passes validation
wire_money = st.one_of(
    st.floats(min_value=0, allow_nan=False, allow_infinity=False),
    st.integers(min_value=0, max_value=10**308),
)
wire_dependents = st.one_of(
    st.integers(min_value=0, max_value=10**300),
    st.floats(min_value=0, max_value=1e300, allow_nan=False).map(math.floor).map(float),
)


def _input(income, contribution, count, alimony) -> IrrfInput:
    return IrrfInput(
        taxable_income=income,
        official_pension_contribution=contribution,
        dependent_count=count,
        alimony=alimony,
    )


@given(money, money, dependents, money)
def test_deterministic(income, contribution, count, alimony):
    in_ = _input(income, contribution, count, alimony)
    assert compute_irrf(in_) == compute_irrf(in_)


@given(money, money, dependents, money)
def test_tax_and_reduction_bounds(income, contribution, count, alimony):
    result = compute_irrf(_input(income, contribution, count, alimony), include_trace=False)
    assert result.tax >= 0
    assert Decimal("0") <= result.reduction <= result.tax
    if result.tax_after_reduction is not None:
        assert result.tax_after_reduction >= 0
        assert result.tax_after_reduction == result.tax - result.reduction


@given(money, st.decimals(min_value=0, max_value=200, places=2), st.integers(0, 2), st.decimals(0, 20, places=2))
def test_small_deductions_use_simplified_minimum(income, contribution, count, alimony):
    result = compute_irrf(_input(income, contribution, count, alimony), include_trace=False)
    assert result.legal_deductions_total < SIMPLIFIED_MINIMUM_DEDUCTION
    assert result.simplified_minimum_used is True
    assert isinstance(result.deduction, SimplifiedDeduction)
    assert result.applied_deduction == SIMPLIFIED_MINIMUM_DEDUCTION


high_income = st.decimals(min_value="7350.01", max_value="1e24", places=2, allow_nan=False, allow_infinity=False)


@given(high_income, money, dependents, money)
def test_threshold_message_above_7350(income, contribution, count, alimony):
    result = compute_irrf(_input(income, contribution, count, alimony), include_trace=False)
    assert result.message is not None
    assert result.tax_after_reduction is None
    assert result.reduction == 0


@given(st.decimals(min_value=0, max_value=7350, places=2), money, dependents, money)
def test_final_tax_reported_up_to_7350(income, contribution, count, alimony):
    result = compute_irrf(_input(income, contribution, count, alimony), include_trace=False)
    assert result.message is None
    assert result.tax_after_reduction is not None


@given(wire_money, wire_money, wire_dependents, wire_money)
def test_any_valid_payload_is_computed(income, contribution, count, alimony):
    in_ = validate_irrf_payload(make_payload(income, contribution, count, alimony))
    result = compute_irrf(in_)
    assert result.tax >= 0
    assert Decimal("0") <= result.reduction <= result.tax
    assert result.net_taxable_base < in_.taxable_income
    if result.tax_after_reduction is not None:
        assert result.tax_after_reduction == result.tax - result.reduction
    assert json.dumps(result.to_payload(), allow_nan=False)
