# tests/test_tax_savings.py
import pytest
from hypothesis import given, settings, strategies as st

from costseg.analysis.depreciation import (
    calculate_depreciation,
    calculate_straight_line_depreciation,
    merge_schedules,
    straight_line_period_for,
)
from costseg.analysis.tax_savings import calculate_tax_savings, savings_through_year
from costseg.domain.asset_classes import PROPERTY_TYPES, get_default_allocation
from costseg.domain.errors import InvalidInput


def _schedules(property_type, value, bonus_rate=100):
    depreciable = [a for a in get_default_allocation(property_type, value) if a.recovery_period]
    accelerated = merge_schedules(
        calculate_depreciation(a.amount, a.recovery_period, bonus_rate) for a in depreciable
    )
    basis = sum(a.amount for a in depreciable)
    straight = calculate_straight_line_depreciation(basis, straight_line_period_for(property_type))
    return accelerated, straight


def test_simple_savings():
    accelerated = [{"year": 1, "depreciation": 1000}, {"year": 2, "depreciation": 0}]
    straight = [{"year": 1, "depreciation": 500}, {"year": 2, "depreciation": 500}]

    out = calculate_tax_savings(accelerated, straight, 40)

    assert [e.annual_savings for e in out] == [200.0, -200.0]
    assert [e.cumulative_savings for e in out] == [200.0, 0.0]
    assert out[0].with_cost_seg == 1000.0
    assert out[0].without_cost_seg == 500.0


def test_schedules_of_different_length_are_merged_by_year():
    accelerated = [{"year": y, "depreciation": 100} for y in range(1, 7)]
    straight = [{"year": y, "depreciation": 200} for y in range(1, 4)]

    out = calculate_tax_savings(accelerated, straight, 10)

    assert len(out) == 6
    assert out[0].annual_savings == -10.0
    # straight line has run out after year 3
    assert out[3].without_cost_seg == 0.0
    assert out[3].annual_savings == 10.0
    assert out[-1].cumulative_savings == 0.0


def test_empty_inputs():
    assert calculate_tax_savings([], [], 37) == []


@pytest.mark.parametrize("rate", [-1, 101])
def test_rejects_tax_rate_out_of_range(rate):
    with pytest.raises(InvalidInput):
        calculate_tax_savings([], [], rate)


def test_first_year_savings_for_commercial_property():
    accelerated, straight = _schedules("commercial", 2_000_000)
    out = calculate_tax_savings(accelerated, straight, 37)

    # 500k bonus + 1.1M * 2.461%, against 1.6M * 2.461%
    assert out[0].with_cost_seg == 527_071.0
    assert out[0].without_cost_seg == 39_376.0
    assert out[0].annual_savings == pytest.approx(180_447.15, abs=0.01)
    assert len(out) == 40


@settings(max_examples=30, deadline=None)
@given(
    ptype=st.sampled_from(PROPERTY_TYPES),
    value=st.floats(min_value=50_000, max_value=20_000_000, allow_nan=False),
    bonus=st.sampled_from([0, 40, 60, 80, 100]),
)
def test_savings_net_to_zero_over_full_horizon(ptype, value, bonus):
    accelerated, straight = _schedules(ptype, value, bonus)
    out = calculate_tax_savings(accelerated, straight, 37)

    # same total depreciation either way; only per-year cent rounding is left
    assert abs(out[-1].cumulative_savings) < 1.0
    assert sum(e.with_cost_seg for e in out) == pytest.approx(sum(e.without_cost_seg for e in out), abs=0.05)


def test_savings_through_year():
    accelerated, straight = _schedules("multifamily", 1_000_000)
    out = calculate_tax_savings(accelerated, straight, 37)

    assert savings_through_year(out, 1) == out[0].cumulative_savings
    assert savings_through_year(out, 5) == out[4].cumulative_savings
    assert savings_through_year(out, 500) == out[-1].cumulative_savings
    assert savings_through_year([], 5) == 0.0
    with pytest.raises(InvalidInput):
        savings_through_year(out, 0)
