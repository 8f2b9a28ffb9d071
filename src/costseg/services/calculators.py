# src/costseg/services/calculators.py
from __future__ import annotations

from typing import Any, Dict, List

from costseg.adapters.logging_utils import get_logger, log_event
from costseg.analysis.bonus import calculate_bonus_depreciation, is_bonus_eligible
from costseg.analysis.depreciation import (
    calculate_depreciation,
    calculate_straight_line_depreciation,
    merge_schedules,
    straight_line_period_for,
)
from costseg.analysis.npv import calculate_npv
from costseg.analysis.tax_savings import calculate_tax_savings, savings_through_year
from costseg.domain.asset_classes import get_default_allocation, normalize_property_type
from costseg.domain.macrs_tables import normalize_recovery_period

logger = get_logger(__name__)


def _clamp_rate(rate: float) -> float:
    return max(0.0, min(100.0, float(rate)))


def depreciation_schedule(
    cost_basis: float,
    recovery_period: Any,
    bonus_rate: float = 100.0,
) -> Dict[str, Any]:
    """Single-asset schedule as returned by the depreciation calculator."""
    period = normalize_recovery_period(recovery_period)
    rate = _clamp_rate(bonus_rate)
    schedule = calculate_depreciation(cost_basis, period, rate)
    return {
        "cost_basis": cost_basis,
        "recovery_period": period,
        "bonus_depreciation_rate": rate,
        "schedule": [e.to_dict() for e in schedule],
    }


def bonus_depreciation_analysis(
    building_value: float,
    property_type: str,
    bonus_rate: float = 100.0,
) -> Dict[str, Any]:
    """
    First-year deduction with vs without a cost segregation study, using the
    typical allocation for the property type.

    Without cost seg the depreciable basis (everything but land) goes on the
    27.5/39-year straight-line table.
    """
    ptype = normalize_property_type(property_type)
    rate = _clamp_rate(bonus_rate)
    allocation = get_default_allocation(ptype, building_value)

    land = sum(a.amount for a in allocation if a.recovery_period == 0)
    building_basis = round(building_value - land, 2)
    straight_line = calculate_straight_line_depreciation(building_basis, straight_line_period_for(ptype))
    without_first_year = straight_line[0].depreciation if straight_line else 0.0

    total_bonus = 0.0
    total_first_year = 0.0
    reclassified = 0.0
    breakdown: List[Dict[str, Any]] = []

    for item in allocation:
        row = item.to_dict()
        if item.recovery_period == 0:
            row.update(bonus_eligible=False, first_year_deduction=0.0)
            breakdown.append(row)
            continue

        result = calculate_bonus_depreciation(item.amount, item.recovery_period, rate)
        eligible = is_bonus_eligible(item.recovery_period)
        if eligible:
            reclassified += item.amount
            total_bonus += result.bonus_amount
        total_first_year += result.first_year_total

        row.update(bonus_eligible=eligible, first_year_deduction=result.first_year_total)
        breakdown.append(row)

    return {
        "building_value": building_value,
        "property_type": ptype,
        "bonus_rate": rate,
        "reclassified_percentage": round(reclassified / building_value * 100.0, 1),
        "reclassified_amount": round(reclassified, 2),
        "bonus_depreciation_total": round(total_bonus, 2),
        "without_cost_seg_first_year": round(without_first_year, 2),
        "with_cost_seg_first_year": round(total_first_year, 2),
        "additional_deduction": round(total_first_year - without_first_year, 2),
        "breakdown": breakdown,
    }


def tax_savings_analysis(
    property_value: float,
    property_type: str,
    tax_rate: float = 37.0,
    bonus_rate: float = 100.0,
    discount_rate: float = 5.0,
    horizon_years: int = 5,
) -> Dict[str, Any]:
    """
    Default allocation -> accelerated vs straight-line -> tax savings -> NPV.

    `horizon_savings` is the cumulative benefit through `horizon_years`;
    `total_savings` runs to the end of the schedule and nets to ~0.
    """
    ptype = normalize_property_type(property_type)
    rate = _clamp_rate(bonus_rate)
    allocation = get_default_allocation(ptype, property_value)

    depreciable = [a for a in allocation if a.recovery_period != 0]
    accelerated = merge_schedules(
        calculate_depreciation(a.amount, a.recovery_period, rate) for a in depreciable
    )

    building_basis = round(sum(a.amount for a in depreciable), 2)
    straight_line = calculate_straight_line_depreciation(building_basis, straight_line_period_for(ptype))

    savings = calculate_tax_savings(accelerated, straight_line, tax_rate)
    npv = calculate_npv([e.annual_savings for e in savings], discount_rate)

    log_event(logger, "tax_savings_analysis", property_type=ptype, property_value=property_value, npv=npv)

    return {
        "property_value": property_value,
        "property_type": ptype,
        "tax_rate": tax_rate,
        "bonus_depreciation_rate": rate,
        "discount_rate": discount_rate,
        "allocation": [a.to_dict() for a in allocation],
        "first_year_savings": savings[0].annual_savings if savings else 0.0,
        "horizon_years": horizon_years,
        "horizon_savings": savings_through_year(savings, horizon_years),
        "total_savings": savings[-1].cumulative_savings if savings else 0.0,
        "npv": npv,
        "schedule": [e.to_dict() for e in savings],
    }
