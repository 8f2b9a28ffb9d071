from __future__ import annotations

from typing import Any, Dict, Iterable

from pydantic import ValidationError

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
from costseg.domain.asset_classes import BUILDING_CATEGORIES, describe_category
from costseg.domain.errors import IncompleteAssetList, InvalidInput
from costseg.domain.macrs_tables import normalize_recovery_period, percentage_for
from costseg.domain.schedule import AssetAllocationItem
from costseg.domain.study import (
    AssetBreakdownRow,
    FirstYearAnalysis,
    ReportSummary,
    ScheduleComparisonRow,
    StudyAsset,
    StudyReport,
    StudyReportInput,
)

logger = get_logger(__name__)

DEFAULT_HORIZON_YEARS = 5


def assets_from_allocation(allocation: Iterable[AssetAllocationItem]) -> list[StudyAsset]:
    """Turn a default allocation into study asset lines (zero-amount buckets dropped)."""
    return [
        StudyAsset(category=a.category, cost_basis=a.amount, recovery_period=a.recovery_period)
        for a in allocation
        if a.amount > 0
    ]


def _coerce_input(data: StudyReportInput | Dict[str, Any]) -> StudyReportInput:
    if isinstance(data, StudyReportInput):
        return data
    try:
        return StudyReportInput.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(str(e)) from e


def _check_rates(inp: StudyReportInput) -> None:
    if not (0.0 <= inp.tax_rate <= 100.0):
        raise InvalidInput(f"tax_rate must be between 0 and 100, got {inp.tax_rate}")
    if inp.discount_rate < 0:
        raise InvalidInput(f"discount_rate must be >= 0, got {inp.discount_rate}")
    if not (0.0 <= inp.bonus_depreciation_rate <= 100.0):
        raise InvalidInput(
            f"bonus_depreciation_rate must be between 0 and 100, got {inp.bonus_depreciation_rate}"
        )


def generate_study_report(
    data: StudyReportInput | Dict[str, Any],
    horizon_years: int = DEFAULT_HORIZON_YEARS,
) -> StudyReport:
    """
    Full cost segregation study for one property.

    1. accelerated schedule per asset line, merged by year
    2. straight-line baseline over the building basis (27.5 or 39 years)
    3. tax savings with vs without, NPV of the savings stream
    4. breakdown, first-year analysis and summary

    Pure function of its input: nothing is stored or mutated.
    """
    inp = _coerce_input(data)

    if not inp.assets:
        raise IncompleteAssetList("study has no assets; add assets before calculating")
    _check_rates(inp)

    bonus_rate = inp.bonus_depreciation_rate
    tax_rate = inp.tax_rate

    # --- per-asset accelerated schedules (land is not depreciable) ---
    depreciable: list[tuple[StudyAsset, Any]] = []
    for asset in inp.assets:
        if asset.recovery_period == 0:
            continue
        depreciable.append((asset, normalize_recovery_period(asset.recovery_period)))

    schedules = [
        calculate_depreciation(asset.cost_basis, period, bonus_rate)
        for asset, period in depreciable
    ]
    accelerated = merge_schedules(schedules)

    # --- straight-line baseline (without cost seg) ---
    sl_period = straight_line_period_for(inp.property_type)
    building_basis = inp.building_value
    if building_basis <= 0:
        building_basis = sum(asset.cost_basis for asset, _ in depreciable)
    straight_line = (
        calculate_straight_line_depreciation(building_basis, sl_period)
        if building_basis > 0
        else []
    )

    # --- tax savings + NPV ---
    savings = calculate_tax_savings(accelerated, straight_line, tax_rate)
    npv_tax_savings = calculate_npv([e.annual_savings for e in savings], inp.discount_rate)

    # --- side-by-side depreciation ---
    depreciation_schedule = [
        ScheduleComparisonRow(
            year=e.year,
            accelerated=e.with_cost_seg,
            straight_line=e.without_cost_seg,
            difference=round(e.with_cost_seg - e.without_cost_seg, 2),
        )
        for e in savings
    ]

    # --- asset breakdown ---
    total_asset_value = sum(a.cost_basis for a in inp.assets)
    asset_breakdown = []
    for asset in inp.assets:
        eligible = asset.recovery_period != 0 and is_bonus_eligible(asset.recovery_period)
        asset_breakdown.append(
            AssetBreakdownRow(
                category=asset.category,
                description=describe_category(asset.category),
                amount=round(asset.cost_basis, 2),
                percentage=(
                    round(asset.cost_basis / total_asset_value * 100.0, 2)
                    if total_asset_value > 0
                    else 0.0
                ),
                recovery_period=asset.recovery_period,
                bonus_eligible=eligible,
            )
        )

    # --- first-year analysis ---
    total_bonus = 0.0
    total_regular = 0.0
    for asset, period in depreciable:
        bonus = calculate_bonus_depreciation(asset.cost_basis, period, bonus_rate)
        total_bonus += bonus.bonus_amount
        total_regular += bonus.remaining_basis * percentage_for(period, 1)

    total_bonus = round(total_bonus, 2)
    total_regular = round(total_regular, 2)
    total_first_year = round(total_bonus + total_regular, 2)
    first_year_tax_savings = round(total_first_year * tax_rate / 100.0, 2)

    first_year_analysis = FirstYearAnalysis(
        bonus_depreciation=total_bonus,
        regular_first_year=total_regular,
        total_first_year=total_first_year,
        tax_savings=first_year_tax_savings,
    )

    # --- summary ---
    total_reclassified = round(
        sum(a.cost_basis for a in inp.assets if a.category not in BUILDING_CATEGORIES and a.recovery_period != 0),
        2,
    )
    effective_rate = (
        round(first_year_tax_savings / inp.purchase_price * 100.0, 2)
        if inp.purchase_price > 0
        else 0.0
    )

    summary = ReportSummary(
        total_reclassified=total_reclassified,
        total_first_year_deduction=accelerated[0].depreciation if accelerated else 0.0,
        total_tax_savings=savings[-1].cumulative_savings if savings else 0.0,
        npv_tax_savings=npv_tax_savings,
        effective_rate=effective_rate,
        horizon_years=horizon_years,
        horizon_tax_savings=savings_through_year(savings, horizon_years),
    )

    log_event(
        logger,
        "study_report_generated",
        property_type=inp.property_type,
        assets=len(inp.assets),
        years=len(savings),
        first_year_deduction=summary.total_first_year_deduction,
        npv_tax_savings=npv_tax_savings,
    )

    return StudyReport(
        summary=summary,
        asset_breakdown=asset_breakdown,
        depreciation_schedule=depreciation_schedule,
        tax_savings_schedule=savings,
        first_year_analysis=first_year_analysis,
    )


def summary_columns(report: StudyReport) -> Dict[str, float]:
    """The three scalar columns stored next to the report blob for listing/sorting."""
    return {
        "total_first_year_deduction": report.summary.total_first_year_deduction,
        "total_tax_savings": report.summary.total_tax_savings,
        "npv_tax_savings": report.summary.npv_tax_savings,
    }
