from __future__ import annotations

from typing import Any, Iterable, Sequence

from costseg.analysis.bonus import is_bonus_eligible
from costseg.domain.asset_classes import is_residential
from costseg.domain.errors import InvalidInput, UnsupportedRecoveryPeriod
from costseg.domain.macrs_tables import (
    STRAIGHT_LINE_PERIODS,
    MacrsRecoveryPeriod,
    get_macrs_rates,
    normalize_recovery_period,
)
from costseg.domain.schedule import DepreciationScheduleEntry, YearlyDepreciation, field_of


def _check_basis(cost_basis: float) -> float:
    try:
        basis = float(cost_basis)
    except (TypeError, ValueError):
        raise InvalidInput(f"cost_basis must be numeric, got {cost_basis!r}") from None
    if not basis > 0:
        raise InvalidInput("cost_basis must be a positive number")
    return basis


def _check_bonus_rate(bonus_rate: float) -> float:
    try:
        rate = float(bonus_rate)
    except (TypeError, ValueError):
        raise InvalidInput(f"bonus_rate must be numeric, got {bonus_rate!r}") from None
    if not (0.0 <= rate <= 100.0):
        raise InvalidInput(f"bonus_rate must be between 0 and 100, got {bonus_rate}")
    return rate


def calculate_depreciation(
    cost_basis: float,
    recovery_period: Any,
    bonus_rate: float = 100.0,
) -> list[DepreciationScheduleEntry]:
    """
    Year-by-year MACRS schedule with optional bonus depreciation.

    - Bonus (bonus_rate % of basis) is only taken on 5/7/15-year property and
      lands entirely in year 1. 27.5/39-year property ignores bonus_rate.
    - The table percentages apply to the post-bonus basis every year (the
      IRS percentage-table method, not a declining balance).
    - Every amount is rounded to cents as its entry is built. A year never
      takes more than what is left, and the last year takes all of it, so the
      schedule always recovers exactly the cost basis.
    """
    basis = round(_check_basis(cost_basis), 2)
    period = normalize_recovery_period(recovery_period)
    rate = _check_bonus_rate(bonus_rate)

    bonus_amount = basis * (rate / 100.0) if is_bonus_eligible(period) else 0.0
    macrs_basis = basis - bonus_amount

    rates = get_macrs_rates(period)
    last_year = len(rates)

    schedule: list[DepreciationScheduleEntry] = []
    cumulative = 0.0

    for year, pct in enumerate(rates, start=1):
        remaining = max(round(basis - cumulative, 2), 0.0)

        if year == last_year:
            dep = remaining
        else:
            dep = macrs_basis * pct
            if year == 1:
                dep += bonus_amount
            dep = min(round(dep, 2), remaining)

        cumulative = round(cumulative + dep, 2)
        schedule.append(
            DepreciationScheduleEntry(
                year=year,
                depreciation=dep,
                cumulative_depreciation=cumulative,
                remaining_basis=max(round(basis - cumulative, 2), 0.0),
            )
        )

    return schedule


def calculate_straight_line_depreciation(
    cost_basis: float,
    recovery_period: MacrsRecoveryPeriod,
) -> list[DepreciationScheduleEntry]:
    """
    'Without cost segregation' baseline: the whole building basis over
    27.5 or 39 years, no bonus.
    """
    period = normalize_recovery_period(recovery_period)
    if period not in STRAIGHT_LINE_PERIODS:
        raise UnsupportedRecoveryPeriod(recovery_period, STRAIGHT_LINE_PERIODS)
    return calculate_depreciation(cost_basis, period, bonus_rate=0.0)


def straight_line_period_for(property_type: str) -> MacrsRecoveryPeriod:
    # residential rental => 27.5, anything else is nonresidential real property
    return 27.5 if is_residential(property_type) else 39


def merge_schedules(schedules: Iterable[Sequence[Any]]) -> list[YearlyDepreciation]:
    """
    Sum several schedules year by year.

    Schedules of different lengths are aligned on their `year` field; a year
    missing from one schedule contributes 0 for it.
    """
    totals: dict[int, float] = {}
    for schedule in schedules:
        for entry in schedule:
            year = int(field_of(entry, "year"))
            totals[year] = totals.get(year, 0.0) + float(field_of(entry, "depreciation"))

    if not totals:
        return []

    horizon = max(totals)
    return [
        YearlyDepreciation(year=y, depreciation=round(totals.get(y, 0.0), 2))
        for y in range(1, horizon + 1)
    ]
