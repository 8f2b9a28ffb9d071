from __future__ import annotations

from typing import Any, Sequence

from costseg.domain.errors import InvalidInput
from costseg.domain.schedule import TaxSavingsEntry, field_of


def _by_year(schedule: Sequence[Any]) -> dict[int, float]:
    out: dict[int, float] = {}
    for entry in schedule:
        year = int(field_of(entry, "year"))
        out[year] = out.get(year, 0.0) + float(field_of(entry, "depreciation"))
    return out


def calculate_tax_savings(
    accelerated: Sequence[Any],
    straight_line: Sequence[Any],
    tax_rate: float,
) -> list[TaxSavingsEntry]:
    """
    Year-by-year tax benefit of cost segregation.

    Both schedules are keyed by year and run out to the longer of the two;
    a year one schedule doesn't reach counts as 0 depreciation on that side.
    Later years usually go negative once straight line overtakes the
    accelerated schedule; over the full horizon the savings net to ~0 because
    total depreciation is the same either way, only its timing moves.
    """
    rate = float(tax_rate)
    if not (0.0 <= rate <= 100.0):
        raise InvalidInput(f"tax_rate must be between 0 and 100, got {tax_rate}")

    with_seg = _by_year(accelerated)
    without_seg = _by_year(straight_line)

    horizon = max([0, *with_seg, *without_seg])

    results: list[TaxSavingsEntry] = []
    cumulative = 0.0
    for year in range(1, horizon + 1):
        dep_with = round(with_seg.get(year, 0.0), 2)
        dep_without = round(without_seg.get(year, 0.0), 2)

        annual = round((dep_with - dep_without) * rate / 100.0, 2)
        cumulative = round(cumulative + annual, 2)

        results.append(
            TaxSavingsEntry(
                year=year,
                with_cost_seg=dep_with,
                without_cost_seg=dep_without,
                annual_savings=annual,
                cumulative_savings=cumulative,
            )
        )

    return results


def savings_through_year(entries: Sequence[TaxSavingsEntry], horizon_years: int) -> float:
    """
    Cumulative savings at the end of `horizon_years`, or at the last year
    when the schedule is shorter than that.
    """
    if not entries:
        return 0.0
    if horizon_years < 1:
        raise InvalidInput("horizon_years must be >= 1")
    idx = min(horizon_years, len(entries)) - 1
    return entries[idx].cumulative_savings
