"""
Section 168(k) bonus depreciation for a single asset.

Property with a recovery period of 20 years or less qualifies; in this engine
that is the 5, 7 and 15-year classes. Real property (27.5 / 39) never does.
"""
from __future__ import annotations

from typing import Any

from costseg.domain.macrs_tables import normalize_recovery_period, percentage_for
from costseg.domain.schedule import BonusDepreciationResult

BONUS_ELIGIBLE_MAX_PERIOD = 20


def is_bonus_eligible(recovery_period: Any) -> bool:
    return normalize_recovery_period(recovery_period) <= BONUS_ELIGIBLE_MAX_PERIOD


def calculate_bonus_depreciation(
    amount: float,
    recovery_period: Any,
    bonus_rate: float = 100.0,
) -> BonusDepreciationResult:
    """
    Bonus amount plus the total first-year deduction for one asset.

    bonus_rate is a percentage and is clamped to [0, 100]. For ineligible
    property the bonus is 0 and the first-year total is just the year-1
    straight-line amount.
    """
    period = normalize_recovery_period(recovery_period)

    if amount is None or amount <= 0:
        return BonusDepreciationResult(bonus_amount=0.0, remaining_basis=0.0, first_year_total=0.0)

    rate = max(0.0, min(100.0, float(bonus_rate)))

    bonus_amount = 0.0
    if is_bonus_eligible(period):
        bonus_amount = round(amount * (rate / 100.0), 2)

    remaining_basis = round(amount - bonus_amount, 2)
    first_year_macrs = round(remaining_basis * percentage_for(period, 1), 2)

    return BonusDepreciationResult(
        bonus_amount=bonus_amount,
        remaining_basis=remaining_basis,
        first_year_total=round(bonus_amount + first_year_macrs, 2),
    )
