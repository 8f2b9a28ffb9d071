"""
MACRS depreciation percentage tables (IRS Publication 946, Appendix A).

All rates are fractions of the depreciable basis (0.20 == 20%).

- 5, 7 and 15-year property: GDS declining balance, half-year convention
  (Table A-1). The first and last years are half years, so each table has
  recovery period + 1 entries.
- 27.5-year residential rental and 39-year nonresidential real property:
  straight line, mid-month convention, placed in service in month 1
  (Tables A-6 and A-7a). Year 1 is prorated for 11.5 months and the final
  year takes the half month that is left.

These are data. When the tax rules change, update the tables here and bump
TABLES_VERSION; the scheduling code does not need to change.
"""
from __future__ import annotations

from typing import Any, Union

from costseg.domain.errors import InvalidInput, UnsupportedRecoveryPeriod

TABLES_VERSION = "irs-pub946-2024"

# one of VALID_RECOVERY_PERIODS; Literal cannot hold 27.5
MacrsRecoveryPeriod = Union[int, float]

# ==============================================================================
# 200% / 150% DECLINING BALANCE - HALF-YEAR CONVENTION
# ==============================================================================

# 5-Year Property (200% DB, HY): carpeting, appliances, task lighting
MACRS_5_YEAR: tuple[float, ...] = (
    0.2000,  # Year 1
    0.3200,  # Year 2
    0.1920,  # Year 3
    0.1152,  # Year 4
    0.1152,  # Year 5
    0.0576,  # Year 6
)

# 7-Year Property (200% DB, HY): office furniture, cabinetry, signs
MACRS_7_YEAR: tuple[float, ...] = (
    0.1429,  # Year 1
    0.2449,  # Year 2
    0.1749,  # Year 3
    0.1249,  # Year 4
    0.0893,  # Year 5
    0.0892,  # Year 6
    0.0893,  # Year 7
    0.0446,  # Year 8
)

# 15-Year Property (150% DB, HY): parking lots, landscaping, sidewalks
MACRS_15_YEAR: tuple[float, ...] = (
    0.0500,  # Year 1
    0.0950,  # Year 2
    0.0855,  # Year 3
    0.0770,  # Year 4
    0.0693,  # Year 5
    0.0623,  # Year 6
    0.0590,  # Year 7
    0.0590,  # Year 8
    0.0591,  # Year 9
    0.0590,  # Year 10
    0.0591,  # Year 11
    0.0590,  # Year 12
    0.0591,  # Year 13
    0.0590,  # Year 14
    0.0591,  # Year 15
    0.0295,  # Year 16
)

# ==============================================================================
# STRAIGHT LINE - MID-MONTH CONVENTION (month 1)
# ==============================================================================

# 27.5-Year Residential Rental Property (Table A-6)
MACRS_27_5_YEAR: tuple[float, ...] = (
    0.03485,  # Year 1
    0.03636,  # Year 2
    0.03636,  # Year 3
    0.03636,  # Year 4
    0.03636,  # Year 5
    0.03636,  # Year 6
    0.03636,  # Year 7
    0.03636,  # Year 8
    0.03636,  # Year 9
    0.03637,  # Year 10
    0.03636,  # Year 11
    0.03637,  # Year 12
    0.03636,  # Year 13
    0.03637,  # Year 14
    0.03636,  # Year 15
    0.03637,  # Year 16
    0.03636,  # Year 17
    0.03637,  # Year 18
    0.03636,  # Year 19
    0.03637,  # Year 20
    0.03636,  # Year 21
    0.03637,  # Year 22
    0.03636,  # Year 23
    0.03637,  # Year 24
    0.03636,  # Year 25
    0.03637,  # Year 26
    0.03636,  # Year 27
    0.01970,  # Year 28
)

# 39-Year Nonresidential Real Property (Table A-7a)
# Year 1: 2.461%, years 2-39: 2.564%, year 40: 0.107%
MACRS_39_YEAR: tuple[float, ...] = (0.02461,) + (0.02564,) * 38 + (0.00107,)

MACRS_TABLES: dict[float, tuple[float, ...]] = {
    5: MACRS_5_YEAR,
    7: MACRS_7_YEAR,
    15: MACRS_15_YEAR,
    27.5: MACRS_27_5_YEAR,
    39: MACRS_39_YEAR,
}

VALID_RECOVERY_PERIODS: tuple[float, ...] = (5, 7, 15, 27.5, 39)
STRAIGHT_LINE_PERIODS: tuple[float, ...] = (27.5, 39)


def normalize_recovery_period(value: Any) -> MacrsRecoveryPeriod:
    """
    Coerce 5, 5.0, "5", "27.5" into the canonical table key.

    Raises UnsupportedRecoveryPeriod for anything outside the MACRS classes
    this engine knows about (including land's 0).
    """
    if isinstance(value, bool):
        raise UnsupportedRecoveryPeriod(value, VALID_RECOVERY_PERIODS)
    try:
        f = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise UnsupportedRecoveryPeriod(value, VALID_RECOVERY_PERIODS) from None

    if f not in MACRS_TABLES:
        raise UnsupportedRecoveryPeriod(value, VALID_RECOVERY_PERIODS)
    return int(f) if f.is_integer() else f


def is_straight_line(recovery_period: Any) -> bool:
    return normalize_recovery_period(recovery_period) in STRAIGHT_LINE_PERIODS


def get_macrs_rates(recovery_period: Any) -> list[float]:
    """Return a copy of the annual rate table for the recovery period."""
    return list(MACRS_TABLES[normalize_recovery_period(recovery_period)])


def percentage_for(recovery_period: Any, year: int) -> float:
    """
    Depreciation rate (fraction of basis) for a 1-based year of service.

    Years past the end of the table depreciate nothing.
    """
    if year < 1:
        raise InvalidInput(f"year must be >= 1, got {year}")
    rates = MACRS_TABLES[normalize_recovery_period(recovery_period)]
    if year > len(rates):
        return 0.0
    return rates[year - 1]
