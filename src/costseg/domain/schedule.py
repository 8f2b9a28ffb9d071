from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class YearlyDepreciation:
    year: int               # 1-based year of service
    depreciation: float     # deduction taken that year


@dataclass(frozen=True)
class DepreciationScheduleEntry:
    year: int
    depreciation: float
    cumulative_depreciation: float  # through and including this year
    remaining_basis: float          # cost basis - cumulative, never < 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BonusDepreciationResult:
    bonus_amount: float      # taken in year 1 on top of regular MACRS
    remaining_basis: float   # basis left for the MACRS table after bonus
    first_year_total: float  # bonus + year-1 MACRS on the remaining basis

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AssetAllocationItem:
    category: str
    description: str
    recovery_period: float  # 0 for land
    amount: float
    percentage: float       # share of the allocated value, 0-100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaxSavingsEntry:
    year: int
    with_cost_seg: float     # accelerated depreciation that year
    without_cost_seg: float  # straight-line depreciation that year
    annual_savings: float    # (with - without) * tax rate
    cumulative_savings: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def field_of(entry: Any, name: str) -> Any:
    """Read `year` / `depreciation` from a dataclass entry or a plain dict."""
    if isinstance(entry, dict):
        return entry[name]
    return getattr(entry, name)
