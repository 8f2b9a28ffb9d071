# src/costseg/domain/study.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from costseg.domain.asset_classes import normalize_property_type
from costseg.domain.schedule import TaxSavingsEntry


def percent_like(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip().replace("%", "")
    return v


class StudyAsset(BaseModel):
    """One reclassified line item of a study (land uses recovery_period 0)."""
    category: str
    cost_basis: float
    recovery_period: float


class StudyReportInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    property_address: str = ""
    property_type: str
    purchase_price: float = 0.0
    building_value: float = 0.0
    land_value: float = 0.0
    study_year: int | None = None

    tax_rate: float = Field(..., description="37 means 37%")
    discount_rate: float = Field(5.0, description="5 means 5%")
    bonus_depreciation_rate: float = Field(100.0, description="percent of basis, 0-100")

    assets: List[StudyAsset] = Field(default_factory=list)

    @field_validator("property_type", mode="before")
    @classmethod
    def _ptype(cls, v: Any) -> Any:
        return normalize_property_type(v)

    @field_validator("tax_rate", "discount_rate", "bonus_depreciation_rate", mode="before")
    @classmethod
    def _strip_percent(cls, v: Any) -> Any:
        return percent_like(v)


@dataclass(frozen=True)
class ReportSummary:
    total_reclassified: float        # 5/7/15-year basis pulled out of the building
    total_first_year_deduction: float
    total_tax_savings: float         # cumulative over the full schedule horizon
    npv_tax_savings: float
    effective_rate: float            # first-year tax savings / purchase price, %
    horizon_years: int
    horizon_tax_savings: float       # cumulative through horizon_years


@dataclass(frozen=True)
class AssetBreakdownRow:
    category: str
    description: str
    amount: float
    percentage: float
    recovery_period: float
    bonus_eligible: bool


@dataclass(frozen=True)
class ScheduleComparisonRow:
    year: int
    accelerated: float
    straight_line: float
    difference: float


@dataclass(frozen=True)
class FirstYearAnalysis:
    bonus_depreciation: float
    regular_first_year: float
    total_first_year: float
    tax_savings: float


@dataclass(frozen=True)
class StudyReport:
    summary: ReportSummary
    asset_breakdown: List[AssetBreakdownRow]
    depreciation_schedule: List[ScheduleComparisonRow]
    tax_savings_schedule: List[TaxSavingsEntry]
    first_year_analysis: FirstYearAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
