# src/costseg/api/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from costseg.adapters.config import config
from costseg.domain.asset_classes import normalize_property_type
from costseg.domain.macrs_tables import normalize_recovery_period
from costseg.domain.study import StudyReportInput, percent_like


# --------------------------------------------
# Calculators
# --------------------------------------------

class DepreciationRequest(BaseModel):
    cost_basis: float = Field(..., gt=0)
    recovery_period: float
    bonus_depreciation_rate: float = Field(default_factory=lambda: config.DEFAULT_BONUS_RATE)

    @field_validator("recovery_period", mode="before")
    @classmethod
    def _period(cls, v: Any) -> Any:
        return normalize_recovery_period(v)

    @field_validator("bonus_depreciation_rate", mode="before")
    @classmethod
    def _rate(cls, v: Any) -> Any:
        return percent_like(v)


class BonusDepreciationRequest(BaseModel):
    building_value: float = Field(..., gt=0)
    property_type: str
    bonus_rate: float = Field(default_factory=lambda: config.DEFAULT_BONUS_RATE)

    @field_validator("property_type", mode="before")
    @classmethod
    def _ptype(cls, v: Any) -> Any:
        return normalize_property_type(v)

    @field_validator("bonus_rate", mode="before")
    @classmethod
    def _rate(cls, v: Any) -> Any:
        return percent_like(v)


class TaxSavingsRequest(BaseModel):
    property_value: float = Field(..., gt=0)
    property_type: str
    tax_rate: float = Field(default_factory=lambda: config.DEFAULT_TAX_RATE, ge=0, le=100)
    bonus_depreciation_rate: float = Field(default_factory=lambda: config.DEFAULT_BONUS_RATE)
    discount_rate: float = Field(default_factory=lambda: config.DEFAULT_DISCOUNT_RATE, ge=0)

    @field_validator("property_type", mode="before")
    @classmethod
    def _ptype(cls, v: Any) -> Any:
        return normalize_property_type(v)

    @field_validator("tax_rate", "bonus_depreciation_rate", "discount_rate", mode="before")
    @classmethod
    def _rates(cls, v: Any) -> Any:
        return percent_like(v)


class NpvRequest(BaseModel):
    cash_flows: List[float] = Field(default_factory=list)
    discount_rate: float = Field(default_factory=lambda: config.DEFAULT_DISCOUNT_RATE, ge=0)

    @field_validator("discount_rate", mode="before")
    @classmethod
    def _rate(cls, v: Any) -> Any:
        return percent_like(v)


# --------------------------------------------
# Studies
# --------------------------------------------

class StudyCreate(StudyReportInput):
    """
    Body for POST /studies: the report input plus a display name.
    An id re-runs the calculation for an existing study.
    """
    study_name: str = ""
    study_id: int | None = None


class StudyItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    study_id: int
    study_name: str
    status: str
    property_address: str
    property_type: str
    study_year: int | None = None
    ts: datetime

    total_first_year_deduction: float | None = None
    total_tax_savings: float | None = None
    npv_tax_savings: float | None = None
