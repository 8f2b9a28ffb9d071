# src/costseg/api/http.py
from __future__ import annotations

import math
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from costseg.adapters.config import config
from costseg.adapters.logging_utils import get_logger, log_event
from costseg.adapters.sql_repo import SqlStudyRepository, StudyRow
from costseg.analysis.npv import calculate_irr, calculate_npv
from costseg.domain.errors import CostSegError
from costseg.domain.study import StudyReportInput
from costseg.services.calculators import (
    bonus_depreciation_analysis,
    depreciation_schedule,
    tax_savings_analysis,
)
from costseg.services.report_generator import generate_study_report
from .schemas import (
    BonusDepreciationRequest,
    DepreciationRequest,
    NpvRequest,
    StudyCreate,
    StudyItem,
    TaxSavingsRequest,
)

logger = get_logger(__name__)

app = FastAPI(title="costseg")

_study_repo = SqlStudyRepository(config.DB_URI)


# -----------------------------
# Errors: every input problem is a 400
# -----------------------------
@app.exception_handler(RequestValidationError)
async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    detail = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(CostSegError)
async def _engine_error(_: Request, exc: CostSegError) -> JSONResponse:
    log_event(logger, "rejected_input", error=str(exc), kind=type(exc).__name__)
    return JSONResponse(status_code=400, content={"detail": str(exc), "error": type(exc).__name__})


# -----------------------------
# Calculators
# -----------------------------
@app.post("/calculators/depreciation")
def depreciation_endpoint(body: DepreciationRequest) -> dict[str, Any]:
    return depreciation_schedule(
        cost_basis=body.cost_basis,
        recovery_period=body.recovery_period,
        bonus_rate=body.bonus_depreciation_rate,
    )


@app.post("/calculators/bonus-depreciation")
def bonus_depreciation_endpoint(body: BonusDepreciationRequest) -> dict[str, Any]:
    return bonus_depreciation_analysis(
        building_value=body.building_value,
        property_type=body.property_type,
        bonus_rate=body.bonus_rate,
    )


@app.post("/calculators/tax-savings")
def tax_savings_endpoint(body: TaxSavingsRequest) -> dict[str, Any]:
    return tax_savings_analysis(
        property_value=body.property_value,
        property_type=body.property_type,
        tax_rate=body.tax_rate,
        bonus_rate=body.bonus_depreciation_rate,
        discount_rate=body.discount_rate,
        horizon_years=config.SAVINGS_HORIZON_YEARS,
    )


@app.post("/calculators/npv")
def npv_endpoint(body: NpvRequest) -> dict[str, Any]:
    irr = calculate_irr(body.cash_flows)
    return {
        "discount_rate": body.discount_rate,
        "npv": calculate_npv(body.cash_flows, body.discount_rate),
        # NaN is not valid JSON
        "irr": None if math.isnan(irr) else irr,
    }


# -----------------------------
# Studies
# -----------------------------
def _study_item(row: StudyRow) -> StudyItem:
    return StudyItem(
        study_id=int(row.id or 0),
        study_name=row.study_name,
        status=row.status,
        property_address=row.property_address,
        property_type=row.property_type,
        study_year=row.study_year,
        ts=row.ts,
        total_first_year_deduction=row.total_first_year_deduction,
        total_tax_savings=row.total_tax_savings,
        npv_tax_savings=row.npv_tax_savings,
    )


@app.post("/studies/report")
def study_report_endpoint(body: StudyReportInput) -> dict[str, Any]:
    """
    Stateless: calculate and return the report without saving it.
    """
    report = generate_study_report(body, horizon_years=config.SAVINGS_HORIZON_YEARS)
    return report.to_dict()


@app.post("/studies")
def create_study(body: StudyCreate) -> dict[str, Any]:
    if body.study_id is not None and _study_repo.get(body.study_id) is None:
        raise HTTPException(status_code=404, detail="Study not found")

    report = generate_study_report(body, horizon_years=config.SAVINGS_HORIZON_YEARS)

    payload = body.model_dump(exclude={"study_name", "study_id"})
    study_id = _study_repo.save_report(
        report,
        payload,
        study_name=body.study_name,
        study_id=body.study_id,
    )
    return {"study_id": study_id, "report": report.to_dict()}


@app.get("/studies", response_model=list[StudyItem])
def list_studies(
    limit: int = Query(config.STUDIES_DEFAULT_LIMIT, ge=1, le=500),
    order_by: str = Query("ts", description="ts|total_tax_savings|npv_tax_savings|total_first_year_deduction"),
) -> list[StudyItem]:
    try:
        rows = _study_repo.list_recent(limit=limit, order_by=order_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return [_study_item(r) for r in rows]


@app.get("/studies/{study_id}")
def get_study(study_id: int) -> dict[str, Any]:
    row = _study_repo.get(study_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Study not found")
    return _study_item(row).model_dump() | {"report": row.results}
