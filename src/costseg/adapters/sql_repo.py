# src/costseg/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from costseg.domain.study import StudyReport
from costseg.services.report_generator import summary_columns


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudyRow(SQLModel, table=True):
    __tablename__ = "cost_seg_studies"

    id: int | None = Field(default=None, primary_key=True)
    ts: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)

    study_name: str = ""
    status: str = Field(default="draft", index=True)  # draft | completed

    property_address: str = ""
    property_type: str = Field(default="", index=True)
    study_year: int | None = None

    tax_rate: float = 37.0
    discount_rate: float = 5.0
    bonus_depreciation_rate: float = 100.0

    payload: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    results: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))

    # pulled out of results["summary"] so listings can sort without the blob
    total_first_year_deduction: float | None = Field(default=None, index=True)
    total_tax_savings: float | None = Field(default=None, index=True)
    npv_tax_savings: float | None = Field(default=None, index=True)


class SqlStudyRepository:
    def __init__(self, uri: str = "sqlite:///costseg.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def save_report(
        self,
        report: StudyReport,
        request_payload: dict[str, Any],
        *,
        study_name: str = "",
        study_id: int | None = None,
    ) -> int:
        """
        Insert a completed study, or overwrite the results of `study_id`.

        Returns the row id.
        """
        with Session(self.engine) as session:
            row: StudyRow | None = session.get(StudyRow, study_id) if study_id is not None else None
            if row is None:
                row = StudyRow()

            row.study_name = study_name or row.study_name
            row.status = "completed"
            row.property_address = str(request_payload.get("property_address", "") or "")
            row.property_type = str(request_payload.get("property_type", "") or "")
            row.study_year = request_payload.get("study_year")
            row.tax_rate = float(request_payload.get("tax_rate", row.tax_rate))
            row.discount_rate = float(request_payload.get("discount_rate", row.discount_rate))
            row.bonus_depreciation_rate = float(
                request_payload.get("bonus_depreciation_rate", row.bonus_depreciation_rate)
            )
            row.payload = request_payload
            row.results = report.to_dict()
            for column, value in summary_columns(report).items():
                setattr(row, column, value)
            row.updated_at = _utcnow()

            session.add(row)
            session.commit()
            session.refresh(row)
            return int(row.id)  # type: ignore[arg-type]

    def get(self, study_id: int) -> StudyRow | None:
        with Session(self.engine) as session:
            return session.get(StudyRow, study_id)

    def list_recent(self, limit: int = 50, order_by: str = "ts") -> list[StudyRow]:
        sort_cols = {
            "ts": StudyRow.ts,
            "total_tax_savings": StudyRow.total_tax_savings,
            "npv_tax_savings": StudyRow.npv_tax_savings,
            "total_first_year_deduction": StudyRow.total_first_year_deduction,
        }
        col = sort_cols.get(order_by)
        if col is None:
            raise ValueError(f"cannot order studies by {order_by!r}")
        with Session(self.engine) as session:
            stmt = select(StudyRow).order_by(col.desc()).limit(limit)
            return list(session.exec(stmt))
