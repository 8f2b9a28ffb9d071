# tests/test_sql_repo.py
import pytest

from costseg.adapters.sql_repo import SqlStudyRepository, StudyRow
from costseg.services.report_generator import generate_study_report, summary_columns


@pytest.fixture
def repo(tmp_path):
    return SqlStudyRepository(f"sqlite:///{tmp_path / 'studies.db'}")


def test_save_and_get(repo, commercial_study):
    report = generate_study_report(commercial_study)
    study_id = repo.save_report(report, commercial_study, study_name="Main St")

    row = repo.get(study_id)
    assert row is not None
    assert row.status == "completed"
    assert row.property_address == "100 Main St"
    assert row.tax_rate == 37.0
    assert row.payload["purchase_price"] == 2_000_000
    assert row.results["first_year_analysis"]["bonus_depreciation"] == 500_000.0
    cols = summary_columns(report)
    assert row.total_first_year_deduction == cols["total_first_year_deduction"]
    assert row.npv_tax_savings == cols["npv_tax_savings"]


def test_save_with_id_overwrites(repo, commercial_study):
    report = generate_study_report(commercial_study)
    study_id = repo.save_report(report, commercial_study, study_name="first")

    commercial_study["tax_rate"] = 21
    again = repo.save_report(generate_study_report(commercial_study), commercial_study, study_id=study_id)

    assert again == study_id
    row = repo.get(study_id)
    assert row.study_name == "first"
    assert row.tax_rate == 21.0
    assert len(repo.list_recent()) == 1


def test_list_recent_ordering(repo, commercial_study):
    for rate in (10, 37, 21):
        commercial_study["tax_rate"] = rate
        repo.save_report(generate_study_report(commercial_study), commercial_study)

    rows = repo.list_recent(order_by="npv_tax_savings")
    assert [r.tax_rate for r in rows] == [37.0, 21.0, 10.0]
    assert len(repo.list_recent(limit=2)) == 2


def test_list_recent_rejects_unknown_column(repo):
    with pytest.raises(ValueError):
        repo.list_recent(order_by="payload")


def test_get_missing(repo):
    assert repo.get(12345) is None


def test_new_rows_get_timezone_aware_timestamps():
    row = StudyRow()
    assert row.ts.tzinfo is not None
    assert row.updated_at.tzinfo is not None
