# tests/test_api_studies.py


def test_stateless_report(client, commercial_study):
    r = client.post("/studies/report", json=commercial_study)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["summary"]["total_first_year_deduction"] == 527_071.0
    assert len(data["asset_breakdown"]) == 5


def test_report_without_assets_is_rejected(client, commercial_study):
    commercial_study["assets"] = []
    r = client.post("/studies/report", json=commercial_study)
    assert r.status_code == 400
    assert r.json()["error"] == "IncompleteAssetList"


def test_report_with_bad_recovery_period(client, commercial_study):
    commercial_study["assets"][0]["recovery_period"] = 12
    r = client.post("/studies/report", json=commercial_study)
    assert r.status_code == 400
    assert r.json()["error"] == "UnsupportedRecoveryPeriod"


def test_report_missing_tax_rate(client, commercial_study):
    del commercial_study["tax_rate"]
    r = client.post("/studies/report", json=commercial_study)
    assert r.status_code == 400


def test_create_fetch_and_rerun_study(client, commercial_study):
    r = client.post("/studies", json={**commercial_study, "study_name": "Main St"})
    assert r.status_code == 200, r.text
    study_id = r.json()["study_id"]

    got = client.get(f"/studies/{study_id}")
    assert got.status_code == 200
    body = got.json()
    assert body["study_name"] == "Main St"
    assert body["status"] == "completed"
    assert body["property_type"] == "commercial"
    assert body["total_first_year_deduction"] == 527_071.0
    assert body["report"]["summary"]["total_reclassified"] == 500_000.0

    commercial_study["bonus_depreciation_rate"] = 0
    rerun = client.post("/studies", json={**commercial_study, "study_id": study_id})
    assert rerun.status_code == 200
    assert rerun.json()["study_id"] == study_id

    body = client.get(f"/studies/{study_id}").json()
    # name kept, numbers recalculated without bonus
    assert body["study_name"] == "Main St"
    assert body["total_first_year_deduction"] < 527_071.0


def test_list_studies(client, commercial_study):
    client.post("/studies", json={**commercial_study, "study_name": "listed"})

    r = client.get("/studies", params={"order_by": "npv_tax_savings", "limit": 10})
    assert r.status_code == 200
    items = r.json()
    assert 1 <= len(items) <= 10
    npvs = [i["npv_tax_savings"] for i in items]
    assert npvs == sorted(npvs, reverse=True)


def test_list_studies_bad_order(client):
    r = client.get("/studies", params={"order_by": "nope"})
    assert r.status_code == 400


def test_unknown_study_is_404(client, commercial_study):
    assert client.get("/studies/999999").status_code == 404
    r = client.post("/studies", json={**commercial_study, "study_id": 999999})
    assert r.status_code == 404


def test_report_rejects_unknown_property_type(client, commercial_study):
    commercial_study["property_type"] = "castle"
    r = client.post("/studies/report", json=commercial_study)
    assert r.status_code == 400
    assert "castle" in r.text

    assert client.post("/studies", json=commercial_study).status_code == 400


def test_report_normalizes_property_type_label(client, commercial_study):
    commercial_study["property_type"] = " Mixed_Use "
    r = client.post("/studies", json=commercial_study)
    assert r.status_code == 200, r.text
    body = client.get(f"/studies/{r.json()['study_id']}").json()
    assert body["property_type"] == "mixed-use"
