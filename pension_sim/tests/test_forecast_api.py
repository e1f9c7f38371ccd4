from __future__ import annotations

from io import BytesIO

import pandas as pd
from flask.testing import FlaskClient

from pension_sim.app import create_app
from pension_sim.export.spreadsheet import SUMMARY_SHEET, USAGE_SHEET, YEARLY_SHEET


def forecast_payload(**overrides) -> dict:
    payload = {
        "age": 30,
        "sex": "male",
        "monthlySalary": 6000,
        "startYear": 2015,
        "endYear": 2050,
        "includeSickLeave": False,
        "startingFunds": 0,
        "desiredMonthlyBenefit": 9000,
    }
    payload.update(overrides)
    return payload


def test_forecast_endpoint_returns_ledger_and_benefit(client: FlaskClient):
    resp = client.post("/api/forecast", json=forecast_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["yearly"]) == 35
    assert body["yearly"][0]["year"] == 2015
    assert body["nominalMonthlyBenefit"] > 0
    assert body["realMonthlyBenefit"] < body["nominalMonthlyBenefit"]
    assert body["benefitStrategy"] == "account"
    assert [option["extraYears"] for option in body["laterRetirementOptions"]] == [1, 2, 5]


def test_invalid_payload_returns_400(client: FlaskClient):
    resp = client.post("/api/forecast", json={"age": 30})

    assert resp.status_code == 400
    body = resp.get_json()
    assert "detail" in body


def test_empty_span_returns_400_with_errors(client: FlaskClient):
    resp = client.post("/api/forecast", json={"age": 110, "sex": "female", "monthlySalary": 5000})

    assert resp.status_code == 400
    assert resp.get_json()["detail"]


def test_latest_forecast_round_trip(client: FlaskClient):
    empty = client.get("/api/forecast/latest").get_json()
    assert empty == {"payload": None, "result": None, "createdAt": None}

    posted = client.post("/api/forecast", json=forecast_payload()).get_json()
    latest = client.get("/api/forecast/latest").get_json()

    assert latest["result"] == posted
    assert latest["payload"]["monthlySalary"] == 6000
    assert latest["createdAt"]


def test_defaults_reflect_configured_overrides(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "USAGE_DB_PATH": str(tmp_path / "usage.db"),
            "LOG_LEVEL": "WARNING",
            "FORECAST_DEFAULTS": {"contributionRate": 0.2},
        }
    )
    with app.test_client() as client:
        defaults = client.get("/api/defaults").get_json()
        body = client.post(
            "/api/forecast", json=forecast_payload(startYear=2015, endYear=2016)
        ).get_json()

    assert defaults["contributionRate"] == 0.2
    assert defaults["retirementAge"] == {"male": 65, "female": 60}
    assert body["yearly"][0]["annualContribution"] == 6000 * 12 * 0.2


def test_repeated_submission_logged_once(client: FlaskClient):
    client.post("/api/forecast", json=forecast_payload())
    client.post("/api/forecast", json=forecast_payload())
    client.post("/api/forecast", json=forecast_payload(monthlySalary=7000))

    entries = client.get("/api/usage").get_json()
    assert [entry["salaryAmount"] for entry in entries] == [6000, 7000]
    assert entries[0]["expectedPension"] == 9000
    assert entries[0]["sickLeaveIncluded"] is False
    assert entries[0]["fundsAccumulated"] is None


def test_usage_search_and_clear(client: FlaskClient):
    client.post("/api/forecast", json=forecast_payload(postalCode="00-950"))
    client.post("/api/forecast", json=forecast_payload(sex="female"))

    matches = client.get("/api/usage", query_string={"q": "00-950"}).get_json()
    assert len(matches) == 1
    assert matches[0]["postalCode"] == "00-950"

    assert client.delete("/api/usage").get_json() == {"deleted": 2}
    assert client.get("/api/usage").get_json() == []


def test_report_returns_pdf(client: FlaskClient):
    resp = client.post("/api/forecast/report", json=forecast_payload(postalCode="00-950"))

    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.data.startswith(b"%PDF")
    assert len(client.get("/api/usage").get_json()) == 1


def test_forecast_export_workbook(client: FlaskClient):
    body = client.post("/api/forecast", json=forecast_payload()).get_json()
    resp = client.post("/api/forecast/export", json=forecast_payload())

    assert resp.status_code == 200
    sheets = pd.read_excel(BytesIO(resp.data), sheet_name=None, engine="openpyxl")
    assert set(sheets) == {SUMMARY_SHEET, YEARLY_SHEET}
    assert len(sheets[YEARLY_SHEET]) == len(body["yearly"])

    summary = dict(zip(sheets[SUMMARY_SHEET]["Metric"], sheets[SUMMARY_SHEET]["Value"]))
    assert int(summary["Estimated pension (nominal)"]) == round(body["nominalMonthlyBenefit"])


def test_usage_export_formats(client: FlaskClient):
    client.post("/api/forecast", json=forecast_payload())

    csv_resp = client.get("/api/usage/export", query_string={"format": "csv"})
    assert csv_resp.status_code == 200
    header = csv_resp.data.decode().splitlines()[0]
    assert header.startswith("Date of use,Time of use,Expected pension")

    xlsx_resp = client.get("/api/usage/export")
    frame = pd.read_excel(BytesIO(xlsx_resp.data), sheet_name=USAGE_SHEET, engine="openpyxl")
    assert len(frame) == 1
    assert frame.loc[0, "Whether periods of illness were included"] == "No"

    bad = client.get("/api/usage/export", query_string={"format": "pdf"})
    assert bad.status_code == 400
    assert bad.get_json()["detail"]


def test_invalid_postal_code_rejected_before_anything_is_stored(client: FlaskClient):
    resp = client.post("/api/forecast", json=forecast_payload(postalCode=12345))

    assert resp.status_code == 400
    assert "detail" in resp.get_json()
    latest = client.get("/api/forecast/latest").get_json()
    assert latest["result"] is None
    assert client.get("/api/usage").get_json() == []


def test_invalid_postal_code_rejected_for_report(client: FlaskClient):
    resp = client.post("/api/forecast/report", json=forecast_payload(postalCode=["00-950"]))

    assert resp.status_code == 400
    assert client.get("/api/usage").get_json() == []
