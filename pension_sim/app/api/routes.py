"""HTTP routes for the Flask API."""

import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request, send_file
from pydantic import ValidationError

from pension_sim.domain.forecast import ForecastValidationError, run_forecast
from pension_sim.domain.usage import build_usage_entry, filter_entries, usage_key
from pension_sim.export.report import render_report
from pension_sim.export.spreadsheet import forecast_workbook, usage_csv, usage_workbook
from pension_sim.schemas.config import ForecastConfig
from pension_sim.schemas.forecast import ForecastRequest, ForecastResult
from pension_sim.schemas.usage import UsageContext
from pension_sim.storage.usage_store import (
    clear_usage,
    fetch_latest_forecast,
    log_usage,
    read_usage,
    save_forecast_run,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": json.loads(exc.json(include_url=False))}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ForecastValidationError)
def _handle_forecast_error(exc: ForecastValidationError):
    return jsonify({"detail": exc.errors}), HTTPStatus.BAD_REQUEST


def _forecast_config() -> ForecastConfig:
    return current_app.extensions["forecast_config"]


def _db_path() -> str:
    return current_app.config["USAGE_DB_PATH"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _read_forecast_payload() -> Tuple[ForecastRequest, Optional[str]]:
    """Split the optional ``postalCode`` off the body and validate the rest."""
    raw_payload: Any = request.get_json(force=True, silent=False)
    context = UsageContext()
    if isinstance(raw_payload, dict):
        raw_payload = dict(raw_payload)
        context = UsageContext.model_validate(
            {"postalCode": raw_payload.pop("postalCode", None)}
        )
    return ForecastRequest.model_validate(raw_payload), context.postalCode


def _compute(payload: ForecastRequest, now: datetime) -> ForecastResult:
    return run_forecast(payload, current_year=now.year, config=_forecast_config())


@api_bp.get("/defaults")
def defaults() -> Any:
    """Assumptions applied when a request leaves a rate out."""
    return jsonify(_forecast_config().model_dump(mode="json"))


@api_bp.post("/forecast")
def forecast() -> Any:
    payload, postal_code = _read_forecast_payload()
    now = _now()
    result = _compute(payload, now)
    body: Dict[str, Any] = result.model_dump(mode="json")
    entry = build_usage_entry(payload, result, now, postal_code)

    save_forecast_run(_db_path(), payload.model_dump(mode="json"), body)
    logged = log_usage(_db_path(), entry, usage_key(payload, result))
    logger.info(
        "forecast %s-%s strategy=%s nominal=%.2f logged=%s",
        result.yearly[0].year if result.yearly else None,
        result.yearly[-1].year if result.yearly else None,
        result.benefitStrategy.value,
        result.nominalMonthlyBenefit,
        logged,
    )
    return jsonify(body)


@api_bp.get("/forecast/latest")
def latest_forecast() -> Any:
    record = fetch_latest_forecast(_db_path())
    if record is None:
        return jsonify({"payload": None, "result": None, "createdAt": None})
    return jsonify(record)


@api_bp.post("/forecast/report")
def forecast_report() -> Any:
    payload, postal_code = _read_forecast_payload()
    now = _now()
    result = _compute(payload, now)
    pdf = render_report(payload, result, generated_at=now, postal_code=postal_code)

    log_usage(
        _db_path(),
        build_usage_entry(payload, result, now, postal_code),
        f"{usage_key(payload, result)}|report|{postal_code or ''}",
    )
    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name="pension-forecast-report.pdf",
    )


@api_bp.post("/forecast/export")
def forecast_export() -> Any:
    payload, _ = _read_forecast_payload()
    result = _compute(payload, _now())
    return send_file(
        BytesIO(forecast_workbook(result)),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name="pension-forecast.xlsx",
    )


@api_bp.get("/usage")
def usage() -> Any:
    entries = filter_entries(read_usage(_db_path()), request.args.get("q"))
    return jsonify([entry.model_dump() for entry in entries])


@api_bp.get("/usage/export")
def usage_export() -> Any:
    fmt = request.args.get("format", "xlsx").lower()
    entries = filter_entries(read_usage(_db_path()), request.args.get("q"))
    if fmt == "csv":
        return send_file(
            BytesIO(usage_csv(entries)),
            mimetype="text/csv",
            as_attachment=True,
            download_name="usage-report.csv",
        )
    if fmt == "xlsx":
        return send_file(
            BytesIO(usage_workbook(entries)),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="usage-report.xlsx",
        )
    return jsonify({"detail": [f"unsupported format {fmt}"]}), HTTPStatus.BAD_REQUEST


@api_bp.delete("/usage")
def delete_usage() -> Any:
    return jsonify({"deleted": clear_usage(_db_path())})
