"""Tabular exports of forecasts and the usage log."""

from __future__ import annotations

from io import BytesIO
from typing import Iterable, List, Tuple

import pandas as pd

from pension_sim.export.formatting import round_currency
from pension_sim.schemas.forecast import ForecastResult
from pension_sim.schemas.usage import USAGE_COLUMNS, UsageLogEntry

SUMMARY_SHEET = "Summary"
YEARLY_SHEET = "Yearly"
USAGE_SHEET = "usage"

YEARLY_COLUMNS = {
    "year": "Year",
    "resolvedSalary": "Salary (gross monthly)",
    "illnessMonths": "Illness months",
    "illnessAdjustedSalary": "Salary after illness",
    "annualContribution": "Annual contribution",
    "cumulativeBalance": "Account balance",
}


def summary_rows(result: ForecastResult) -> List[Tuple[str, object]]:
    """Metric/value pairs; money in whole currency units."""
    return [
        ("Estimated pension (nominal)", round_currency(result.nominalMonthlyBenefit)),
        ("Real (inflation-adjusted)", round_currency(result.realMonthlyBenefit)),
        ("Replacement rate", round(result.replacementRate, 4)),
        ("Account balance at retirement", round_currency(result.terminalBalance)),
        ("Average pension benchmark", round_currency(result.averagePensionBenchmark)),
        ("Years worked", result.yearsWorked),
        ("Years to goal", "" if result.yearsToGoal is None else result.yearsToGoal),
        ("Benefit strategy", result.benefitStrategy.value),
    ] + [
        (f"+{option.extraYears} years", round_currency(option.projectedBenefit))
        for option in result.laterRetirementOptions
    ]


def yearly_frame(result: ForecastResult) -> pd.DataFrame:
    frame = pd.DataFrame(
        [record.model_dump() for record in result.yearly], columns=list(YEARLY_COLUMNS)
    )
    money = [column for column in YEARLY_COLUMNS if column not in ("year", "illnessMonths")]
    frame[money] = frame[money].round(2)
    return frame.rename(columns=YEARLY_COLUMNS)


def forecast_workbook(result: ForecastResult) -> bytes:
    buffer = BytesIO()
    summary = pd.DataFrame(summary_rows(result), columns=["Metric", "Value"])
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        summary.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
        yearly_frame(result).to_excel(writer, sheet_name=YEARLY_SHEET, index=False)
    return buffer.getvalue()


def usage_frame(entries: Iterable[UsageLogEntry]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [entry.model_dump() for entry in entries], columns=list(USAGE_COLUMNS)
    )
    frame["sickLeaveIncluded"] = frame["sickLeaveIncluded"].map({True: "Yes", False: "No"})
    return frame.rename(columns=USAGE_COLUMNS)


def usage_workbook(entries: Iterable[UsageLogEntry]) -> bytes:
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        usage_frame(entries).to_excel(writer, sheet_name=USAGE_SHEET, index=False)
    return buffer.getvalue()


def usage_csv(entries: Iterable[UsageLogEntry]) -> bytes:
    return usage_frame(entries).to_csv(index=False).encode()
