"""Paginated PDF report for a single forecast."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pension_sim.export.formatting import format_percent, format_pln
from pension_sim.schemas.forecast import ForecastRequest, ForecastResult

TITLE = "Pension Forecast Report"
DISCLAIMER = (
    "Educational simulator. Start and end years refer to January. Real outcomes "
    "depend on official indexation and individual history."
)

# header fills per table
INPUTS_FILL = colors.HexColor("#3F84D2")
RESULTS_FILL = colors.HexColor("#00993F")
SCENARIOS_FILL = colors.HexColor("#FFB34F")


def span_years(request: ForecastRequest, result: ForecastResult) -> tuple:
    if result.yearly:
        return result.yearly[0].year, result.yearly[-1].year + 1
    return request.startYear, request.endYear


def input_rows(
    request: ForecastRequest, result: ForecastResult, postal_code: Optional[str] = None
) -> List[List[str]]:
    start, end = span_years(request, result)
    return [
        ["Parameter", "Value"],
        ["Age", str(request.age)],
        ["Sex", request.sex.value.capitalize()],
        ["Gross salary", format_pln(request.monthlySalary)],
        ["Start year (Jan)", str(start)],
        ["Planned retirement year (Jan)", str(end)],
        ["Include sick leave", "Yes" if request.includeSickLeave else "No"],
        ["Funds accumulated", format_pln(request.startingFunds)],
        [
            "Desired pension",
            format_pln(request.desiredMonthlyBenefit)
            if request.desiredMonthlyBenefit
            else "-",
        ],
        ["Postal code (optional)", postal_code or "-"],
    ]


def result_rows(result: ForecastResult) -> List[List[str]]:
    return [
        ["Metric", "Amount"],
        ["Estimated pension (nominal)", format_pln(result.nominalMonthlyBenefit)],
        ["Real (inflation-adjusted)", format_pln(result.realMonthlyBenefit)],
        ["Replacement rate", format_percent(result.replacementRate)],
        ["Average pension benchmark", format_pln(result.averagePensionBenchmark)],
        ["Years worked (Jan-Jan)", str(result.yearsWorked)],
    ]


def scenario_rows(result: ForecastResult) -> List[List[str]]:
    rows = [["Scenario", "Estimated pension"]]
    for option in result.laterRetirementOptions:
        label = "year" if option.extraYears == 1 else "years"
        rows.append([f"+{option.extraYears} {label}", format_pln(option.projectedBenefit)])
    return rows


def goal_sentence(request: ForecastRequest, result: ForecastResult) -> str:
    desired = request.desiredMonthlyBenefit
    if not desired:
        return "No desired pension provided."
    if result.nominalMonthlyBenefit >= desired:
        return f"Your forecast meets your desired pension of {format_pln(desired)}."
    if result.yearsToGoal is not None:
        unit = "year" if result.yearsToGoal == 1 else "years"
        return (
            f"You may need approximately {result.yearsToGoal} more {unit} of work "
            f"to reach {format_pln(desired)}."
        )
    return f"Your desired pension of {format_pln(desired)} is not reachable under these assumptions."


def _table(rows: List[List[str]], fill) -> Table:
    table = Table(rows, colWidths=[3 * inch, 2.5 * inch])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), fill),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (1, 1), (1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ]
        )
    )
    return table


def render_report(
    request: ForecastRequest,
    result: ForecastResult,
    generated_at: datetime,
    postal_code: Optional[str] = None,
) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4, rightMargin=40, leftMargin=40, topMargin=50, bottomMargin=30
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Heading1"], fontSize=18)
    heading_style = ParagraphStyle("ReportHeading", parent=styles["Heading2"], fontSize=12)
    normal_style = styles["Normal"]
    note_style = ParagraphStyle(
        "ReportNote", parent=styles["Normal"], fontSize=8, textColor=colors.grey
    )

    story = [
        Paragraph(TITLE, title_style),
        Paragraph(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M')}", normal_style),
        Spacer(1, 12),
        _table(input_rows(request, result, postal_code), INPUTS_FILL),
        Spacer(1, 16),
        _table(result_rows(result), RESULTS_FILL),
        Spacer(1, 16),
        _table(scenario_rows(result), SCENARIOS_FILL),
        Spacer(1, 16),
        Paragraph("Goal comparison", heading_style),
        Paragraph(goal_sentence(request, result), normal_style),
        Spacer(1, 16),
    ]
    story.extend(Paragraph(warning, note_style) for warning in result.warnings)
    story.append(Paragraph(DISCLAIMER, note_style))

    doc.build(story)
    return buffer.getvalue()
