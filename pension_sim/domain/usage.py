from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from pension_sim.export.formatting import round_currency
from pension_sim.schemas.forecast import ForecastRequest, ForecastResult
from pension_sim.schemas.usage import UsageLogEntry


def build_usage_entry(
    request: ForecastRequest,
    result: ForecastResult,
    logged_at: datetime,
    postal_code: Optional[str] = None,
) -> UsageLogEntry:
    return UsageLogEntry(
        date=logged_at.strftime("%Y-%m-%d"),
        time=logged_at.strftime("%H:%M:%S"),
        expectedPension=request.desiredMonthlyBenefit,
        age=request.age,
        sex=request.sex.value,
        salaryAmount=request.monthlySalary,
        sickLeaveIncluded=request.includeSickLeave,
        fundsAccumulated=request.startingFunds or None,
        actualPension=round_currency(result.nominalMonthlyBenefit),
        realPension=round_currency(result.realMonthlyBenefit),
        postalCode=postal_code or None,
    )


def usage_key(request: ForecastRequest, result: ForecastResult) -> str:
    """Deterministic key for one forecast run, used to drop repeated submissions."""
    if result.yearly:
        start, end = result.yearly[0].year, result.yearly[-1].year + 1
    else:
        start, end = request.startYear, request.endYear
    parts = [
        "forecast",
        request.age,
        request.sex.value,
        request.monthlySalary,
        start,
        end,
        1 if request.includeSickLeave else 0,
        request.startingFunds,
        request.desiredMonthlyBenefit or 0,
        result.benefitStrategy.value,
        round_currency(result.nominalMonthlyBenefit),
        round_currency(result.realMonthlyBenefit),
    ]
    return "|".join(str(part) for part in parts)


def filter_entries(entries: Iterable[UsageLogEntry], text: Optional[str]) -> List[UsageLogEntry]:
    """Case-insensitive search over date, time, age, sex, salary, postal code and goal."""
    entries = list(entries)
    if not text:
        return entries
    needle = text.lower()

    def haystack(entry: UsageLogEntry) -> str:
        fields = [
            entry.date,
            entry.time,
            str(entry.age),
            entry.sex,
            str(entry.salaryAmount),
            entry.postalCode or "",
            str(entry.expectedPension or ""),
        ]
        return " ".join(fields).lower()

    return [entry for entry in entries if needle in haystack(entry)]
