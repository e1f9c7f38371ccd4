"""Pro-rata salary reduction for periods of illness."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from pension_sim.schemas.forecast import IllnessInterval

MONTHS_PER_YEAR = 12.0


def clamp_months(months: float) -> float:
    return min(max(months, 0.0), MONTHS_PER_YEAR)


def illness_months_by_year(
    years: Iterable[int], intervals: Iterable[IllnessInterval]
) -> Dict[int, float]:
    """Months off per year, summed over overlapping intervals and clamped to [0, 12]."""
    totals: Dict[int, float] = {year: 0.0 for year in years}
    for interval in intervals:
        first = min(interval.startYear, interval.endYear)
        last = max(interval.startYear, interval.endYear)
        for year in range(first, last + 1):
            if year in totals:
                totals[year] += interval.monthsPerYearOff
    return {year: clamp_months(months) for year, months in totals.items()}


def adjust_for_illness(
    salary_series: Mapping[int, float], intervals: Iterable[IllnessInterval]
) -> Dict[int, float]:
    """Scale each year's salary by (12 - months off) / 12."""
    months = illness_months_by_year(salary_series.keys(), intervals)
    return apply_months_off(salary_series, months)


def apply_months_off(
    salary_series: Mapping[int, float], months_off: Mapping[int, float]
) -> Dict[int, float]:
    return {
        year: salary * (MONTHS_PER_YEAR - clamp_months(months_off.get(year, 0.0))) / MONTHS_PER_YEAR
        for year, salary in salary_series.items()
    }
