from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pension_sim.core.projection import ForecastInputs, project_forecast
from pension_sim.schemas.config import DEFAULT_CONFIG, ForecastConfig
from pension_sim.schemas.forecast import (
    ForecastRequest,
    ForecastResult,
    IllnessInterval,
    SalaryPoint,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0


class ForecastValidationError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass
class PreparationResult:
    inputs: Optional[ForecastInputs]
    errors: List[str]
    warnings: List[str]


def default_span(
    request: ForecastRequest, config: ForecastConfig, current_year: int
) -> Tuple[int, int]:
    """Start/end years for a request, filling omitted ones from age and sex."""
    birth_year = current_year - request.age
    start = request.startYear
    if start is None:
        start = max(birth_year + config.careerStartAge, config.earliestStartYear)
    end = request.endYear
    if end is None:
        end = birth_year + config.retirementAge[request.sex]
    return start, end


def default_sick_leave_interval(
    request: ForecastRequest, config: ForecastConfig, start: int, end: int
) -> IllnessInterval:
    days = config.sickLeaveDaysPerYear.get(request.sex, 0.0)
    months = min(12.0, days * 12 / DAYS_PER_YEAR)
    return IllnessInterval(startYear=start, endYear=end - 1, monthsPerYearOff=months)


def salary_point_warnings(
    points: Sequence[SalaryPoint], start: int, end: int, label: str
) -> List[str]:
    warnings: List[str] = []
    for year, count in sorted(Counter(point.year for point in points).items()):
        if count > 1:
            warnings.append(f"{label} year {year} given {count} times; last value used")
    for point in points:
        if not start <= point.year < end:
            warnings.append(f"{label} year {point.year} outside {start}-{end - 1}; ignored")
    return warnings


def illness_warnings(intervals: Sequence[IllnessInterval], start: int, end: int) -> List[str]:
    return [
        f"illness {interval.startYear}-{interval.endYear} outside {start}-{end - 1}; ignored"
        for interval in intervals
        if interval.endYear < start or interval.startYear >= end
    ]


def prepare_forecast(
    request: ForecastRequest,
    current_year: int,
    config: ForecastConfig = DEFAULT_CONFIG,
) -> PreparationResult:
    errors: List[str] = []
    warnings: List[str] = []

    start, end = default_span(request, config, current_year)
    if end <= start:
        errors.append(f"working span is empty (startYear {start}, endYear {end})")
        return PreparationResult(inputs=None, errors=errors, warnings=warnings)

    warnings.extend(
        salary_point_warnings(request.historicalSalaryPoints, start, end, "historical salary")
    )
    warnings.extend(
        salary_point_warnings(request.futureSalaryOverrides, start, end, "future salary")
    )
    warnings.extend(illness_warnings(request.illnessIntervals, start, end))

    intervals = list(request.illnessIntervals)
    if request.includeSickLeave and not intervals:
        intervals.append(default_sick_leave_interval(request, config, start, end))

    indexation = (
        request.annualIndexationRate
        if request.annualIndexationRate is not None
        else config.indexationRate
    )
    wage_growth = request.wageGrowthRate if request.wageGrowthRate is not None else indexation

    inputs = ForecastInputs(
        start_year=start,
        end_year=end,
        current_year=current_year,
        sex=request.sex,
        monthly_salary=request.monthlySalary,
        starting_funds=request.startingFunds,
        desired_benefit=request.desiredMonthlyBenefit,
        include_sick_leave=request.includeSickLeave,
        historical_points=tuple(request.historicalSalaryPoints),
        future_overrides=tuple(request.futureSalaryOverrides),
        illness_intervals=tuple(intervals),
        wage_growth_rate=wage_growth,
        indexation_rate=indexation,
        inflation_rate=(
            request.inflationRate if request.inflationRate is not None else config.inflationRate
        ),
        contribution_rate=(
            request.contributionRate
            if request.contributionRate is not None
            else config.contributionRate
        ),
        life_expectancy_years=(
            request.lifeExpectancyYears
            if request.lifeExpectancyYears is not None
            else config.lifeExpectancyYears
        ),
        strategy=request.benefitStrategy,
        config=config,
        warnings=tuple(warnings),
    )
    return PreparationResult(inputs=inputs, errors=errors, warnings=warnings)


def run_forecast(
    request: ForecastRequest,
    current_year: int,
    config: ForecastConfig = DEFAULT_CONFIG,
) -> ForecastResult:
    """Validate, resolve defaults and run the engine.

    ``current_year`` is the caller's "now"; the engine never reads the clock,
    so equal inputs always give equal results.
    """
    preparation = prepare_forecast(request, current_year, config)
    if preparation.errors or not preparation.inputs:
        raise ForecastValidationError(preparation.errors)

    for warning in preparation.warnings:
        logger.warning("forecast input: %s", warning)

    return project_forecast(preparation.inputs)
