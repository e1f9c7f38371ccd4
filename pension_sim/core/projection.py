from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pension_sim.core.accumulation import accumulate
from pension_sim.core.benefit import BenefitContext, get_converter, years_until_retirement
from pension_sim.core.goal import later_retirement_options, years_to_goal
from pension_sim.core.illness import apply_months_off, illness_months_by_year
from pension_sim.core.salary_path import resolve_salary_path
from pension_sim.schemas.config import DEFAULT_CONFIG, ForecastConfig
from pension_sim.schemas.forecast import (
    BenefitStrategy,
    ForecastResult,
    IllnessInterval,
    SalaryPoint,
    Sex,
)


@dataclass(frozen=True)
class ForecastInputs:
    """A request with every default resolved; the engine reads nothing else."""

    start_year: int
    end_year: int
    current_year: int
    sex: Sex
    monthly_salary: float
    starting_funds: float = 0.0
    desired_benefit: Optional[float] = None
    include_sick_leave: bool = False
    historical_points: Tuple[SalaryPoint, ...] = ()
    future_overrides: Tuple[SalaryPoint, ...] = ()
    illness_intervals: Tuple[IllnessInterval, ...] = ()
    wage_growth_rate: float = 0.035
    indexation_rate: float = 0.035
    inflation_rate: float = 0.025
    contribution_rate: float = 0.1952
    life_expectancy_years: float = 20.0
    strategy: BenefitStrategy = BenefitStrategy.ACCOUNT
    config: ForecastConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    warnings: Tuple[str, ...] = ()

    @property
    def years_worked(self) -> int:
        return max(0, self.end_year - self.start_year)


def average_pension_benchmark(monthly_salary: float, floor: float, salary_share: float) -> float:
    return max(floor, salary_share * monthly_salary)


def sick_leave_penalty(inputs: ForecastInputs) -> float:
    if not inputs.include_sick_leave:
        return 0.0
    return inputs.config.sickLeavePenalty.get(inputs.sex, 0.0)


def project_forecast(inputs: ForecastInputs) -> ForecastResult:
    """
    Run the whole engine for one career.

    Order of operations:
      1) resolve the dense salary path (wage growth rate)
      2) reduce each year for illness months
      3) accumulate contributions; balance indexed before the year's contribution
      4) convert to a monthly benefit with the selected strategy
      5) later-retirement scenarios and years-to-goal from the nominal benefit

    Simulated years are start_year .. end_year - 1.
    """
    config = inputs.config

    salaries = resolve_salary_path(
        inputs.start_year,
        inputs.end_year,
        inputs.monthly_salary,
        inputs.historical_points,
        inputs.future_overrides,
        growth_rate=inputs.wage_growth_rate,
        gap_fill=config.salaryGapFill,
        backfill=config.backfillSalary,
    )
    months_off = illness_months_by_year(salaries.keys(), inputs.illness_intervals)
    adjusted = apply_months_off(salaries, months_off)

    yearly, balance = accumulate(
        adjusted,
        inputs.starting_funds,
        inputs.indexation_rate,
        inputs.contribution_rate,
        resolved_salaries=salaries,
        illness_months=months_off,
    )

    # a fully ill final year falls back to the declared salary
    final_salary = yearly[-1].illnessAdjustedSalary if yearly else 0.0
    if final_salary <= 0:
        final_salary = inputs.monthly_salary

    context = BenefitContext(
        terminal_balance=balance,
        final_salary=final_salary,
        monthly_salary=inputs.monthly_salary,
        starting_funds=inputs.starting_funds,
        years_worked=inputs.years_worked,
        years_until_retirement=years_until_retirement(inputs.end_year, inputs.current_year),
        inflation_rate=inputs.inflation_rate,
        life_expectancy_years=inputs.life_expectancy_years,
        sick_penalty=sick_leave_penalty(inputs),
        replacement_factor=config.directReplacementFactor,
        reference_years=config.directReferenceYears,
        funds_annuity_months=config.fundsAnnuityMonths,
        max_years_worked=config.maxYearsWorked,
        salary_floor=config.salaryFloor,
    )
    figures = get_converter(inputs.strategy).convert(context)

    return ForecastResult(
        yearly=yearly,
        terminalBalance=balance,
        nominalMonthlyBenefit=figures.nominal_monthly,
        realMonthlyBenefit=figures.real_monthly,
        replacementRate=figures.replacement_rate,
        laterRetirementOptions=later_retirement_options(
            figures.nominal_monthly,
            config.laterRetirementGrowth,
            config.laterRetirementYears,
        ),
        yearsToGoal=years_to_goal(
            figures.nominal_monthly,
            inputs.desired_benefit,
            config.laterRetirementGrowth,
        ),
        averagePensionBenchmark=average_pension_benchmark(
            inputs.monthly_salary,
            config.benchmarkFloor,
            config.benchmarkSalaryShare,
        ),
        benefitStrategy=inputs.strategy,
        yearsWorked=inputs.years_worked,
        warnings=list(inputs.warnings),
    )


__all__ = [
    "ForecastInputs",
    "average_pension_benchmark",
    "sick_leave_penalty",
    "project_forecast",
]
