"""Year-by-year contribution ledger and account balance."""

from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from pension_sim.schemas.forecast import YearRecord


def annual_contribution(monthly_salary: float, contribution_rate: float) -> float:
    return monthly_salary * 12 * contribution_rate


def accumulate(
    adjusted_salaries: Mapping[int, float],
    starting_funds: float,
    indexation_rate: float,
    contribution_rate: float,
    resolved_salaries: Optional[Mapping[int, float]] = None,
    illness_months: Optional[Mapping[int, float]] = None,
) -> Tuple[List[YearRecord], float]:
    """Compound the account over the adjusted salary series.

    Per year: index last year's balance first, then add this year's
    contribution (no indexation in the year it is paid in).
    """
    resolved_salaries = resolved_salaries or adjusted_salaries
    illness_months = illness_months or {}

    balance = starting_funds
    records: List[YearRecord] = []
    for year in sorted(adjusted_salaries):
        salary = adjusted_salaries[year]
        contribution = annual_contribution(salary, contribution_rate)
        balance = balance * (1 + indexation_rate) + contribution
        records.append(
            YearRecord(
                year=year,
                resolvedSalary=resolved_salaries.get(year, salary),
                illnessMonths=illness_months.get(year, 0.0),
                illnessAdjustedSalary=salary,
                annualContribution=contribution,
                cumulativeBalance=balance,
            )
        )

    return records, balance
