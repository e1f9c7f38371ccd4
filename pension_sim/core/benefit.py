"""Monthly benefit strategies.

Two formulas coexist and give different numbers:

* ``AccountBalanceConverter`` turns the accumulated account balance into a
  flat annuity over the life-expectancy divisor.
* ``DirectFormulaConverter`` ignores the ledger and applies
  salary * factor * (years worked / reference years), reduced by a sick-leave
  penalty, plus accumulated funds spread over a fixed number of months.

Callers pick one by name through ``BENEFIT_CONVERTERS``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict

from pension_sim.schemas.forecast import BenefitStrategy


@dataclass(frozen=True)
class BenefitFigures:
    nominal_monthly: float
    real_monthly: float
    replacement_rate: float


@dataclass(frozen=True)
class BenefitContext:
    """Everything either strategy may need, already resolved."""

    terminal_balance: float
    final_salary: float
    monthly_salary: float
    starting_funds: float
    years_worked: int
    years_until_retirement: int
    inflation_rate: float
    life_expectancy_years: float
    sick_penalty: float
    replacement_factor: float
    reference_years: float
    funds_annuity_months: float
    max_years_worked: int
    salary_floor: float


def years_until_retirement(end_year: int, current_year: int) -> int:
    return max(0, end_year - current_year)


def discount_to_real(nominal: float, inflation_rate: float, years: int) -> float:
    """Today's value of ``nominal`` paid ``years`` from now."""
    factor = (1 + inflation_rate) ** max(0, years)
    if not math.isfinite(factor) or factor <= 0:
        return 0.0
    return nominal / factor


def replacement_rate(nominal: float, salary: float, salary_floor: float) -> float:
    if salary <= 0:
        return 0.0
    return nominal / max(salary_floor, salary)


def convert_balance(
    terminal_balance: float,
    final_salary: float,
    life_expectancy_years: float,
    inflation_rate: float,
    years_until: int,
    salary_floor: float = 1.0,
) -> BenefitFigures:
    """Balance / (life expectancy * 12), discounted and compared to the final salary."""
    months = life_expectancy_years * 12
    nominal = terminal_balance / months if months > 0 else 0.0
    return BenefitFigures(
        nominal_monthly=nominal,
        real_monthly=discount_to_real(nominal, inflation_rate, years_until),
        replacement_rate=replacement_rate(nominal, final_salary, salary_floor),
    )


def direct_benefit(
    monthly_salary: float,
    years_worked: int,
    sick_penalty: float,
    starting_funds: float,
    inflation_rate: float,
    years_until: int,
    replacement_factor: float = 0.40,
    reference_years: float = 35.0,
    funds_annuity_months: float = 240.0,
    max_years_worked: int = 60,
    salary_floor: float = 1.0,
) -> BenefitFigures:
    years = min(max(years_worked, 0), max_years_worked)
    base = monthly_salary * replacement_factor * (years / reference_years)
    funds_monthly = starting_funds / funds_annuity_months if starting_funds else 0.0
    nominal = base * (1 - sick_penalty) + funds_monthly
    return BenefitFigures(
        nominal_monthly=nominal,
        real_monthly=discount_to_real(nominal, inflation_rate, years_until),
        replacement_rate=replacement_rate(nominal, monthly_salary, salary_floor),
    )


class BenefitConverter(ABC):
    strategy: BenefitStrategy

    @abstractmethod
    def convert(self, context: BenefitContext) -> BenefitFigures:
        """Derive nominal, real and replacement figures."""


class AccountBalanceConverter(BenefitConverter):
    strategy = BenefitStrategy.ACCOUNT

    def convert(self, context: BenefitContext) -> BenefitFigures:
        return convert_balance(
            terminal_balance=context.terminal_balance,
            final_salary=context.final_salary,
            life_expectancy_years=context.life_expectancy_years,
            inflation_rate=context.inflation_rate,
            years_until=context.years_until_retirement,
            salary_floor=context.salary_floor,
        )


class DirectFormulaConverter(BenefitConverter):
    strategy = BenefitStrategy.DIRECT

    def convert(self, context: BenefitContext) -> BenefitFigures:
        return direct_benefit(
            monthly_salary=context.monthly_salary,
            years_worked=context.years_worked,
            sick_penalty=context.sick_penalty,
            starting_funds=context.starting_funds,
            inflation_rate=context.inflation_rate,
            years_until=context.years_until_retirement,
            replacement_factor=context.replacement_factor,
            reference_years=context.reference_years,
            funds_annuity_months=context.funds_annuity_months,
            max_years_worked=context.max_years_worked,
            salary_floor=context.salary_floor,
        )


BENEFIT_CONVERTERS: Dict[BenefitStrategy, BenefitConverter] = {
    BenefitStrategy.ACCOUNT: AccountBalanceConverter(),
    BenefitStrategy.DIRECT: DirectFormulaConverter(),
}


def get_converter(strategy: BenefitStrategy) -> BenefitConverter:
    return BENEFIT_CONVERTERS[BenefitStrategy(strategy)]
