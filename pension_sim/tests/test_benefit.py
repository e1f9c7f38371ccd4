from __future__ import annotations

from math import isclose

from pension_sim.core.benefit import (
    BENEFIT_CONVERTERS,
    BenefitContext,
    convert_balance,
    direct_benefit,
    discount_to_real,
    get_converter,
    years_until_retirement,
)
from pension_sim.schemas.forecast import BenefitStrategy


def context(**overrides) -> BenefitContext:
    values = dict(
        terminal_balance=480000.0,
        final_salary=8000.0,
        monthly_salary=6000.0,
        starting_funds=0.0,
        years_worked=35,
        years_until_retirement=0,
        inflation_rate=0.025,
        life_expectancy_years=20.0,
        sick_penalty=0.0,
        replacement_factor=0.40,
        reference_years=35.0,
        funds_annuity_months=240.0,
        max_years_worked=60,
        salary_floor=1.0,
    )
    values.update(overrides)
    return BenefitContext(**values)


def test_balance_is_spread_over_life_expectancy_months():
    figures = convert_balance(240000.0, 5000.0, 20.0, 0.0, 0)

    assert isclose(figures.nominal_monthly, 1000.0)
    assert isclose(figures.real_monthly, 1000.0)
    assert isclose(figures.replacement_rate, 0.2)


def test_real_value_discounts_by_years_until_retirement():
    figures = convert_balance(240000.0, 5000.0, 20.0, 0.025, 10)
    assert isclose(figures.real_monthly, 1000.0 / 1.025**10)


def test_years_until_retirement_uses_supplied_current_year():
    assert years_until_retirement(2050, 2025) == 25
    assert years_until_retirement(2020, 2025) == 0
    assert discount_to_real(500.0, 0.03, -4) == 500.0


def test_replacement_rate_zero_when_final_salary_not_positive():
    figures = convert_balance(240000.0, 0.0, 20.0, 0.025, 5)
    assert figures.replacement_rate == 0.0

    floored = convert_balance(240000.0, 0.5, 20.0, 0.0, 0)
    assert isclose(floored.replacement_rate, 1000.0)


def test_direct_formula_full_reference_career():
    figures = direct_benefit(6000.0, 35, 0.0, 0.0, 0.0, 0)
    assert isclose(figures.nominal_monthly, 2400.0)
    assert isclose(figures.replacement_rate, 0.4)


def test_direct_formula_penalty_applies_to_base_term_only():
    figures = direct_benefit(6000.0, 35, 0.03, 24000.0, 0.0, 0)
    # 2400 * 0.97 + 24000 / 240
    assert isclose(figures.nominal_monthly, 2328.0 + 100.0)


def test_direct_formula_clamps_years_worked():
    long_career = direct_benefit(3500.0, 100, 0.0, 0.0, 0.0, 0)
    negative = direct_benefit(3500.0, -5, 0.0, 0.0, 0.0, 0)

    assert isclose(long_career.nominal_monthly, 3500.0 * 0.4 * 60 / 35)
    assert negative.nominal_monthly == 0.0


def test_both_strategies_are_registered_and_differ():
    assert set(BENEFIT_CONVERTERS) == {BenefitStrategy.ACCOUNT, BenefitStrategy.DIRECT}

    ctx = context()
    account = get_converter(BenefitStrategy.ACCOUNT).convert(ctx)
    direct = get_converter("direct").convert(ctx)

    assert isclose(account.nominal_monthly, 2000.0)
    assert isclose(account.replacement_rate, 0.25)
    assert isclose(direct.nominal_monthly, 2400.0)
    assert isclose(direct.replacement_rate, 0.4)
