from __future__ import annotations

from math import isclose

import pytest
from pydantic import ValidationError

from pension_sim.core.illness import adjust_for_illness, illness_months_by_year
from pension_sim.schemas.forecast import IllnessInterval


def test_overlapping_intervals_accumulate_and_clamp():
    intervals = [
        IllnessInterval(startYear=2020, endYear=2021, monthsPerYearOff=8),
        IllnessInterval(startYear=2021, endYear=2022, monthsPerYearOff=6),
    ]
    months = illness_months_by_year(range(2020, 2024), intervals)

    assert months == {2020: 8.0, 2021: 12.0, 2022: 6.0, 2023: 0.0}


def test_more_than_twelve_months_gives_zero_salary_year_never_negative():
    """
    Overlaps summing past a full year clamp to 12 months, so that year's salary is exactly zero.
    """
    salaries = {2020: 1200.0, 2021: 1200.0, 2022: 1200.0}
    intervals = [
        IllnessInterval(startYear=2020, endYear=2021, monthsPerYearOff=8),
        IllnessInterval(startYear=2021, endYear=2022, monthsPerYearOff=6),
    ]

    adjusted = adjust_for_illness(salaries, intervals)

    assert isclose(adjusted[2020], 400.0)
    assert adjusted[2021] == 0.0
    assert isclose(adjusted[2022], 600.0)
    assert all(value >= 0 for value in adjusted.values())


def test_no_intervals_leaves_series_unchanged():
    salaries = {2020: 3000.0, 2021: 3100.0}
    assert adjust_for_illness(salaries, []) == salaries


def test_reversed_endpoints_are_treated_as_a_range():
    reversed_interval = IllnessInterval.model_construct(
        startYear=2022, endYear=2020, monthsPerYearOff=3.0
    )
    months = illness_months_by_year(range(2019, 2024), [reversed_interval])

    assert months == {2019: 0.0, 2020: 3.0, 2021: 3.0, 2022: 3.0, 2023: 0.0}


def test_interval_ending_before_it_starts_is_rejected():
    with pytest.raises(ValidationError):
        IllnessInterval(startYear=2022, endYear=2020, monthsPerYearOff=3)

    with pytest.raises(ValidationError):
        IllnessInterval(startYear=2020, endYear=2022, monthsPerYearOff=13)
