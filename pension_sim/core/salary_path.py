"""Reconstruct a dense salary series from sparse salary points."""

from __future__ import annotations

from bisect import bisect_left
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pension_sim.schemas.forecast import SalaryPoint


def salary_lookup(points: Iterable[SalaryPoint]) -> Dict[int, float]:
    """Map year -> gross monthly salary; the last point for a year wins."""
    return {point.year: point.grossMonthly for point in points}


def explicit_salaries(
    years: Sequence[int],
    historical_points: Iterable[SalaryPoint],
    future_overrides: Iterable[SalaryPoint],
) -> Dict[int, float]:
    """Explicit salaries inside ``years``; historical points beat future overrides."""
    historical = salary_lookup(historical_points)
    future = salary_lookup(future_overrides)

    out: Dict[int, float] = {}
    for year in years:
        if year in historical:
            out[year] = historical[year]
        elif year in future:
            out[year] = future[year]
    return out


def _enclosing_points(known: List[int], year: int) -> Optional[Tuple[int, int]]:
    index = bisect_left(known, year)
    if 0 < index < len(known):
        return known[index - 1], known[index]
    return None


def _interpolate(explicit: Dict[int, float], low: int, high: int, year: int) -> float:
    share = (year - low) / (high - low)
    return explicit[low] + (explicit[high] - explicit[low]) * share


def resolve_salary_path(
    start_year: int,
    end_year: int,
    base_salary: float,
    historical_points: Iterable[SalaryPoint] = (),
    future_overrides: Iterable[SalaryPoint] = (),
    growth_rate: float = 0.0,
    gap_fill: str = "extrapolate",
    backfill: bool = False,
) -> Dict[int, float]:
    """
    Return {year: monthly salary} for every year in ``start_year..end_year-1``.

    Resolution rules, applied per year in priority order:
      1) historical point for the year (last duplicate wins)
      2) future override for the year (last duplicate wins)
      3) gap_fill="interpolate" only: linear value between the two explicit
         points enclosing the year
      4) first year of the range: ``base_salary``
      5) previous year * (1 + growth_rate)

    With ``backfill`` the years before the earliest explicit point are
    derived backward from it, dividing by (1 + growth_rate) per year, and
    ``base_salary`` is not used.
    """
    years = list(range(start_year, end_year))
    if not years:
        return {}

    explicit = explicit_salaries(years, historical_points, future_overrides)
    known = sorted(explicit)
    growth = 1.0 + growth_rate

    path: Dict[int, float] = {}

    if backfill and known and known[0] > start_year:
        anchor = known[0]
        for year in range(start_year, anchor):
            path[year] = explicit[anchor] / growth ** (anchor - year)

    for year in years:
        if year in path:
            continue
        if year in explicit:
            path[year] = explicit[year]
            continue

        if gap_fill == "interpolate":
            bounds = _enclosing_points(known, year)
            if bounds is not None:
                path[year] = _interpolate(explicit, bounds[0], bounds[1], year)
                continue

        previous = path.get(year - 1)
        value = base_salary if previous is None else previous * growth
        path[year] = max(0.0, value)

    return {year: path[year] for year in years}
