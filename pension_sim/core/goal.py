"""Goal seeking and later-retirement scenarios."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from pension_sim.schemas.forecast import LaterRetirementOption

DEFAULT_YEARLY_BOOST = 1.08


def years_to_goal(
    current_benefit: float,
    desired_benefit: Optional[float],
    growth_factor: float = DEFAULT_YEARLY_BOOST,
) -> Optional[int]:
    """Smallest n >= 0 with current * growth^n >= desired, or None if unreachable.

    The growth factor is a fixed assumed boost per year of delayed
    retirement, not something derived from the ledger.
    """
    if desired_benefit is None:
        return None
    values = (current_benefit, desired_benefit, growth_factor)
    if not all(math.isfinite(value) for value in values):
        return None
    if current_benefit <= 0:
        return None
    if current_benefit >= desired_benefit:
        return 0
    if growth_factor <= 1:
        return None

    ratio = desired_benefit / current_benefit
    if not math.isfinite(ratio) or ratio <= 0:
        return None
    exact = math.log(ratio) / math.log(growth_factor)
    if not math.isfinite(exact):
        return None
    return max(0, math.ceil(exact))


def later_retirement_options(
    current_benefit: float,
    growth_factor: float = DEFAULT_YEARLY_BOOST,
    extra_years: Iterable[int] = (1, 2, 5),
) -> List[LaterRetirementOption]:
    # simplification: compounds the final benefit, the ledger is not re-run
    options: List[LaterRetirementOption] = []
    for years in extra_years:
        projected = current_benefit * growth_factor**years
        if not math.isfinite(projected):
            projected = 0.0
        options.append(LaterRetirementOption(extraYears=years, projectedBenefit=projected))
    return options
