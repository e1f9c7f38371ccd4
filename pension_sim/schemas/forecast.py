"""Data contracts exchanged with the forecast engine."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class BenefitStrategy(str, Enum):
    """How a career is turned into a monthly benefit.

    ACCOUNT converts the accumulated account balance into an annuity.
    DIRECT applies the simplified salary x factor x (years / 35) formula.
    The two are not equivalent and are never reconciled.
    """

    ACCOUNT = "account"
    DIRECT = "direct"


class SalaryPoint(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(ge=1900, le=2200)
    grossMonthly: float = Field(ge=0)


class IllnessInterval(BaseModel):
    """Months off work per year for every year in ``startYear..endYear`` (inclusive)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    startYear: int = Field(ge=1900, le=2200)
    endYear: int = Field(ge=1900, le=2200)
    monthsPerYearOff: float = Field(default=0.0, ge=0, le=12)

    @model_validator(mode="after")
    def ensure_ordered(self) -> "IllnessInterval":
        if self.endYear < self.startYear:
            raise ValueError("illness interval endYear must not be before startYear")
        return self


class ForecastRequest(BaseModel):
    """Inputs for a single forecast run.

    ``startYear``/``endYear`` may be omitted; they are then derived from age,
    sex and the current year. ``endYear`` is the January of the retirement
    year, so the simulated years are ``startYear .. endYear - 1``.
    Rates left as ``None`` fall back to ``ForecastConfig``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    age: int = Field(ge=0, le=120)
    sex: Sex
    monthlySalary: float = Field(gt=0)
    startYear: Optional[int] = Field(default=None, ge=1900, le=2200)
    endYear: Optional[int] = Field(default=None, ge=1900, le=2200)
    includeSickLeave: bool = False
    startingFunds: float = Field(default=0.0, ge=0)
    desiredMonthlyBenefit: Optional[float] = Field(default=None, ge=0)

    historicalSalaryPoints: List[SalaryPoint] = Field(default_factory=list)
    futureSalaryOverrides: List[SalaryPoint] = Field(default_factory=list)
    illnessIntervals: List[IllnessInterval] = Field(default_factory=list)

    annualIndexationRate: Optional[float] = Field(default=None, ge=0, le=1)
    wageGrowthRate: Optional[float] = Field(default=None, ge=0, le=1)
    inflationRate: Optional[float] = Field(default=None, ge=0, le=1)
    contributionRate: Optional[float] = Field(default=None, gt=0, lt=1)
    lifeExpectancyYears: Optional[float] = Field(default=None, gt=0)

    benefitStrategy: BenefitStrategy = BenefitStrategy.ACCOUNT

    @model_validator(mode="after")
    def ensure_validity(self) -> "ForecastRequest":
        if (
            self.startYear is not None
            and self.endYear is not None
            and self.startYear >= self.endYear
        ):
            raise ValueError("endYear must be greater than startYear")
        return self


class YearRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    resolvedSalary: float
    illnessMonths: float
    illnessAdjustedSalary: float
    annualContribution: float
    cumulativeBalance: float


class LaterRetirementOption(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    extraYears: int
    projectedBenefit: float


class ForecastResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    yearly: List[YearRecord]
    terminalBalance: float
    nominalMonthlyBenefit: float
    realMonthlyBenefit: float
    replacementRate: float
    laterRetirementOptions: List[LaterRetirementOption]
    yearsToGoal: Optional[int] = None
    averagePensionBenchmark: float
    benefitStrategy: BenefitStrategy
    yearsWorked: int
    warnings: List[str] = Field(default_factory=list)
