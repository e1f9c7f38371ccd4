"""Named, overridable assumptions used by the forecast engine."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from pension_sim.schemas.forecast import Sex


class ForecastConfig(BaseModel):
    """Every constant the engine relies on, with its documented default.

    Rates carried on a ``ForecastRequest`` win over the values here; this
    object supplies whatever the caller left out.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # accumulation
    contributionRate: float = Field(default=0.1952, gt=0, lt=1)
    indexationRate: float = Field(default=0.035, ge=0, le=1)
    inflationRate: float = Field(default=0.025, ge=0, le=1)
    lifeExpectancyYears: float = Field(default=20.0, gt=0)

    # later retirement / goal seeking
    laterRetirementGrowth: float = Field(default=1.08, gt=0)
    laterRetirementYears: List[int] = Field(default_factory=lambda: [1, 2, 5])

    # sex-specific defaults
    sickLeavePenalty: Dict[Sex, float] = Field(
        default_factory=lambda: {Sex.MALE: 0.02, Sex.FEMALE: 0.03}
    )
    sickLeaveDaysPerYear: Dict[Sex, float] = Field(
        default_factory=lambda: {Sex.MALE: 12.0, Sex.FEMALE: 18.0}
    )
    retirementAge: Dict[Sex, int] = Field(
        default_factory=lambda: {Sex.MALE: 65, Sex.FEMALE: 60}
    )

    # direct formula
    directReplacementFactor: float = Field(default=0.40, ge=0)
    directReferenceYears: float = Field(default=35.0, gt=0)
    fundsAnnuityMonths: float = Field(default=240.0, gt=0)
    maxYearsWorked: int = Field(default=60, ge=0)

    salaryFloor: float = Field(default=1.0, gt=0)
    benchmarkFloor: float = Field(default=2500.0, ge=0)
    benchmarkSalaryShare: float = Field(default=0.45, ge=0)

    # span defaults
    earliestStartYear: int = 1980
    careerStartAge: int = Field(default=18, ge=0)

    # salary path resolution
    salaryGapFill: Literal["extrapolate", "interpolate"] = "extrapolate"
    backfillSalary: bool = False

    @field_validator("laterRetirementYears")
    @classmethod
    def _positive_years(cls, value: List[int]) -> List[int]:
        if any(years < 0 for years in value):
            raise ValueError("laterRetirementYears must not contain negative values")
        return sorted(set(value))

    @field_validator("sickLeavePenalty", "sickLeaveDaysPerYear", "retirementAge")
    @classmethod
    def _both_sexes(cls, value: Dict[Sex, Any], info: ValidationInfo) -> Dict[Sex, Any]:
        missing = [sex.value for sex in Sex if sex not in value]
        if missing:
            raise ValueError(f"{info.field_name} is missing {', '.join(missing)}")
        return value

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "ForecastConfig":
        """Return a copy with ``overrides`` applied and re-validated.

        Sex-keyed tables are merged key by key, so ``{"retirementAge": {"male": 67}}``
        keeps the current female value.
        """
        if not overrides:
            return self
        merged = self.model_dump(mode="json")
        for key, value in overrides.items():
            if key in SEX_KEYED_FIELDS and isinstance(value, Mapping):
                value = {
                    **merged[key],
                    **{getattr(sex, "value", sex): item for sex, item in value.items()},
                }
            merged[key] = value
        return ForecastConfig.model_validate(merged)


SEX_KEYED_FIELDS = ("sickLeavePenalty", "sickLeaveDaysPerYear", "retirementAge")

DEFAULT_CONFIG = ForecastConfig()


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> ForecastConfig:
    return DEFAULT_CONFIG.with_overrides(overrides)
