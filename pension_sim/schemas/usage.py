"""Flattened usage-log row, one per forecast shown to a user."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UsageLogEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str = Field(pattern=r"^\d{2}:\d{2}:\d{2}$")
    expectedPension: Optional[float] = None
    age: int
    sex: str
    salaryAmount: float
    sickLeaveIncluded: bool
    fundsAccumulated: Optional[float] = None
    actualPension: int
    realPension: int
    postalCode: Optional[str] = None


# column headings used by spreadsheet exports, in display order
USAGE_COLUMNS = {
    "date": "Date of use",
    "time": "Time of use",
    "expectedPension": "Expected pension",
    "age": "Age",
    "sex": "Sex",
    "salaryAmount": "Salary amount",
    "sickLeaveIncluded": "Whether periods of illness were included",
    "fundsAccumulated": "Amount of funds accumulated",
    "actualPension": "Actual pension",
    "realPension": "Real (inflation-adjusted) pension",
    "postalCode": "Postal code",
}


class UsageContext(BaseModel):
    """Fields sent next to a forecast request that only the usage log and report read."""

    model_config = ConfigDict(extra="forbid")

    postalCode: Optional[str] = Field(default=None, max_length=16)
