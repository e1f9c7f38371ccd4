"""Presentation-boundary rounding and currency formatting.

The engine never rounds; everything shown to a person or written to a file
goes through these helpers.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

CURRENCY = "PLN"

_NON_DIGITS = re.compile(r"[^\d-]")


def round_currency(value: float) -> int:
    """Whole currency units, halves rounded away from zero."""
    if value is None or not math.isfinite(value):
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_pln(value: float) -> str:
    """``6000.4`` -> ``"6 000 PLN"``; negative amounts display as 0."""
    amount = max(0, round_currency(value))
    return f"{amount:,}".replace(",", " ") + f" {CURRENCY}"


def parse_pln(text: str) -> int:
    """Inverse of ``format_pln``."""
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        raise ValueError(f"Invalid currency value: {text}")
    return int(digits)


def format_percent(rate: float) -> str:
    return f"{round_currency(rate * 100)}%"
