"""
Per-dimension risk rules for patient vitals.

Each classifier takes one raw field exactly as delivered by the API and
returns either a ``Level`` or a ``BadData`` marker. Thresholds are fixed.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

BP_PATTERN = re.compile(r"(\d+)/(\d+)", re.ASCII)


@dataclass(frozen=True)
class Level:
    value: int


@dataclass(frozen=True)
class BadData:
    reason: str


RiskOutcome = Union[Level, BadData]

# Blood pressure levels
BP_NORMAL = 0
BP_ELEVATED = 1
BP_STAGE_ONE = 2
BP_STAGE_TWO = 3

# Fever levels
FEVER_NORMAL = 0
FEVER_LOW = 1
FEVER_HIGH = 2

# Age levels
AGE_UNDER_40 = 0
AGE_40_TO_65 = 1
AGE_OVER_65 = 2


def _as_number(value: Any) -> Optional[float]:
    # bool is an int subclass; a True/False vital is never a measurement
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def systolic_score(systolic: int) -> int:
    if systolic < 120:
        return BP_NORMAL
    if systolic < 130:
        return BP_ELEVATED
    if systolic < 140:
        return BP_STAGE_ONE
    return BP_STAGE_TWO


def diastolic_score(diastolic: int) -> int:
    # No elevated rung on this scale: 80-89 counts as stage one at level 1,
    # so diastolic alone tops out at 2.
    if diastolic < 80:
        return 0
    if diastolic < 90:
        return 1
    return 2


def assess_blood_pressure(reading: Any) -> RiskOutcome:
    if not isinstance(reading, str):
        return BadData(f"blood pressure is not a string: {reading!r}")
    match = BP_PATTERN.fullmatch(reading.strip())
    if match is None:
        return BadData(f"malformed blood pressure: {reading!r}")
    systolic, diastolic = int(match.group(1)), int(match.group(2))
    return Level(max(systolic_score(systolic), diastolic_score(diastolic)))


def assess_fever(temperature: Any) -> RiskOutcome:
    temp = _as_number(temperature)
    if temp is None:
        return BadData(f"invalid temperature: {temperature!r}")
    if temp <= 99.5:
        return Level(FEVER_NORMAL)
    if 99.6 <= temp <= 100.9:
        return Level(FEVER_LOW)
    # (99.5, 99.6) lands here too
    return Level(FEVER_HIGH)


def assess_age(age: Any) -> RiskOutcome:
    value = _as_number(age)
    if value is None:
        return BadData(f"invalid age: {age!r}")
    if value < 40:
        return Level(AGE_UNDER_40)
    if value <= 65:
        return Level(AGE_40_TO_65)
    return Level(AGE_OVER_65)
