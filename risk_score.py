from __future__ import annotations

from typing import Optional

from risk_rules import FEVER_LOW, BadData, Level, RiskOutcome

HIGH_RISK_THRESHOLD = 4


def combine_risks(bp: RiskOutcome, fever: RiskOutcome, age: RiskOutcome) -> Optional[int]:
    """Sum the three levels, or return None if any dimension is bad data.

    A patient with bad data is excluded from scoring entirely rather than
    scored with a zero for the missing dimension.
    """
    outcomes = (bp, fever, age)
    if any(isinstance(o, BadData) for o in outcomes):
        return None
    return sum(o.value for o in outcomes)


def is_high_risk(score: Optional[int]) -> bool:
    return score is not None and score >= HIGH_RISK_THRESHOLD


def has_fever(fever: RiskOutcome) -> bool:
    return isinstance(fever, Level) and fever.value >= FEVER_LOW
