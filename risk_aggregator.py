"""
Classify a batch of patients and collect the assessment lists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from patient_client import Patient
from risk_rules import BadData, RiskOutcome, assess_age, assess_blood_pressure, assess_fever
from risk_score import combine_risks, has_fever, is_high_risk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatientAssessment:
    patient_id: Optional[str]
    blood_pressure: RiskOutcome
    fever_level: RiskOutcome
    age: RiskOutcome
    score: Optional[int]

    @property
    def bad_data(self) -> List[BadData]:
        return [o for o in (self.blood_pressure, self.fever_level, self.age) if isinstance(o, BadData)]

    @property
    def has_bad_data(self) -> bool:
        return self.score is None

    @property
    def high_risk(self) -> bool:
        return is_high_risk(self.score)

    @property
    def fever(self) -> bool:
        return not self.has_bad_data and has_fever(self.fever_level)


@dataclass(frozen=True)
class AssessmentResult:
    high_risk: Tuple[str, ...] = ()
    fever: Tuple[str, ...] = ()
    data_quality_issue: Tuple[str, ...] = ()
    total_patients: int = 0

    def to_payload(self) -> Dict[str, List[str]]:
        return {
            "high_risk_patients": list(self.high_risk),
            "fever_patients": list(self.fever),
            "data_quality_issues": list(self.data_quality_issue),
        }


def classify_patient(patient: Patient) -> PatientAssessment:
    bp = assess_blood_pressure(patient.blood_pressure)
    fever = assess_fever(patient.temperature)
    age = assess_age(patient.age)
    return PatientAssessment(
        patient_id=patient.patient_id,
        blood_pressure=bp,
        fever_level=fever,
        age=age,
        score=combine_risks(bp, fever, age),
    )


@dataclass
class _OrderedIds:
    seen: set = field(default_factory=set)
    order: List[str] = field(default_factory=list)

    def add(self, pid: str) -> None:
        if pid not in self.seen:
            self.seen.add(pid)
            self.order.append(pid)


def assess_patients(patients: Iterable[Patient]) -> AssessmentResult:
    high_risk = _OrderedIds()
    fever = _OrderedIds()
    data_issues = _OrderedIds()
    total = 0

    for patient in patients:
        total += 1
        result = classify_patient(patient)
        pid = patient.patient_id
        if pid is None:
            logger.warning("Skipping patient record without patient_id (record %d)", total)
            continue

        if result.has_bad_data:
            logger.warning(
                "Data quality issue for %s: %s", pid, "; ".join(b.reason for b in result.bad_data)
            )
            data_issues.add(pid)
            continue

        if result.high_risk:
            high_risk.add(pid)
        if result.fever:
            fever.add(pid)

    return AssessmentResult(
        high_risk=tuple(high_risk.order),
        fever=tuple(fever.order),
        data_quality_issue=tuple(data_issues.order),
        total_patients=total,
    )
