"""
HTTP client for the patient assessment API.

Pages of patients are fetched one at a time with a bounded exponential
backoff between failed attempts; the submission POST is single-shot.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class FetchError(Exception):
    """A page request kept failing until the retry budget ran out."""

    def __init__(self, page: int, attempts: int, cause: Exception) -> None:
        super().__init__(f"Failed to fetch page {page} after {attempts} attempts: {cause}")
        self.page = page
        self.attempts = attempts
        self.cause = cause


@dataclass(frozen=True)
class Patient:
    patient_id: Optional[str]
    age: Any = None
    blood_pressure: Any = None
    temperature: Any = None
    name: Optional[str] = None
    gender: Optional[str] = None
    visit_date: Optional[str] = None
    diagnosis: Optional[str] = None
    medications: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Patient":
        return cls(
            patient_id=raw.get("patient_id"),
            age=raw.get("age"),
            blood_pressure=raw.get("blood_pressure"),
            temperature=raw.get("temperature"),
            name=raw.get("name"),
            gender=raw.get("gender"),
            visit_date=raw.get("visit_date"),
            diagnosis=raw.get("diagnosis"),
            medications=raw.get("medications"),
        )


def exponential_backoff(attempt: int) -> float:
    return float(2 ** attempt)


@dataclass
class RetryPolicy:
    """Attempt schedule for one page request.

    ``backoff(k)`` is the wait after failed attempt ``k`` (1-indexed) before
    attempt ``k + 1``. Nothing is slept after the last attempt.
    """

    max_attempts: int = 5
    backoff: Callable[[int], float] = exponential_backoff
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


def get_session() -> requests.Session:
    s = requests.Session()
    # Transport retries stay off; RetryPolicy owns the attempt schedule.
    retry = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


class PatientClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session if session is not None else get_session()
        self.timeout = timeout
        self.sleep = sleep

    @property
    def headers(self) -> Dict[str, str]:
        return {"x-api-key": self.api_key, "Content-Type": "application/json"}

    def _get_page_once(self, page: int, limit: int) -> List[Patient]:
        url = f"{self.base_url}/api/patients"
        params = {"page": page, "limit": limit}
        logger.debug("GET %s %s", url, params)
        resp = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json()
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise ValueError(f"Response for page {page} has no 'data' list")
        return [Patient.from_dict(item if isinstance(item, dict) else {}) for item in data]

    def fetch_page(self, page: int, limit: int, max_retries: int) -> List[Patient]:
        policy = RetryPolicy(max_attempts=max_retries, sleep=self.sleep)
        return self.fetch_page_with_policy(page, limit, policy)

    def fetch_page_with_policy(self, page: int, limit: int, policy: RetryPolicy) -> List[Patient]:
        last_error: Optional[Exception] = None
        for attempt in range(1, policy.max_attempts + 1):
            try:
                patients = self._get_page_once(page, limit)
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                logger.warning(
                    "Attempt %d/%d for page %d failed: %s", attempt, policy.max_attempts, page, exc
                )
                if attempt < policy.max_attempts:
                    wait = policy.backoff(attempt)
                    logger.warning("Retrying page %d in %.0fs", page, wait)
                    policy.sleep(wait)
                continue
            if patients:
                logger.info("Fetched %d patients from page %d", len(patients), page)
            else:
                logger.info("No patient data on page %d", page)
            return patients

        assert last_error is not None
        logger.error("Giving up on page %d after %d attempts", page, policy.max_attempts)
        raise FetchError(page, policy.max_attempts, last_error) from last_error

    def fetch_all(self, limit: int = 20, max_retries: int = 5) -> List[Patient]:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        patients: List[Patient] = []
        page = 1
        while True:
            batch = self.fetch_page(page, limit, max_retries)
            if not batch:
                break
            patients.extend(batch)
            # A short page is the last one
            if len(batch) < limit:
                break
            page += 1
        logger.info("Fetched %d patient records across %d page request(s)", len(patients), page)
        return patients

    def submit_assessment(self, payload: Dict[str, List[str]]) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/api/submit-assessment"
        logger.debug("POST %s", url)
        try:
            resp = self.session.post(url, headers=self.headers, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            result = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error submitting assessment: %s", exc)
            return None

        feedback = {}
        if isinstance(result, dict) and isinstance(result.get("results"), dict):
            feedback = result["results"].get("feedback") or {}
        if isinstance(feedback, dict):
            if feedback.get("strengths"):
                logger.info("Feedback strengths: %s", feedback["strengths"])
            if feedback.get("issues"):
                logger.info("Feedback issues: %s", feedback["issues"])
        return result
