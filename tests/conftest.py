from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ""

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Replays scripted responses; an Exception in the script is raised instead."""

    def __init__(self, get_script: Optional[List[Any]] = None, post_script: Optional[List[Any]] = None) -> None:
        self.get_script = list(get_script or [])
        self.post_script = list(post_script or [])
        self.get_calls: List[Dict[str, Any]] = []
        self.post_calls: List[Dict[str, Any]] = []

    @staticmethod
    def _next(script: List[Any]) -> Any:
        item = script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.get_calls.append({"url": url, **kwargs})
        return self._next(self.get_script)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.post_calls.append({"url": url, **kwargs})
        return self._next(self.post_script)


def make_patient(pid: str, bp: Any = "110/70", temp: Any = 98.6, age: Any = 30) -> Dict[str, Any]:
    return {
        "patient_id": pid,
        "name": "Doe, Jane",
        "age": age,
        "gender": "F",
        "blood_pressure": bp,
        "temperature": temp,
        "visit_date": "2024-01-15",
        "diagnosis": "Routine",
        "medications": "None",
    }


def page(records: List[Dict[str, Any]]) -> FakeResponse:
    return FakeResponse(200, {"data": records})


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()
