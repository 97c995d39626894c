import json
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest
import requests

from cardio_risk.client.api import ApiClient
from cardio_risk.data.history import HistoryStore
from cardio_risk.data.storage import InMemoryStorage
from cardio_risk.schemas import PredictionInput, PredictionResult
from cardio_risk.utils.config import ClientSettings

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
BASE_URL = "https://classifier.test"


def make_response(status_code: int = 200, body=None, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "headers": headers, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def settings():
    return ClientSettings(base_url=BASE_URL)


@pytest.fixture
def history(storage):
    return HistoryStore(storage)


@pytest.fixture
def risky_input():
    return PredictionInput(
        age=60,
        gender="male",
        cholesterol=260,
        bloodPressureSystolic=150,
        bloodPressureDiastolic=95,
        smoking=True,
        diabetes=True,
        familyHistory=False,
        bmi=27,
    )


@pytest.fixture
def healthy_input():
    return PredictionInput(
        age=35,
        gender="female",
        cholesterol=180,
        bloodPressureSystolic=118,
        bloodPressureDiastolic=76,
        smoking=False,
        diabetes=False,
        familyHistory=False,
    )


@pytest.fixture
def make_client(storage, clock, rng, settings):
    def _make(*outcomes, **overrides):
        session = FakeSession(*outcomes)
        client = ApiClient(
            settings=overrides.get("settings", settings),
            storage=overrides.get("storage", storage),
            clock=clock,
            rng=rng,
            session=session,
        )
        return client, session

    return _make


@pytest.fixture
def make_result(healthy_input):
    counter = {"n": 0}

    def _make(risk_level="low", risk_score=None, gender="female", age=35) -> PredictionResult:
        counter["n"] += 1
        n = counter["n"]
        default_scores = {"low": 10, "medium": 40, "high": 70}
        return PredictionResult(
            id=f"pred-{n}",
            user_id="user-1",
            input=healthy_input.model_copy(update={"gender": gender, "age": age}),
            risk_score=risk_score if risk_score is not None else default_scores[risk_level],
            risk_level=risk_level,
            recommendations=["Continue maintaining healthy lifestyle habits"],
            factors=[],
            model_version="v2.1.0",
            created_at=FIXED_NOW + timedelta(minutes=n),
        )

    return _make
