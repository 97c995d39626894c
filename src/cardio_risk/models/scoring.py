"""Turn the classifier's binary label into an explained, displayable result.

The service only answers ``{"risk": 0}`` or ``{"risk": 1}``. The displayed
score is synthesized by drawing uniformly inside a band for that label:

- risk 0 -> score in [5, 25), level ``low``
- risk 1 -> score in [35, 85), level ``high`` above 50, else ``medium``

This is a placeholder for the classifier's own probability and must not be
treated as a clinical score. Replace :func:`synthesize_risk_score` with the
service probability once the endpoint exposes one, keeping
:func:`risk_level_for_score` monotonic.
"""

import logging
import uuid
from datetime import datetime

import numpy as np

from cardio_risk.schemas import (
    PredictionInput,
    PredictionResult,
    RiskFactor,
    RiskLevel,
    ServiceOutput,
)

logger = logging.getLogger(__name__)

LOW_RISK_BAND = (5, 25)
HIGH_RISK_BAND = (35, 85)
HIGH_LEVEL_CUTOFF = 50
LOW_LEVEL_CUTOFF = 35

HEALTHY_FALLBACK = "Continue maintaining healthy lifestyle habits"


def risk_level_for_score(score: int) -> RiskLevel:
    """Map a 0-100 score to its display bucket (monotonic in ``score``)."""
    if score > HIGH_LEVEL_CUTOFF:
        return "high"
    if score >= LOW_LEVEL_CUTOFF:
        return "medium"
    return "low"


def synthesize_risk_score(risk: int, rng: np.random.Generator) -> int:
    """Draw a display score inside the band of the binary label."""
    low, high = HIGH_RISK_BAND if risk == 1 else LOW_RISK_BAND
    score = int(rng.integers(low, high))
    logger.debug("Synthesized placeholder score %d for label %d", score, risk)
    return score


def generate_recommendations(data: PredictionInput) -> list[str]:
    """Evaluate the recommendation rules in their fixed order.

    Each rule adds at most one line; when none fires a single
    healthy-lifestyle line is returned.
    """
    rules = [
        (data.smoking, "Consider smoking cessation programs"),
        (data.blood_pressure_systolic > 140, "Monitor blood pressure regularly"),
        (data.cholesterol > 200, "Consider dietary changes to reduce cholesterol"),
        (data.diabetes, "Maintain blood glucose control"),
        (data.bmi is not None and data.bmi > 25, "Consider weight management plan"),
    ]
    recommendations = [text for fired, text in rules if fired]
    return recommendations or [HEALTHY_FALLBACK]


def identify_risk_factors(data: PredictionInput) -> list[RiskFactor]:
    """Name the input conditions that raise cardiovascular risk, with fixed impacts."""
    factors = []

    if data.smoking:
        factors.append(RiskFactor(
            name="Smoking",
            impact=25,
            description="Smoking significantly increases cardiovascular risk",
        ))
    if data.blood_pressure_systolic > 140:
        factors.append(RiskFactor(
            name="High Blood Pressure",
            impact=30,
            description="Elevated systolic blood pressure",
        ))
    if data.cholesterol > 240:
        factors.append(RiskFactor(
            name="High Cholesterol",
            impact=20,
            description="Cholesterol level above recommended range",
        ))
    if data.age > 55:
        factors.append(RiskFactor(
            name="Age",
            impact=15,
            description="Age is a non-modifiable risk factor",
        ))

    return factors


def new_prediction_id(created_at: datetime) -> str:
    """Build a unique id: creation time in ms plus a random suffix."""
    millis = int(created_at.timestamp() * 1000)
    return f"pred-{millis}-{uuid.uuid4().hex[:8]}"


def build_prediction_result(
    output: ServiceOutput,
    data: PredictionInput,
    *,
    rng: np.random.Generator,
    created_at: datetime,
    user_id: str,
    model_version: str,
) -> PredictionResult:
    """Assemble the explained result for one classifier answer.

    Parameters
    ----------
    output : ServiceOutput
        Validated classifier answer.
    data : PredictionInput
        The submitted form input (cholesterol in mg/dL, not the tier).
    rng : np.random.Generator
        Source of the placeholder score.
    created_at : datetime
        Timezone-aware creation timestamp.
    user_id : str
        Owner of the assessment.
    model_version : str
        Version tag recorded on the result.

    Returns
    -------
    PredictionResult
        Immutable, ready to be stored in history.
    """
    score = synthesize_risk_score(output.risk, rng)
    level = risk_level_for_score(score)

    return PredictionResult(
        id=new_prediction_id(created_at),
        user_id=user_id,
        input=data,
        risk_score=score,
        risk_level=level,
        recommendations=generate_recommendations(data),
        factors=identify_risk_factors(data),
        model_version=model_version,
        created_at=created_at,
    )
