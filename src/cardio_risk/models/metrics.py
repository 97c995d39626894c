"""Reported classifier metrics and synthetic monitoring series."""

import logging
from datetime import date, datetime

import numpy as np
import pandas as pd

from cardio_risk.schemas import AccuracyPoint, DatasetSample, FeatureImportance, MLMetrics

logger = logging.getLogger(__name__)

# Hold-out results of the deployed ensemble.
REPORTED_METRICS = {
    "accuracy": 0.7334,
    "precision": 0.75,
    "recall": 0.69,
    "f1_score": 0.72,
    "confusion_matrix": [[5411, 1527], [2131, 4654]],
}

FEATURE_IMPORTANCE = [
    ("Age", 0.25),
    ("Blood Pressure (Systolic)", 0.18),
    ("Blood Pressure (Diastolic)", 0.14),
    ("BMI", 0.12),
    ("Cholesterol", 0.10),
    ("Weight", 0.08),
    ("Glucose", 0.05),
    ("Height", 0.03),
    ("Smoking", 0.02),
    ("Physical Activity", 0.02),
    ("Alcohol", 0.01),
]

SAMPLE_GENDERS = ["male", "female", "other"]


def reported_metrics(model_version: str, last_updated: datetime) -> MLMetrics:
    """Return the published evaluation metrics of the classifier."""
    return MLMetrics(
        **REPORTED_METRICS,
        feature_importance=[
            FeatureImportance(feature=name, importance=value)
            for name, value in FEATURE_IMPORTANCE
        ],
        model_version=model_version,
        last_updated=last_updated,
    )


def accuracy_history(
    today: date,
    rng: np.random.Generator,
    days: int = 30,
) -> list[AccuracyPoint]:
    """Generate one synthetic daily metrics point for each of the last ``days`` days.

    Parameters
    ----------
    today : date
        Last day of the series (inclusive).
    rng : np.random.Generator
        Source of the jitter around the baseline metrics.
    days : int
        Number of days before ``today``; the series has ``days + 1`` points.

    Returns
    -------
    list[AccuracyPoint]
        Oldest first.
    """
    dates = pd.date_range(end=pd.Timestamp(today), periods=days + 1, freq="D")
    n = len(dates)
    accuracy = 0.92 + rng.random(n) * 0.04
    precision = 0.91 + rng.random(n) * 0.05
    recall = 0.93 + rng.random(n) * 0.04

    return [
        AccuracyPoint(
            date=d.strftime("%Y-%m-%d"),
            accuracy=float(a),
            precision=float(p),
            recall=float(r),
        )
        for d, a, p, r in zip(dates, accuracy, precision, recall)
    ]


def dataset_samples(rng: np.random.Generator, limit: int = 100) -> list[DatasetSample]:
    """Draw synthetic (age, cholesterol, risk, gender) points for scatter plots."""
    cholesterol = np.round(150 + rng.random(limit) * 150).astype(int)
    age = np.round(30 + rng.random(limit) * 50).astype(int)
    risk = (rng.random(limit) > 0.5).astype(int)
    gender = rng.integers(0, len(SAMPLE_GENDERS), size=limit)

    return [
        DatasetSample(
            age=int(age[i]),
            cholesterol=int(cholesterol[i]),
            risk=int(risk[i]),
            gender=SAMPLE_GENDERS[gender[i]],
        )
        for i in range(limit)
    ]
