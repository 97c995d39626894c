import numpy as np
import pytest
from pydantic import ValidationError

from cardio_risk.models.scoring import (
    HEALTHY_FALLBACK,
    build_prediction_result,
    generate_recommendations,
    identify_risk_factors,
    risk_level_for_score,
    synthesize_risk_score,
)
from cardio_risk.schemas import ServiceOutput

from conftest import FIXED_NOW


def _build(output_risk, data, rng):
    return build_prediction_result(
        ServiceOutput(risk=output_risk),
        data,
        rng=rng,
        created_at=FIXED_NOW,
        user_id="user-1",
        model_version="v2.1.0",
    )


def test_low_label_scores_stay_in_low_band(rng):
    scores = [synthesize_risk_score(0, rng) for _ in range(500)]

    assert min(scores) >= 5
    assert max(scores) < 25


def test_high_label_scores_stay_in_high_band(rng):
    scores = [synthesize_risk_score(1, rng) for _ in range(500)]

    assert min(scores) >= 35
    assert max(scores) < 85


@pytest.mark.parametrize(
    "score, level",
    [(5, "low"), (24, "low"), (35, "medium"), (50, "medium"), (51, "high"), (84, "high")],
)
def test_risk_level_for_score(score, level):
    assert risk_level_for_score(score) == level


def test_level_is_monotonic_in_score():
    order = {"low": 0, "medium": 1, "high": 2}
    levels = [order[risk_level_for_score(s)] for s in range(0, 101)]

    assert levels == sorted(levels)


def test_round_trip_scenario_result(risky_input, rng):
    result = _build(1, risky_input, rng)

    assert result.risk_level in {"medium", "high"}
    assert 35 <= result.risk_score < 85
    assert result.risk_level == risk_level_for_score(result.risk_score)
    assert [f.name for f in result.factors] == [
        "Smoking",
        "High Blood Pressure",
        "High Cholesterol",
        "Age",
    ]
    assert [f.impact for f in result.factors] == [25, 30, 20, 15]
    assert result.input == risky_input
    assert result.created_at == FIXED_NOW
    assert result.model_version == "v2.1.0"
    assert result.user_id == "user-1"


def test_low_label_result(healthy_input, rng):
    result = _build(0, healthy_input, rng)

    assert result.risk_level == "low"
    assert result.factors == []
    assert result.recommendations == [HEALTHY_FALLBACK]


def test_recommendations_follow_rule_order(risky_input):
    assert generate_recommendations(risky_input) == [
        "Consider smoking cessation programs",
        "Monitor blood pressure regularly",
        "Consider dietary changes to reduce cholesterol",
        "Maintain blood glucose control",
        "Consider weight management plan",
    ]


def test_recommendations_use_mg_dl_cholesterol(healthy_input):
    # 220 mg/dL is tier 2 but still above the 200 mg/dL recommendation threshold
    data = healthy_input.model_copy(update={"cholesterol": 220})

    assert generate_recommendations(data) == ["Consider dietary changes to reduce cholesterol"]
    assert identify_risk_factors(data) == []


def test_missing_bmi_never_triggers_weight_advice(healthy_input):
    assert "Consider weight management plan" not in generate_recommendations(healthy_input)


def test_threshold_values_do_not_fire(healthy_input):
    data = healthy_input.model_copy(
        update={"blood_pressure_systolic": 140, "cholesterol": 200, "age": 55, "bmi": 25}
    )

    assert generate_recommendations(data) == [HEALTHY_FALLBACK]
    assert identify_risk_factors(data) == []


def test_ids_are_unique_for_same_timestamp(healthy_input):
    rng = np.random.default_rng(0)
    ids = {_build(0, healthy_input, rng).id for _ in range(20)}

    assert len(ids) == 20
    assert all(i.startswith("pred-") for i in ids)


def test_result_is_immutable(healthy_input, rng):
    result = _build(0, healthy_input, rng)

    with pytest.raises(ValidationError):
        result.risk_score = 99
