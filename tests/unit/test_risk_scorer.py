import random
import pytest
from app.liver_data import FEATURE_NAMES, FEATURE_WEIGHTS, LOW_ADVERSE_FEATURES
from app.services.risk_scorer import abnormality_scorer

def _vector(value):
    return {name: value for name in FEATURE_NAMES}

def test_weights_sum_to_one():
    assert sum(FEATURE_WEIGHTS.values()) == pytest.approx(1.0)
    assert all(w >= 0 for w in FEATURE_WEIGHTS.values())

def test_weight_table():
    assert FEATURE_WEIGHTS == {
        "albumin": 0.25,
        "alkaline_phosphatase": 0.18,
        "alamine_aminotransferase": 0.16,
        "aspartate_aminotransferase": 0.15,
        "bilirubin": 0.12,
        "cholesterol": 0.06,
        "albumin_globulin_ratio": 0.04,
        "platelets_count": 0.02,
        "prothrombin_time": 0.02,
        "age": 0.0,
    }

def test_low_adverse_features_are_inverted():
    assert LOW_ADVERSE_FEATURES == {"albumin", "albumin_globulin_ratio", "platelets_count"}
    assert abnormality_scorer.directional("albumin", 0.2) == pytest.approx(0.8)
    assert abnormality_scorer.directional("bilirubin", 0.2) == pytest.approx(0.2)
    # Older age is adverse, though its weight keeps it out of the score
    assert abnormality_scorer.directional("age", 0.9) == pytest.approx(0.9)

def test_all_zero_vector_scores_low_adverse_weights():
    # Only albumin, A/G ratio and platelets contribute when everything is 0
    assert abnormality_scorer.score(_vector(0.0)) == pytest.approx(0.25 + 0.04 + 0.02)

def test_all_one_vector_scores_high_adverse_weights():
    assert abnormality_scorer.score(_vector(1.0)) == pytest.approx(1.0 - 0.31)

def test_extremes_reach_bounds():
    worst = {n: (0.0 if n in LOW_ADVERSE_FEATURES else 1.0) for n in FEATURE_NAMES}
    best = {n: (1.0 if n in LOW_ADVERSE_FEATURES else 0.0) for n in FEATURE_NAMES}
    assert abnormality_scorer.score(worst) == pytest.approx(1.0)
    assert abnormality_scorer.score(best) == pytest.approx(0.0)

def test_score_stays_in_unit_interval():
    rng = random.Random(42)
    for _ in range(500):
        vector = {n: rng.random() for n in FEATURE_NAMES}
        score = abnormality_scorer.score(vector)
        assert 0.0 <= score <= 1.0

def test_contributions_add_up_to_score():
    vector = {n: 0.5 for n in FEATURE_NAMES}
    contributions = abnormality_scorer.contributions(vector)
    assert list(contributions.keys()) == FEATURE_NAMES
    assert sum(contributions.values()) == pytest.approx(abnormality_scorer.score(vector))
    assert contributions["albumin"] == pytest.approx(0.125)

def test_age_does_not_move_the_score():
    young = {**_vector(0.5), "age": 0.0}
    old = {**_vector(0.5), "age": 1.0}
    assert abnormality_scorer.score(young) == pytest.approx(abnormality_scorer.score(old))
    assert abnormality_scorer.contributions(old)["age"] == 0.0
