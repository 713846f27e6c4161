"""Unit tests for anomaly detection."""
from __future__ import annotations

from engagement.analysis.patterns import detect_patterns, is_straight_lined
from engagement.config import ScoringConfig
from engagement.taxonomy import DRIVER_CATEGORIES, Category


def _answers(values):
    return {f"q{i}": v for i, v in enumerate(values, start=1)}


def _mid(q7):
    # q1 differs from the rest so the response is not straight-lined
    return _answers([2, 3, 3, 3, 3, 3, q7, 3, 3])


def test_fewer_than_minimum_yields_empty_list():
    assert detect_patterns([_answers([1] * 9)] * 4) == []


def test_polarized_answers():
    responses = [_answers([1, 5, 1, 5, 1, 5, 1, 5, 1])] * 5
    patterns = detect_patterns(responses)
    assert [p.type for p in patterns] == ["POLARIZED"]
    assert patterns[0].severity == "warning"
    assert patterns[0].metric == "100% extreme answers"


def test_low_engagement():
    responses = [_answers([3] * 9)] * 5
    patterns = detect_patterns(responses)
    assert [p.type for p in patterns] == ["LOW_ENGAGEMENT"]
    assert patterns[0].severity == "info"
    assert patterns[0].metric == "5 responses (100%)"


def test_low_engagement_exactly_at_ratio_does_not_fire():
    varied = _answers([2, 3, 4, 2, 3, 4, 2, 3, 4])
    responses = [_answers([3] * 9)] + [varied] * 9
    assert detect_patterns(responses) == []


def test_high_variance_in_one_category():
    responses = [_mid(v) for v in (1, 5, 1, 5, 1, 5)]
    patterns = detect_patterns(responses)
    assert len(patterns) == 1
    pattern = patterns[0]
    assert pattern.type == "HIGH_VARIANCE"
    assert pattern.category is Category.PAY_BENEFITS
    assert pattern.metric == "Std dev: 2.00"
    assert pattern.title == "Wide spread in Pay & Benefits"
    assert pattern.to_dict()["category"] == "PAY_BENEFITS"


def test_high_variance_needs_enough_qualifying_responses():
    responses = [_mid(v) for v in (1, 5, 1, 5)] + [_answers([2, 3, 3, 3, 3, 3, None, 3, 3])] * 2
    assert detect_patterns(responses) == []


def test_everything_fires_in_detection_order():
    responses = [_answers([1] * 9)] * 3 + [_answers([5] * 9)] * 3
    patterns = detect_patterns(responses)
    assert len(patterns) == 10
    assert [p.type for p in patterns[:2]] == ["POLARIZED", "LOW_ENGAGEMENT"]
    assert [p.category for p in patterns[2:]] == list(DRIVER_CATEGORIES)


def test_thresholds_are_configurable():
    responses = [_answers([1, 5, 1, 5, 1, 5, 1, 5, 1])] * 5
    assert detect_patterns(responses, config=ScoringConfig(polarization_ratio=1.0)) == []


def test_straight_lining_ignores_unanswered_questions():
    assert is_straight_lined({"q1": 4, "q2": 4})
    assert not is_straight_lined({"q1": 4, "q2": 3})
    assert not is_straight_lined({})


def test_variance_gate_is_independent_of_detector_minimum():
    responses = [_mid(v) for v in (1, 5, 1)]
    config = ScoringConfig(min_pattern_responses=3)
    assert detect_patterns(responses, config=config) == []

    loose = ScoringConfig(min_pattern_responses=3, min_variance_responses=3)
    assert [p.type for p in detect_patterns(responses, config=loose)] == ["HIGH_VARIANCE"]
