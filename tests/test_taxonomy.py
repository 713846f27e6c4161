"""Unit tests for the static taxonomy and ScoringConfig."""
from __future__ import annotations

import pytest

from engagement import config as cfg
from engagement.config import ScoringConfig, get_default_config
from engagement.exceptions import TaxonomyError
from engagement.taxonomy import (
    CATEGORY_MAPPING,
    DEFAULT_QUESTIONS,
    DRIVER_CATEGORIES,
    DRIVER_QUESTION_KEYS,
    Category,
    validate_mapping,
)


def test_every_driver_category_maps_at_least_one_question():
    assert len(DRIVER_CATEGORIES) == 8
    for category in DRIVER_CATEGORIES:
        assert CATEGORY_MAPPING[category]


def test_mapping_covers_q1_to_q9_without_overlap():
    keys = [k for keys in CATEGORY_MAPPING.values() for k in keys]
    assert sorted(keys, key=lambda k: int(k[1:])) == list(DRIVER_QUESTION_KEYS)
    assert len(keys) == len(set(keys))


def test_pseudo_categories_are_not_mapped():
    assert Category.ENPS not in CATEGORY_MAPPING
    assert Category.RETENTION_INTENTION not in CATEGORY_MAPPING


def test_default_questions_agree_with_mapping():
    for question in DEFAULT_QUESTIONS:
        if question.category in CATEGORY_MAPPING:
            assert question.key in CATEGORY_MAPPING[question.category]
    reversed_keys = [q.key for q in DEFAULT_QUESTIONS if q.is_reversed]
    assert reversed_keys == ["q5"]


@pytest.mark.parametrize(
    "mapping",
    [
        {Category.TEAMWORK: ()},
        {Category.TEAMWORK: ("q4",), Category.PAY_BENEFITS: ("q4",)},
        {Category.TEAMWORK: ("q11",)},
        {Category.ENPS: ("q9",)},
    ],
)
def test_validate_mapping_rejects_malformed_taxonomy(mapping):
    with pytest.raises(TaxonomyError):
        validate_mapping(mapping)


def test_config_validates_mapping_on_construction():
    with pytest.raises(TaxonomyError):
        ScoringConfig(category_mapping={Category.TEAMWORK: ()})


def test_config_from_env_overrides(monkeypatch):
    monkeypatch.setenv("SCORING_VARIANCE_THRESHOLD", "1.5")
    monkeypatch.setenv("SCORING_MIN_CORRELATION_RESPONSES", "20")
    monkeypatch.setenv("SCORING_MIN_PATTERN_RESPONSES", "3")
    config = ScoringConfig.from_env()
    assert config.variance_threshold == 1.5
    assert config.min_correlation_responses == 20
    assert config.min_pattern_responses == 3
    assert config.min_variance_responses == cfg.MIN_VARIANCE_RESPONSES
    assert config.polarization_ratio == cfg.POLARIZATION_RATIO


def test_config_from_env_ignores_bad_values(monkeypatch, caplog):
    monkeypatch.setenv("SCORING_POLARIZATION_RATIO", "lots")
    monkeypatch.setenv("SCORING_MIN_PATTERN_RESPONSES", "-3")
    config = ScoringConfig.from_env()
    assert config.polarization_ratio == cfg.POLARIZATION_RATIO
    assert config.min_pattern_responses == cfg.MIN_PATTERN_RESPONSES
    assert "SCORING_POLARIZATION_RATIO" in caplog.text


def test_default_config_is_cached():
    assert get_default_config() is get_default_config()
    assert get_default_config().is_reverse("WORKLOAD_STAFFING")
