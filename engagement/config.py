"""Read-only scoring configuration.

Calculators never reach for globals: they take a :class:`ScoringConfig`
(``config=``) and fall back to :func:`get_default_config`, which is built once
per process from environment variables.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet, Mapping, Tuple

from engagement.taxonomy import (
    CATEGORY_MAPPING,
    OUTCOME_CATEGORIES,
    REVERSE_SCORED_CATEGORIES,
    Category,
    validate_mapping,
)

logger = logging.getLogger(__name__)

# Pattern detector thresholds. Inherited constants with no documented
# derivation; pending product-owner confirmation.
POLARIZATION_RATIO: float = 0.6
STRAIGHT_LINE_RATIO: float = 0.1
VARIANCE_THRESHOLD: float = 1.2

# Category deltas smaller than this are reported as "same"
CATEGORY_DEAD_BAND: float = 0.05

MIN_CORRELATION_RESPONSES: int = 10
MIN_PATTERN_RESPONSES: int = 5
# Qualifying per-response scores a category needs before its spread counts
MIN_VARIANCE_RESPONSES: int = 5
MIN_COHORT_RESPONSES: int = 3
MIN_COHORT_SIZE: int = 2
MIN_ANALYTICS_RESPONSES: int = 3

# Confidence tiers: LOW below the first bound, MEDIUM below the second
CONFIDENCE_LOW_BELOW: int = 5
CONFIDENCE_MEDIUM_BELOW: int = 20


@dataclass(frozen=True)
class ScoringConfig:
    """Taxonomy plus every numeric threshold used by the engine."""

    category_mapping: Mapping[Category, Tuple[str, ...]] = field(
        default_factory=lambda: CATEGORY_MAPPING
    )
    reverse_scored: FrozenSet[Category] = REVERSE_SCORED_CATEGORIES
    outcome_categories: FrozenSet[Category] = OUTCOME_CATEGORIES

    polarization_ratio: float = POLARIZATION_RATIO
    straight_line_ratio: float = STRAIGHT_LINE_RATIO
    variance_threshold: float = VARIANCE_THRESHOLD
    category_dead_band: float = CATEGORY_DEAD_BAND

    min_correlation_responses: int = MIN_CORRELATION_RESPONSES
    min_pattern_responses: int = MIN_PATTERN_RESPONSES
    min_variance_responses: int = MIN_VARIANCE_RESPONSES
    min_cohort_responses: int = MIN_COHORT_RESPONSES
    min_cohort_size: int = MIN_COHORT_SIZE
    min_analytics_responses: int = MIN_ANALYTICS_RESPONSES

    confidence_low_below: int = CONFIDENCE_LOW_BELOW
    confidence_medium_below: int = CONFIDENCE_MEDIUM_BELOW

    def __post_init__(self) -> None:
        validate_mapping(self.category_mapping)

    @property
    def driver_categories(self) -> Tuple[Category, ...]:
        return tuple(self.category_mapping)

    def is_reverse(self, category: Category | str) -> bool:
        return Category(category) in self.reverse_scored

    def questions_for(self, category: Category | str) -> Tuple[str, ...]:
        return self.category_mapping[Category(category)]

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Build a config, overriding thresholds from ``SCORING_*`` env vars."""
        return cls(
            polarization_ratio=_env_float("SCORING_POLARIZATION_RATIO", POLARIZATION_RATIO),
            straight_line_ratio=_env_float("SCORING_STRAIGHT_LINE_RATIO", STRAIGHT_LINE_RATIO),
            variance_threshold=_env_float("SCORING_VARIANCE_THRESHOLD", VARIANCE_THRESHOLD),
            category_dead_band=_env_float("SCORING_CATEGORY_DEAD_BAND", CATEGORY_DEAD_BAND),
            min_correlation_responses=_env_int(
                "SCORING_MIN_CORRELATION_RESPONSES", MIN_CORRELATION_RESPONSES
            ),
            min_pattern_responses=_env_int(
                "SCORING_MIN_PATTERN_RESPONSES", MIN_PATTERN_RESPONSES
            ),
            min_variance_responses=_env_int(
                "SCORING_MIN_VARIANCE_RESPONSES", MIN_VARIANCE_RESPONSES
            ),
            min_cohort_responses=_env_int(
                "SCORING_MIN_COHORT_RESPONSES", MIN_COHORT_RESPONSES
            ),
            min_analytics_responses=_env_int(
                "SCORING_MIN_ANALYTICS_RESPONSES", MIN_ANALYTICS_RESPONSES
            ),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s value '%s'; using default %s.", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        logger.warning("Invalid %s value '%s'; must be integer.", name, raw)
        return default
    if parsed <= 0:
        logger.warning("Ignoring %s=%s (must be positive int)", name, raw)
        return default
    return parsed


@lru_cache(maxsize=1)
def get_default_config() -> ScoringConfig:
    """Return the process-wide configuration, loading it on first use."""
    config = ScoringConfig.from_env()
    logger.debug("Scoring configuration loaded: %s", config)
    return config
