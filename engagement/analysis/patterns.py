"""Anomaly detection over raw per-response answer vectors.

Three independent detectors run over the driver questions (q1–q9):

* polarization – most individual answers sit on the scale extremes
* low engagement – respondents giving the same value to every question
* high variance – respondents disagree strongly within one category

Output order is detection order, not severity.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import ResponseLike, present_answers
from engagement.scoring.categories import response_category
from engagement.scoring.numeric import population_std_dev
from engagement.taxonomy import DRIVER_QUESTION_KEYS, Category, category_label

logger = logging.getLogger(__name__)

SCALE_EXTREMES = (1, 5)

INFO = "info"
WARNING = "warning"


@dataclass(frozen=True)
class Pattern:
    type: str
    severity: str
    title: str
    description: str
    metric: str
    category: Optional[Category] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value if self.category else None
        return data


def detect_polarization(
    responses: Sequence[ResponseLike], *, config: ScoringConfig
) -> Optional[Pattern]:
    """Share of individual answers equal to 1 or 5 above the ratio."""
    answers: List[float] = []
    for response in responses:
        answers.extend(present_answers(response, DRIVER_QUESTION_KEYS))
    if not answers:
        return None

    polarization = sum(1 for a in answers if a in SCALE_EXTREMES) / len(answers)
    if polarization <= config.polarization_ratio:
        return None
    return Pattern(
        type="POLARIZED",
        severity=WARNING,
        title="Polarized opinions",
        description=(
            "Employee opinions are sharply split. Groups within the team may be "
            "having very different experiences."
        ),
        metric=f"{polarization * 100:.0f}% extreme answers",
    )


def is_straight_lined(response: ResponseLike) -> bool:
    """True when every answered driver question carries the same value."""
    values = present_answers(response, DRIVER_QUESTION_KEYS)
    return bool(values) and len(set(values)) == 1


def detect_low_engagement(
    responses: Sequence[ResponseLike], *, config: ScoringConfig
) -> Optional[Pattern]:
    suspicious = sum(1 for r in responses if is_straight_lined(r))
    share = suspicious / len(responses)
    if share <= config.straight_line_ratio:
        return None
    return Pattern(
        type="LOW_ENGAGEMENT",
        severity=INFO,
        title="Low-engagement responses detected",
        description=(
            "Some respondents gave the same answer to every question. Treat the "
            "reliability of these responses with care."
        ),
        metric=f"{suspicious} responses ({share * 100:.0f}%)",
    )


def detect_high_variance(
    responses: Sequence[ResponseLike], *, config: ScoringConfig
) -> List[Pattern]:
    """Per-category population std-dev of per-response averages."""
    patterns: List[Pattern] = []
    for category in config.driver_categories:
        scores = [
            score
            for score in (response_category(r, category, config=config) for r in responses)
            if score is not None
        ]
        if len(scores) < config.min_variance_responses:
            continue
        std_dev = population_std_dev(scores)
        if std_dev is None or std_dev <= config.variance_threshold:
            continue
        patterns.append(
            Pattern(
                type="HIGH_VARIANCE",
                severity=WARNING,
                title=f"Wide spread in {category_label(category)}",
                description=(
                    "Employees' experiences differ widely in this area. Particular "
                    "shifts or supervisors may be the cause."
                ),
                metric=f"Std dev: {std_dev:.2f}",
                category=category,
            )
        )
    return patterns


def detect_patterns(
    responses: Sequence[ResponseLike], *, config: ScoringConfig | None = None
) -> List[Pattern]:
    """Run every detector; an empty list is a valid "nothing unusual" result.

    Fewer than the configured minimum responses also yields ``[]``.
    """
    config = config or get_default_config()
    if len(responses) < config.min_pattern_responses:
        logger.debug("Pattern detection skipped: %d responses", len(responses))
        return []

    patterns: List[Pattern] = []
    polarized = detect_polarization(responses, config=config)
    if polarized is not None:
        patterns.append(polarized)
    low_engagement = detect_low_engagement(responses, config=config)
    if low_engagement is not None:
        patterns.append(low_engagement)
    patterns.extend(detect_high_variance(responses, config=config))
    return patterns
