"""Category, overall and retention-intention averages.

All averages use present-value filtering: a response contributes only the
question keys it actually answered, and a category with no present answers
across the whole set is ``None`` (never ``0``). No rounding happens here.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import ResponseLike, present_answers
from engagement.scoring.numeric import mean
from engagement.taxonomy import DRIVER_QUESTION_KEYS, RETENTION_QUESTION_KEY, Category


def average_of_keys(
    responses: Iterable[ResponseLike], keys: Sequence[str]
) -> Optional[float]:
    """Mean of every present answer to *keys* across *responses*."""
    values = []
    for response in responses:
        values.extend(present_answers(response, keys))
    return mean(values)


def calculate_category_score(
    responses: Sequence[ResponseLike],
    category: Category | str,
    *,
    config: ScoringConfig | None = None,
) -> Optional[float]:
    """Return the raw (never inverted) average for one driver *category*."""
    config = config or get_default_config()
    return average_of_keys(responses, config.questions_for(category))


def calculate_all_category_scores(
    responses: Sequence[ResponseLike], *, config: ScoringConfig | None = None
) -> Dict[Category, Optional[float]]:
    """Return ``{category: average | None}`` for every driver category."""
    config = config or get_default_config()
    return {
        category: average_of_keys(responses, keys)
        for category, keys in config.category_mapping.items()
    }


def calculate_overall_score(responses: Sequence[ResponseLike]) -> Optional[float]:
    """Average of all present q1–q9 answers.

    Computed directly from the nine driver questions, not as a mean of the
    category scores (categories have unequal question counts).
    """
    return average_of_keys(responses, DRIVER_QUESTION_KEYS)


def calculate_retention_intention(responses: Sequence[ResponseLike]) -> Optional[float]:
    """Average of present ``q10`` answers (an outcome measure)."""
    return average_of_keys(responses, (RETENTION_QUESTION_KEY,))


def response_overall(response: ResponseLike) -> Optional[float]:
    """Overall score of a single response, from its own answers only."""
    return mean(present_answers(response, DRIVER_QUESTION_KEYS))


def response_category(
    response: ResponseLike,
    category: Category | str,
    *,
    config: ScoringConfig | None = None,
) -> Optional[float]:
    """Category score of a single response, from its own answers only."""
    config = config or get_default_config()
    return mean(present_answers(response, config.questions_for(category)))
