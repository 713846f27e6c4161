"""Which driver category moves the overall score the most.

For every response we compute its own overall score and its own category
scores, then correlate each category with the overall score across
responses (Pearson r). Categories are ranked by ``|r|``.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence, Union

from engagement.analysis.sentinels import InsufficientData
from engagement.config import ScoringConfig, get_default_config
from engagement.responses import ResponseLike
from engagement.scoring.categories import response_category, response_overall
from engagement.scoring.numeric import pearson
from engagement.taxonomy import Category, category_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Correlation:
    category: Category
    correlation: float
    impact: float

    @property
    def label(self) -> str:
        return category_label(self.category)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        data["label"] = self.label
        return data


@dataclass(frozen=True)
class CorrelationAnalysis:
    correlations: List[Correlation] = field(default_factory=list)

    @property
    def top(self) -> Correlation | None:
        return self.correlations[0] if self.correlations else None

    @property
    def insight(self) -> str | None:
        """One-sentence summary naming the dominant driver."""
        if self.top is None:
            return None
        return (
            f'"{self.top.label}" has the strongest impact on overall satisfaction. '
            "Improving this area will be most effective."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [c.to_dict() for c in self.correlations],
            "insight": self.insight,
        }


def correlate_category(
    responses: Sequence[ResponseLike],
    category: Category,
    *,
    config: ScoringConfig | None = None,
) -> float:
    """Pearson r between per-response *category* and overall scores.

    Only responses that answered both a question of *category* and at least
    one driver question are paired; unanswered values are never imputed.
    """
    xs: List[float] = []
    ys: List[float] = []
    for response in responses:
        overall = response_overall(response)
        value = response_category(response, category, config=config)
        if overall is None or value is None:
            continue
        xs.append(value)
        ys.append(overall)
    return pearson(xs, ys)


def calculate_correlations(
    responses: Sequence[ResponseLike], *, config: ScoringConfig | None = None
) -> Union[CorrelationAnalysis, InsufficientData]:
    """Rank driver categories by correlation with the overall score.

    Returns :class:`InsufficientData` below the configured minimum response
    count instead of a (misleading) coefficient.
    """
    config = config or get_default_config()
    required = config.min_correlation_responses
    if len(responses) < required:
        logger.debug("Correlation skipped: %d < %d responses", len(responses), required)
        return InsufficientData(
            required=required,
            actual=len(responses),
            message=f"Correlation analysis needs at least {required} responses.",
        )

    correlations = []
    for category in config.driver_categories:
        r = correlate_category(responses, category, config=config)
        correlations.append(Correlation(category=category, correlation=r, impact=abs(r)))

    # sorted() is stable: equal impacts keep taxonomy order
    correlations = sorted(correlations, key=lambda c: c.impact, reverse=True)
    return CorrelationAnalysis(correlations=correlations)
