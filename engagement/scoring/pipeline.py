"""One pass of the scoring pipeline over a closed batch of responses."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import Response
from engagement.scoring.categories import (
    calculate_all_category_scores,
    calculate_overall_score,
    calculate_retention_intention,
)
from engagement.scoring.enps import EMPTY_ENPS, ENPSResult, calculate_enps
from engagement.taxonomy import Category


@dataclass(frozen=True)
class ShopScores:
    """Category/overall/eNPS/retention figures for one response set."""

    response_count: int
    overall_score: Optional[float]
    category_scores: Dict[Category, Optional[float]] = field(default_factory=dict)
    enps: ENPSResult = EMPTY_ENPS
    retention_intention: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response_count": self.response_count,
            "overall_score": self.overall_score,
            "category_scores": {c.value: s for c, s in self.category_scores.items()},
            "enps": self.enps.to_dict(),
            "retention_intention": self.retention_intention,
        }


def score_responses(
    responses: Sequence[Response], *, config: ScoringConfig | None = None
) -> ShopScores:
    """Run the category, overall, eNPS and retention calculators."""
    config = config or get_default_config()
    return ShopScores(
        response_count=len(responses),
        overall_score=calculate_overall_score(responses),
        category_scores=calculate_all_category_scores(responses, config=config),
        enps=calculate_enps(responses),
        retention_intention=calculate_retention_intention(responses),
    )
