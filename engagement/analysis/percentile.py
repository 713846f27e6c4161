"""Position of one shop within its same-industry cohort."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import ResponseLike
from engagement.scoring.categories import calculate_overall_score
from engagement.scoring.numeric import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PercentileResult:
    percentile: int
    rank: int
    total_shops: int
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_cohort(
    industry_responses: Mapping[str, Sequence[ResponseLike]],
    *,
    config: ScoringConfig | None = None,
) -> List[Tuple[str, float]]:
    """Return ``[(shop_id, overall_score)]`` for eligible shops.

    *industry_responses* holds every response (no date filter) of every shop
    in the industry. Shops with fewer than the minimum responses, or with no
    answered driver question at all, are left out rather than scored as 0.
    Input order is preserved.
    """
    config = config or get_default_config()
    cohort: List[Tuple[str, float]] = []
    for shop_id, responses in industry_responses.items():
        if len(responses) < config.min_cohort_responses:
            continue
        score = calculate_overall_score(responses)
        if score is None:
            continue
        cohort.append((shop_id, score))
    return cohort


def calculate_percentile(
    shop_id: str,
    industry_responses: Mapping[str, Sequence[ResponseLike]],
    *,
    config: ScoringConfig | None = None,
) -> Optional[PercentileResult]:
    """Rank *shop_id* against its industry.

    ``percentile`` is the share of cohort shops strictly below this shop,
    rounded half-up. ``rank`` is the 1-based position in the cohort sorted by
    score descending; ties keep input order and occupy adjacent ranks.
    Returns ``None`` when the shop is not in the cohort or the cohort has
    fewer than two members.
    """
    config = config or get_default_config()
    cohort = build_cohort(industry_responses, config=config)
    logger.debug("Percentile cohort for shop %s: %d shop(s)", shop_id, len(cohort))

    this_score = next((score for sid, score in cohort if sid == shop_id), None)
    if this_score is None or len(cohort) < config.min_cohort_size:
        return None

    below = sum(1 for _, score in cohort if score < this_score)
    ranked = sorted(cohort, key=lambda entry: entry[1], reverse=True)
    rank = next(i for i, (sid, _) in enumerate(ranked, start=1) if sid == shop_id)

    return PercentileResult(
        percentile=round_half_up(below / len(cohort) * 100),
        rank=rank,
        total_shops=len(cohort),
        score=this_score,
    )
