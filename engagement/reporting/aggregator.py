"""Aggregate a batch of survey responses into report structures.

The persistence layer hands over responses already filtered by shop and date;
everything here is a pure function of those inputs plus configuration.
"""

from __future__ import annotations

import datetime
import logging
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from engagement.analysis.benchmark import (
    BenchmarkMap,
    calculate_benchmark_overall,
    compare_to_benchmark,
)
from engagement.analysis.comparison import PeriodComparison, compare_periods
from engagement.analysis.correlation import calculate_correlations
from engagement.analysis.patterns import detect_patterns
from engagement.analysis.percentile import calculate_percentile
from engagement.analysis.questions import calculate_question_stats, lowest_and_highest
from engagement.analysis.ranking import ShopEntry, find_biggest_gaps, rank_shops
from engagement.analysis.sentinels import InsufficientData
from engagement.analysis.trend import calculate_trend
from engagement.config import ScoringConfig, get_default_config
from engagement.reporting import config as report_config
from engagement.reporting.models import (
    CategoryBreakdown,
    Comment,
    ShopAnalytics,
    ShopComparison,
    ShopReport,
    ShopTrend,
)
from engagement.responses import Response
from engagement.scoring.confidence import get_confidence_level
from engagement.scoring.pipeline import score_responses
from engagement.scoring.risk import (
    classify_category,
    classify_enps,
    classify_overall,
    classify_retention,
)
from engagement.taxonomy import DEFAULT_QUESTIONS, Question

logger = logging.getLogger(__name__)


def _recent_comments(responses: Sequence[Response], limit: int) -> Tuple[int, List[Comment]]:
    """Return (total, newest *limit*) non-empty comments."""
    comments = [
        Comment(text=r.comment.strip(), submitted_at=r.submitted_at)
        for r in responses
        if r.comment and r.comment.strip()
    ]
    dated = [c for c in comments if c.submitted_at is not None]
    undated = [c for c in comments if c.submitted_at is None]
    ordered = sorted(dated, key=lambda c: c.submitted_at, reverse=True) + undated
    return len(comments), ordered[:limit]


def build_shop_report(
    responses: Sequence[Response],
    *,
    shop_id: str,
    benchmarks: BenchmarkMap | None = None,
    previous_responses: Optional[Sequence[Response]] = None,
    shop_name: str | None = None,
    industry: str | None = None,
    config: ScoringConfig | None = None,
) -> ShopReport:
    """Score *responses* and assemble a :class:`ShopReport`.

    When *previous_responses* is given the same pipeline runs over it as well
    and the report carries period-over-period changes.

    The function is read-only; it does not mutate its inputs.
    """
    config = config or get_default_config()

    comparison: Optional[PeriodComparison] = None
    if previous_responses is not None:
        comparison = compare_periods(responses, previous_responses, config=config)
        current = comparison.current
    else:
        current = score_responses(responses, config=config)

    benchmark_rows = compare_to_benchmark(
        current.category_scores, benchmarks, industry=industry, config=config
    )
    categories = []
    for category, row in benchmark_rows.items():
        is_reverse = config.is_reverse(category)
        categories.append(
            CategoryBreakdown.from_comparison(
                row,
                risk=classify_category(row.score, is_reverse),
                is_reverse=is_reverse,
                change=comparison.changes.categories.get(category) if comparison else None,
            )
        )

    comment_total, recent = _recent_comments(responses, report_config.MAX_RECENT_COMMENTS)

    logger.debug(
        "Shop report for %s: responses=%d overall=%s enps=%s compared=%s",
        shop_id,
        current.response_count,
        current.overall_score,
        current.enps.score,
        comparison is not None,
    )

    return ShopReport(
        shop_id=shop_id,
        shop_name=shop_name,
        industry=industry,
        response_count=current.response_count,
        overall_score=current.overall_score,
        overall_risk=classify_overall(current.overall_score),
        benchmark_overall=calculate_benchmark_overall(
            benchmarks, industry=industry, config=config
        ),
        categories=categories,
        confidence=get_confidence_level(current.response_count, config=config),
        enps=current.enps,
        enps_risk=classify_enps(current.enps.score),
        retention_intention=current.retention_intention,
        retention_risk=classify_retention(current.retention_intention),
        comparison=comparison,
        comment_total=comment_total,
        recent_comments=recent,
    )


def build_shop_analytics(
    responses: Sequence[Response],
    *,
    shop_id: str,
    industry_responses: Mapping[str, Sequence[Response]] | None = None,
    questions: Sequence[Question] = DEFAULT_QUESTIONS,
    config: ScoringConfig | None = None,
) -> Union[ShopAnalytics, InsufficientData]:
    """Run the deep-dive views: question stats, correlation, patterns, percentile.

    *industry_responses* maps every same-industry shop id to all of its
    responses; without it the percentile is ``None``.
    """
    config = config or get_default_config()
    required = config.min_analytics_responses
    if len(responses) < required:
        return InsufficientData(
            required=required,
            actual=len(responses),
            message=f"Analytics need at least {required} responses.",
        )

    stats = calculate_question_stats(responses, questions, config=config)
    lowest, highest = lowest_and_highest(stats, report_config.MAX_QUESTION_HIGHLIGHTS)
    percentile = (
        calculate_percentile(shop_id, industry_responses, config=config)
        if industry_responses
        else None
    )

    return ShopAnalytics(
        shop_id=shop_id,
        response_count=len(responses),
        questions=stats,
        lowest_questions=lowest,
        highest_questions=highest,
        correlations=calculate_correlations(responses, config=config),
        patterns=detect_patterns(responses, config=config),
        percentile=percentile,
    )


def build_shop_comparison(
    shops: Mapping[str, Tuple[str, Sequence[Response]]],
    *,
    config: ScoringConfig | None = None,
) -> ShopComparison:
    """Rank several shops (``{shop_id: (name, responses)}``) against each other."""
    config = config or get_default_config()
    entries = [
        ShopEntry(shop_id=shop_id, name=name, scores=score_responses(responses, config=config))
        for shop_id, (name, responses) in shops.items()
    ]
    return ShopComparison(
        rankings=rank_shops(entries, config=config),
        gaps=find_biggest_gaps(entries, config=config),
    )


def build_shop_trend(
    responses: Sequence[Response],
    *,
    shop_id: str,
    months: int = 12,
    now: datetime.datetime | None = None,
    tz: datetime.tzinfo | None = None,
    config: ScoringConfig | None = None,
) -> ShopTrend:
    """Monthly trend of *responses* over the last *months* calendar months.

    *responses* should span the whole window; anything outside it is ignored.
    """
    points = calculate_trend(responses, months, now=now, tz=tz, config=config)
    logger.debug(
        "Trend for %s: %d month(s), %d with responses",
        shop_id,
        len(points),
        sum(1 for p in points if p.response_count),
    )
    return ShopTrend(shop_id=shop_id, points=points)
