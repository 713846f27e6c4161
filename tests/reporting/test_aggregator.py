"""Unit tests for reporting.aggregator."""

from __future__ import annotations

import datetime

import pytest

from engagement.analysis.sentinels import is_insufficient
from engagement.reporting.aggregator import (
    build_shop_analytics,
    build_shop_comparison,
    build_shop_report,
    build_shop_trend,
)
from engagement.responses import Response
from engagement.scoring.pipeline import score_responses
from engagement.taxonomy import DRIVER_CATEGORIES, Category

UTC = datetime.timezone.utc

BENCHMARKS = {category.value: 3.0 for category in DRIVER_CATEGORIES}


def _response(value, enps=None, comment=None, day=None):
    return Response(
        answers={f"q{i}": value for i in range(1, 11)},
        enps_score=enps,
        comment=comment,
        submitted_at=datetime.datetime(2026, 9, day, tzinfo=UTC) if day else None,
    )


def test_shop_report_happy_path():
    responses = [_response(5, enps=10), _response(1, enps=3), _response(3, enps=8)]
    report = build_shop_report(
        responses, shop_id="s1", shop_name="Shibuya", industry="RESTAURANT", benchmarks=BENCHMARKS
    )

    assert report.response_count == 3
    assert report.overall_score == 3.0
    assert report.overall_risk.level == "CAUTION"
    assert report.benchmark_overall == 3.0
    assert report.confidence.level == "LOW"
    assert report.enps.score == 0
    assert report.enps_risk.level == "WARNING"
    assert report.retention_intention == 3.0
    assert report.comparison is None
    assert report.overall_change is None

    assert [c.category for c in report.categories] == list(DRIVER_CATEGORIES)
    workload = next(c for c in report.categories if c.category is Category.WORKLOAD_STAFFING)
    assert workload.is_reverse
    assert workload.difference == 0.0
    assert workload.label == "Staffing & Resources"


def test_shop_report_without_responses():
    report = build_shop_report([], shop_id="new")
    assert report.overall_score is None
    assert report.overall_risk is None
    assert report.enps.score is None
    assert report.benchmark_overall is None
    assert all(c.score is None and c.risk is None for c in report.categories)


def test_shop_report_with_previous_period():
    report = build_shop_report(
        [_response(4, enps=9)], shop_id="s1", previous_responses=[_response(3, enps=5)]
    )
    assert report.overall_change.direction == "up"
    assert report.enps_change.value == 200
    assert all(c.change.direction == "up" for c in report.categories)


def test_recent_comments_newest_first():
    responses = [
        _response(3, comment="older", day=1),
        _response(3, comment="   "),
        _response(3, comment="undated"),
        _response(3, comment=" newest ", day=20),
    ]
    report = build_shop_report(responses, shop_id="s1")
    assert report.comment_total == 3
    assert [c.text for c in report.recent_comments] == ["newest", "older", "undated"]


def test_analytics_below_minimum():
    result = build_shop_analytics([_response(3)] * 2, shop_id="s1")
    assert is_insufficient(result)
    assert result.required == 3
    assert result.actual == 2


def test_analytics_with_and_without_cohort():
    responses = [_response(v) for v in (1, 2, 3, 4, 5)]
    analytics = build_shop_analytics(responses, shop_id="s1")
    assert analytics.percentile is None
    assert len(analytics.questions) == 9
    assert len(analytics.lowest_questions) == 3
    assert is_insufficient(analytics.correlations)

    industry = {"s1": responses, "s2": [_response(1)] * 3}
    analytics = build_shop_analytics(responses, shop_id="s1", industry_responses=industry)
    assert analytics.percentile.rank == 1
    assert analytics.percentile.percentile == 50
    assert analytics.to_dict()["percentile"]["total_shops"] == 2


def test_shop_comparison():
    comparison = build_shop_comparison(
        {"a": ("Alpha", [_response(2)]), "b": ("Beta", [_response(4)])}
    )
    assert [e.name for e in comparison.rankings.overall] == ["Beta", "Alpha"]
    assert len(comparison.gaps) == len(DRIVER_CATEGORIES)
    assert comparison.gaps[0].gap == pytest.approx(2.0)


def test_shop_report_tolerates_extra_benchmark_categories():
    benchmarks = dict(BENCHMARKS, JOB_SATISFACTION=3.1)
    report = build_shop_report([_response(4)], shop_id="s1", benchmarks=benchmarks)
    assert report.benchmark_overall == 3.0
    assert all(c.benchmark == 3.0 for c in report.categories)


def test_shop_trend_covers_requested_months():
    now = datetime.datetime(2026, 10, 16, tzinfo=UTC)
    responses = [_response(4, enps=9, day=5), _response(2, enps=0, day=20)]
    trend = build_shop_trend(responses, shop_id="s1", months=6, now=now)

    assert trend.months == 6
    assert [p.month for p in trend.points] == [
        "2026-05",
        "2026-06",
        "2026-07",
        "2026-08",
        "2026-09",
        "2026-10",
    ]
    september = trend.points[4]
    assert september.response_count == 2
    assert september.overall_score == 3.0
    assert september.enps == 0
    assert trend.to_dict()["points"][-1]["response_count"] == 0


def test_full_pipeline_is_idempotent():
    responses = [
        _response(v, enps=e, comment=f"c{v}", day=d)
        for v, e, d in ((1, 0, 1), (2, 6, 3), (3, 7, 5), (4, 9, 7), (5, 10, 9))
    ] * 2
    snapshot = list(responses)
    industry = {"s1": responses, "s2": [_response(2)] * 3, "s3": [_response(5)] * 4}
    now = datetime.datetime(2026, 10, 16, tzinfo=UTC)

    def run():
        return (
            score_responses(responses),
            build_shop_report(
                responses,
                shop_id="s1",
                benchmarks=BENCHMARKS,
                previous_responses=responses[:3],
            ),
            build_shop_analytics(responses, shop_id="s1", industry_responses=industry),
            build_shop_trend(responses, shop_id="s1", now=now),
        )

    first, second = run(), run()
    assert first == second
    assert responses == snapshot

    analytics = first[2]
    assert not is_insufficient(analytics.correlations)
    assert analytics.percentile is not None
    assert analytics.patterns
