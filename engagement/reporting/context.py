"""Context dataclass for rendering shop reports.

This module defines `ReportContext`, a typed container that holds all
values expected by the master Jinja2 template located in
`engagement/reporting/templates/report.md.j2`.

The scoring core returns unrounded floats and ``None`` for missing data;
rounding, signs and placeholders are applied here and nowhere else.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime as _dt
from datetime import timezone as _tz
from typing import Any, Dict, List, Optional, Union

from engagement.analysis.comparison import Change
from engagement.analysis.sentinels import InsufficientData, is_insufficient
from engagement.reporting import config
from engagement.reporting.models import ShopAnalytics, ShopReport, ShopTrend
from engagement.scoring.risk import RiskLevel

__all__ = [
    "CategoryRow",
    "ReportContext",
    "build_report_context",
    "format_score",
    "format_enps",
    "format_change",
]

NO_DATA = "-"

_ARROWS = {"up": "▲", "down": "▼", "same": "→"}


def format_score(score: Optional[float]) -> str:
    """Two decimals, or ``-`` when there is no data."""
    if score is None:
        return NO_DATA
    return f"{score:.2f}"


def format_enps(score: Optional[int]) -> str:
    """Signed index (``+42``, ``-7``, ``0``→``+0``), or ``-``."""
    if score is None:
        return NO_DATA
    return f"+{score}" if score >= 0 else f"{score}"


def format_change(change: Optional[Change], *, decimals: int = 2) -> str:
    if change is None:
        return ""
    return f"{_ARROWS[change.direction]} {change.value:+.{decimals}f}"


def format_risk(risk: Optional[RiskLevel]) -> str:
    return risk.label if risk else "No data"


@dataclass(slots=True)
class CategoryRow:
    """One line of the category table."""

    label: str
    score: str
    benchmark: str
    difference: str
    risk: str
    change: str = ""
    reverse: bool = False


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the report template."""

    # Header & meta
    shop_id: str
    shop_name: str
    date: str  # ISO-8601 date string (UTC)
    industry: Optional[str]

    # Headline figures
    response_count: int
    confidence: str
    confidence_note: str
    overall_score: str
    overall_risk: str
    overall_change: str
    benchmark_overall: str
    enps: str
    enps_risk: str
    enps_change: str
    enps_breakdown: str
    retention: str
    retention_risk: str

    categories: List[CategoryRow] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    comment_total: int = 0

    # Analytics (optional section)
    analytics_note: Optional[str] = None
    percentile: Optional[str] = None
    top_driver: Optional[str] = None
    correlation_note: Optional[str] = None
    lowest_questions: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)

    # Monthly trend (optional section)
    trend: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    # Alias for convenience (e.g. template kwargs)
    __call__ = to_dict


def _analytics_fields(
    analytics: Union[ShopAnalytics, InsufficientData, None],
) -> Dict[str, Any]:
    if analytics is None:
        return {}
    if is_insufficient(analytics):
        return {"analytics_note": analytics.message}

    fields: Dict[str, Any] = {
        "lowest_questions": [
            f"Q{s.question.order} {s.question.text} ({format_score(s.average)})"
            for s in analytics.lowest_questions
        ],
        "patterns": [f"{p.title}: {p.metric}" for p in analytics.patterns],
    }
    if analytics.percentile is not None:
        p = analytics.percentile
        fields["percentile"] = (
            f"{p.percentile}th percentile (rank {p.rank} of {p.total_shops})"
        )
    if is_insufficient(analytics.correlations):
        fields["correlation_note"] = analytics.correlations.message
    else:
        fields["top_driver"] = analytics.correlations.insight
    return fields


def _trend_rows(trend: Optional[ShopTrend]) -> List[str]:
    if trend is None:
        return []
    rows = []
    for point in trend.points:
        if not point.response_count:
            rows.append(f"{point.month}: no responses")
            continue
        rows.append(
            f"{point.month}: {format_score(point.overall_score)} "
            f"(eNPS {format_enps(point.enps)}, {point.response_count} responses)"
        )
    return rows


def build_report_context(
    report: ShopReport,
    analytics: Union[ShopAnalytics, InsufficientData, None] = None,
    trend: Optional[ShopTrend] = None,
) -> ReportContext:
    """Convert a :class:`ShopReport` (plus optional analytics and trend) for the template.

    The function is *pure* – it does not mutate its inputs.
    """

    rows = [
        CategoryRow(
            label=c.label,
            score=format_score(c.score),
            benchmark=format_score(c.benchmark),
            difference=f"{c.difference:+.2f}" if c.difference is not None else NO_DATA,
            risk=format_risk(c.risk),
            change=format_change(c.change),
            reverse=c.is_reverse,
        )
        for c in report.categories
    ]

    enps = report.enps
    breakdown = (
        f"{enps.promoters} promoters / {enps.passives} passives / "
        f"{enps.detractors} detractors"
        if enps.total_responses
        else "no eNPS answers"
    )

    return ReportContext(
        shop_id=report.shop_id,
        shop_name=report.shop_name or report.shop_id,
        date=_dt.now(tz=_tz.utc).strftime("%Y-%m-%d"),
        industry=report.industry,
        response_count=report.response_count,
        confidence=report.confidence.label,
        confidence_note=report.confidence.description,
        overall_score=format_score(report.overall_score),
        overall_risk=format_risk(report.overall_risk),
        overall_change=format_change(report.overall_change),
        benchmark_overall=format_score(report.benchmark_overall),
        enps=format_enps(enps.score),
        enps_risk=format_risk(report.enps_risk),
        enps_change=format_change(report.enps_change, decimals=0),
        enps_breakdown=breakdown,
        retention=format_score(report.retention_intention),
        retention_risk=format_risk(report.retention_risk),
        categories=rows,
        comments=[c.text for c in report.recent_comments[: config.MAX_COMMENTS]],
        comment_total=report.comment_total,
        trend=_trend_rows(trend),
        **_analytics_fields(analytics),
    )
