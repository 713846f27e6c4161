"""Data structures for the reporting pipeline."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from engagement.analysis.benchmark import BenchmarkComparison
from engagement.analysis.comparison import Change, PeriodComparison
from engagement.analysis.correlation import CorrelationAnalysis
from engagement.analysis.patterns import Pattern
from engagement.analysis.percentile import PercentileResult
from engagement.analysis.questions import QuestionStat
from engagement.analysis.ranking import Gap, Rankings
from engagement.analysis.sentinels import InsufficientData
from engagement.analysis.trend import TrendPoint
from engagement.scoring.confidence import Confidence
from engagement.scoring.enps import ENPSResult
from engagement.scoring.risk import RiskLevel
from engagement.taxonomy import Category, category_label


@dataclass(frozen=True)
class CategoryBreakdown:
    """One driver category row of a shop report."""

    category: Category
    score: Optional[float]
    benchmark: Optional[float]
    difference: Optional[float]
    risk: Optional[RiskLevel]
    is_reverse: bool
    change: Optional[Change] = None

    @property
    def label(self) -> str:
        return category_label(self.category)

    @classmethod
    def from_comparison(
        cls,
        comparison: BenchmarkComparison,
        *,
        risk: Optional[RiskLevel],
        is_reverse: bool,
        change: Optional[Change] = None,
    ) -> "CategoryBreakdown":
        return cls(
            category=comparison.category,
            score=comparison.score,
            benchmark=comparison.benchmark,
            difference=comparison.difference,
            risk=risk,
            is_reverse=is_reverse,
            change=change,
        )


@dataclass(frozen=True)
class Comment:
    text: str
    submitted_at: Optional[datetime.datetime] = None


@dataclass(frozen=True)
class ShopReport:
    """Everything the presentation layer needs for one shop and period."""

    shop_id: str
    response_count: int
    overall_score: Optional[float]
    overall_risk: Optional[RiskLevel]
    benchmark_overall: Optional[float]
    categories: List[CategoryBreakdown]
    confidence: Confidence
    enps: ENPSResult
    enps_risk: Optional[RiskLevel]
    retention_intention: Optional[float] = None
    retention_risk: Optional[RiskLevel] = None
    shop_name: Optional[str] = None
    industry: Optional[str] = None
    comparison: Optional[PeriodComparison] = None
    comment_total: int = 0
    recent_comments: List[Comment] = field(default_factory=list)

    @property
    def overall_change(self) -> Optional[Change]:
        return self.comparison.changes.overall if self.comparison else None

    @property
    def enps_change(self) -> Optional[Change]:
        return self.comparison.changes.enps if self.comparison else None


@dataclass(frozen=True)
class ShopAnalytics:
    """Deep-dive analytics for one shop."""

    shop_id: str
    response_count: int
    questions: List[QuestionStat]
    lowest_questions: List[QuestionStat]
    highest_questions: List[QuestionStat]
    correlations: Union[CorrelationAnalysis, InsufficientData]
    patterns: List[Pattern] = field(default_factory=list)
    percentile: Optional[PercentileResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shop_id": self.shop_id,
            "response_count": self.response_count,
            "questions": [q.to_dict() for q in self.questions],
            "correlations": self.correlations.to_dict(),
            "patterns": [p.to_dict() for p in self.patterns],
            "percentile": self.percentile.to_dict() if self.percentile else None,
        }


@dataclass(frozen=True)
class ShopTrend:
    """Monthly series for one shop, oldest month first."""

    shop_id: str
    points: List[TrendPoint] = field(default_factory=list)

    @property
    def months(self) -> int:
        return len(self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shop_id": self.shop_id,
            "months": self.months,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass(frozen=True)
class ShopComparison:
    """Several shops ranked against each other."""

    rankings: Rankings
    gaps: List[Gap] = field(default_factory=list)
