"""Monthly trend series with explicit zero-response months."""
from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import Response
from engagement.scoring.pipeline import score_responses
from engagement.taxonomy import Category

logger = logging.getLogger(__name__)

MonthKey = Tuple[int, int]


@dataclass(frozen=True)
class TrendPoint:
    month: str  # "YYYY-MM"
    response_count: int
    overall_score: Optional[float]
    # None for a month without responses
    category_scores: Optional[Dict[Category, Optional[float]]]
    enps: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "response_count": self.response_count,
            "overall_score": self.overall_score,
            "category_scores": (
                {c.value: s for c, s in self.category_scores.items()}
                if self.category_scores is not None
                else None
            ),
            "enps": self.enps,
        }


def month_key(timestamp: datetime.datetime, tz: datetime.tzinfo | None = None) -> MonthKey:
    """Calendar ``(year, month)`` of *timestamp*, converted to *tz* if given."""
    if tz is not None and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    return timestamp.year, timestamp.month


def format_month(key: MonthKey) -> str:
    return f"{key[0]:04d}-{key[1]:02d}"


def month_window(months: int, now: datetime.datetime) -> List[MonthKey]:
    """The *months* calendar months ending with (and including) *now*'s month."""
    if months <= 0:
        raise ValueError("months must be positive")
    year, month = now.year, now.month
    keys: List[MonthKey] = []
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    keys.reverse()
    return keys


def group_by_month(
    responses: Sequence[Response], tz: datetime.tzinfo | None = None
) -> Dict[MonthKey, List[Response]]:
    grouped: Dict[MonthKey, List[Response]] = defaultdict(list)
    for response in responses:
        if response.submitted_at is None:
            continue
        grouped[month_key(response.submitted_at, tz)].append(response)
    return grouped


def calculate_trend(
    responses: Sequence[Response],
    months: int = 12,
    *,
    now: datetime.datetime | None = None,
    tz: datetime.tzinfo | None = None,
    config: ScoringConfig | None = None,
) -> List[TrendPoint]:
    """Return exactly *months* contiguous :class:`TrendPoint` entries.

    Every calendar month of the window is present, oldest first. Months
    without responses get ``response_count=0`` and ``None`` scores.
    Responses outside the window are ignored.

    Parameters
    ----------
    now
        End of the window; defaults to the current time (in *tz* if given).
        Pass it explicitly for reproducible output.
    tz
        Time zone whose calendar defines "month" for aware timestamps.
    """
    config = config or get_default_config()
    if now is None:
        now = datetime.datetime.now(tz)
    elif tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)

    window = month_window(months, now)
    grouped = group_by_month(responses, tz)
    logger.debug(
        "Trend window %s..%s, %d populated month(s)",
        format_month(window[0]),
        format_month(window[-1]),
        sum(1 for key in window if key in grouped),
    )

    points: List[TrendPoint] = []
    for key in window:
        bucket = grouped.get(key)
        if not bucket:
            points.append(
                TrendPoint(
                    month=format_month(key),
                    response_count=0,
                    overall_score=None,
                    category_scores=None,
                    enps=None,
                )
            )
            continue
        scores = score_responses(bucket, config=config)
        points.append(
            TrendPoint(
                month=format_month(key),
                response_count=scores.response_count,
                overall_score=scores.overall_score,
                category_scores=scores.category_scores,
                enps=scores.enps.score,
            )
        )
    return points
