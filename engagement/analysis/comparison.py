"""Deltas between a current and a previous reporting period."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import Response
from engagement.scoring.pipeline import ShopScores, score_responses
from engagement.taxonomy import Category

UP = "up"
DOWN = "down"
SAME = "same"


@dataclass(frozen=True)
class Change:
    value: float
    direction: str
    percentage: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PeriodChanges:
    overall: Optional[Change]
    categories: Dict[Category, Optional[Change]] = field(default_factory=dict)
    enps: Optional[Change] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.to_dict() if self.overall else None,
            "categories": {
                c.value: (ch.to_dict() if ch else None) for c, ch in self.categories.items()
            },
            "enps": self.enps.to_dict() if self.enps else None,
        }


def direction_of(diff: float, dead_band: float = 0.0) -> str:
    """``up``/``down`` when ``|diff|`` exceeds *dead_band*, else ``same``.

    With the default ``dead_band=0`` this is a strict sign comparison.
    """
    if diff > dead_band:
        return UP
    if diff < -dead_band:
        return DOWN
    return SAME


def overall_change(current: Optional[float], previous: Optional[float]) -> Optional[Change]:
    if current is None or previous is None:
        return None
    diff = current - previous
    percentage = diff / previous * 100 if previous != 0 else None
    return Change(value=diff, direction=direction_of(diff), percentage=percentage)


def category_change(
    current: Optional[float], previous: Optional[float], dead_band: float
) -> Optional[Change]:
    if current is None or previous is None:
        return None
    diff = current - previous
    return Change(value=diff, direction=direction_of(diff, dead_band))


def enps_change(current: Optional[int], previous: Optional[int]) -> Optional[Change]:
    if current is None or previous is None:
        return None
    diff = current - previous
    return Change(value=diff, direction=direction_of(diff))


def calculate_changes(
    current: ShopScores,
    previous: ShopScores,
    *,
    config: ScoringConfig | None = None,
) -> PeriodChanges:
    """Compare two independently computed :class:`ShopScores`.

    Overall and eNPS directions use strict sign comparison; category
    directions use the configured dead band so noise does not flip them.
    A metric missing in either period yields ``None`` for its change.
    """
    config = config or get_default_config()
    categories = {
        category: category_change(
            current.category_scores.get(category),
            previous.category_scores.get(category),
            config.category_dead_band,
        )
        for category in config.driver_categories
    }
    return PeriodChanges(
        overall=overall_change(current.overall_score, previous.overall_score),
        categories=categories,
        enps=enps_change(current.enps.score, previous.enps.score),
    )


@dataclass(frozen=True)
class PeriodComparison:
    current: ShopScores
    previous: ShopScores
    changes: PeriodChanges

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict(),
            "changes": self.changes.to_dict(),
        }


def compare_periods(
    current_responses: Sequence[Response],
    previous_responses: Sequence[Response],
    *,
    config: ScoringConfig | None = None,
) -> PeriodComparison:
    """Score both (disjoint) periods independently and diff them."""
    config = config or get_default_config()
    current = score_responses(current_responses, config=config)
    previous = score_responses(previous_responses, config=config)
    return PeriodComparison(
        current=current,
        previous=previous,
        changes=calculate_changes(current, previous, config=config),
    )
