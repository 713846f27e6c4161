"""Side-by-side comparison of several shops: rankings and biggest gaps."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.scoring.pipeline import ShopScores
from engagement.taxonomy import Category, category_label


@dataclass(frozen=True)
class ShopEntry:
    shop_id: str
    name: str
    scores: ShopScores


@dataclass(frozen=True)
class Gap:
    category: Category
    best: ShopEntry
    worst: ShopEntry
    gap: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "label": category_label(self.category),
            "best": {"shop": self.best.name, "score": self.best.scores.category_scores[self.category]},
            "worst": {"shop": self.worst.name, "score": self.worst.scores.category_scores[self.category]},
            "gap": self.gap,
        }


@dataclass(frozen=True)
class Rankings:
    overall: List[ShopEntry] = field(default_factory=list)
    by_category: Dict[Category, List[ShopEntry]] = field(default_factory=dict)


def _rank(entries: Sequence[ShopEntry], key) -> List[ShopEntry]:
    """Sort by *key* descending; entries whose key is ``None`` go last."""
    with_data = [e for e in entries if key(e) is not None]
    without = [e for e in entries if key(e) is None]
    return sorted(with_data, key=key, reverse=True) + without


def rank_shops(
    entries: Sequence[ShopEntry], *, config: ScoringConfig | None = None
) -> Rankings:
    config = config or get_default_config()
    by_category = {
        category: _rank(entries, lambda e, c=category: e.scores.category_scores.get(c))
        for category in config.driver_categories
    }
    return Rankings(
        overall=_rank(entries, lambda e: e.scores.overall_score),
        by_category=by_category,
    )


def find_biggest_gaps(
    entries: Sequence[ShopEntry], *, config: ScoringConfig | None = None
) -> List[Gap]:
    """Best-vs-worst spread per category, largest first.

    Only shops with an overall score take part; a category needs at least
    two shops with a score for that category.
    """
    config = config or get_default_config()
    valid = [e for e in entries if e.scores.overall_score is not None]
    if len(valid) < 2:
        return []

    gaps: List[Gap] = []
    for category in config.driver_categories:
        scored = [e for e in valid if e.scores.category_scores.get(category) is not None]
        if len(scored) < 2:
            continue
        ordered = sorted(scored, key=lambda e: e.scores.category_scores[category], reverse=True)
        best, worst = ordered[0], ordered[-1]
        gap = (
            best.scores.category_scores[category] - worst.scores.category_scores[category]
        )
        gaps.append(Gap(category=category, best=best, worst=worst, gap=gap))
    return sorted(gaps, key=lambda g: g.gap, reverse=True)
