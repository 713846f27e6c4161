"""Risk classification of overall, category, eNPS and retention scores.

Each metric has its own band table: ascending inclusive upper bounds, least
favourable tier first. ``reverse=True`` keeps the cut points and the raw score
as they are and only swaps which end of the table is "good".
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class RiskLevel:
    level: str
    label: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RiskBand:
    upper: float  # inclusive
    risk: RiskLevel


Bands = Tuple[RiskBand, ...]

CRITICAL = RiskLevel("CRITICAL", "Critical", "red")
WARNING = RiskLevel("WARNING", "Warning", "orange")
CAUTION = RiskLevel("CAUTION", "Caution", "yellow")
STABLE = RiskLevel("STABLE", "Stable", "green")
EXCELLENT = RiskLevel("EXCELLENT", "Excellent", "emerald")

NEEDS_IMPROVEMENT = RiskLevel("NEEDS_IMPROVEMENT", "Needs improvement", "red")
ROOM_FOR_IMPROVEMENT = RiskLevel("ROOM_FOR_IMPROVEMENT", "Room for improvement", "yellow")
GOOD = RiskLevel("GOOD", "Good", "green")

OVERALL_BANDS: Bands = (
    RiskBand(2.0, CRITICAL),
    RiskBand(2.7, WARNING),
    RiskBand(3.2, CAUTION),
    RiskBand(3.8, STABLE),
    RiskBand(math.inf, EXCELLENT),
)

CATEGORY_BANDS: Bands = (
    RiskBand(2.5, NEEDS_IMPROVEMENT),
    RiskBand(3.2, ROOM_FOR_IMPROVEMENT),
    RiskBand(math.inf, GOOD),
)

# eNPS lives on -100..+100
ENPS_BANDS: Bands = (
    RiskBand(-30, CRITICAL),
    RiskBand(0, WARNING),
    RiskBand(30, STABLE),
    RiskBand(math.inf, EXCELLENT),
)

# Outcome measure; kept separate from OVERALL_BANDS so the two can diverge
RETENTION_BANDS: Bands = (
    RiskBand(2.0, CRITICAL),
    RiskBand(2.7, WARNING),
    RiskBand(3.2, CAUTION),
    RiskBand(3.8, STABLE),
    RiskBand(math.inf, EXCELLENT),
)


def classify(
    score: Optional[float], bands: Bands = CATEGORY_BANDS, reverse: bool = False
) -> Optional[RiskLevel]:
    """Return the :class:`RiskLevel` for *score*, or ``None`` for no data."""
    if score is None:
        return None
    for index, band in enumerate(bands):
        if score <= band.upper:
            break
    if reverse:
        return bands[len(bands) - 1 - index].risk
    return band.risk


def classify_overall(score: Optional[float]) -> Optional[RiskLevel]:
    return classify(score, OVERALL_BANDS)


def classify_category(score: Optional[float], reverse: bool = False) -> Optional[RiskLevel]:
    return classify(score, CATEGORY_BANDS, reverse)


def classify_enps(score: Optional[float]) -> Optional[RiskLevel]:
    return classify(score, ENPS_BANDS)


def classify_retention(score: Optional[float]) -> Optional[RiskLevel]:
    return classify(score, RETENTION_BANDS)
