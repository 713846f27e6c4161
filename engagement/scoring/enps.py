"""Employee Net Promoter Score.

Promoters answer 9–10, passives 7–8, detractors 0–6. Responses without a
present eNPS answer are left out of every count and percentage.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Union

from engagement.responses import Response, enps_of
from engagement.scoring.numeric import round_half_up

PROMOTER_MIN = 9
PASSIVE_MIN = 7


@dataclass(frozen=True)
class ENPSResult:
    score: Optional[int]
    promoters: int = 0
    passives: int = 0
    detractors: int = 0
    total_responses: int = 0
    promoter_percentage: Optional[float] = None
    detractor_percentage: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EMPTY_ENPS = ENPSResult(score=None)


def classify_enps_answer(value: int) -> str:
    """Return ``promoter``, ``passive`` or ``detractor`` for a 0–10 answer."""
    if value >= PROMOTER_MIN:
        return "promoter"
    if value >= PASSIVE_MIN:
        return "passive"
    return "detractor"


def calculate_enps(items: Iterable[Union[Response, Optional[int]]]) -> ENPSResult:
    """Compute eNPS from responses or bare ``enps_score`` values.

    ``score = round((promoters - detractors) / total * 100)`` (half-up), in
    -100..+100. Percentages keep full precision for the display layer.
    """
    counts = {"promoter": 0, "passive": 0, "detractor": 0}
    for item in items:
        value = enps_of(item)
        if value is None:
            continue
        counts[classify_enps_answer(value)] += 1

    total = sum(counts.values())
    if total == 0:
        return EMPTY_ENPS

    promoters = counts["promoter"]
    detractors = counts["detractor"]
    return ENPSResult(
        score=round_half_up((promoters - detractors) / total * 100),
        promoters=promoters,
        passives=counts["passive"],
        detractors=detractors,
        total_responses=total,
        promoter_percentage=promoters / total * 100,
        detractor_percentage=detractors / total * 100,
    )
