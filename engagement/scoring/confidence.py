"""Sample-size confidence tiers used to caveat small reports."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from engagement.config import ScoringConfig, get_default_config


@dataclass(frozen=True)
class Confidence:
    level: str
    label: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


LOW = Confidence("LOW", "Indicative", "Few responses; treat these results as indicative only.")
MEDIUM = Confidence("MEDIUM", "Moderate", "More responses will make these results more accurate.")
HIGH = Confidence("HIGH", "High", "There are enough responses for reliable results.")


def get_confidence_level(
    response_count: int, *, config: ScoringConfig | None = None
) -> Confidence:
    """Map *response_count* to a tier. Looks at the count only, never scores."""
    config = config or get_default_config()
    if response_count < config.confidence_low_below:
        return LOW
    if response_count < config.confidence_medium_below:
        return MEDIUM
    return HIGH
