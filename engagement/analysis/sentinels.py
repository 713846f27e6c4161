"""Explicit "not enough responses" result shared by the analytics views."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class InsufficientData:
    """Returned instead of a computed value when the sample is too small.

    Distinguishable from a genuine zero/neutral result; callers turn it into
    a user-visible explanation.
    """

    required: int
    actual: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def is_insufficient(value: Any) -> bool:
    return isinstance(value, InsufficientData)
