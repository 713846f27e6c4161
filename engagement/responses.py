"""The immutable ``Response`` record and present-value helpers."""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Union

from engagement.taxonomy import SCALE_BOUNDS, Scale

Answers = Mapping[str, Any]


@dataclass(frozen=True)
class Response:
    """One survey submission as handed over by the persistence layer.

    ``answers`` maps ``q1``..``q10`` to 1–5 scores; missing keys are
    unanswered questions. ``enps_score`` (Q11, 0–10) is stored separately.
    """

    answers: Answers = field(default_factory=dict)
    enps_score: Optional[int] = None
    comment: Optional[str] = None
    submitted_at: Optional[datetime.datetime] = None
    shop_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "answers", MappingProxyType(dict(self.answers)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Response":
        """Build a response from a persistence export row.

        Accepts camelCase (``enpsScore``, ``submittedAt``, ``shopId``) or
        snake_case keys; ``submittedAt`` may be an ISO-8601 string.
        """
        submitted = data.get("submitted_at", data.get("submittedAt"))
        if isinstance(submitted, str):
            submitted = datetime.datetime.fromisoformat(submitted.replace("Z", "+00:00"))
        return cls(
            answers=data.get("answers") or {},
            enps_score=data.get("enps_score", data.get("enpsScore")),
            comment=data.get("comment"),
            submitted_at=submitted,
            shop_id=data.get("shop_id", data.get("shopId")),
        )


ResponseLike = Union[Response, Answers]


def answers_of(item: ResponseLike) -> Answers:
    """Return the answer map of a :class:`Response` or a bare mapping."""
    if isinstance(item, Response):
        return item.answers
    return item


def present_value(value: Any, scale: Scale = Scale.LIKERT_5) -> Optional[float]:
    """Return *value* when it is a number inside *scale*, else ``None``.

    Missing, non-numeric, fractional and out-of-range answers are all
    "absent"; they are excluded from averages rather than counted as zero.
    Whole floats such as ``4.0`` (JSON exports) are accepted.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    low, high = SCALE_BOUNDS[scale]
    if not low <= value <= high:
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return value


def present_answers(item: ResponseLike, keys: Iterable[str]) -> List[float]:
    """Return the present values of *keys* in one response, in key order."""
    answers = answers_of(item)
    values = []
    for key in keys:
        value = present_value(answers.get(key))
        if value is not None:
            values.append(value)
    return values


def enps_of(item: Union[Response, Optional[int]]) -> Optional[int]:
    """Return the present eNPS value of a response or a bare score."""
    raw = item.enps_score if isinstance(item, Response) else item
    return present_value(raw, Scale.NPS_11)


