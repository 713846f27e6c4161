"""Static survey taxonomy: question keys, categories and scale types.

The survey has eleven scored questions:

* ``q1``–``q9`` – the eight driver categories (1–5 Likert scale)
* ``q10`` – retention intention, an outcome measure (1–5)
* Q11 – eNPS, an outcome measure (0–10), stored on ``Response.enps_score``

Plus an optional free-text comment. Everything here is plain immutable data.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple

from engagement.exceptions import TaxonomyError


class Category(str, Enum):
    """Closed set of survey categories."""

    MANAGER_LEADERSHIP = "MANAGER_LEADERSHIP"
    SCHEDULE_HOURS = "SCHEDULE_HOURS"
    TEAMWORK = "TEAMWORK"
    WORKLOAD_STAFFING = "WORKLOAD_STAFFING"
    RESPECT_RECOGNITION = "RESPECT_RECOGNITION"
    PAY_BENEFITS = "PAY_BENEFITS"
    WORK_ENVIRONMENT = "WORK_ENVIRONMENT"
    SKILLS_GROWTH = "SKILLS_GROWTH"
    # Pseudo-categories backed by their own dedicated field
    RETENTION_INTENTION = "RETENTION_INTENTION"
    ENPS = "ENPS"
    FREE_TEXT = "FREE_TEXT"


class Scale(str, Enum):
    LIKERT_5 = "1-5"
    NPS_11 = "0-10"
    TEXT = "text"


# Inclusive numeric bounds per scale
SCALE_BOUNDS: Mapping[Scale, Tuple[int, int]] = MappingProxyType(
    {Scale.LIKERT_5: (1, 5), Scale.NPS_11: (0, 10)}
)

DRIVER_QUESTION_KEYS: Tuple[str, ...] = tuple(f"q{i}" for i in range(1, 10))
RETENTION_QUESTION_KEY = "q10"

# Driver category → question keys (Q1-Q9). Non-overlapping.
CATEGORY_MAPPING: Mapping[Category, Tuple[str, ...]] = MappingProxyType(
    {
        Category.MANAGER_LEADERSHIP: ("q1", "q2"),
        Category.SCHEDULE_HOURS: ("q3",),
        Category.TEAMWORK: ("q4",),
        Category.WORKLOAD_STAFFING: ("q5",),
        Category.RESPECT_RECOGNITION: ("q6",),
        Category.PAY_BENEFITS: ("q7",),
        Category.WORK_ENVIRONMENT: ("q8",),
        Category.SKILLS_GROWTH: ("q9",),
    }
)

DRIVER_CATEGORIES: Tuple[Category, ...] = tuple(CATEGORY_MAPPING)

# Higher raw score means a worse outcome (Q5: "Do you feel short-staffed?")
REVERSE_SCORED_CATEGORIES: FrozenSet[Category] = frozenset(
    {Category.WORKLOAD_STAFFING}
)

OUTCOME_CATEGORIES: FrozenSet[Category] = frozenset(
    {Category.RETENTION_INTENTION, Category.ENPS}
)

CATEGORY_LABELS: Mapping[Category, str] = MappingProxyType(
    {
        Category.MANAGER_LEADERSHIP: "Manager & Leadership",
        Category.SCHEDULE_HOURS: "Schedule & Hours",
        Category.TEAMWORK: "Teamwork",
        Category.WORKLOAD_STAFFING: "Staffing & Resources",
        Category.RESPECT_RECOGNITION: "Respect & Recognition",
        Category.PAY_BENEFITS: "Pay & Benefits",
        Category.WORK_ENVIRONMENT: "Work Environment",
        Category.SKILLS_GROWTH: "Skills & Growth",
        Category.RETENTION_INTENTION: "Retention Intention",
        Category.ENPS: "eNPS",
        Category.FREE_TEXT: "Comments",
    }
)


@dataclass(frozen=True)
class Question:
    """One entry of the ordered question list supplied by persistence."""

    order: int
    category: Category
    scale: Scale
    text: str = ""
    is_reversed: bool = False
    is_outcome: bool = False

    @property
    def key(self) -> str:
        """Answer-map key for this question (``q{order}``)."""
        return f"q{self.order}"


DEFAULT_QUESTIONS: Tuple[Question, ...] = (
    Question(1, Category.MANAGER_LEADERSHIP, Scale.LIKERT_5,
             "Is it easy to consult with your manager when you have problems?"),
    Question(2, Category.MANAGER_LEADERSHIP, Scale.LIKERT_5,
             "Does your manager treat staff fairly?"),
    Question(3, Category.SCHEDULE_HOURS, Scale.LIKERT_5,
             "Are you able to work your preferred shifts?"),
    Question(4, Category.TEAMWORK, Scale.LIKERT_5,
             "Does your team help each other during busy times?"),
    Question(5, Category.WORKLOAD_STAFFING, Scale.LIKERT_5,
             "Do you feel there is a shortage of staff?", is_reversed=True),
    Question(6, Category.RESPECT_RECOGNITION, Scale.LIKERT_5,
             "Do you feel your efforts are recognized?"),
    Question(7, Category.PAY_BENEFITS, Scale.LIKERT_5,
             "Are you satisfied with your current pay and benefits?"),
    Question(8, Category.WORK_ENVIRONMENT, Scale.LIKERT_5,
             "Are you able to take adequate breaks?"),
    Question(9, Category.SKILLS_GROWTH, Scale.LIKERT_5,
             "Do you have opportunities to learn new tasks?"),
    Question(10, Category.RETENTION_INTENTION, Scale.LIKERT_5,
             "Do you think you will still be working here in 6 months?",
             is_outcome=True),
    Question(11, Category.ENPS, Scale.NPS_11,
             "How likely are you to recommend this workplace to a friend?",
             is_outcome=True),
)


def validate_mapping(mapping: Mapping[Category, Tuple[str, ...]]) -> None:
    """Fail loudly when *mapping* breaks the taxonomy invariants.

    Raises
    ------
    TaxonomyError
        If a category has no questions, a key is mapped twice, a key is not a
        driver question, or an outcome/free-text pseudo-category is mapped.
    """

    seen: Dict[str, Category] = {}
    for category, keys in mapping.items():
        if category in OUTCOME_CATEGORIES or category is Category.FREE_TEXT:
            raise TaxonomyError(
                f"{category.value} is backed by its own field and cannot be mapped."
            )
        if not keys:
            raise TaxonomyError(f"Category {category.value} has no mapped questions.")
        for key in keys:
            if key not in DRIVER_QUESTION_KEYS:
                raise TaxonomyError(
                    f"Category {category.value} maps unknown question key {key!r}."
                )
            if key in seen:
                raise TaxonomyError(
                    f"Question {key} mapped to both {seen[key].value} and {category.value}."
                )
            seen[key] = category


def category_label(category: Category | str) -> str:
    return CATEGORY_LABELS.get(Category(category), str(category))
