"""Per-question descriptive statistics for the analytics view."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from engagement.config import ScoringConfig, get_default_config
from engagement.responses import ResponseLike, present_answers
from engagement.scoring.numeric import mean, population_std_dev
from engagement.scoring.risk import RiskLevel, classify_category
from engagement.taxonomy import DEFAULT_QUESTIONS, Question, Scale

LIKERT_VALUES = (1, 2, 3, 4, 5)


@dataclass(frozen=True)
class QuestionStat:
    question: Question
    average: Optional[float]
    median: Optional[float]
    std_dev: Optional[float]
    distribution: Dict[int, int] = field(default_factory=dict)
    response_count: int = 0
    risk: Optional[RiskLevel] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.question.order,
            "text": self.question.text,
            "category": self.question.category.value,
            "average": self.average,
            "median": self.median,
            "std_dev": self.std_dev,
            "distribution": dict(self.distribution),
            "response_count": self.response_count,
            "risk": self.risk.to_dict() if self.risk else None,
        }


def question_stat(
    responses: Sequence[ResponseLike],
    question: Question,
    *,
    config: ScoringConfig | None = None,
) -> QuestionStat:
    config = config or get_default_config()
    scores: List[float] = []
    for response in responses:
        scores.extend(present_answers(response, (question.key,)))

    distribution = {value: sum(1 for s in scores if s == value) for value in LIKERT_VALUES}
    if not scores:
        return QuestionStat(question, None, None, None, distribution)

    average = mean(scores)
    # Upper median, as shown on the dashboards
    median = sorted(scores)[len(scores) // 2]
    reverse = question.is_reversed or config.is_reverse(question.category)
    return QuestionStat(
        question=question,
        average=average,
        median=median,
        std_dev=population_std_dev(scores),
        distribution=distribution,
        response_count=len(scores),
        risk=classify_category(average, reverse),
    )


def calculate_question_stats(
    responses: Sequence[ResponseLike],
    questions: Sequence[Question] = DEFAULT_QUESTIONS,
    *,
    config: ScoringConfig | None = None,
) -> List[QuestionStat]:
    """Statistics for every 1–5 driver question, in question order."""
    drivers = [
        q for q in sorted(questions, key=lambda q: q.order)
        if q.scale is Scale.LIKERT_5 and not q.is_outcome
    ]
    return [question_stat(responses, q, config=config) for q in drivers]


def lowest_and_highest(
    stats: Sequence[QuestionStat], count: int = 3
) -> tuple[List[QuestionStat], List[QuestionStat]]:
    """Return ``(lowest, highest)`` scoring questions; highest best-first."""
    scored = sorted((s for s in stats if s.average is not None), key=lambda s: s.average)
    return scored[:count], scored[::-1][:count]
