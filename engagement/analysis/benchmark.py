"""Comparison of a shop's category scores against industry benchmarks."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from engagement.config import ScoringConfig, get_default_config
from engagement.exceptions import MissingBenchmarkError
from engagement.scoring.numeric import mean
from engagement.taxonomy import Category

logger = logging.getLogger(__name__)

BenchmarkMap = Mapping[Category | str, Optional[float]]


@dataclass(frozen=True)
class BenchmarkComparison:
    category: Category
    score: Optional[float]
    benchmark: Optional[float]
    difference: Optional[float]
    # True when the shop is on the healthy side of the benchmark
    is_positive: Optional[bool]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _known_categories(
    benchmarks: BenchmarkMap, industry: str | None
) -> Dict[Category, Optional[float]]:
    """Key *benchmarks* by :class:`Category`, dropping keys outside the taxonomy."""
    table: Dict[Category, Optional[float]] = {}
    for key, value in benchmarks.items():
        try:
            category = Category(key)
        except ValueError:
            logger.warning(
                "Ignoring unknown benchmark category %r for industry %s", key, industry
            )
            continue
        table[category] = value
    return table


def normalize_benchmarks(
    benchmarks: BenchmarkMap | None,
    *,
    industry: str | None = None,
    config: ScoringConfig | None = None,
) -> Dict[Category, Optional[float]]:
    """Key *benchmarks* by :class:`Category`.

    An empty or missing table means the industry has no benchmarks yet and
    every driver maps to ``None``. A non-empty table that lacks a driver
    category is a configuration bug. Keys outside the taxonomy (industry tables
    may carry categories this survey does not ask about) are logged and dropped.

    Raises
    ------
    MissingBenchmarkError
        If a non-empty table has no entry for a driver category.
    """
    config = config or get_default_config()
    if not benchmarks:
        logger.debug("No benchmarks for industry %s", industry)
        return {category: None for category in Category}

    table = _known_categories(benchmarks, industry)
    for category in config.driver_categories:
        if category not in table:
            raise MissingBenchmarkError(category.value, industry)
    return table


def benchmark_difference(
    score: Optional[float], benchmark: Optional[float], is_reverse: bool = False
) -> tuple[Optional[float], Optional[bool]]:
    """Return ``(score - benchmark, is_positive)`` or ``(None, None)``."""
    if score is None or benchmark is None:
        return None, None
    diff = score - benchmark
    return diff, (diff <= 0 if is_reverse else diff >= 0)


def compare_to_benchmark(
    category_scores: Mapping[Category, Optional[float]],
    benchmarks: BenchmarkMap | None,
    *,
    industry: str | None = None,
    config: ScoringConfig | None = None,
) -> Dict[Category, BenchmarkComparison]:
    """Diff every driver category score against its benchmark."""
    config = config or get_default_config()
    table = normalize_benchmarks(benchmarks, industry=industry, config=config)

    result: Dict[Category, BenchmarkComparison] = {}
    for category in config.driver_categories:
        score = category_scores.get(category)
        benchmark = table.get(category)
        diff, positive = benchmark_difference(score, benchmark, config.is_reverse(category))
        result[category] = BenchmarkComparison(
            category=category,
            score=score,
            benchmark=benchmark,
            difference=diff,
            is_positive=positive,
        )
    return result


def calculate_benchmark_overall(
    benchmarks: BenchmarkMap | None,
    *,
    industry: str | None = None,
    config: ScoringConfig | None = None,
) -> Optional[float]:
    """Average of the benchmarks comparable to the overall score.

    Reverse-scored categories and outcome measures (retention intention,
    eNPS) are left out; including them makes the figure incomparable to
    :func:`~engagement.scoring.categories.calculate_overall_score`.
    """
    config = config or get_default_config()
    if not benchmarks:
        return None
    values = []
    for category, value in _known_categories(benchmarks, industry).items():
        if category in config.reverse_scored or category in config.outcome_categories:
            continue
        if category is Category.FREE_TEXT or value is None:
            continue
        values.append(value)
    return mean(values)
