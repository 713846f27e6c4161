"""Unit tests for benchmark comparison."""
from __future__ import annotations

import pytest

from engagement.analysis.benchmark import (
    benchmark_difference,
    calculate_benchmark_overall,
    compare_to_benchmark,
    normalize_benchmarks,
)
from engagement.exceptions import MissingBenchmarkError
from engagement.taxonomy import DRIVER_CATEGORIES, Category

RESTAURANT = {
    "MANAGER_LEADERSHIP": 3.5,
    "SCHEDULE_HOURS": 3.2,
    "TEAMWORK": 3.8,
    "WORKLOAD_STAFFING": 2.9,
    "RESPECT_RECOGNITION": 3.6,
    "PAY_BENEFITS": 2.8,
    "WORK_ENVIRONMENT": 3.3,
    "SKILLS_GROWTH": 2.7,
    "RETENTION_INTENTION": 3.9,
}


def test_overall_benchmark_excludes_reverse_and_outcome_categories():
    assert calculate_benchmark_overall(RESTAURANT) == pytest.approx(22.9 / 7)


def test_overall_benchmark_empty_table():
    assert calculate_benchmark_overall({}) is None
    assert calculate_benchmark_overall(None) is None


def test_difference_and_direction():
    scores = {category: 3.0 for category in DRIVER_CATEGORIES}
    rows = compare_to_benchmark(scores, RESTAURANT, industry="RESTAURANT")

    ml = rows[Category.MANAGER_LEADERSHIP]
    assert ml.difference == pytest.approx(-0.5)
    assert ml.is_positive is False

    pay = rows[Category.PAY_BENEFITS]
    assert pay.difference == pytest.approx(0.2)
    assert pay.is_positive is True


def test_reverse_category_lower_is_better():
    diff, positive = benchmark_difference(2.5, 2.9, is_reverse=True)
    assert diff == pytest.approx(-0.4)
    assert positive is True
    assert benchmark_difference(3.5, 2.9, is_reverse=True)[1] is False


def test_missing_score_or_benchmark_yields_nulls():
    rows = compare_to_benchmark({Category.TEAMWORK: 4.0}, RESTAURANT)
    assert rows[Category.SCHEDULE_HOURS].difference is None
    assert rows[Category.SCHEDULE_HOURS].is_positive is None
    assert rows[Category.TEAMWORK].difference == pytest.approx(0.2)


def test_no_benchmarks_for_industry():
    rows = compare_to_benchmark({Category.TEAMWORK: 4.0}, {})
    assert set(rows) == set(DRIVER_CATEGORIES)
    assert all(row.benchmark is None and row.difference is None for row in rows.values())


def test_partial_table_is_a_configuration_error():
    partial = {k: v for k, v in RESTAURANT.items() if k != "TEAMWORK"}
    with pytest.raises(MissingBenchmarkError, match="TEAMWORK for industry RETAIL"):
        normalize_benchmarks(partial, industry="RETAIL")


def test_unknown_benchmark_categories_are_ignored(caplog):
    table = dict(RESTAURANT, JOB_SATISFACTION=3.1, WORKPLACE_ENVIRONMENT=4.9)
    normalized = normalize_benchmarks(table, industry="RESTAURANT")
    assert set(normalized) == set(DRIVER_CATEGORIES) | {Category.RETENTION_INTENTION}
    assert calculate_benchmark_overall(table) == pytest.approx(22.9 / 7)
    assert "JOB_SATISFACTION" in caplog.text


def test_unknown_keys_do_not_stand_in_for_missing_drivers():
    table = {k: v for k, v in RESTAURANT.items() if k != "PAY_BENEFITS"}
    table["JOB_SATISFACTION"] = 3.1
    with pytest.raises(MissingBenchmarkError):
        normalize_benchmarks(table)
