"""Leaderboard sorting and name search."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Sequence

from rapidfuzz import fuzz

from .records import SourcerPerformanceRecord


def _quality(record: SourcerPerformanceRecord) -> float:
    """Match-score rating, or the acceptance rate under the acceptance proxy."""
    if record.avg_candidate_rating is not None:
        return record.avg_candidate_rating
    if record.acceptance_rate is not None:
        return record.acceptance_rate
    return -1

SORT_KEYS: dict[str, Callable[[SourcerPerformanceRecord], float]] = {
    "performance": lambda record: -record.performance_score,
    # fewer hours ranks higher
    "speed": lambda record: record.avg_completion_hours,
    # unrated sourcers sit below any rated one
    "rating": lambda record: -_quality(record),
    "completed": lambda record: -record.completed_jobs,
}

DEFAULT_SORT = "performance"


def rank(
    records: Iterable[SourcerPerformanceRecord],
    sort_by: str = DEFAULT_SORT,
) -> list[SourcerPerformanceRecord]:
    """Sort records and assign positional ranks starting at 1.

    Ties keep their input order and still receive distinct ranks. Unknown
    sort keys fall back to performance.
    """
    key = SORT_KEYS.get(sort_by, SORT_KEYS[DEFAULT_SORT])
    ordered = sorted(records, key=key)
    return [replace(record, rank=index + 1) for index, record in enumerate(ordered)]


def search(
    records: Sequence[SourcerPerformanceRecord],
    query: str | None,
    *,
    fuzzy_threshold: float | None = None,
) -> list[SourcerPerformanceRecord]:
    """Filter records by display name, case-insensitively."""
    if not query:
        return list(records)
    needle = query.casefold()
    matched: list[SourcerPerformanceRecord] = []
    for record in records:
        haystack = record.name.casefold()
        if needle in haystack:
            matched.append(record)
        elif fuzzy_threshold is not None and fuzz.partial_ratio(needle, haystack) >= fuzzy_threshold:
            matched.append(record)
    return matched
