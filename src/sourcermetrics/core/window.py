"""Relative time-window filtering."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Sequence, TypeVar

import pendulum

from ..schemas import Job

T = TypeVar("T")

WINDOW_DAYS: dict[str, int] = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
}

ALL_TIME = "alltime"


def window_cutoff(window: str, *, now: datetime | None = None) -> pendulum.DateTime | None:
    """Return the inclusive lower bound for ``window`` or None for all-time."""
    days = WINDOW_DAYS.get(window)
    if days is None:
        return None
    reference = pendulum.instance(now) if now is not None else pendulum.now("UTC")
    return reference.subtract(days=days)


def within_window(
    items: Iterable[T],
    window: str,
    timestamp: Callable[[T], datetime],
    *,
    now: datetime | None = None,
) -> list[T]:
    cutoff = window_cutoff(window, now=now)
    if cutoff is None:
        return list(items)
    return [item for item in items if timestamp(item) >= cutoff]


def filter_by_window(
    jobs: Sequence[Job],
    window: str,
    *,
    now: datetime | None = None,
) -> list[Job]:
    """Keep jobs whose ``updated_at`` falls inside the window.

    ``alltime`` and unrecognised window names return the jobs unchanged. A job
    updated exactly at the cutoff is kept.
    """
    return within_window(jobs, window, lambda job: job.updated_at, now=now)
