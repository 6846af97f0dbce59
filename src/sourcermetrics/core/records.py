"""Derived leaderboard records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .numeric import round_half_up, round_to

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class SourcerPerformanceRecord:
    """One leaderboard row, rebuilt on every computation pass."""

    sourcer_id: str
    name: str
    total_jobs: int
    completed_jobs: int
    claimed_jobs: int
    total_candidates: int
    avg_candidates_per_job: int
    avg_completion_hours: float
    fastest_completion_hours: float
    success_rate: int
    speed_score: float
    speed_tier: str
    avg_candidate_rating: int | None
    acceptance_rate: int | None
    quality_method: str
    performance_score: int
    preset: str
    last_active: datetime | None = None
    rank: int | None = None
    quality_metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_display(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "sourcer_id": self.sourcer_id,
            "name": self.name,
            "total_jobs": self.total_jobs,
            "completed_jobs": self.completed_jobs,
            "claimed_jobs": self.claimed_jobs,
            "total_candidates": self.total_candidates,
            "avg_candidates_per_job": self.avg_candidates_per_job,
            "avg_completion_hours": round_to(self.avg_completion_hours),
            "fastest_completion_hours": round_to(self.fastest_completion_hours),
            "success_rate": self.success_rate,
            "speed_score": round_half_up(self.speed_score),
            "speed_tier": self.speed_tier,
            "avg_candidate_rating": _or_na(self.avg_candidate_rating),
            "acceptance_rate": _or_na(self.acceptance_rate),
            "quality_method": self.quality_method,
            "performance_score": self.performance_score,
            "preset": self.preset,
            "last_active": self.last_active.isoformat() if self.last_active else None,
        }


def _or_na(value: int | None) -> int | str:
    return NOT_AVAILABLE if value is None else value
