"""Leaderboard computation: filter, aggregate, score and rank."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

import pendulum

from ..cache import MatchScoreCache, SourcerDirectory
from ..schemas import Candidate, Job
from .aggregator import CandidateLookup, RawAggregate, aggregate, candidates_lookup
from .numeric import mean, round_to
from .ranking import DEFAULT_SORT, rank, search
from .records import SourcerPerformanceRecord
from .resolvers import QualityResolver, StaticAcceptanceResolver, build_resolver
from .scoring import ScoringPreset, composite, get_preset, speed_score, speed_tier
from .window import ALL_TIME, filter_by_window

PODIUM_SIZE = 3


@dataclass(slots=True)
class LeaderboardSummary:
    """Headline figures shown above the leaderboard."""

    active_sourcers: int
    total_completed_jobs: int
    average_completion_hours: float
    top_performers: list[SourcerPerformanceRecord] = field(default_factory=list)

    def to_display(self) -> dict[str, Any]:
        return {
            "active_sourcers": self.active_sourcers,
            "total_completed_jobs": self.total_completed_jobs,
            "average_completion_hours": round_to(self.average_completion_hours),
            "top_performers": [record.to_display() for record in self.top_performers],
        }


@dataclass(slots=True)
class Leaderboard:
    """Ranked records plus the parameters they were computed with."""

    window: str
    sort_by: str
    preset: str
    quality_method: str
    records: list[SourcerPerformanceRecord]
    summary: LeaderboardSummary
    search: str | None = None

    def to_display(self) -> dict[str, Any]:
        return {
            "window": self.window,
            "sort_by": self.sort_by,
            "preset": self.preset,
            "quality_method": self.quality_method,
            "search": self.search,
            "leaderboard": [record.to_display() for record in self.records],
            "summary": self.summary.to_display(),
        }


class PerformanceEngine:
    """Stateless sourcer scoring over in-memory jobs, candidates and match scores."""

    DEFAULT_WINDOW = "30days"

    def __init__(
        self,
        *,
        preset: ScoringPreset | str | None = None,
        quality_resolver: QualityResolver | None = None,
        quality: str | None = None,
        directory: SourcerDirectory | None = None,
        match_score_cache: MatchScoreCache | None = None,
        window: str | None = None,
        sort_by: str | None = None,
        require_completed_in_window: bool | None = False,
        top_n: int | None = None,
        fuzzy_threshold: float | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._preset = get_preset(preset)
        if quality_resolver is None:
            quality_resolver = build_resolver(quality or self._preset.quality_method)
        self._resolver = quality_resolver
        self._directory = directory or SourcerDirectory()
        self._match_score_cache = match_score_cache
        self._window = window or self.DEFAULT_WINDOW
        self._sort_by = sort_by or DEFAULT_SORT
        self._require_completed = bool(require_completed_in_window)
        self._top_n = top_n or None
        self._fuzzy_threshold = fuzzy_threshold
        self._now_provider = now_provider or pendulum.now

    @property
    def preset(self) -> ScoringPreset:
        return self._preset

    @property
    def quality_method(self) -> str:
        return self._resolver.method

    def score(
        self,
        jobs: Iterable[Job] | None,
        candidates: CandidateLookup | Iterable[Candidate] | None = None,
        match_scores: Mapping[str, Any] | None = None,
        *,
        window: str | None = None,
        now: datetime | None = None,
    ) -> list[SourcerPerformanceRecord]:
        """Build one unranked record per sourcer seen in the windowed jobs."""
        window = window or self._window
        reference = now or self._now_provider()
        in_window = filter_by_window(list(jobs or ()), window, now=reference)
        aggregates = aggregate(in_window, _as_lookup(candidates))
        if self._require_completed and window != ALL_TIME:
            aggregates = {sid: agg for sid, agg in aggregates.items() if agg.completed_count}

        scores = self._resolve_match_scores(match_scores)
        names = self._directory.names(aggregates.keys()) if aggregates else {}
        return [
            self._build_record(agg, names.get(sid) or SourcerDirectory.fallback_name(sid), scores)
            for sid, agg in aggregates.items()
        ]

    def leaderboard(
        self,
        jobs: Iterable[Job] | None,
        candidates: CandidateLookup | Iterable[Candidate] | None = None,
        match_scores: Mapping[str, Any] | None = None,
        *,
        window: str | None = None,
        sort_by: str | None = None,
        query: str | None = None,
        now: datetime | None = None,
    ) -> Leaderboard:
        window = window or self._window
        sort_by = sort_by or self._sort_by
        records = rank(
            self.score(jobs, candidates, match_scores, window=window, now=now),
            sort_by,
        )
        summary = self.summarize(records)

        visible = rank(
            search(records, query, fuzzy_threshold=self._fuzzy_threshold),
            sort_by,
        )
        if self._top_n:
            visible = visible[: self._top_n]

        return Leaderboard(
            window=window,
            sort_by=sort_by,
            preset=self._preset.name,
            quality_method=self._resolver.method,
            records=visible,
            summary=summary,
            search=query or None,
        )

    @staticmethod
    def summarize(records: list[SourcerPerformanceRecord]) -> LeaderboardSummary:
        return LeaderboardSummary(
            active_sourcers=len(records),
            total_completed_jobs=sum(record.completed_jobs for record in records),
            average_completion_hours=mean(record.avg_completion_hours for record in records),
            top_performers=list(records[:PODIUM_SIZE]),
        )

    def _resolve_match_scores(self, match_scores: Mapping[str, Any] | None) -> Mapping[str, Any]:
        if match_scores is not None:
            return match_scores
        if self._match_score_cache is not None:
            return self._match_score_cache.get()
        return {}

    def _build_record(
        self,
        agg: RawAggregate,
        name: str,
        match_scores: Mapping[str, Any],
    ) -> SourcerPerformanceRecord:
        avg_hours = agg.avg_completion_hours if agg.completed_count else None
        speed = speed_score(avg_hours)
        quality = self._resolver.resolve(agg.candidates, match_scores)
        is_acceptance = quality.method == StaticAcceptanceResolver.method

        return SourcerPerformanceRecord(
            sourcer_id=agg.sourcer_id,
            name=name,
            total_jobs=agg.total_jobs,
            completed_jobs=agg.completed_count,
            claimed_jobs=agg.claimed_count,
            total_candidates=agg.total_candidates,
            avg_candidates_per_job=agg.avg_candidates_per_job,
            avg_completion_hours=agg.avg_completion_hours,
            fastest_completion_hours=agg.fastest_completion_hours,
            success_rate=agg.success_rate,
            speed_score=speed,
            speed_tier=speed_tier(avg_hours),
            avg_candidate_rating=None if is_acceptance else quality.value,
            acceptance_rate=quality.value if is_acceptance else None,
            quality_method=quality.method,
            performance_score=composite(speed, quality.value, agg.completed_count, self._preset),
            preset=self._preset.name,
            last_active=agg.last_active,
            quality_metadata=quality.metadata,
        )


def _as_lookup(
    candidates: CandidateLookup | Iterable[Candidate] | None,
) -> CandidateLookup | None:
    if candidates is None or isinstance(candidates, Mapping) or callable(candidates):
        return candidates
    return candidates_lookup(candidates)
